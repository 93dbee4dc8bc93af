from typing import Optional
from fastapi import APIRouter, Depends, status, Query
from sqlalchemy.orm import Session

from app.database import get_db
from app.dependencies import get_household_context
from app.models.household_context import HouseholdContext
from app.services.todo_service import TodoService
from app.schemas.todo_schemas import TodoCreate, TodoUpdate, TodoResponse, TodoListResponse

router = APIRouter()


@router.post("", response_model=TodoResponse, status_code=status.HTTP_201_CREATED)
def create_todo(
    todo_data: TodoCreate,
    context: HouseholdContext = Depends(get_household_context),
    db: Session = Depends(get_db),
):
    """
    Create a new todo.

    - Visibility "personal" hides it from everyone but creator and assignee
    - Assignee must be a household member
    - Requires ADMIN or MEMBER role
    """
    service = TodoService(db)
    return service.create_todo(todo_data, context)


@router.get("", response_model=TodoListResponse)
def list_todos(
    completed: Optional[bool] = Query(None, description="Filter by completion state"),
    assigned_to: Optional[int] = Query(None, gt=0, description="Filter by assignee user ID"),
    context: HouseholdContext = Depends(get_household_context),
    db: Session = Depends(get_db),
):
    """
    List todos visible to the caller, newest first.
    """
    service = TodoService(db)
    todos = service.list_todos(context, completed=completed, assigned_to=assigned_to)
    return TodoListResponse(todos=todos, total=len(todos))


@router.get("/{todo_id}", response_model=TodoResponse)
def get_todo(
    todo_id: int,
    context: HouseholdContext = Depends(get_household_context),
    db: Session = Depends(get_db),
):
    """Get a specific todo by ID"""
    service = TodoService(db)
    return service.get_todo(todo_id, context)


@router.patch("/{todo_id}", response_model=TodoResponse)
def update_todo(
    todo_id: int,
    todo_data: TodoUpdate,
    context: HouseholdContext = Depends(get_household_context),
    db: Session = Depends(get_db),
):
    """
    Update a todo.

    - Only provided fields are updated (partial update)
    - Viewers may only change todos assigned to them
    """
    service = TodoService(db)
    return service.update_todo(todo_id, todo_data, context)


@router.patch("/{todo_id}/toggle", response_model=TodoResponse)
def toggle_todo(
    todo_id: int,
    context: HouseholdContext = Depends(get_household_context),
    db: Session = Depends(get_db),
):
    """Mark an open todo completed, or a completed one open again"""
    service = TodoService(db)
    return service.toggle_completed(todo_id, context)


@router.delete("/{todo_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_todo(
    todo_id: int,
    context: HouseholdContext = Depends(get_household_context),
    db: Session = Depends(get_db),
):
    """
    Delete a todo.

    - Requires being its creator or a household ADMIN
    """
    service = TodoService(db)
    service.delete_todo(todo_id, context)
