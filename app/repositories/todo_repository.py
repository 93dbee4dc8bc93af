from typing import Optional
from sqlalchemy import or_
from sqlalchemy.orm import Session

from app.models.todo import Todo, TodoVisibility


class TodoRepository:
    """Repository for Todo data access"""

    def __init__(self, db: Session):
        self.db = db

    def create(self, todo: Todo) -> Todo:
        """Create a new todo"""
        self.db.add(todo)
        self.db.commit()
        self.db.refresh(todo)
        return todo

    def get_by_id_and_household(self, todo_id: int, household_id: int) -> Optional[Todo]:
        """Get todo by ID, ensuring it belongs to the household"""
        return (
            self.db.query(Todo)
            .filter(Todo.id == todo_id, Todo.household_id == household_id)
            .first()
        )

    def get_visible_todos(
        self,
        household_id: int,
        user_id: int,
        completed: Optional[bool] = None,
        assigned_to: Optional[int] = None,
    ) -> list[Todo]:
        """
        Get household todos the user may see.

        Personal todos are included only for their creator and assignee.

        Args:
            household_id: Household ID for isolation
            user_id: Viewing user
            completed: Optional completion-state filter
            assigned_to: Optional assignee filter

        Returns:
            Todos, newest first
        """
        query = self.db.query(Todo).filter(
            Todo.household_id == household_id,
            or_(
                Todo.visibility == TodoVisibility.HOUSEHOLD,
                Todo.created_by == user_id,
                Todo.assigned_to == user_id,
            ),
        )

        if completed is not None:
            query = query.filter(Todo.completed == completed)

        if assigned_to is not None:
            query = query.filter(Todo.assigned_to == assigned_to)

        return query.order_by(Todo.created_at.desc(), Todo.id.desc()).all()

    def update(self, todo: Todo) -> Todo:
        """Update a todo"""
        self.db.commit()
        self.db.refresh(todo)
        return todo

    def delete(self, todo: Todo) -> None:
        """Delete a todo"""
        self.db.delete(todo)
        self.db.commit()
