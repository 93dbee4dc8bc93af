import logging
from typing import Optional
from sqlalchemy.orm import Session

from app.models.household_context import HouseholdContext
from app.models.todo import Todo, TodoVisibility
from app.repositories.todo_repository import TodoRepository
from app.repositories.household_membership_repository import HouseholdMembershipRepository
from app.schemas.todo_schemas import TodoCreate, TodoUpdate
from app.core.exceptions import NotFoundException, ForbiddenException, ValidationException

logger = logging.getLogger(__name__)


class TodoService:
    """
    Service layer for household todos.

    Access rules:
    - Household todos are visible to every member; personal todos only to
      their creator and assignee (others get 404)
    - Admins and members create todos; viewers cannot
    - Creator, assignee, admins and members may update or toggle a visible todo
    - Only the creator or an admin may delete
    """

    def __init__(self, db: Session):
        self.db = db
        self.todo_repo = TodoRepository(db)
        self.membership_repo = HouseholdMembershipRepository(db)

    def _check_assignee(self, assigned_to: Optional[int], context: HouseholdContext) -> None:
        if assigned_to is None:
            return
        if not self.membership_repo.get_membership(assigned_to, context.household.id):
            raise ValidationException(f"User {assigned_to} is not a member of this household")

    def _get_visible(self, todo_id: int, context: HouseholdContext) -> Todo:
        todo = self.todo_repo.get_by_id_and_household(todo_id, context.household.id)
        if not todo:
            raise NotFoundException(f"Todo {todo_id} not found")
        if todo.visibility == TodoVisibility.PERSONAL and not todo.is_involved(context.user.id):
            raise NotFoundException(f"Todo {todo_id} not found")
        return todo

    def _get_modifiable(self, todo_id: int, context: HouseholdContext) -> Todo:
        todo = self._get_visible(todo_id, context)
        if not (todo.is_involved(context.user.id) or context.can_contribute()):
            logger.warning("User %s denied change to todo %s", context.user.id, todo_id)
            raise ForbiddenException("Viewers can only change todos assigned to them")
        return todo

    def create_todo(self, todo_data: TodoCreate, context: HouseholdContext) -> Todo:
        """
        Create a new todo.

        Raises:
            ForbiddenException: If caller is a VIEWER
            ValidationException: If assignee is not a household member
        """
        if not context.can_contribute():
            raise ForbiddenException("Viewers cannot create todos")

        self._check_assignee(todo_data.assigned_to, context)

        todo = Todo(
            household_id=context.household.id,
            created_by=context.user.id,
            **todo_data.model_dump(),
        )
        todo = self.todo_repo.create(todo)
        logger.info(
            "User %s created todo %s in household %s", context.user.id, todo.id, context.household.id
        )
        return todo

    def list_todos(
        self,
        context: HouseholdContext,
        completed: Optional[bool] = None,
        assigned_to: Optional[int] = None,
    ) -> list[Todo]:
        """List todos visible to the caller, newest first"""
        return self.todo_repo.get_visible_todos(
            context.household.id, context.user.id, completed=completed, assigned_to=assigned_to
        )

    def get_todo(self, todo_id: int, context: HouseholdContext) -> Todo:
        """Get a todo the caller may see"""
        return self._get_visible(todo_id, context)

    def update_todo(self, todo_id: int, todo_data: TodoUpdate, context: HouseholdContext) -> Todo:
        """
        Partially update a todo.

        Only fields present in the request change; explicit nulls clear
        description, due_date and assigned_to.

        Raises:
            NotFoundException: If todo doesn't exist or is invisible to caller
            ForbiddenException: If caller may not change it
            ValidationException: If assignee is not a household member
        """
        todo = self._get_modifiable(todo_id, context)
        changes = todo_data.model_dump(exclude_unset=True)

        if "assigned_to" in changes:
            self._check_assignee(changes["assigned_to"], context)

        for name, value in changes.items():
            # title, flags and enums are required columns
            if value is None and name not in ("description", "due_date", "assigned_to"):
                continue
            setattr(todo, name, value)

        todo = self.todo_repo.update(todo)
        logger.info("User %s updated todo %s", context.user.id, todo.id)
        return todo

    def toggle_completed(self, todo_id: int, context: HouseholdContext) -> Todo:
        """Flip a todo between open and completed"""
        todo = self._get_modifiable(todo_id, context)
        todo.completed = not todo.completed
        todo = self.todo_repo.update(todo)
        logger.info(
            "User %s marked todo %s %s",
            context.user.id,
            todo.id,
            "completed" if todo.completed else "open",
        )
        return todo

    def delete_todo(self, todo_id: int, context: HouseholdContext) -> None:
        """
        Delete a todo.

        Raises:
            NotFoundException: If todo doesn't exist or is invisible to caller
            ForbiddenException: If caller is neither creator nor admin
        """
        todo = self._get_visible(todo_id, context)
        if todo.created_by != context.user.id and not context.is_admin():
            raise ForbiddenException("Only the creator or an admin can delete this todo")
        self.todo_repo.delete(todo)
        logger.info("User %s deleted todo %s", context.user.id, todo_id)
