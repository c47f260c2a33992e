"""Todo service - personal task lists"""

import logging

from sqlalchemy.orm import Session

from ...errors import ForbiddenError, NotFoundError
from ...models import Todo
from ...utils.time_conversion import to_storage, utcnow
from .repository import TodoRepository
from .schemas import TodoCreate, TodoUpdate

logger = logging.getLogger(__name__)


class TodoService:
    """Service layer for todo business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = TodoRepository()

    def _get_owned_todo(self, todo_id: int, user_id: int) -> Todo:
        todo = self.repo.get_by_id(self.db, todo_id)
        if not todo:
            raise NotFoundError(f"Todo {todo_id} not found")
        if todo.user_id != user_id:
            logger.warning(f"⚠️ User {user_id} attempted to access todo {todo_id}")
            raise ForbiddenError("You can only manage your own todos")
        return todo

    def list_todos(self, user_id: int) -> list[Todo]:
        return self.repo.get_for_user(self.db, user_id)

    def create_todo(self, user_id: int, data: TodoCreate) -> Todo:
        """Create a todo; a missing due date means now"""
        now = utcnow()
        todo = Todo(
            user_id=user_id,
            text=data.text,
            due_date=to_storage(data.dueDate) or now,
            status=data.status,
            created_at=now,
            updated_at=now,
        )
        todo = self.repo.create(self.db, todo)
        logger.info(f"✅ Todo {todo.id} created for user {user_id}")
        return todo

    def update_todo(self, todo_id: int, user_id: int, data: TodoUpdate) -> Todo:
        todo = self._get_owned_todo(todo_id, user_id)
        updates = {"updated_at": utcnow()}
        # None on these non-nullable columns means "leave as is"
        if data.text is not None:
            updates["text"] = data.text
        if data.dueDate is not None:
            updates["due_date"] = to_storage(data.dueDate)
        if data.status is not None:
            updates["status"] = data.status

        todo = self.repo.update(self.db, todo, **updates)
        logger.info(f"✅ Todo {todo_id} updated by user {user_id}")
        return todo

    def delete_todo(self, todo_id: int, user_id: int) -> None:
        todo = self._get_owned_todo(todo_id, user_id)
        self.repo.delete(self.db, todo)
        logger.info(f"🗑️ Todo {todo_id} deleted by user {user_id}")
