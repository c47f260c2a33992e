"""Todo repository - Database operations for todos"""

from typing import Optional

from sqlalchemy import case
from sqlalchemy.orm import Session

from ...models import Todo


class TodoRepository:
    """Repository for todo database operations"""

    @staticmethod
    def get_by_id(db: Session, todo_id: int) -> Optional[Todo]:
        return db.query(Todo).filter(Todo.id == todo_id).first()

    @staticmethod
    def get_for_user(db: Session, user_id: int) -> list[Todo]:
        """Open items first, each group by due date"""
        done_last = case((Todo.status == "done", 1), else_=0)
        return (
            db.query(Todo)
            .filter(Todo.user_id == user_id)
            .order_by(done_last, Todo.due_date, Todo.id)
            .all()
        )

    @staticmethod
    def create(db: Session, todo: Todo) -> Todo:
        db.add(todo)
        db.commit()
        db.refresh(todo)
        return todo

    @staticmethod
    def update(db: Session, todo: Todo, **updates) -> Todo:
        for key, value in updates.items():
            setattr(todo, key, value)
        db.commit()
        db.refresh(todo)
        return todo

    @staticmethod
    def delete(db: Session, todo: Todo) -> None:
        db.delete(todo)
        db.commit()
