"""Todo router - personal task list endpoints"""

import logging

from fastapi import APIRouter, Depends, Response
from sqlalchemy.orm import Session

from ...auth import CurrentUser, get_current_user
from ...database import get_db
from ...models import Todo
from .schemas import TodoCreate, TodoResponse, TodoUpdate
from .service import TodoService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/todos", tags=["Todos"])


def get_todo_service(db: Session = Depends(get_db)) -> TodoService:
    """Dependency injection for TodoService"""
    return TodoService(db)


def build_todo_response(todo: Todo) -> TodoResponse:
    return TodoResponse(
        id=todo.id,
        userId=todo.user_id,
        text=todo.text,
        dueDate=todo.due_date,
        status=todo.status,
        createdAt=todo.created_at,
        updatedAt=todo.updated_at,
    )


@router.get("", response_model=list[TodoResponse])
async def list_todos(
    current_user: CurrentUser = Depends(get_current_user),
    service: TodoService = Depends(get_todo_service),
):
    """The requester's todos, unfinished first"""
    return [build_todo_response(t) for t in service.list_todos(current_user.id)]


@router.post("", response_model=TodoResponse, status_code=201)
async def create_todo(
    data: TodoCreate,
    current_user: CurrentUser = Depends(get_current_user),
    service: TodoService = Depends(get_todo_service),
):
    return build_todo_response(service.create_todo(current_user.id, data))


@router.put("/{todo_id}", response_model=TodoResponse)
async def update_todo(
    todo_id: int,
    data: TodoUpdate,
    current_user: CurrentUser = Depends(get_current_user),
    service: TodoService = Depends(get_todo_service),
):
    return build_todo_response(service.update_todo(todo_id, current_user.id, data))


@router.delete("/{todo_id}", status_code=204)
async def delete_todo(
    todo_id: int,
    current_user: CurrentUser = Depends(get_current_user),
    service: TodoService = Depends(get_todo_service),
):
    service.delete_todo(todo_id, current_user.id)
    return Response(status_code=204)
