# routers/user_blocks_router.py
import json
from typing import List, Optional

from fastapi import APIRouter, Depends, Request
from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError
from sqlalchemy.orm import Session

from app.auth import get_optional_user
from app.core.user_blocking import (
    NotAuthenticated,
    block_status,
    create_block,
    list_blocked_users,
    remove_block,
)
from app.database import get_db
from app.models.user import User
from app.schemas.user_block_schema import (
    BlockCreateOut,
    BlockedUserOut,
    BlockRemoveOut,
    BlockStatusOut,
    UserBlockCreate,
)


router = APIRouter(prefix="/user_blocks", tags=["User Blocks"])

FORM_CONTENT_TYPES = ("application/x-www-form-urlencoded", "multipart/form-data")


# --------------------------------------------------
# DEPENDENCIES
# --------------------------------------------------
def require_user(user: Optional[User] = Depends(get_optional_user)) -> User:
    if user is None:
        raise NotAuthenticated()
    return user


async def read_user_block(request: Request) -> UserBlockCreate:
    """
    Parse the create payload from JSON or from a form post
    (``blocked_id`` or ``user_block[blocked_id]``).
    """
    content_type = request.headers.get("content-type", "")

    if content_type.startswith(FORM_CONTENT_TYPES):
        form = await request.form()
        blocked_id = form.get("user_block[blocked_id]") or form.get("blocked_id")
        data = {} if blocked_id is None else {"blocked_id": blocked_id}
    else:
        raw = await request.body()
        try:
            data = json.loads(raw) if raw else {}
        except ValueError:
            raise RequestValidationError(
                [{"type": "json_invalid", "loc": ("body",), "msg": "JSON decode error", "input": {}}]
            )

    try:
        return UserBlockCreate.model_validate(data)
    except ValidationError as exc:
        raise RequestValidationError(
            [{**error, "loc": ("body", *error["loc"])} for error in exc.errors(include_url=False)]
        )


# --------------------------------------------------
# MY BLOCKED USERS
# --------------------------------------------------
@router.get("", response_model=List[BlockedUserOut])
def get_my_blocked_users(
    current_user: User = Depends(require_user),
    db: Session = Depends(get_db),
):
    return list_blocked_users(db, current_user)


# --------------------------------------------------
# BLOCK STATUS
# --------------------------------------------------
@router.get("/{blocked_id}", response_model=BlockStatusOut)
def show_user_block(
    blocked_id: str,
    current_user: User = Depends(require_user),
    db: Session = Depends(get_db),
):
    return {"result": block_status(db, current_user, blocked_id)}


# --------------------------------------------------
# BLOCK USER
# --------------------------------------------------
@router.post("", response_model=BlockCreateOut)
def create_user_block(
    current_user: User = Depends(require_user),
    payload: UserBlockCreate = Depends(read_user_block),
    db: Session = Depends(get_db),
):
    return {"result": create_block(db, current_user, payload.blocked_id)}


# --------------------------------------------------
# UNBLOCK USER
# --------------------------------------------------
@router.delete("/{blocked_id}", response_model=BlockRemoveOut)
def delete_user_block(
    blocked_id: str,
    current_user: User = Depends(require_user),
    db: Session = Depends(get_db),
):
    return {"result": remove_block(db, current_user, blocked_id)}
