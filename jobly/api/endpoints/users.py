"""
User management endpoints.

- POST /users: admin adds a user (possibly another admin)
- GET /users: admin lists everyone
- GET/PATCH/DELETE /users/{username}: the user themself or an admin
"""

import logging
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from jobly.core.database import get_db
from jobly.core.deps import ensure_admin, ensure_correct_user_or_admin
from jobly.core.security import create_token
from jobly.crud import user as user_crud
from jobly.schemas.user import (
    UserCreateRequest,
    UserCreateResponse,
    UserResponse,
    UserUpdateRequest,
)

router = APIRouter(prefix="/users", tags=["Users"])
logger = logging.getLogger(__name__)


@router.post("/", status_code=201, response_model=UserCreateResponse)
def create_user(
    request: UserCreateRequest,
    db: Session = Depends(get_db),
    admin=Depends(ensure_admin)
):
    """Add a user and return a token for them. Admin only."""
    new_user = user_crud.register(db, request, is_admin=request.is_admin)
    logger.info(f"Admin {admin.username} created user {new_user.username}")

    return UserCreateResponse(
        access_token=create_token(new_user),
        user=UserResponse.model_validate(new_user)
    )


@router.get("/", response_model=list[UserResponse])
def list_users(
    db: Session = Depends(get_db),
    admin=Depends(ensure_admin)
):
    """List all users. Admin only."""
    return user_crud.find_all(db)


@router.get("/{username}", response_model=UserResponse)
def get_user(
    username: str,
    db: Session = Depends(get_db),
    current_user=Depends(ensure_correct_user_or_admin)
):
    return user_crud.get(db, username)


@router.patch("/{username}", response_model=UserResponse)
def update_user(
    username: str,
    request: UserUpdateRequest,
    db: Session = Depends(get_db),
    current_user=Depends(ensure_correct_user_or_admin)
):
    """Partially update a user's profile or password."""
    data = request.model_dump(exclude_unset=True, by_alias=True)
    return user_crud.update(db, username, data)


@router.delete("/{username}")
def delete_user(
    username: str,
    db: Session = Depends(get_db),
    current_user=Depends(ensure_correct_user_or_admin)
):
    user_crud.remove(db, username)
    return {"deleted": username}
