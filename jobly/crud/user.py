"""
CRUD operations for the User model, plus credential checks.
"""

import logging
from typing import Any, List, Mapping

from sqlalchemy import text
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from jobly.core.exceptions import ConflictError, NotFoundError, UnauthorizedError
from jobly.core.security import get_password_hash, verify_password
from jobly.core.sql import sql_for_partial_update, to_named_params
from jobly.models.user import User
from jobly.schemas.user import UserRegisterRequest

logger = logging.getLogger(__name__)

UPDATE_COLUMNS = {
    "firstName": "first_name",
    "lastName": "last_name",
    "isAdmin": "is_admin",
}


def authenticate(db: Session, username: str, password: str) -> User:
    """
    Check a username/password pair.

    Raises:
        UnauthorizedError: If the user is unknown or the password is wrong
    """
    user = db.query(User).filter(User.username == username).first()
    if user and verify_password(password, user.password):
        return user

    logger.warning(f"Failed login for {username}")
    raise UnauthorizedError("Invalid username/password")


def register(db: Session, user_data: UserRegisterRequest, is_admin: bool = False) -> User:
    """
    Create a user with a hashed password.

    Raises:
        ConflictError: If the username is taken
    """
    duplicate = db.query(User).filter(User.username == user_data.username).first()
    if duplicate:
        raise ConflictError(f"Duplicate username: {user_data.username}")

    db_user = User(
        username=user_data.username,
        password=get_password_hash(user_data.password),
        first_name=user_data.first_name,
        last_name=user_data.last_name,
        email=user_data.email,
        is_admin=is_admin
    )

    db.add(db_user)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ConflictError(f"Duplicate username: {user_data.username}")
    db.refresh(db_user)

    logger.info(f"Registered user {db_user.username} (admin={db_user.is_admin})")
    return db_user


def find_all(db: Session) -> List[User]:
    return db.query(User).order_by(User.username).all()


def get(db: Session, username: str) -> User:
    """
    Raises:
        NotFoundError: If no such user
    """
    user = db.query(User).filter(User.username == username).first()
    if not user:
        raise NotFoundError(f"No user: {username}")
    return user


def update(db: Session, username: str, data: Mapping[str, Any]) -> User:
    """
    Partially update a user with API-named fields
    (firstName, lastName, password, email, isAdmin).

    A new password is hashed before it is stored.

    Raises:
        BadRequestError: If ``data`` is empty
        NotFoundError: If no such user
    """
    if data and "password" in data:
        data = {**data, "password": get_password_hash(data["password"])}

    set_cols, values = sql_for_partial_update(data, UPDATE_COLUMNS)
    username_idx = f"${len(values) + 1}"

    sql, params = to_named_params(
        f"""UPDATE users
            SET {set_cols}
            WHERE username = {username_idx}
            RETURNING username""",
        [*values, username]
    )
    row = db.execute(text(sql), params).first()

    if row is None:
        db.rollback()
        raise NotFoundError(f"No user: {username}")

    db.commit()
    logger.info(f"Updated user {username}: {', '.join(data)}")
    return get(db, username)


def remove(db: Session, username: str) -> None:
    """
    Raises:
        NotFoundError: If no such user
    """
    user = get(db, username)
    db.delete(user)
    db.commit()
    logger.info(f"Deleted user {username}")
