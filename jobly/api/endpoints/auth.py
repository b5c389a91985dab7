"""
Authentication endpoints.

- POST /auth/token: exchange username/password for a JWT
- POST /auth/register: create a regular (non-admin) account and get a JWT
"""

import logging
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from jobly.core.database import get_db
from jobly.core.security import create_token
from jobly.crud import user as user_crud
from jobly.schemas.user import TokenResponse, UserLoginRequest, UserRegisterRequest

router = APIRouter(prefix="/auth", tags=["Authentication"])
logger = logging.getLogger(__name__)


@router.post("/token", response_model=TokenResponse)
def login(request: UserLoginRequest, db: Session = Depends(get_db)):
    """
    Authenticate with username and password.

    Returns a bearer token carrying the username and admin flag.
    """
    user = user_crud.authenticate(db, request.username, request.password)
    logger.info(f"User logged in: {user.username}")
    return TokenResponse(access_token=create_token(user))


@router.post("/register", status_code=201, response_model=TokenResponse)
def register(request: UserRegisterRequest, db: Session = Depends(get_db)):
    """
    Register a new user account.

    Self-registered users are never admins. Returns a token for immediate use.
    """
    new_user = user_crud.register(db, request, is_admin=False)
    return TokenResponse(access_token=create_token(new_user))
