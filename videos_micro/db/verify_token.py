from fastapi import Depends, HTTPException, status
from typing import Annotated
from dotenv import load_dotenv
from Endpoints.auth import get_current_user
from db.connection import get_db
from models.users_models import User
from sqlalchemy.orm import Session
import os

load_dotenv()

ADMIN_USER_ID = int(os.getenv("ADMIN_USER_ID", 1))

user_dependency = Annotated[dict, Depends(get_current_user)]


def is_admin(user: User) -> bool:
    return bool(user.is_admin) or user.id == ADMIN_USER_ID


async def verify_token(
    current_user: user_dependency,
    db: Session = Depends(get_db)
) -> User:
    """
    Verify token and return the User object from database
    """
    user = db.query(User).filter(User.id == current_user["user_id"]).first()

    if not user:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="User not found"
        )

    if not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Account is disabled"
        )

    return user

