from datetime import timedelta, datetime
from fastapi import APIRouter, HTTPException, Depends, Response, status
from typing import Annotated
from passlib.context import CryptContext
from fastapi.security import OAuth2PasswordBearer
from jose import jwt, JWTError
from sqlalchemy.exc import IntegrityError
from dotenv import load_dotenv
import os
import logging

from db.connection import db_dependency
from models.users_models import User
from schemas.schemas import CreateUserRequest, UserLogin, Token, UsernameAvailability
from schemas.return_schemas import ReturnUser

# Load environment variables
load_dotenv()

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Authentication"])

# Environment variables
SECRET_KEY = os.getenv("SECRET_KEY")
ALGORITHM = os.getenv("ALGORITHM", "HS256")
ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", 60 * 24))

if not SECRET_KEY:
    logger.warning("SECRET_KEY is not set, using an insecure development key")
    SECRET_KEY = "gorillaflix-dev-secret"

# Password and token setup
bcrypt_context = CryptContext(schemes=["bcrypt"], deprecated="auto")
oauth2_bearer = OAuth2PasswordBearer(tokenUrl="api/login")


# Authentication function
def authenticate_user(username: str, password: str, db):
    user = db.query(User).filter(User.username == username).first()
    if not user:
        return False
    if not bcrypt_context.verify(password, user.password_hash):
        return False
    return user


# Token creation
def create_access_token(
    username: str, user_id: int, expires_delta: timedelta = timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES)
):
    encode = {"uname": username, "id": user_id}
    expires = datetime.utcnow() + expires_delta
    encode.update({"exp": expires})
    return jwt.encode(encode, SECRET_KEY, algorithm=ALGORITHM)


# Current user dependency
async def get_current_user(token: Annotated[str, Depends(oauth2_bearer)]):
    try:
        payload = jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])
        username: str = payload.get("uname")
        user_id: int = payload.get("id")
        if username is None or user_id is None:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Invalid authentication credentials",
            )
        return {"username": username, "user_id": user_id}
    except JWTError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication failed. Your token is invalid or has expired.",
        )


user_dependency = Annotated[dict, Depends(get_current_user)]


def token_response(user: User) -> Token:
    token = create_access_token(user.username, user.id)
    return Token(access_token=token, token_type="bearer", user=ReturnUser.model_validate(user))


@router.post("/register", response_model=Token, status_code=status.HTTP_201_CREATED)
async def create_user(db: db_dependency, user_request: CreateUserRequest):
    """
    Register a new user account. The first account on a fresh database
    becomes the administrator.
    """
    try:
        check_username = db.query(User).filter(User.username == user_request.username).first()
        if check_username:
            raise HTTPException(status_code=400, detail="Username already taken")

        is_first_user = db.query(User).count() == 0

        new_user = User(
            username=user_request.username,
            password_hash=bcrypt_context.hash(user_request.password),
            bio=user_request.bio,
            is_admin=is_first_user
        )
        db.add(new_user)
        db.commit()
        db.refresh(new_user)

        logger.info(f"Registered user {new_user.id} ({new_user.username})")
        return token_response(new_user)

    except HTTPException:
        raise
    except IntegrityError:
        # A concurrent registration claimed the username after the check above
        db.rollback()
        raise HTTPException(status_code=400, detail="Username already taken")
    except Exception as e:
        db.rollback()
        logger.exception("Registration failed")
        raise HTTPException(status_code=500, detail=f"Registration error: {str(e)}")


@router.post("/login", response_model=Token)
async def login(db: db_dependency, user_login: UserLogin):
    """
    Authenticate user and provide access token
    """
    user = authenticate_user(user_login.username, user_login.password, db)

    if not user or not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid username or password",
        )

    return token_response(user)


@router.post("/logout")
async def logout(response: Response):
    """
    Logout user - frontend should clear token
    """
    # Tokens are stateless; clearing the cookie signals the frontend
    response.set_cookie(key="access_token", value="", max_age=0)
    return {"message": "Successfully logged out"}


@router.get("/user", response_model=ReturnUser)
async def get_user(current_user: user_dependency, db: db_dependency):
    """
    Get current user information
    """
    user = db.query(User).filter(User.id == current_user["user_id"]).first()

    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    if not user.is_active:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Account is disabled")

    return ReturnUser.model_validate(user)


@router.get("/check-username/{username}", response_model=UsernameAvailability)
async def check_username(username: str, db: db_dependency):
    """Tell the signup form whether a username is still free"""
    if len(username.strip()) < 3:
        return UsernameAvailability(available=False)

    existing = db.query(User).filter(User.username == username.strip()).first()
    return UsernameAvailability(available=existing is None)
