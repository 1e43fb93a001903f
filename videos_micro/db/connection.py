from fastapi import Depends, HTTPException
from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError
from .database import SessionLocal
from typing import Annotated
import logging

logger = logging.getLogger(__name__)


def get_db():
    db = SessionLocal()
    try:
        yield db
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Database error, session rolled back: {e}")
        raise HTTPException(status_code=500, detail="Database connection error")
    finally:
        db.close()


db_dependency = Annotated[Session, Depends(get_db)]
