import logging

import bcrypt
from sqlalchemy.orm import Session

from shortener.db import repository
from shortener.db.models import User

logger = logging.getLogger(__name__)


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode(), bcrypt.gensalt()).decode()


class UserService:

    @staticmethod
    def register(db: Session, username: str, password: str, email: str) -> User:
        # username and email are not required to be unique
        user = repository.create_user(db, username, hash_password(password), email)
        logger.info("Registered user id=%s username=%s", user.id, username)
        return user

    @staticmethod
    def verify_password(user: User, password: str) -> bool:
        return bcrypt.checkpw(password.encode(), user.hashed_pw.encode())
