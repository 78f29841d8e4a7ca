"""
Identity directory: account lookup by email and account creation.

The users table enforces one account per email. Creation runs inside a
savepoint so that losing a race against a concurrent insert surfaces as
AlreadyRegisteredError without poisoning the caller's transaction.
"""
import logging
import secrets
from typing import Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from app.auth.security import hash_password
from app.config import settings
from app.models.user import User, UserRole
from app.services.errors import AlreadyRegisteredError, StoreError

logger = logging.getLogger(__name__)


def generate_password() -> str:
    return secrets.token_urlsafe(settings.generated_password_bytes)


class IdentityDirectory:
    def __init__(self, db: Session):
        self.db = db

    def find_by_email(self, email: str) -> Optional[User]:
        return self.db.query(User).filter(User.email == email.strip().lower()).first()

    def get(self, user_id: int) -> Optional[User]:
        return self.db.query(User).filter(User.id == user_id).first()

    def create_account(
        self,
        email: str,
        display_name: str,
        password: Optional[str] = None,
        role: UserRole = UserRole.STUDENT,
        confirmed: bool = False,
    ) -> User:
        """
        Create an account. A random password is generated when none is given;
        it is hashed and never returned.
        """
        user = User(
            email=email.strip().lower(),
            password_hash=hash_password(password or generate_password()),
            display_name=display_name,
            role=role,
            email_confirmed=confirmed,
        )
        try:
            with self.db.begin_nested():
                self.db.add(user)
                self.db.flush()
        except IntegrityError as e:
            raise AlreadyRegisteredError(user.email) from e
        except SQLAlchemyError as e:
            raise StoreError(f"Failed to create user: {e}") from e

        logger.info("Created account %s for %s", user.id, user.email)
        return user

