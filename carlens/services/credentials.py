import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from carlens.core.errors import ConflictError, InvalidCredentialsError, MissingFieldsError
from carlens.core.security import dummy_verify, hash_password, verify_password
from carlens.models import User

logger = logging.getLogger(__name__)

class CredentialStore:
    """Creates accounts and checks email/password pairs against the users table."""

    def __init__(self, db: Session):
        self.db = db

    def create_user(self, email: str, password: str) -> User:
        """
        Register a new user with a hashed password.

        Raises:
            MissingFieldsError: email or password is blank
            ConflictError: the email is already registered
        """
        if not email or not password:
            raise MissingFieldsError()

        user = User(email=email, password_hash=hash_password(password))
        self.db.add(user)
        try:
            # The unique index on email decides races between concurrent signups
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            logger.info("Signup rejected, email already registered")
            raise ConflictError("Email already exists")

        self.db.refresh(user)
        logger.info(f"Created user {user.id}")
        return user

    def verify_credentials(self, email: str, password: str) -> User:
        """Return the user for a matching email/password pair or raise InvalidCredentialsError."""
        if not email or not password:
            raise MissingFieldsError()

        user = self.db.query(User).filter(User.email == email).first()
        if user is None:
            dummy_verify()
            raise InvalidCredentialsError()

        if not verify_password(password, user.password_hash):
            raise InvalidCredentialsError()

        return user

    def get_user(self, user_id: int) -> User:
        return self.db.query(User).filter(User.id == user_id).first()
