from repositories.user_repository import UserRepository
from utilities.hashing_util import HashingUtility
from utilities.validation_util import ValidationUtility
from services.errors import AuthenticationError, DuplicateError, ValidationError
from domain.user import User

import logging

logger = logging.getLogger(__name__)

class AuthService:
    MIN_PASSWORD_LENGTH = 8

    def __init__(self, user_repository: UserRepository, hashing_utility: HashingUtility):
        self.user_repository = user_repository
        self.hashing_utility = hashing_utility

    def register_user(self, username: str, plain_password: str) -> User:
        username_cleaned = (username or "").strip().lower()
        field_errors = {}
        if not ValidationUtility.is_valid_email(username_cleaned):
            field_errors['username'] = ["Must be a valid email address"]
        password_errors = ValidationUtility.account_password_errors(plain_password, self.MIN_PASSWORD_LENGTH)
        if password_errors:
            field_errors['password'] = password_errors
        if field_errors:
            raise ValidationError(field_errors)

        if self.user_repository.get_by_username(username_cleaned):
            logger.warning(f"AUTH_SERVICE: Registration attempt for existing username {username_cleaned}.")
            raise DuplicateError("Username already exists")

        new_user = self.user_repository.add_user(
            username=username_cleaned,
            password_hash=self.hashing_utility.hash_password(plain_password),
        )
        logger.info(f"AUTH_SERVICE: Registered user_id {new_user.user_id} ({username_cleaned}).")
        return new_user

    def login_user(self, username: str, plain_password: str) -> User:
        username_cleaned = (username or "").strip().lower()
        user = self.user_repository.get_by_username(username_cleaned) if username_cleaned else None
        if not user or not plain_password or not self.hashing_utility.verify_password(user.password_hash, plain_password):
            logger.warning(f"AUTH_SERVICE: Failed login for {username_cleaned or '<empty>'}.")
            raise AuthenticationError("Invalid username or password")
        logger.info(f"AUTH_SERVICE: user_id {user.user_id} logged in.")
        return user

    def get_user(self, user_id: int) -> User | None:
        return self.user_repository.get_by_id(user_id)
