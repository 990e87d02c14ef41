"""Registration and login for ordertrack."""

import logging

from .data_store import DataStore
from .errors import (
    InvalidCredentialsError,
    InvalidPasswordError,
    InvalidUsernameError,
    NotLoggedInError,
    PasswordMismatchError,
    UsernameTakenError,
)
from .models import User
from .session import SessionManager
from .validator import is_valid_password, is_valid_username, passwords_match

logger = logging.getLogger(__name__)


class AccountService:
    """Entry points a front end calls to register, log in and log out."""

    def __init__(self, store: DataStore, session: SessionManager):
        self.store = store
        self.session = session

    def register(self, username: str, password: str, confirm_password: str) -> User:
        """
        Register a new user. Does not log them in.

        Raises:
            InvalidUsernameError: If username is shorter than 3 characters.
            InvalidPasswordError: If password is shorter than 6 characters.
            PasswordMismatchError: If confirm_password differs.
            UsernameTakenError: If the username is already registered.
            StoreError: If the user could not be saved.
        """
        if not is_valid_username(username):
            raise InvalidUsernameError(username)
        if not is_valid_password(password):
            raise InvalidPasswordError()
        if not passwords_match(password, confirm_password):
            raise PasswordMismatchError()
        if self.store.count_by_username(username) > 0:
            raise UsernameTakenError(username)

        user = User.create(username=username, password=password)
        self.store.insert_user(user)
        return user

    def login(self, username: str, password: str, remember: bool = False) -> User:
        """
        Authenticate and start a session.

        Raises:
            InvalidCredentialsError: If username and password don't match a user.
        """
        user = self.session.authenticate(username, password)
        if user is None:
            logger.info("Failed login for %s", username)
            raise InvalidCredentialsError()

        self.session.login(user, remember=remember)
        return user

    def logout(self) -> None:
        self.session.logout()

    def require_user(self) -> User:
        """
        Return the current user.

        Raises:
            NotLoggedInError: If nobody is logged in.
        """
        user = self.session.resolve_current_user()
        if user is None:
            raise NotLoggedInError()
        return user
