"""Login session tracking for ordertrack."""

import logging
from dataclasses import replace

from .data_store import DataStore
from .models import Preferences, User
from .preferences import PreferenceStore

logger = logging.getLogger(__name__)


class SessionManager:
    """
    Tracks which user is logged in.

    Two states: logged out, and logged in as a user. The in-memory current
    user lasts for the life of the process; the logged-in flag and the
    remembered username are persisted so a remembered login can be restored
    after a restart.
    """

    def __init__(self, store: DataStore, preferences: PreferenceStore):
        self.store = store
        self.preferences = preferences
        self.current_user: User | None = None

    @property
    def is_logged_in(self) -> bool:
        """The persisted logged-in flag."""
        return self.preferences.load().is_logged_in

    @property
    def remembered_username(self) -> str | None:
        """Username saved by the last remember-me login, if any."""
        return self.preferences.load().remembered_username

    def authenticate(self, username: str, password: str) -> User | None:
        """
        Look up a user by exact username and password.

        Does not change the session; call login() with the result.
        """
        return self.store.find_by_credentials(username, password)

    def login(self, user: User, remember: bool = False) -> None:
        """Make user the current user and persist the login."""
        if user.remember_me != remember:
            self.store.update_user(replace(user, remember_me=remember))
            user.remember_me = remember

        self.preferences.save(
            Preferences(
                is_logged_in=True,
                remembered_username=user.username if remember else None,
            )
        )
        self.current_user = user
        logger.info("User %s logged in (remember=%s)", user.username, remember)

    def logout(self) -> None:
        """Clear the current user and the persisted login."""
        username = self.current_user.username if self.current_user else None
        self.current_user = None
        self.preferences.save(Preferences(is_logged_in=False))
        logger.info("User %s logged out", username or "<none>")

    def resolve_current_user(self) -> User | None:
        """
        Return the current user, restoring a remembered login if needed.

        A remembered username that no longer resolves returns None but does
        not log out; the caller decides what to do.
        """
        if self.current_user is not None:
            return self.current_user

        prefs = self.preferences.load()
        if not prefs.is_logged_in or not prefs.remembered_username:
            return None

        user = self.store.find_by_username(prefs.remembered_username)
        if user is None:
            logger.warning("Remembered user %s no longer exists", prefs.remembered_username)
            return None

        self.current_user = user
        return user
