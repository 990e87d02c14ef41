"""Custom exceptions for ordertrack."""


class OrderTrackError(Exception):
    """Base exception for all ordertrack errors."""

    pass


class ValidationError(OrderTrackError):
    """Raised when an order field fails validation. Nothing is written."""

    def __init__(self, field: str, message: str | None = None):
        self.field = field
        super().__init__(message or f"Invalid value for {field}")


# Registration


class RegistrationError(OrderTrackError):
    """Base for errors raised while registering a new user."""

    pass


class InvalidUsernameError(RegistrationError):
    """Raised when a username is empty or shorter than 3 characters."""

    def __init__(self, username: str):
        self.username = username
        super().__init__("Username must be at least 3 characters")


class InvalidPasswordError(RegistrationError):
    """Raised when a password is empty or shorter than 6 characters."""

    def __init__(self) -> None:
        super().__init__("Password must be at least 6 characters")


class PasswordMismatchError(RegistrationError):
    """Raised when password and confirmation differ."""

    def __init__(self) -> None:
        super().__init__("Passwords do not match")


class UsernameTakenError(RegistrationError):
    """Raised when a username already belongs to another user."""

    def __init__(self, username: str):
        self.username = username
        super().__init__(f"Username already exists: {username}")


# Authentication


class AuthError(OrderTrackError):
    """Base for authentication and session errors."""

    pass


class InvalidCredentialsError(AuthError):
    """Raised when no user matches the supplied username and password."""

    def __init__(self) -> None:
        super().__init__("Invalid username or password")


class NotLoggedInError(AuthError):
    """Raised when an operation needs a current user and there is none."""

    def __init__(self) -> None:
        super().__init__("Not logged in. Run 'ordertrack login' first.")


# Storage


class StoreError(OrderTrackError):
    """Raised when the underlying storage fails. Safe to retry."""

    def __init__(self, message: str, path: str | None = None):
        self.path = path
        if path:
            message = f"{message} ({path})"
        super().__init__(message)


class InvalidSchemaVersionError(StoreError):
    """Raised when a data file has an unsupported schema version."""

    def __init__(self, found: int, supported: int):
        self.found = found
        self.supported = supported
        super().__init__(
            f"Unsupported schema version {found}. This tool supports version {supported}."
        )


class UserNotFoundError(OrderTrackError):
    """Raised when a user ID doesn't exist."""

    def __init__(self, user_id: str):
        self.user_id = user_id
        super().__init__(f"User not found: {user_id}")


class OrderNotFoundError(OrderTrackError):
    """Raised when an order ID doesn't exist."""

    def __init__(self, order_id: str):
        self.order_id = order_id
        super().__init__(f"Order not found: {order_id}")
