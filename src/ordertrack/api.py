"""FastAPI REST API for ordertrack."""

from datetime import date
from pathlib import Path
from typing import Optional, Union

from fastapi import Depends, FastAPI, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from . import __version__
from .errors import (
    InvalidCredentialsError,
    InvalidPasswordError,
    InvalidSchemaVersionError,
    InvalidUsernameError,
    NotLoggedInError,
    OrderNotFoundError,
    OrderTrackError,
    PasswordMismatchError,
    StoreError,
    UserNotFoundError,
    UsernameTakenError,
    ValidationError,
)
from .models import Order, OrderFields, User
from .services import Services, build_services


# --- Pydantic Schemas ---


class UserSchema(BaseModel):
    id: str
    username: str
    remember_me: bool
    created_at: str


class RegisterRequest(BaseModel):
    username: str
    password: str
    confirm_password: str


class LoginRequest(BaseModel):
    username: str
    password: str
    remember: bool = Field(default=False, description="Restore this login after a restart")


class SessionResponse(BaseModel):
    logged_in: bool
    user: Optional[UserSchema] = None
    remembered_username: Optional[str] = None


class OrderSchema(BaseModel):
    id: str
    owner_id: str
    order_number: str
    due_date: Optional[date] = None
    buyer_name: str
    address: str
    phone: str
    total: float
    created_at: str
    updated_at: str


class OrderRequest(BaseModel):
    """Request body for creating or replacing an order."""

    order_number: str
    due_date: Optional[date] = None
    buyer_name: str
    address: str
    phone: str = Field(..., description="10-15 characters, digits or a leading +")
    total: Union[str, float] = Field(..., description="Greater than 0")

    def to_fields(self) -> OrderFields:
        return OrderFields(
            order_number=self.order_number,
            buyer_name=self.buyer_name,
            address=self.address,
            phone=self.phone,
            total=self.total,
            due_date=self.due_date,
        )


class OrderListResponse(BaseModel):
    orders: list[OrderSchema]
    count: int


class ErrorResponse(BaseModel):
    detail: str
    error_type: str
    field: Optional[str] = None


# --- Global Exception Handler ---


# Map exception types to HTTP status codes
ERROR_STATUS_CODES: dict[type, int] = {
    ValidationError: 400,
    InvalidUsernameError: 400,
    InvalidPasswordError: 400,
    PasswordMismatchError: 400,
    UsernameTakenError: 409,
    InvalidCredentialsError: 401,
    NotLoggedInError: 401,
    OrderNotFoundError: 404,
    UserNotFoundError: 404,
    StoreError: 503,
    InvalidSchemaVersionError: 500,
}


async def ordertrack_error_handler(request: Request, exc: OrderTrackError) -> JSONResponse:
    """Map OrderTrackError subclasses to appropriate HTTP responses."""
    status_code = ERROR_STATUS_CODES.get(type(exc), 500)
    content = {"detail": str(exc), "error_type": type(exc).__name__}
    if isinstance(exc, ValidationError):
        content["field"] = exc.field
    return JSONResponse(status_code=status_code, content=content)


# --- Helper Functions ---


def get_services(request: Request) -> Services:
    """Get the services owned by this app instance."""
    return request.app.state.services


def user_to_schema(user: User) -> UserSchema:
    """Convert dataclass User to Pydantic schema. The password is never exposed."""
    return UserSchema(
        id=user.id,
        username=user.username,
        remember_me=user.remember_me,
        created_at=user.created_at,
    )


def order_to_schema(order: Order) -> OrderSchema:
    """Convert dataclass Order to Pydantic schema."""
    return OrderSchema(
        id=order.id,
        owner_id=order.owner_id,
        order_number=order.order_number,
        due_date=order.due_date,
        buyer_name=order.buyer_name,
        address=order.address,
        phone=order.phone,
        total=order.total,
        created_at=order.created_at,
        updated_at=order.updated_at,
    )


def get_owned_order(services: Services, user: User, order_id: str) -> Order:
    """
    Get an order only if it belongs to user.

    Raises:
        OrderNotFoundError: If the order doesn't exist or has another owner.
    """
    order = services.orders.get_order(order_id)
    if order.owner_id != user.id:
        raise OrderNotFoundError(order_id)
    return order


# --- App ---


def create_app(config_dir: Path | None = None) -> FastAPI:
    """
    Create the API app with its own services.

    Args:
        config_dir: Override data directory (for testing).
    """
    app = FastAPI(
        title="ordertrack API",
        description="Per-user order tracking",
        version=__version__,
    )
    app.state.services = build_services(config_dir)
    app.add_exception_handler(OrderTrackError, ordertrack_error_handler)

    # --- Endpoints ---

    @app.get("/api/health")
    def health_check(services: Services = Depends(get_services)):
        """Health check endpoint."""
        try:
            logged_in = services.session.is_logged_in
        except StoreError as e:
            return {"status": "error", "detail": str(e)}
        return {"status": "ok", "logged_in": logged_in}

    # --- Account Endpoints ---

    @app.post("/api/register", response_model=UserSchema, status_code=201)
    def register(request: RegisterRequest, services: Services = Depends(get_services)):
        """Register a new user. Does not log in."""
        user = services.accounts.register(
            request.username, request.password, request.confirm_password
        )
        return user_to_schema(user)

    @app.post("/api/login", response_model=UserSchema)
    def login(request: LoginRequest, services: Services = Depends(get_services)):
        """Log in, optionally remembering the login across restarts."""
        user = services.accounts.login(request.username, request.password, request.remember)
        return user_to_schema(user)

    @app.post("/api/logout")
    def logout(services: Services = Depends(get_services)):
        """Log out. Always succeeds."""
        services.accounts.logout()
        return {"status": "ok"}

    @app.get("/api/session", response_model=SessionResponse)
    def get_session(services: Services = Depends(get_services)):
        """Get the current user, restoring a remembered login if needed."""
        user = services.session.resolve_current_user()
        return SessionResponse(
            logged_in=user is not None,
            user=user_to_schema(user) if user else None,
            remembered_username=services.session.remembered_username,
        )

    # --- Order Endpoints ---

    @app.get("/api/orders", response_model=OrderListResponse)
    def list_orders(services: Services = Depends(get_services)):
        """List the current user's orders by due date, undated last."""
        user = services.accounts.require_user()
        orders = services.orders.list_orders(user.id)
        return OrderListResponse(
            orders=[order_to_schema(o) for o in orders],
            count=len(orders),
        )

    @app.post("/api/orders", response_model=OrderSchema, status_code=201)
    def create_order(request: OrderRequest, services: Services = Depends(get_services)):
        """Create an order for the current user."""
        user = services.accounts.require_user()
        order = services.orders.create_order(user.id, request.to_fields())
        return order_to_schema(order)

    @app.get("/api/orders/{order_id}", response_model=OrderSchema)
    def get_order(order_id: str, services: Services = Depends(get_services)):
        """Get one of the current user's orders."""
        user = services.accounts.require_user()
        return order_to_schema(get_owned_order(services, user, order_id))

    @app.put("/api/orders/{order_id}", response_model=OrderSchema)
    def update_order(
        order_id: str, request: OrderRequest, services: Services = Depends(get_services)
    ):
        """Replace every editable field of one of the current user's orders."""
        user = services.accounts.require_user()
        get_owned_order(services, user, order_id)
        order = services.orders.update_order(order_id, request.to_fields())
        return order_to_schema(order)

    @app.delete("/api/orders/{order_id}", response_model=OrderSchema)
    def delete_order(order_id: str, services: Services = Depends(get_services)):
        """Delete one of the current user's orders."""
        user = services.accounts.require_user()
        order = get_owned_order(services, user, order_id)
        services.orders.delete_order(order.id)
        return order_to_schema(order)

    return app


app = create_app()
