"""Service wiring for ordertrack front ends."""

from dataclasses import dataclass
from pathlib import Path

from .accounts import AccountService
from .data_store import DataStore
from .orders import OrderRepository
from .preferences import PreferenceStore
from .session import SessionManager


@dataclass
class Services:
    """One process's set of services, sharing a store and a session."""

    store: DataStore
    session: SessionManager
    accounts: AccountService
    orders: OrderRepository


def build_services(config_dir: Path | None = None) -> Services:
    """
    Construct the services over one data directory.

    Args:
        config_dir: Override data directory (for testing).
    """
    store = DataStore(config_dir)
    session = SessionManager(store, PreferenceStore(config_dir))
    return Services(
        store=store,
        session=session,
        accounts=AccountService(store, session),
        orders=OrderRepository(store),
    )
