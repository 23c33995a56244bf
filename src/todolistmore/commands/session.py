"""Store access for commands."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from todolistmore.services.config_service import get_config_service
from todolistmore.services.store import Store
from todolistmore.utils.logger import configure_logging


@asynccontextmanager
async def open_store() -> AsyncIterator[Store]:
    """Open the store with the saved configuration and close it afterwards."""
    config = get_config_service().config
    configure_logging(config.logging.level)
    store = Store.open(config)
    try:
        yield store
    finally:
        store.close()
