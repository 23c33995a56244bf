"""Shared test fixtures and configuration.

Provides infrastructure to isolate tests from real filesystem state: every
platformdirs lookup lands in *tmp_path* and every store lives there too.
"""

from __future__ import annotations

from datetime import datetime
from unittest.mock import patch
from zoneinfo import ZoneInfo

import pytest

from todolistmore.adapters.sqlite.connection import MEMORY_PATH, DatabaseConnection
from todolistmore.models import AppConfig, ReminderConfig, StoreConfig
from todolistmore.services.notification_service import NotificationService
from todolistmore.services.store import Store


class FakeNotificationService(NotificationService):
    """Records what the scheduler asks for instead of notifying anyone."""

    def __init__(self, authorized: bool = True):
        self.authorized = authorized
        self.scheduled: dict[str, tuple[datetime, str, str]] = {}
        self.cancelled: list[str] = []
        self.cancel_all_calls = 0
        self.authorization_requests = 0

    async def request_authorization(self) -> bool:
        self.authorization_requests += 1
        return self.authorized

    async def check_authorization(self) -> bool:
        return self.authorized

    async def schedule(self, identifier, fire_time, title, body) -> None:
        self.scheduled[identifier] = (fire_time, title, body)

    async def cancel(self, identifier) -> None:
        self.cancelled.append(identifier)
        self.scheduled.pop(identifier, None)

    async def cancel_all(self) -> None:
        self.cancel_all_calls += 1
        self.scheduled.clear()


# ---------------------------------------------------------------------------
# Filesystem isolation
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def isolated_dirs(tmp_path):
    """Point every platformdirs lookup at *tmp_path*."""
    from todolistmore.services.config_service import get_config_service

    config_dir = str(tmp_path / "config")
    data_dir = str(tmp_path / "data")
    log_dir = str(tmp_path / "logs")
    get_config_service.cache_clear()
    with (
        patch("todolistmore.services.config_service.user_config_dir", return_value=config_dir),
        patch("todolistmore.services.config_service.user_data_dir", return_value=data_dir),
        patch("todolistmore.adapters.sqlite.location.user_data_dir", return_value=data_dir),
        patch("todolistmore.utils.logger.user_log_dir", return_value=log_dir),
    ):
        yield tmp_path
    get_config_service.cache_clear()


# ---------------------------------------------------------------------------
# Local timezone
# ---------------------------------------------------------------------------


@pytest.fixture()
def pin_zone():
    """Fix the local timezone for the duration of a test.

    Usage: ``zone = pin_zone("America/New_York")``
    """
    patches = []

    def pin(name: str) -> ZoneInfo:
        zone = ZoneInfo(name)
        patcher = patch("todolistmore.utils.dates.tzlocal.get_localzone", return_value=zone)
        patcher.start()
        patches.append(patcher)
        return zone

    yield pin
    for patcher in reversed(patches):
        patcher.stop()


# ---------------------------------------------------------------------------
# Store fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def app_config(tmp_path) -> AppConfig:
    return AppConfig(
        store=StoreConfig(shared_root=str(tmp_path / "shared")),
        reminders=ReminderConfig(authorized=True),
    )


@pytest.fixture()
def notifications() -> FakeNotificationService:
    return FakeNotificationService()


@pytest.fixture()
def store(app_config, notifications):
    """File-backed store in the shared location under *tmp_path*."""
    store = Store.open(app_config, notifications)
    yield store
    store.close()


@pytest.fixture()
def memory_store(app_config, notifications):
    store = Store(DatabaseConnection(MEMORY_PATH), app_config, notifications)
    yield store
    store.close()
