"""Tests for widget deep links."""

from datetime import UTC, datetime

import pytest

from todolistmore.models import Task, WidgetSnapshot
from todolistmore.services.deep_links import DeepLink, parse_deep_link, tasks_for

NOW = datetime(2026, 10, 18, 9, 0, tzinfo=UTC)


@pytest.mark.parametrize(
    "url, expected",
    [
        ("todolistmore://today", DeepLink.TODAY),
        ("todolistmore://priority", DeepLink.PRIORITY),
        ("todolistmore://new", DeepLink.NEW_TASK),
        ("todolistmore://today/extra?x=1", DeepLink.TODAY),
        ("todolistmore://settings", None),
        ("https://today", None),
        ("not a url", None),
        ("todolistmore://", None),
    ],
)
def test_parse_deep_link(url, expected):
    assert parse_deep_link(url) is expected


def test_url_round_trip():
    for link in DeepLink:
        assert parse_deep_link(link.url) is link


def test_tasks_for_destination():
    today = Task(id="a", title="A", date_created=NOW, date_modified=NOW)
    urgent = Task(id="b", title="B", priority=3, date_created=NOW, date_modified=NOW)
    snapshot = WidgetSnapshot(date=NOW, today_tasks=[today], high_priority_tasks=[urgent])

    assert tasks_for(snapshot, DeepLink.TODAY) == [today]
    assert tasks_for(snapshot, DeepLink.PRIORITY) == [urgent]
    assert tasks_for(snapshot, DeepLink.NEW_TASK) == []
