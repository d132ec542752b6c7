"""Shared pytest fixtures."""

from datetime import datetime
from typing import Any

import pytest

from campaign_card.processing.types import MembershipRecord

#: Fixed reference time for every recency assertion.
NOW = datetime(2024, 6, 1, 12, 0, 0)


@pytest.fixture
def now() -> datetime:
    return NOW


@pytest.fixture
def raw_memberships() -> list[dict[str, Any]]:
    """``listsforemail.json`` response for a contact on seven lists."""
    return [
        {"ListID": "l1", "ListName": "List 1", "SubscriberState": "Active",
         "DateSubscriberAdded": "2018-01-10 09:00:00"},
        {"ListID": "l2", "ListName": "List 2", "SubscriberState": "Unsubscribed",
         "DateSubscriberAdded": "2019-05-01 10:30:00"},
        {"ListID": "l3", "ListName": "List 3", "SubscriberState": "Deleted",
         "DateSubscriberAdded": "2020-02-02 08:00:00"},
        {"ListID": "l4", "ListName": "List 4", "SubscriberState": "Unconfirmed",
         "DateSubscriberAdded": "2021-03-03 17:45:00"},
        {"ListID": "l5", "ListName": "List 5", "SubscriberState": "Active",
         "DateSubscriberAdded": "2017-03-19 11:15:00"},
        {"ListID": "l6", "ListName": "List 6", "SubscriberState": "Active",
         "DateSubscriberAdded": "2022-01-01 00:00:00"},
        {"ListID": "l7", "ListName": "List 7", "SubscriberState": "Active",
         "DateSubscriberAdded": "2023-01-01 00:00:00"},
    ]


@pytest.fixture
def memberships(raw_memberships: list[dict[str, Any]]) -> list[MembershipRecord]:
    return [MembershipRecord.from_api(m) for m in raw_memberships]
