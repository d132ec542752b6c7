"""Membership summarizer — turns list memberships into a one-line card."""

from __future__ import annotations

import logging
import math
import os
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime, timedelta

import humanize

from campaign_card.processing.types import (
    STATE_LABEL,
    MembershipRecord,
    Summary,
    to_naive_utc,
)

logger = logging.getLogger(__name__)

_EMPTY_TEXT = "Not in any list."
_NAMES_SHOWN = 2
_SECONDS_PER_DAY = 86400


@dataclass(frozen=True)
class SummaryConfig:
    """Controls optional parts of the summary text."""

    include_recency_preamble: bool = True

    @classmethod
    def from_env(cls) -> SummaryConfig:
        """Build SummaryConfig from environment variables."""
        return cls(
            include_recency_preamble=(
                os.environ.get("CARD_RECENCY_PREAMBLE", "true").lower() == "true"
            ),
        )


def summarize(
    memberships: Sequence[MembershipRecord],
    now: datetime,
    config: SummaryConfig | None = None,
) -> Summary:
    """Summarise memberships grouped by subscriber state.

    Groups appear in SubscriberState order; each lists the two oldest lists
    by ``date_added`` and a count of the rest. ``now`` is the reference time
    for the "Added ... ago" preamble and is never read from the clock here.

    Example::

        summarize(records, now=datetime.now()).text
        # 'Added 7 years ago. _Subscribed to_ List 5, List 1 and 2 more. '
    """
    config = config or SummaryConfig()
    if not memberships:
        return Summary(text=_EMPTY_TEXT)

    text = ""
    if config.include_recency_preamble:
        text += _recency_preamble(memberships, now)

    for state, label in STATE_LABEL.items():
        members = [m for m in memberships if m.subscriber_state == state.value]
        if not members:
            continue
        members.sort(key=_date_sort_key)
        text += f"_{label}_ "
        text += ", ".join(m.list_name for m in members[:_NAMES_SHOWN])
        if len(members) > _NAMES_SHOWN:
            text += f" and {len(members) - _NAMES_SHOWN} more. "
        else:
            text += ". "

    logger.debug("Summarised %d memberships: %r", len(memberships), text)
    return Summary(text=text)


def _recency_preamble(memberships: Sequence[MembershipRecord], now: datetime) -> str:
    """Return 'Added <relative>. ' for the earliest membership.

    Any undated membership leaves the earliest date unknown, so the preamble
    is dropped entirely.
    """
    dates = [m.date_added for m in memberships]
    if any(d is None for d in dates):
        return ""
    return f"Added {_relative_time(min(dates), to_naive_utc(now))}. "


def _relative_time(then: datetime, now: datetime) -> str:
    """Phrase ``now - then`` with a single rounded unit: '7 years ago', 'a day ago'.

    Each unit is rounded to nearest and the first one under its cut-off wins
    (45s, 45min, 22h, 26 days, 11 months); humanize phrases that one unit.
    """
    delta = now - then
    seconds = abs(delta.total_seconds())
    months = seconds / _SECONDS_PER_DAY * 4800 / 146097

    if round(seconds) < 45:
        phrase = "a few seconds"
    elif round(seconds / 60) < 45:
        phrase = humanize.naturaldelta(timedelta(minutes=round(seconds / 60)))
    elif round(seconds / 3600) < 22:
        phrase = humanize.naturaldelta(timedelta(hours=round(seconds / 3600)))
    elif round(seconds / _SECONDS_PER_DAY) < 26:
        phrase = humanize.naturaldelta(timedelta(days=round(seconds / _SECONDS_PER_DAY)))
    elif round(months) < 11:
        # humanize counts a month as 30.5 days
        phrase = humanize.naturaldelta(timedelta(days=math.ceil(round(months) * 30.5)))
    else:
        phrase = humanize.naturaldelta(timedelta(days=365 * max(round(months / 12), 1)))

    return f"in {phrase}" if delta < timedelta(0) else f"{phrase} ago"


def _date_sort_key(membership: MembershipRecord) -> tuple[bool, datetime]:
    # Undated memberships sort last; sort() is stable so ties keep input order.
    return (membership.date_added is None, membership.date_added or datetime.min)
