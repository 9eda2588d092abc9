import pytest

from quotedesk.core import config
from quotedesk.models.enums.quote_status import QuoteAction, QuoteStatus
from quotedesk.services.quotes.lifecycle_service import (
    _dedupe,
    can_purge,
    resolve_transition,
)


@pytest.mark.parametrize(
    "action, current, expected",
    [
        (QuoteAction.APPROVE, QuoteStatus.PENDING, QuoteStatus.APPROVED),
        (QuoteAction.APPROVE, QuoteStatus.REJECTED, QuoteStatus.APPROVED),
        (QuoteAction.APPROVE, QuoteStatus.APPROVED, QuoteStatus.APPROVED),
        (QuoteAction.REJECT, QuoteStatus.PENDING, QuoteStatus.REJECTED),
        (QuoteAction.REJECT, QuoteStatus.APPROVED, QuoteStatus.REJECTED),
        (QuoteAction.TRASH, QuoteStatus.PENDING, QuoteStatus.TRASHED),
        (QuoteAction.TRASH, QuoteStatus.APPROVED, QuoteStatus.TRASHED),
        (QuoteAction.TRASH, QuoteStatus.REJECTED, QuoteStatus.TRASHED),
        (QuoteAction.RESTORE, QuoteStatus.TRASHED, QuoteStatus.PENDING),
    ],
)
def test_allowed_transitions(action, current, expected):
    assert resolve_transition(action, current) == expected


@pytest.mark.parametrize(
    "action, current",
    [
        (QuoteAction.APPROVE, QuoteStatus.TRASHED),
        (QuoteAction.REJECT, QuoteStatus.TRASHED),
        (QuoteAction.TRASH, QuoteStatus.TRASHED),
        (QuoteAction.RESTORE, QuoteStatus.PENDING),
        (QuoteAction.RESTORE, QuoteStatus.APPROVED),
    ],
)
def test_transitions_outside_the_table_are_refused(action, current):
    assert resolve_transition(action, current) is None


def test_restore_ignores_status_held_before_trash():
    for before in QuoteStatus.active():
        trashed = resolve_transition(QuoteAction.TRASH, before)
        assert resolve_transition(QuoteAction.RESTORE, trashed) == QuoteStatus.PENDING


def test_purge_is_permissive_by_default(monkeypatch):
    monkeypatch.setattr(config, "PURGE_REQUIRES_TRASH", False)
    assert all(can_purge(status) for status in QuoteStatus)


def test_purge_can_be_gated_on_trash(monkeypatch):
    monkeypatch.setattr(config, "PURGE_REQUIRES_TRASH", True)
    assert can_purge(QuoteStatus.TRASHED)
    assert not can_purge(QuoteStatus.APPROVED)


def test_dedupe_keeps_first_occurrence_order():
    assert _dedupe([3, 1, 3, 2, 1]) == [3, 1, 2]


def test_status_parse_falls_back_to_none():
    assert QuoteStatus.parse("Trashed") == QuoteStatus.TRASHED
    assert QuoteStatus.parse("all") is None
    assert QuoteStatus.parse("publish") is None
    assert QuoteStatus.parse(None) is None
