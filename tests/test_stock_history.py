"""Ledger query tests: ordering, pagination and ownership."""
from datetime import datetime, timedelta, timezone

import pytest

from app.core.errors import NotFoundError
from app.models.stock_history import StockHistory
from app.services.inventory_kinds import STOCK, TOOLS
from app.services.stock_adjustment import adjust_quantity, list_history


def _entry(stock, reason, quantity, created_at):
    return StockHistory(
        item_kind="stock",
        stock_id=stock.id,
        reason=reason,
        quantity=quantity,
        previous_quantity=0,
        new_quantity=0,
        created_at=created_at,
    )


def test_history_empty_for_untouched_item(db_session, user, make_stock):
    stock = make_stock(user)

    assert list_history(db_session, STOCK, stock.id, user.id) == []


def test_history_sorted_newest_first(db_session, user, make_stock):
    stock = make_stock(user)
    base = datetime(2025, 3, 1, 8, 0, tzinfo=timezone.utc)

    # Inserted out of chronological order on purpose
    db_session.add_all([
        _entry(stock, "add", 1, base + timedelta(hours=2)),
        _entry(stock, "remove", 2, base),
        _entry(stock, "damaged", 3, base + timedelta(hours=5)),
        _entry(stock, "expired", 4, base + timedelta(hours=1)),
    ])
    db_session.commit()

    entries = list_history(db_session, STOCK, stock.id, user.id)

    assert [e.quantity for e in entries] == [3, 1, 4, 2]
    stamps = [e.created_at for e in entries]
    assert stamps == sorted(stamps, reverse=True)


def test_history_of_rapid_adjustments_keeps_call_order(db_session, user, make_stock):
    stock = make_stock(user, quantity=100)

    for delta in (1, 2, 3, 4):
        adjust_quantity(db_session, STOCK, stock.id, user.id, delta, "remove")

    entries = list_history(db_session, STOCK, stock.id, user.id)

    assert [e.quantity for e in entries] == [4, 3, 2, 1]


def test_history_pagination(db_session, user, make_stock):
    stock = make_stock(user, quantity=0)

    for delta in range(1, 6):
        adjust_quantity(db_session, STOCK, stock.id, user.id, delta, "add")

    page = list_history(db_session, STOCK, stock.id, user.id, limit=2, offset=1)

    assert [e.quantity for e in page] == [4, 3]


def test_history_scoped_to_item_and_kind(db_session, user, make_stock, make_tool):
    stock = make_stock(user, quantity=10)
    other_stock = make_stock(user, quantity=10, name="Barley")
    tool = make_tool(user, quantity=4)

    adjust_quantity(db_session, STOCK, stock.id, user.id, 1, "add")
    adjust_quantity(db_session, STOCK, other_stock.id, user.id, 2, "add")
    adjust_quantity(db_session, TOOLS, tool.id, user.id, 3, "add")

    assert [e.quantity for e in list_history(db_session, STOCK, stock.id, user.id)] == [1]
    tool_entries = list_history(db_session, TOOLS, tool.id, user.id)
    assert [e.quantity for e in tool_entries] == [3]
    assert tool_entries[0].item_kind == "tools"


def test_history_of_foreign_item_is_not_found(db_session, user, other_user, make_stock):
    stock = make_stock(other_user)

    with pytest.raises(NotFoundError):
        list_history(db_session, STOCK, stock.id, user.id)
