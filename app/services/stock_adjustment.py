# app/services/stock_adjustment.py
"""
Quantity adjustments for every inventory kind.

An adjustment moves an item's on-hand quantity by a positive magnitude in the
direction implied by its reason:

    add                         quantity + delta
    remove / expired / damaged  max(0, quantity - delta)

Removals larger than the stock on hand are not errors; they clamp at zero.
Additions may not carry an item past the largest quantity its column holds
exactly (see MAX_COUNT and MAX_MEASURE).
The ledger entry still records the requested delta, with the previous and
resulting quantities stored next to it.

The item row is locked (SELECT ... FOR UPDATE) and the new quantity is
computed by the database in the UPDATE statement itself, so concurrent
adjustments of one item cannot lose each other's changes. The item update,
the ledger entry and any low-stock alert are committed together.
"""

import logging
import math
from decimal import Decimal

from sqlalchemy import case, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.errors import NotFoundError, StorageError, ValidationError
from app.models.stock_history import StockHistory
from app.services.inventory_kinds import InventoryKind
from app.services.notifications import notify_low_stock

logger = logging.getLogger("app.stock")


def get_owned_item(db: Session, kind: InventoryKind, item_id: int, user_id: int, lock: bool = False):
    model = kind.model
    query = db.query(model).filter(model.id == item_id, model.user_id == user_id)
    if lock:
        query = query.with_for_update().populate_existing()

    item = query.first()
    if item is None:
        raise NotFoundError(f"{kind.label} not found")
    return item


def validate_adjustment(kind: InventoryKind, quantity, reason):
    """Check an adjustment request and return the delta to apply."""
    if quantity is None or not reason:
        raise ValidationError("Quantity and type are required")

    if reason not in kind.reasons:
        raise ValidationError(
            f"Invalid type. Must be one of: {', '.join(kind.reasons)}"
        )

    if isinstance(quantity, bool) or not isinstance(quantity, (int, float, Decimal)):
        raise ValidationError("Quantity must be a number")

    if (not isinstance(quantity, int) and not math.isfinite(quantity)) or quantity <= 0:
        raise ValidationError("Quantity must be greater than zero")

    if quantity > kind.max_quantity:
        raise ValidationError(f"Quantity must not exceed {kind.max_quantity:.0f}")

    if kind.integral:
        if float(quantity) != int(quantity):
            raise ValidationError(f"{kind.label} quantity must be a whole number")
        return int(quantity)

    return float(quantity)


def adjust_quantity(
    db: Session,
    kind: InventoryKind,
    item_id: int,
    user_id: int,
    quantity,
    reason: str,
    note: str | None = None,
):
    delta = validate_adjustment(kind, quantity, reason)
    model = kind.model

    stage = "lock"
    try:
        item = get_owned_item(db, kind, item_id, user_id, lock=True)
        previous_quantity = item.quantity

        if reason == "add" and previous_quantity + delta > kind.max_quantity:
            raise ValidationError(
                f"{kind.label} quantity cannot exceed {kind.max_quantity:.0f}"
            )

        if reason == "add":
            new_value = model.quantity + delta
        else:
            remaining = model.quantity - delta
            new_value = case((remaining < 0, 0), else_=remaining)

        stage = "update"
        db.execute(
            update(model)
            .where(model.id == item.id)
            .values(quantity=new_value)
            .execution_options(synchronize_session=False)
        )
        db.refresh(item)

        if reason != "add" and delta > previous_quantity:
            logger.warning(
                f"{kind.slug} #{item.id}: {reason} of {delta} exceeds on-hand "
                f"{previous_quantity}, clamped to 0"
            )

        stage = "ledger"
        entry = StockHistory(
            item_kind=kind.slug,
            reason=reason,
            quantity=delta,
            previous_quantity=previous_quantity,
            new_quantity=item.quantity,
            note=note,
        )
        setattr(entry, kind.history_fk, item.id)
        db.add(entry)

        if item.is_low_stock:
            stage = "notification"
            notify_low_stock(db, kind, item)

        stage = "commit"
        db.commit()

    except (NotFoundError, ValidationError):
        db.rollback()
        raise

    except SQLAlchemyError as exc:
        db.rollback()
        if stage in ("ledger", "notification", "commit"):
            logger.exception(
                f"{kind.slug} #{item_id}: quantity update rolled back, "
                f"ledger write failed at stage '{stage}'"
            )
        else:
            logger.exception(f"{kind.slug} #{item_id}: quantity update failed at stage '{stage}'")
        raise StorageError(
            f"Error updating {kind.label.lower()} quantity",
            error=exc.__class__.__name__,
        ) from exc

    logger.info(
        f"{kind.slug} #{item.id} {reason} {delta}: "
        f"{previous_quantity} -> {item.quantity} (user {user_id})"
    )
    return item


def list_history(
    db: Session,
    kind: InventoryKind,
    item_id: int,
    user_id: int,
    limit: int | None = None,
    offset: int = 0,
):
    get_owned_item(db, kind, item_id, user_id)

    query = (
        db.query(StockHistory)
        .filter(kind.history_column == item_id)
        .order_by(StockHistory.created_at.desc(), StockHistory.id.desc())
    )

    if offset:
        query = query.offset(offset)
    if limit is not None:
        query = query.limit(limit)

    return query.all()
