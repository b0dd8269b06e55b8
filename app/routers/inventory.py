# app/routers/inventory.py
#
# The seven inventory kinds expose the same surface; build_inventory_router
# stamps it out once per kind with that kind's schemas and capabilities.

import logging

from fastapi import APIRouter, Depends, Query, Request, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.database import get_db
from app.core.auth import get_current_user
from app.core.config import settings
from app.core.errors import StorageError, ValidationError
from app.core.rate_limiter import limiter
from app.schemas.inventory import SCHEMAS, QuantityAdjustment
from app.schemas.stock_history import StockHistoryResponse
from app.services.inventory_kinds import (
    EQUIPMENT,
    FEED,
    FERTILIZER,
    HARVEST,
    SEEDS,
    STOCK,
    TOOLS,
    InventoryKind,
)
from app.services.notifications import notify_low_stock
from app.services.stock_adjustment import adjust_quantity, get_owned_item, list_history

logger = logging.getLogger("app.inventory")


def build_inventory_router(kind: InventoryKind, prefix: str) -> APIRouter:
    schemas = SCHEMAS[kind.slug]
    CreateSchema = schemas.create
    UpdateSchema = schemas.update
    model = kind.model
    label = kind.label.lower()

    router = APIRouter(
        prefix=prefix,
        tags=[f"{kind.label} Inventory"],
    )

    # ---------------- LIST ----------------
    @router.get("", response_model=list[schemas.response])
    def list_items(
        low_stock: bool = Query(False, description="Only items at or below their alert threshold"),
        db: Session = Depends(get_db),
        current_user=Depends(get_current_user),
    ):
        query = db.query(model).filter(model.user_id == current_user.id)

        if low_stock:
            query = query.filter(model.quantity <= getattr(model, kind.threshold_column))

        return query.order_by(model.updated_at.desc(), model.id.desc()).all()

    # ---------------- CREATE ----------------
    @router.post("", response_model=schemas.response, status_code=status.HTTP_201_CREATED)
    def create_item(
        item_data: CreateSchema,
        db: Session = Depends(get_db),
        current_user=Depends(get_current_user),
    ):
        item = model(**item_data.model_dump(), user_id=current_user.id)

        try:
            db.add(item)
            db.flush()

            if item.is_low_stock:
                notify_low_stock(db, kind, item)

            db.commit()

        except SQLAlchemyError as exc:
            db.rollback()
            logger.exception(f"Unable to create {kind.slug} for user {current_user.id}")
            raise StorageError(f"Error creating {label}", error=exc.__class__.__name__) from exc

        db.refresh(item)
        logger.info(f"{kind.slug} #{item.id} created with {item.quantity:g} {item.unit}")
        return item

    # ---------------- GET ONE ----------------
    @router.get("/{item_id}", response_model=schemas.response)
    def get_item(
        item_id: int,
        db: Session = Depends(get_db),
        current_user=Depends(get_current_user),
    ):
        return get_owned_item(db, kind, item_id, current_user.id)

    # ---------------- UPDATE DETAILS ----------------
    @router.put("/{item_id}", response_model=schemas.response)
    def update_item(
        item_id: int,
        item_data: UpdateSchema,
        db: Session = Depends(get_db),
        current_user=Depends(get_current_user),
    ):
        item = get_owned_item(db, kind, item_id, current_user.id)
        updates = item_data.model_dump(exclude_unset=True)

        for field, value in updates.items():
            if value is None and not model.__table__.columns[field].nullable:
                raise ValidationError(f"{field} cannot be empty")

        for field, value in updates.items():
            setattr(item, field, value)

        try:
            db.commit()
        except SQLAlchemyError as exc:
            db.rollback()
            logger.exception(f"Unable to update {kind.slug} #{item_id}")
            raise StorageError(f"Error updating {label}", error=exc.__class__.__name__) from exc

        db.refresh(item)
        return item

    # ---------------- DELETE ----------------
    @router.delete("/{item_id}")
    def delete_item(
        item_id: int,
        db: Session = Depends(get_db),
        current_user=Depends(get_current_user),
    ):
        item = get_owned_item(db, kind, item_id, current_user.id)

        try:
            # Ledger entries go with the item
            db.delete(item)
            db.commit()
        except SQLAlchemyError as exc:
            db.rollback()
            logger.exception(f"Unable to delete {kind.slug} #{item_id}")
            raise StorageError(f"Error deleting {label}", error=exc.__class__.__name__) from exc

        logger.info(f"{kind.slug} #{item_id} deleted by user {current_user.id}")
        return {"message": f"{kind.label} deleted successfully"}

    # ---------------- ADJUST QUANTITY ----------------
    def update_quantity(
        request: Request,
        item_id: int,
        adjustment: QuantityAdjustment,
        db: Session = Depends(get_db),
        current_user=Depends(get_current_user),
    ):
        return adjust_quantity(
            db,
            kind,
            item_id,
            current_user.id,
            adjustment.quantity,
            adjustment.type,
            adjustment.notes,
        )

    # slowapi keys its buckets by function name
    update_quantity.__name__ = f"update_{kind.slug}_quantity"
    router.patch(
        "/{item_id}/quantity",
        response_model=schemas.response_with_history,
    )(limiter.limit(settings.ADJUST_RATE_LIMIT)(update_quantity))

    # ---------------- HISTORY ----------------
    @router.get("/{item_id}/history", response_model=list[StockHistoryResponse])
    def get_history(
        item_id: int,
        limit: int | None = Query(None, ge=1, le=500),
        offset: int = Query(0, ge=0),
        db: Session = Depends(get_db),
        current_user=Depends(get_current_user),
    ):
        return list_history(db, kind, item_id, current_user.id, limit=limit, offset=offset)

    return router


routers = [
    build_inventory_router(STOCK, "/stock"),
    build_inventory_router(FEED, "/stock-feed"),
    build_inventory_router(SEEDS, "/stock-seeds"),
    build_inventory_router(FERTILIZER, "/stock-fertilizer"),
    build_inventory_router(EQUIPMENT, "/stock-equipment"),
    build_inventory_router(HARVEST, "/stock-harvest"),
    build_inventory_router(TOOLS, "/stock-tools"),
]
