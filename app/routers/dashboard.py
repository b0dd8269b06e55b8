# app/routers/dashboard.py

from datetime import date, timedelta

from fastapi import APIRouter, Depends, Query
from sqlalchemy import case, func, literal
from sqlalchemy.orm import Session

from app.database import get_db
from app.core.auth import get_current_user
from app.schemas.dashboard import (
    ExpiringItem,
    InventorySummaryResponse,
    LowStockSummaryResponse,
)
from app.services.inventory_kinds import KINDS
from app.services.notifications import EXPIRY_WINDOW_DAYS, expiring_items

router = APIRouter(
    prefix="/dashboard",
    tags=["Dashboard"],
)


@router.get("/low-stock", response_model=LowStockSummaryResponse)
def low_stock_summary(
    db: Session = Depends(get_db),
    current_user=Depends(get_current_user),
):
    kinds = []
    total_low_stock = 0

    for kind in KINDS.values():
        model = kind.model
        threshold = getattr(model, kind.threshold_column)

        total_items = (
            db.query(func.count(model.id))
            .filter(model.user_id == current_user.id)
            .scalar()
        )

        low_items = (
            db.query(model)
            .filter(
                model.user_id == current_user.id,
                model.quantity <= threshold,
            )
            .order_by(model.quantity.asc(), model.id.asc())
            .all()
        )

        total_low_stock += len(low_items)
        kinds.append({
            "kind": kind.slug,
            "total_items": total_items,
            "low_stock_items": len(low_items),
            "items": [
                {
                    "id": item.id,
                    "name": item.name,
                    "quantity": item.quantity,
                    "unit": item.unit,
                    "threshold": item.threshold,
                }
                for item in low_items
            ],
        })

    return {
        "total_low_stock": total_low_stock,
        "kinds": kinds,
    }


@router.get("/summary", response_model=InventorySummaryResponse)
def inventory_summary(
    days: int = Query(EXPIRY_WINDOW_DAYS, ge=1, le=365),
    db: Session = Depends(get_db),
    current_user=Depends(get_current_user),
):
    # Already-expired items count as expiring here, unlike expiry alerts
    horizon = date.today() + timedelta(days=days)

    kinds = []
    for kind in KINDS.values():
        model = kind.model
        threshold = getattr(model, kind.threshold_column)

        if kind.priced:
            value = func.coalesce(func.sum(model.quantity * model.price), 0)
        else:
            value = literal(0)

        if kind.expires:
            expiring = func.count(case((model.expiry_date <= horizon, 1)))
        else:
            expiring = literal(0)

        row = (
            db.query(
                func.count(model.id).label("total_items"),
                func.coalesce(func.sum(model.quantity), 0).label("total_quantity"),
                value.label("total_value"),
                func.count(case((model.quantity <= threshold, 1))).label("low_stock"),
                expiring.label("expiring"),
            )
            .filter(model.user_id == current_user.id)
            .one()
        )

        kinds.append({
            "kind": kind.slug,
            "total_items": row.total_items,
            "total_quantity": row.total_quantity,
            "total_value": row.total_value,
            "low_stock": row.low_stock,
            "expiring": row.expiring,
        })

    totals = {
        field: sum(entry[field] for entry in kinds)
        for field in ("total_items", "total_value", "low_stock", "expiring")
    }

    return {
        "expiry_window_days": days,
        "totals": totals,
        "kinds": kinds,
    }


@router.get("/expiring", response_model=list[ExpiringItem])
def expiring(
    days: int = Query(EXPIRY_WINDOW_DAYS, ge=1, le=365),
    db: Session = Depends(get_db),
    current_user=Depends(get_current_user),
):
    today = date.today()

    return [
        {
            "kind": kind.slug,
            "id": item.id,
            "name": item.name,
            "quantity": item.quantity,
            "unit": item.unit,
            "expiry_date": item.expiry_date,
            "days_left": (item.expiry_date - today).days,
        }
        for kind, item in expiring_items(db, current_user.id, days=days, today=today)
    ]
