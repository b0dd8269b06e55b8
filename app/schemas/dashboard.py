# schemas/dashboard.py

from datetime import date
from typing import List

from pydantic import BaseModel


class LowStockItem(BaseModel):
    id: int
    name: str
    quantity: float
    unit: str
    threshold: float


class KindStockSummary(BaseModel):
    kind: str
    total_items: int
    low_stock_items: int
    items: List[LowStockItem]


class LowStockSummaryResponse(BaseModel):
    total_low_stock: int
    kinds: List[KindStockSummary]


class KindInventorySummary(BaseModel):
    kind: str
    total_items: int
    total_quantity: float
    total_value: float
    low_stock: int
    expiring: int


class InventoryTotals(BaseModel):
    total_items: int
    total_value: float
    low_stock: int
    expiring: int


class InventorySummaryResponse(BaseModel):
    expiry_window_days: int
    totals: InventoryTotals
    kinds: List[KindInventorySummary]


class ExpiringItem(BaseModel):
    kind: str
    id: int
    name: str
    quantity: float
    unit: str
    expiry_date: date
    days_left: int
