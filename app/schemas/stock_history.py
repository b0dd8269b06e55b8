# schemas/stock_history.py

from pydantic import BaseModel
from datetime import datetime


class StockHistoryResponse(BaseModel):
    id: int
    item_kind: str
    reason: str
    quantity: float
    previous_quantity: float
    new_quantity: float
    note: str | None
    created_at: datetime

    class Config:
        from_attributes = True
