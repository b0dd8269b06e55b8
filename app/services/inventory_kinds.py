# app/services/inventory_kinds.py
#
# Capabilities of each inventory kind. The adjustment, history and CRUD
# services are written once against this record instead of once per table.

from dataclasses import dataclass

from app.core.errors import NotFoundError
from app.models.inventory import (
    MAX_COUNT,
    MAX_MEASURE,
    Stock,
    StockEquipment,
    StockFeed,
    StockFertilizer,
    StockHarvest,
    StockSeeds,
    StockTools,
)
from app.models.stock_history import StockHistory

ALL_REASONS = ("add", "remove", "expired", "damaged")
DURABLE_REASONS = ("add", "remove", "damaged")


@dataclass(frozen=True)
class InventoryKind:
    slug: str
    label: str
    model: type
    history_fk: str
    reasons: tuple[str, ...] = ALL_REASONS
    integral: bool = False

    @property
    def threshold_column(self) -> str:
        return self.model.threshold_column

    @property
    def max_quantity(self):
        return MAX_COUNT if self.integral else MAX_MEASURE

    @property
    def expires(self) -> bool:
        return hasattr(self.model, "expiry_date")

    @property
    def priced(self) -> bool:
        return hasattr(self.model, "price")

    @property
    def history_column(self):
        return getattr(StockHistory, self.history_fk)


STOCK = InventoryKind("stock", "Stock", Stock, "stock_id")
FEED = InventoryKind("feed", "Feed", StockFeed, "stock_feed_id")
SEEDS = InventoryKind("seeds", "Seed", StockSeeds, "stock_seeds_id")
FERTILIZER = InventoryKind("fertilizer", "Fertilizer", StockFertilizer, "stock_fertilizer_id")
EQUIPMENT = InventoryKind(
    "equipment", "Equipment", StockEquipment, "stock_equipment_id",
    reasons=DURABLE_REASONS, integral=True,
)
HARVEST = InventoryKind("harvest", "Harvest", StockHarvest, "stock_harvest_id")
TOOLS = InventoryKind(
    "tools", "Tool", StockTools, "stock_tools_id",
    reasons=DURABLE_REASONS, integral=True,
)

KINDS = {
    kind.slug: kind
    for kind in (STOCK, FEED, SEEDS, FERTILIZER, EQUIPMENT, HARVEST, TOOLS)
}


def get_kind(slug: str) -> InventoryKind:
    kind = KINDS.get(slug)
    if kind is None:
        raise NotFoundError(f"Unknown inventory kind '{slug}'")
    return kind
