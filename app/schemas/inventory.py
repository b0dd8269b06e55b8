# schemas/inventory.py

from datetime import date, datetime
from typing import List, Literal

from pydantic import BaseModel, Field, StrictFloat, StrictInt, create_model

from app.models.inventory import MAX_COUNT, MAX_MEASURE
from app.schemas.stock_history import StockHistoryResponse


StockUnit = Literal["kg", "g", "l", "ml", "units"]
StockCategory = Literal["seeds", "fertilizer", "harvest", "feed", "pesticide", "equipment", "tools"]


# ---------------- SHARED ----------------

class InventoryCreateBase(BaseModel):
    name: str = Field(..., min_length=1)
    quantity: float = Field(0, ge=0, le=MAX_MEASURE, description="Initial on-hand quantity")
    unit: str = Field("kg", min_length=1)


class InventoryUpdateBase(BaseModel):
    name: str | None = Field(None, min_length=1)
    unit: str | None = Field(None, min_length=1)

    class Config:
        # quantity only moves through PATCH /{id}/quantity
        extra = "forbid"


class InventoryResponseBase(BaseModel):
    id: int
    name: str
    quantity: float
    unit: str
    is_low_stock: bool
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class QuantityAdjustment(BaseModel):
    # Strict: booleans and numeric strings are not quantities
    quantity: StrictInt | StrictFloat | None = Field(
        None, description="Magnitude of the change, always positive"
    )
    type: str | None = Field(None, description="add | remove | expired | damaged")
    notes: str | None = None


# ---------------- STOCK ----------------

class StockCreate(InventoryCreateBase):
    unit: StockUnit
    category: StockCategory
    low_stock_threshold: float = Field(10, ge=0)
    is_natural: bool = False
    location: str | None = None
    notes: str | None = None
    expiry_date: date | None = None
    supplier: str | None = None
    price: float | None = Field(None, ge=0)
    quality_status: Literal["good", "medium", "poor"] | None = None
    batch_number: str | None = None


class StockUpdate(InventoryUpdateBase):
    unit: StockUnit | None = None
    category: StockCategory | None = None
    low_stock_threshold: float | None = Field(None, ge=0)
    is_natural: bool | None = None
    location: str | None = None
    notes: str | None = None
    expiry_date: date | None = None
    supplier: str | None = None
    price: float | None = Field(None, ge=0)
    quality_status: Literal["good", "medium", "poor"] | None = None
    batch_number: str | None = None


class StockResponse(InventoryResponseBase):
    category: str
    low_stock_threshold: float
    is_natural: bool
    location: str | None
    notes: str | None
    expiry_date: date | None
    supplier: str | None
    price: float | None
    quality_status: str | None
    batch_number: str | None


# ---------------- FEED ----------------

class FeedCreate(InventoryCreateBase):
    min_quantity_alert: float = Field(100, ge=0)
    animal_type: str = Field(..., min_length=1)
    daily_consumption_rate: float = Field(0, ge=0)
    price: float = Field(0, ge=0)
    expiry_date: date | None = None
    supplier: str | None = None


class FeedUpdate(InventoryUpdateBase):
    min_quantity_alert: float | None = Field(None, ge=0)
    animal_type: str | None = Field(None, min_length=1)
    daily_consumption_rate: float | None = Field(None, ge=0)
    price: float | None = Field(None, ge=0)
    expiry_date: date | None = None
    supplier: str | None = None


class FeedResponse(InventoryResponseBase):
    min_quantity_alert: float
    animal_type: str
    daily_consumption_rate: float
    price: float
    expiry_date: date | None
    supplier: str | None


# ---------------- SEEDS ----------------

class SeedsCreate(InventoryCreateBase):
    min_quantity_alert: float = Field(50, ge=0)
    crop_type: str = Field(..., min_length=1)
    variety: str | None = None
    germination: float | None = Field(None, ge=0, le=100)
    price: float = Field(0, ge=0)
    expiry_date: date | None = None
    supplier: str | None = None


class SeedsUpdate(InventoryUpdateBase):
    min_quantity_alert: float | None = Field(None, ge=0)
    crop_type: str | None = Field(None, min_length=1)
    variety: str | None = None
    germination: float | None = Field(None, ge=0, le=100)
    price: float | None = Field(None, ge=0)
    expiry_date: date | None = None
    supplier: str | None = None


class SeedsResponse(InventoryResponseBase):
    min_quantity_alert: float
    crop_type: str
    variety: str | None
    germination: float | None
    price: float
    expiry_date: date | None
    supplier: str | None


# ---------------- FERTILIZER ----------------

FertilizerType = Literal["organic", "chemical", "mixed"]


class FertilizerCreate(InventoryCreateBase):
    min_quantity_alert: float = Field(100, ge=0)
    fertilizer_type: FertilizerType
    npk_ratio: str | None = Field(None, pattern=r"^\d+-\d+-\d+$")
    application_rate: float | None = Field(None, ge=0)
    price: float = Field(0, ge=0)
    expiry_date: date | None = None
    supplier: str | None = None


class FertilizerUpdate(InventoryUpdateBase):
    min_quantity_alert: float | None = Field(None, ge=0)
    fertilizer_type: FertilizerType | None = None
    npk_ratio: str | None = Field(None, pattern=r"^\d+-\d+-\d+$")
    application_rate: float | None = Field(None, ge=0)
    price: float | None = Field(None, ge=0)
    expiry_date: date | None = None
    supplier: str | None = None


class FertilizerResponse(InventoryResponseBase):
    min_quantity_alert: float
    fertilizer_type: str
    npk_ratio: str | None
    application_rate: float | None
    price: float
    expiry_date: date | None
    supplier: str | None


# ---------------- EQUIPMENT ----------------

EquipmentType = Literal[
    "tractor",
    "harvester",
    "irrigation_system",
    "planter",
    "sprayer",
    "tillage_equipment",
    "generator",
    "pump",
    "storage_unit",
    "processing_equipment",
    "transport_vehicle",
    "other",
]
EquipmentStatus = Literal["operational", "in_use", "maintenance", "repair", "broken", "retired", "reserved"]


class EquipmentCreate(InventoryCreateBase):
    quantity: int = Field(0, ge=0, le=MAX_COUNT)
    unit: str = Field("units", min_length=1)
    min_quantity_alert: int = Field(0, ge=0, le=MAX_COUNT)
    equipment_type: EquipmentType
    status: EquipmentStatus = "operational"
    serial_number: str | None = None
    manufacturer: str | None = None
    location: str | None = None


class EquipmentUpdate(InventoryUpdateBase):
    min_quantity_alert: int | None = Field(None, ge=0, le=MAX_COUNT)
    equipment_type: EquipmentType | None = None
    status: EquipmentStatus | None = None
    serial_number: str | None = None
    manufacturer: str | None = None
    location: str | None = None


class EquipmentResponse(InventoryResponseBase):
    quantity: int
    min_quantity_alert: int
    equipment_type: str
    status: str
    serial_number: str | None
    manufacturer: str | None
    location: str | None


# ---------------- HARVEST ----------------

HarvestQuality = Literal["premium", "standard", "secondary"]


class HarvestCreate(InventoryCreateBase):
    min_quantity_alert: float = Field(0, ge=0)
    quality: HarvestQuality = "standard"
    harvest_date: date
    storage_location: str | None = None
    batch_number: str | None = None
    moisture: float | None = Field(None, ge=0, le=100)
    price: float | None = Field(None, ge=0)


class HarvestUpdate(InventoryUpdateBase):
    min_quantity_alert: float | None = Field(None, ge=0)
    quality: HarvestQuality | None = None
    harvest_date: date | None = None
    storage_location: str | None = None
    batch_number: str | None = None
    moisture: float | None = Field(None, ge=0, le=100)
    price: float | None = Field(None, ge=0)


class HarvestResponse(InventoryResponseBase):
    min_quantity_alert: float
    quality: str
    harvest_date: date
    storage_location: str | None
    batch_number: str | None
    moisture: float | None
    price: float | None


# ---------------- TOOLS ----------------

ToolCategory = Literal[
    "hand_tools",
    "power_tools",
    "pruning_tools",
    "irrigation_tools",
    "harvesting_tools",
    "measuring_tools",
    "safety_equipment",
    "other",
]
ToolStatus = Literal["available", "in_use", "maintenance", "broken", "lost"]
ToolCondition = Literal["new", "good", "fair", "poor"]


class ToolsCreate(InventoryCreateBase):
    quantity: int = Field(0, ge=0, le=MAX_COUNT)
    unit: str = Field("units", min_length=1)
    min_quantity_alert: int = Field(2, ge=0, le=MAX_COUNT)
    category: ToolCategory
    status: ToolStatus = "available"
    condition: ToolCondition = "good"
    brand: str | None = None
    storage_location: str | None = None


class ToolsUpdate(InventoryUpdateBase):
    min_quantity_alert: int | None = Field(None, ge=0, le=MAX_COUNT)
    category: ToolCategory | None = None
    status: ToolStatus | None = None
    condition: ToolCondition | None = None
    brand: str | None = None
    storage_location: str | None = None


class ToolsResponse(InventoryResponseBase):
    quantity: int
    min_quantity_alert: int
    category: str
    status: str
    condition: str
    brand: str | None
    storage_location: str | None


# ---------------- REGISTRY ----------------

def _with_history(response: type[BaseModel]) -> type[BaseModel]:
    return create_model(
        f"{response.__name__}WithHistory",
        __base__=response,
        history=(List[StockHistoryResponse], []),
    )


class KindSchemas:
    def __init__(self, create, update, response):
        self.create = create
        self.update = update
        self.response = response
        self.response_with_history = _with_history(response)


SCHEMAS = {
    "stock": KindSchemas(StockCreate, StockUpdate, StockResponse),
    "feed": KindSchemas(FeedCreate, FeedUpdate, FeedResponse),
    "seeds": KindSchemas(SeedsCreate, SeedsUpdate, SeedsResponse),
    "fertilizer": KindSchemas(FertilizerCreate, FertilizerUpdate, FertilizerResponse),
    "equipment": KindSchemas(EquipmentCreate, EquipmentUpdate, EquipmentResponse),
    "harvest": KindSchemas(HarvestCreate, HarvestUpdate, HarvestResponse),
    "tools": KindSchemas(ToolsCreate, ToolsUpdate, ToolsResponse),
}
