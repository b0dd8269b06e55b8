# app/models/inventory.py
#
# One table per inventory kind. The columns the quantity protocol relies on
# (owner, quantity, unit, threshold, timestamps) come from InventoryMixin;
# everything else is kind-specific description.

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    Date,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import declared_attr, relationship
from sqlalchemy.sql import func

from app.database import Base

# Largest quantity each column type holds exactly: PostgreSQL INTEGER for
# counted kinds, the 53-bit mantissa of a double for measured ones.
MAX_COUNT = 2**31 - 1
MAX_MEASURE = float(2**53)


class InventoryMixin:
    # Name of the column holding the low-stock threshold
    threshold_column = "min_quantity_alert"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    unit = Column(String, nullable=False, default="kg")

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )

    @declared_attr
    def user_id(cls):
        return Column(
            Integer,
            ForeignKey("users.id", ondelete="CASCADE"),
            nullable=False,
            index=True,
        )

    @declared_attr
    def history(cls):
        return relationship(
            "StockHistory",
            # Entries are attached by foreign key, not through this collection
            cascade="all, delete",
            passive_deletes=True,
            order_by="[desc(StockHistory.created_at), desc(StockHistory.id)]",
        )

    @declared_attr
    def __table_args__(cls):
        return (
            CheckConstraint("quantity >= 0", name=f"ck_{cls.__tablename__}_quantity_non_negative"),
            CheckConstraint(
                f"{cls.threshold_column} >= 0",
                name=f"ck_{cls.__tablename__}_threshold_non_negative",
            ),
        )

    @property
    def threshold(self):
        return getattr(self, self.threshold_column)

    @property
    def is_low_stock(self) -> bool:
        threshold = self.threshold
        if threshold is None:
            return False
        return self.quantity <= threshold


class Stock(InventoryMixin, Base):
    __tablename__ = "stocks"
    threshold_column = "low_stock_threshold"

    quantity = Column(Float, nullable=False, default=0)
    low_stock_threshold = Column(Float, nullable=False, default=10)

    category = Column(String, nullable=False)
    is_natural = Column(Boolean, nullable=False, default=False)
    location = Column(String, nullable=True)
    notes = Column(Text, nullable=True)
    expiry_date = Column(Date, nullable=True)
    supplier = Column(String, nullable=True)
    price = Column(Float, nullable=True)
    quality_status = Column(String, nullable=True)
    batch_number = Column(String, nullable=True)


class StockFeed(InventoryMixin, Base):
    __tablename__ = "stock_feed"

    quantity = Column(Float, nullable=False, default=0)
    min_quantity_alert = Column(Float, nullable=False, default=100)

    animal_type = Column(String, nullable=False)
    daily_consumption_rate = Column(Float, nullable=False, default=0)  # kg per animal per day
    price = Column(Float, nullable=False, default=0)
    expiry_date = Column(Date, nullable=True)
    supplier = Column(String, nullable=True)


class StockSeeds(InventoryMixin, Base):
    __tablename__ = "stock_seeds"

    quantity = Column(Float, nullable=False, default=0)
    min_quantity_alert = Column(Float, nullable=False, default=50)

    crop_type = Column(String, nullable=False)
    variety = Column(String, nullable=True)
    germination = Column(Float, nullable=True)  # percent
    price = Column(Float, nullable=False, default=0)
    expiry_date = Column(Date, nullable=True)
    supplier = Column(String, nullable=True)


class StockFertilizer(InventoryMixin, Base):
    __tablename__ = "stock_fertilizer"

    quantity = Column(Float, nullable=False, default=0)
    min_quantity_alert = Column(Float, nullable=False, default=100)

    fertilizer_type = Column(String, nullable=False)
    npk_ratio = Column(String, nullable=True)  # e.g. "20-10-10"
    application_rate = Column(Float, nullable=True)  # per hectare
    price = Column(Float, nullable=False, default=0)
    expiry_date = Column(Date, nullable=True)
    supplier = Column(String, nullable=True)


class StockEquipment(InventoryMixin, Base):
    __tablename__ = "stock_equipment"

    quantity = Column(Integer, nullable=False, default=0)
    min_quantity_alert = Column(Integer, nullable=False, default=0)

    equipment_type = Column(String, nullable=False)
    status = Column(String, nullable=False, default="operational")
    serial_number = Column(String, nullable=True)
    manufacturer = Column(String, nullable=True)
    location = Column(String, nullable=True)


class StockHarvest(InventoryMixin, Base):
    __tablename__ = "stock_harvest"

    quantity = Column(Float, nullable=False, default=0)
    min_quantity_alert = Column(Float, nullable=False, default=0)

    quality = Column(String, nullable=False, default="standard")
    harvest_date = Column(Date, nullable=False)
    storage_location = Column(String, nullable=True)
    batch_number = Column(String, nullable=True)
    moisture = Column(Float, nullable=True)  # percent
    price = Column(Float, nullable=True)


class StockTools(InventoryMixin, Base):
    __tablename__ = "stock_tools"

    quantity = Column(Integer, nullable=False, default=0)
    min_quantity_alert = Column(Integer, nullable=False, default=2)

    category = Column(String, nullable=False)
    status = Column(String, nullable=False, default="available")
    condition = Column(String, nullable=False, default="good")
    brand = Column(String, nullable=True)
    storage_location = Column(String, nullable=True)
