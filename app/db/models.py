import uuid
from datetime import datetime

from sqlalchemy import Boolean, Column, DateTime, Float, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import declarative_base, relationship

Base = declarative_base()


class User(Base):
    __tablename__ = "users"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    username = Column(String, nullable=False, unique=True)
    name = Column(String, nullable=False)
    email = Column(String, nullable=True)
    password_hash = Column(String, nullable=False, default="")
    role = Column(String, nullable=False, default="DRIVER")
    status = Column(String, nullable=False, default="active")
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    operations = relationship("Operation", back_populates="driver", foreign_keys="Operation.driver_id")


class Vehicle(Base):
    __tablename__ = "vehicles"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    plate_number = Column(String, nullable=False)
    model = Column(String, nullable=False)
    manufacturer = Column(String, nullable=True)
    capacity_tons = Column(Float, nullable=True)
    status = Column(String, nullable=False, default="ACTIVE")
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    operations = relationship("Operation", back_populates="vehicle")


class Location(Base):
    __tablename__ = "locations"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    name = Column(String, nullable=False)
    address = Column(String, nullable=False, default="")
    latitude = Column(Float, nullable=True)
    longitude = Column(Float, nullable=True)
    location_type = Column(String, nullable=False, default="BOTH")
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)


class Item(Base):
    __tablename__ = "items"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    name = Column(String, nullable=False)
    unit = Column(String, nullable=True, default="t")
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)


class Operation(Base):
    __tablename__ = "operations"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    operation_number = Column(String, nullable=False, default="")
    vehicle_id = Column(String, ForeignKey("vehicles.id"), nullable=False)
    driver_id = Column(String, ForeignKey("users.id"), nullable=False)
    status = Column(String, nullable=False, default="PLANNING")
    planned_start_time = Column(DateTime(timezone=True), nullable=True)
    actual_start_time = Column(DateTime(timezone=True), nullable=True)
    planned_end_time = Column(DateTime(timezone=True), nullable=True)
    actual_end_time = Column(DateTime(timezone=True), nullable=True)
    total_distance_km = Column(Float, nullable=True)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    vehicle = relationship("Vehicle", back_populates="operations")
    driver = relationship("User", back_populates="operations", foreign_keys=[driver_id])
    details = relationship("OperationDetail", back_populates="operation", cascade="all, delete-orphan")
    inspections = relationship("InspectionRecord", back_populates="operation")
    gps_logs = relationship("GpsLog", back_populates="operation")


class OperationDetail(Base):
    """A work segment (loading, unloading, refueling...) inside an operation."""

    __tablename__ = "operation_details"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    operation_id = Column(String, ForeignKey("operations.id"), nullable=False)
    sequence_number = Column(Integer, nullable=False, default=1)
    activity_type = Column(String, nullable=False)
    # no FK constraint: rows may outlive the referenced location/item
    location_id = Column(String, nullable=True)
    item_id = Column(String, nullable=True)
    planned_time = Column(DateTime(timezone=True), nullable=True)
    actual_start_time = Column(DateTime(timezone=True), nullable=True)
    actual_end_time = Column(DateTime(timezone=True), nullable=True)
    quantity_tons = Column(Float, nullable=True, default=0)
    notes = Column(Text, nullable=True)
    latitude = Column(Float, nullable=True)
    longitude = Column(Float, nullable=True)
    gps_recorded_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    operation = relationship("Operation", back_populates="details")
    location = relationship(
        "Location",
        primaryjoin="foreign(OperationDetail.location_id) == Location.id",
        viewonly=True,
    )
    item = relationship(
        "Item",
        primaryjoin="foreign(OperationDetail.item_id) == Item.id",
        viewonly=True,
    )


class InspectionItem(Base):
    __tablename__ = "inspection_items"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    name = Column(String, nullable=False)
    description = Column(String, nullable=True)
    category = Column(String, nullable=True)
    inspection_type = Column(String, nullable=False, default="PRE_TRIP")
    display_order = Column(Integer, nullable=False, default=0)
    is_active = Column(Boolean, default=True, nullable=False)


class InspectionRecord(Base):
    __tablename__ = "inspection_records"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    operation_id = Column(String, ForeignKey("operations.id"), nullable=True)
    vehicle_id = Column(String, ForeignKey("vehicles.id"), nullable=False)
    inspector_id = Column(String, ForeignKey("users.id"), nullable=True)
    inspection_type = Column(String, nullable=False)
    status = Column(String, nullable=False, default="PENDING")
    started_at = Column(DateTime(timezone=True), nullable=True)
    completed_at = Column(DateTime(timezone=True), nullable=True)
    overall_notes = Column(Text, nullable=True)
    latitude = Column(Float, nullable=True)
    longitude = Column(Float, nullable=True)
    created_at = Column(DateTime(timezone=True), default=datetime.utcnow, nullable=False)

    operation = relationship("Operation", back_populates="inspections")
    results = relationship(
        "InspectionItemResult",
        back_populates="record",
        cascade="all, delete-orphan",
        order_by="InspectionItemResult.created_at",
    )


class InspectionItemResult(Base):
    __tablename__ = "inspection_item_results"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    inspection_record_id = Column(String, ForeignKey("inspection_records.id"), nullable=False)
    inspection_item_id = Column(String, nullable=False)
    result_value = Column(String, nullable=True)
    is_passed = Column(Boolean, nullable=True)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    record = relationship("InspectionRecord", back_populates="results")


class GpsLog(Base):
    __tablename__ = "gps_logs"
    __table_args__ = (Index("ix_gps_logs_operation_recorded", "operation_id", "recorded_at"),)

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    vehicle_id = Column(String, ForeignKey("vehicles.id"), nullable=False)
    operation_id = Column(String, ForeignKey("operations.id"), nullable=True)
    latitude = Column(Float, nullable=False)
    longitude = Column(Float, nullable=False)
    speed_kmh = Column(Float, nullable=True)
    heading = Column(Float, nullable=True)
    recorded_at = Column(DateTime(timezone=True), nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    operation = relationship("Operation", back_populates="gps_logs")
