"""
Maintenance Models: interval schedules, performed service, requests and their edit history
"""

from sqlalchemy import JSON, Boolean, Column, Date, DateTime, Float, ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from .database import Base


class MaintenanceInterval(Base):
    """Recurring maintenance schedule for one equipment component"""

    __tablename__ = "equipment_maintenance_intervals"

    id = Column(Integer, primary_key=True, index=True)
    shop_id = Column(Integer, ForeignKey("shops.id"), nullable=False, index=True)
    equipment_id = Column(Integer, ForeignKey("equipment_assets.id"), nullable=False, index=True)

    item_name = Column(String(255), nullable=False)
    item_category = Column(String(50), nullable=False)
    description = Column(Text, nullable=True)

    # Schedule
    interval_type = Column(String(20), nullable=False)  # time, hours, engine_hours, mileage
    interval_value = Column(Float, nullable=False)
    interval_unit = Column(String(20), nullable=False)  # days/weeks/months/years, hours, km/miles

    # Consumables
    quantity = Column(Float, nullable=True)
    quantity_unit = Column(String(20), nullable=True)
    part_numbers = Column(JSON, nullable=True)
    parts_needed = Column(JSON, nullable=True)  # [{"name", "qty", "unit"}]

    # Last / next service
    last_service_date = Column(Date, nullable=True)
    last_service_hours = Column(Float, nullable=True)
    last_service_mileage = Column(Float, nullable=True)
    next_service_date = Column(Date, nullable=True)
    next_service_hours = Column(Float, nullable=True)
    next_service_mileage = Column(Float, nullable=True)

    is_active = Column(Boolean, default=True, nullable=False)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    equipment = relationship("Equipment", back_populates="maintenance_intervals")
    records = relationship(
        "MaintenanceRecord", back_populates="interval", order_by="MaintenanceRecord.performed_date"
    )


class MaintenanceRecord(Base):
    """Maintenance actually performed against an interval"""

    __tablename__ = "maintenance_performed"

    id = Column(Integer, primary_key=True, index=True)
    shop_id = Column(Integer, ForeignKey("shops.id"), nullable=False, index=True)
    equipment_id = Column(Integer, ForeignKey("equipment_assets.id"), nullable=False, index=True)
    interval_id = Column(Integer, ForeignKey("equipment_maintenance_intervals.id"), nullable=True)
    performed_date = Column(Date, nullable=False)
    hours_reading = Column(Float, nullable=True)
    mileage_reading = Column(Float, nullable=True)
    performed_by = Column(String(255), nullable=True)
    parts_used = Column(JSON, nullable=True)
    notes = Column(Text, nullable=True)
    entered_by = Column(Integer, ForeignKey("users.id"), nullable=True)
    created_at = Column(DateTime, server_default=func.now())

    interval = relationship("MaintenanceInterval", back_populates="records")


class MaintenanceRequest(Base):
    __tablename__ = "maintenance_requests"
    __table_args__ = (UniqueConstraint("shop_id", "request_number", name="uq_request_number"),)

    id = Column(Integer, primary_key=True, index=True)
    shop_id = Column(Integer, ForeignKey("shops.id"), nullable=False, index=True)
    equipment_id = Column(Integer, ForeignKey("equipment_assets.id"), nullable=False, index=True)
    request_number = Column(String(30), nullable=False, index=True)

    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=False)
    reported_by_person = Column(String(255), nullable=True)
    priority = Column(String(20), default="medium")  # low, medium, high, urgent
    request_type = Column(String(30), default="repair")  # repair, preventive, inspection, other
    status = Column(String(30), default="pending")  # pending, approved, rejected, in_progress, completed

    attachments = Column(JSON, default=list)  # [{"name", "url", "type", "size"}]
    parts_requested = Column(JSON, default=list)
    estimated_cost = Column(Float, nullable=True)
    estimated_hours = Column(Float, nullable=True)
    scheduled_date = Column(Date, nullable=True)
    notes = Column(Text, nullable=True)

    requested_by = Column(Integer, ForeignKey("users.id"), nullable=False)
    requested_by_name = Column(String(255), nullable=True)
    requested_at = Column(DateTime, server_default=func.now())
    work_order_id = Column(Integer, ForeignKey("work_orders.id"), nullable=True)

    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    equipment = relationship("Equipment")
    history = relationship(
        "MaintenanceRequestHistory",
        back_populates="request",
        order_by="MaintenanceRequestHistory.version_number.desc()",
        cascade="all, delete-orphan",
    )


class MaintenanceRequestHistory(Base):
    """Versioned audit trail: one row per edit of a maintenance request"""

    __tablename__ = "maintenance_request_history"

    id = Column(Integer, primary_key=True, index=True)
    maintenance_request_id = Column(
        Integer, ForeignKey("maintenance_requests.id"), nullable=False, index=True
    )
    version_number = Column(Integer, nullable=False)

    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=False)
    reported_by_person = Column(String(255), nullable=True)
    priority = Column(String(20), nullable=True)
    request_type = Column(String(30), nullable=True)
    attachments = Column(JSON, default=list)
    changes = Column(JSON, nullable=True)  # {"field": {"from": ..., "to": ...}}

    edited_by = Column(Integer, ForeignKey("users.id"), nullable=False)
    edited_by_name = Column(String(255), nullable=True)
    change_summary = Column(String(1000), nullable=True)
    created_at = Column(DateTime, server_default=func.now())

    request = relationship("MaintenanceRequest", back_populates="history")


class TripLog(Base):
    __tablename__ = "trip_logs"

    id = Column(Integer, primary_key=True, index=True)
    shop_id = Column(Integer, ForeignKey("shops.id"), nullable=False, index=True)
    equipment_id = Column(Integer, ForeignKey("equipment_assets.id"), nullable=False, index=True)
    trip_date = Column(Date, nullable=False)
    start_reading = Column(Float, nullable=True)
    end_reading = Column(Float, nullable=True)
    reading_type = Column(String(10), default="miles")  # miles, km, hours
    driver_name = Column(String(255), nullable=True)
    purpose = Column(String(255), nullable=True)
    destination = Column(String(255), nullable=True)
    notes = Column(Text, nullable=True)
    entered_by = Column(Integer, ForeignKey("users.id"), nullable=True)
    created_at = Column(DateTime, server_default=func.now())

    equipment = relationship("Equipment")

    @property
    def distance(self):
        if self.start_reading is None or self.end_reading is None:
            return None
        return self.end_reading - self.start_reading
