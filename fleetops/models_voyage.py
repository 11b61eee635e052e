"""
Voyage Log Models for vessel trip records and radio communications
"""

from sqlalchemy import JSON, Boolean, Column, DateTime, Float, ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from .database import Base


class VoyageLog(Base):
    __tablename__ = "voyage_logs"
    __table_args__ = (UniqueConstraint("shop_id", "voyage_number", name="uq_voyage_number"),)

    id = Column(Integer, primary_key=True, index=True)
    shop_id = Column(Integer, ForeignKey("shops.id"), nullable=False, index=True)
    vessel_id = Column(Integer, ForeignKey("equipment_assets.id"), nullable=False, index=True)
    voyage_number = Column(String(50), nullable=False)
    voyage_type = Column(String(30), nullable=True)  # transit, towing, cargo, fishing, charter, training, other
    voyage_status = Column(String(30), default="planned")  # planned, in_progress, completed, cancelled

    # Route
    departure_datetime = Column(DateTime, nullable=False)
    arrival_datetime = Column(DateTime, nullable=True)
    origin_location = Column(String(255), nullable=False)
    destination_location = Column(String(255), nullable=False)

    # Personnel
    master_name = Column(String(255), nullable=False)
    master_signature = Column(Text, nullable=True)  # data URL of a PNG signature
    crew_members = Column(JSON, default=list)  # [{"name", "role"}]

    # Cargo / tow
    barge_name = Column(String(255), nullable=True)
    cargo_description = Column(Text, nullable=True)
    cargo_weight = Column(Float, nullable=True)
    cargo_weight_unit = Column(String(20), nullable=True)

    # Readings
    engine_hours_start = Column(Float, nullable=True)
    engine_hours_end = Column(Float, nullable=True)
    fuel_start = Column(Float, nullable=True)
    fuel_end = Column(Float, nullable=True)
    fuel_unit = Column(String(20), default="litres")

    weather_conditions = Column(JSON, nullable=True)
    activity_log = Column(JSON, default=list)  # [{"timestamp", "type", "description", "location"}]
    has_incidents = Column(Boolean, default=False)
    incidents = Column(JSON, default=list)

    notes = Column(Text, nullable=True)
    confirmed_at = Column(DateTime, nullable=True)
    entered_by = Column(Integer, ForeignKey("users.id"), nullable=True)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    vessel = relationship("Equipment")
    communications = relationship(
        "VoyageCommunicationLog",
        back_populates="voyage",
        order_by="VoyageCommunicationLog.communication_time",
        cascade="all, delete-orphan",
    )


class VoyageCommunicationLog(Base):
    """Radio communications logged during a voyage"""

    __tablename__ = "voyage_communication_logs"

    id = Column(Integer, primary_key=True, index=True)
    voyage_id = Column(Integer, ForeignKey("voyage_logs.id"), nullable=False, index=True)
    communication_time = Column(DateTime, nullable=False)
    channel = Column(String(20), nullable=True)  # e.g. VHF 16
    contact_station = Column(String(255), nullable=True)
    call_type = Column(String(30), nullable=True)  # routine, safety, urgency, distress, traffic, radio_check
    direction = Column(String(10), nullable=True)  # incoming, outgoing
    message_summary = Column(Text, nullable=True)
    logged_by = Column(Integer, ForeignKey("users.id"), nullable=True)
    created_at = Column(DateTime, server_default=func.now())

    voyage = relationship("VoyageLog", back_populates="communications")
