"""
Work Order Models: labor job lines, parts, discount catalogue and applied discounts
"""

from sqlalchemy import Boolean, Column, DateTime, Float, ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from .database import Base


class WorkOrder(Base):
    __tablename__ = "work_orders"
    __table_args__ = (UniqueConstraint("shop_id", "work_order_number", name="uq_work_order_number"),)

    id = Column(Integer, primary_key=True, index=True)
    shop_id = Column(Integer, ForeignKey("shops.id"), nullable=False, index=True)
    work_order_number = Column(String(30), nullable=False, index=True)
    equipment_id = Column(Integer, ForeignKey("equipment_assets.id"), nullable=True)
    maintenance_request_id = Column(Integer, nullable=True, index=True)  # the request links back through work_order_id
    technician_id = Column(Integer, ForeignKey("team_members.id"), nullable=True)

    customer_name = Column(String(255), nullable=True)
    description = Column(Text, nullable=True)
    status = Column(String(30), default="open")  # open, in_progress, on_hold, completed, invoiced, cancelled

    # Pricing
    tax_rate = Column(Float, nullable=False)
    total_cost = Column(Float, default=0)  # Cached grand total, refreshed on every totals calculation

    invoiced_at = Column(DateTime, nullable=True)
    created_by = Column(Integer, ForeignKey("users.id"), nullable=True)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    equipment = relationship("Equipment")
    job_lines = relationship(
        "WorkOrderJobLine", back_populates="work_order", cascade="all, delete-orphan", order_by="WorkOrderJobLine.id"
    )
    parts = relationship(
        "WorkOrderPart", back_populates="work_order", cascade="all, delete-orphan", order_by="WorkOrderPart.id"
    )
    discounts = relationship(
        "WorkOrderDiscount", back_populates="work_order", cascade="all, delete-orphan", order_by="WorkOrderDiscount.id"
    )


class WorkOrderJobLine(Base):
    """Labor line on a work order"""

    __tablename__ = "work_order_job_lines"

    id = Column(Integer, primary_key=True, index=True)
    work_order_id = Column(Integer, ForeignKey("work_orders.id"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    category = Column(String(100), nullable=True)
    estimated_hours = Column(Float, nullable=False)
    labor_rate = Column(Float, nullable=False)
    labor_rate_type = Column(String(20), default="standard")  # standard, overtime, premium, flat_rate
    total_amount = Column(Float, default=0)
    status = Column(String(20), default="pending")  # pending, in-progress, completed, on-hold
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    work_order = relationship("WorkOrder", back_populates="job_lines")


class WorkOrderPart(Base):
    __tablename__ = "work_order_parts"

    id = Column(Integer, primary_key=True, index=True)
    work_order_id = Column(Integer, ForeignKey("work_orders.id"), nullable=False, index=True)
    job_line_id = Column(Integer, ForeignKey("work_order_job_lines.id"), nullable=True)
    inventory_item_id = Column(Integer, ForeignKey("inventory_items.id"), nullable=True)
    part_number = Column(String(100), nullable=True)
    name = Column(String(255), nullable=False)
    supplier_cost = Column(Float, default=0)
    markup_percentage = Column(Float, default=0)
    customer_price = Column(Float, nullable=False)
    quantity = Column(Integer, default=1, nullable=False)
    status = Column(String(20), default="ordered")  # ordered, received, installed, backordered, defective, returned
    supplier = Column(String(255), nullable=True)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    work_order = relationship("WorkOrder", back_populates="parts")

    @property
    def part_type(self) -> str:
        return "inventory" if self.inventory_item_id else "non_inventory"


class DiscountType(Base):
    """Predefined discount a shop offers (e.g. Senior 10%, Fleet customer $50)"""

    __tablename__ = "discount_types"

    id = Column(Integer, primary_key=True, index=True)
    shop_id = Column(Integer, ForeignKey("shops.id"), nullable=True, index=True)  # null = available to all shops
    name = Column(String(100), nullable=False)
    description = Column(String(500), nullable=True)
    discount_type = Column(String(20), nullable=False)  # percentage, fixed_amount
    default_value = Column(Float, nullable=False)
    applies_to = Column(String(20), nullable=False)  # labor, parts, work_order
    is_active = Column(Boolean, default=True)
    created_at = Column(DateTime, server_default=func.now())


class WorkOrderDiscount(Base):
    __tablename__ = "work_order_discounts"

    id = Column(Integer, primary_key=True, index=True)
    work_order_id = Column(Integer, ForeignKey("work_orders.id"), nullable=False, index=True)
    scope = Column(String(20), nullable=False)  # labor, parts, work_order
    job_line_id = Column(Integer, ForeignKey("work_order_job_lines.id"), nullable=True)
    part_id = Column(Integer, ForeignKey("work_order_parts.id"), nullable=True)
    discount_type_id = Column(Integer, ForeignKey("discount_types.id"), nullable=True)
    discount_name = Column(String(100), nullable=False)
    discount_type = Column(String(20), nullable=False)  # percentage, fixed_amount
    discount_value = Column(Float, nullable=False)
    discount_amount = Column(Float, default=0)  # Refreshed on every totals calculation
    reason = Column(String(500), nullable=True)
    created_by = Column(String(255), nullable=True)
    applied_at = Column(DateTime, server_default=func.now())

    work_order = relationship("WorkOrder", back_populates="discounts")
