"""Work order repository - Database operations for work orders and their lines"""

from typing import Optional

from sqlalchemy import or_
from sqlalchemy.orm import Session, selectinload

from ...models import Equipment, InventoryItem, TeamMember
from ...models_maintenance import MaintenanceRequest
from ...models_work_order import DiscountType, WorkOrder, WorkOrderDiscount, WorkOrderJobLine, WorkOrderPart


class WorkOrderRepository:
    @staticmethod
    def search_work_orders(
        db: Session,
        shop_id: int,
        status: Optional[str] = None,
        equipment_id: Optional[int] = None,
        search: Optional[str] = None,
    ) -> list[WorkOrder]:
        query = db.query(WorkOrder).filter(WorkOrder.shop_id == shop_id)
        if status:
            query = query.filter(WorkOrder.status == status)
        if equipment_id:
            query = query.filter(WorkOrder.equipment_id == equipment_id)
        if search:
            pattern = f"%{search}%"
            query = query.filter(
                or_(
                    WorkOrder.work_order_number.ilike(pattern),
                    WorkOrder.customer_name.ilike(pattern),
                    WorkOrder.description.ilike(pattern),
                )
            )
        return query.order_by(WorkOrder.created_at.desc(), WorkOrder.id.desc()).all()

    @staticmethod
    def get_by_id(db: Session, work_order_id: int, shop_id: int) -> Optional[WorkOrder]:
        return (
            db.query(WorkOrder)
            .options(
                selectinload(WorkOrder.job_lines),
                selectinload(WorkOrder.parts),
                selectinload(WorkOrder.discounts),
            )
            .filter(WorkOrder.id == work_order_id, WorkOrder.shop_id == shop_id)
            .first()
        )

    @staticmethod
    def get_job_line(db: Session, work_order_id: int, job_line_id: int) -> Optional[WorkOrderJobLine]:
        return (
            db.query(WorkOrderJobLine)
            .filter(WorkOrderJobLine.id == job_line_id, WorkOrderJobLine.work_order_id == work_order_id)
            .first()
        )

    @staticmethod
    def get_part(db: Session, work_order_id: int, part_id: int) -> Optional[WorkOrderPart]:
        return (
            db.query(WorkOrderPart)
            .filter(WorkOrderPart.id == part_id, WorkOrderPart.work_order_id == work_order_id)
            .first()
        )

    @staticmethod
    def get_discount(db: Session, work_order_id: int, discount_id: int) -> Optional[WorkOrderDiscount]:
        return (
            db.query(WorkOrderDiscount)
            .filter(WorkOrderDiscount.id == discount_id, WorkOrderDiscount.work_order_id == work_order_id)
            .first()
        )

    @staticmethod
    def get_discount_types(db: Session, shop_id: int, applies_to: Optional[str] = None) -> list[DiscountType]:
        """Active types for the shop plus the ones shared by every shop"""
        query = db.query(DiscountType).filter(
            DiscountType.is_active.is_(True),
            or_(DiscountType.shop_id == shop_id, DiscountType.shop_id.is_(None)),
        )
        if applies_to:
            query = query.filter(DiscountType.applies_to == applies_to)
        return query.order_by(DiscountType.applies_to, DiscountType.name).all()

    @staticmethod
    def get_discount_type(db: Session, discount_type_id: int, shop_id: int) -> Optional[DiscountType]:
        return (
            db.query(DiscountType)
            .filter(
                DiscountType.id == discount_type_id,
                or_(DiscountType.shop_id == shop_id, DiscountType.shop_id.is_(None)),
            )
            .first()
        )

    @staticmethod
    def get_inventory_item(db: Session, item_id: int, shop_id: int) -> Optional[InventoryItem]:
        return db.query(InventoryItem).filter(InventoryItem.id == item_id, InventoryItem.shop_id == shop_id).first()

    @staticmethod
    def get_equipment(db: Session, equipment_id: int, shop_id: int) -> Optional[Equipment]:
        return db.query(Equipment).filter(Equipment.id == equipment_id, Equipment.shop_id == shop_id).first()

    @staticmethod
    def get_team_member(db: Session, member_id: int, shop_id: int) -> Optional[TeamMember]:
        return db.query(TeamMember).filter(TeamMember.id == member_id, TeamMember.shop_id == shop_id).first()

    @staticmethod
    def get_request(db: Session, request_id: int, shop_id: int) -> Optional[MaintenanceRequest]:
        return (
            db.query(MaintenanceRequest)
            .filter(MaintenanceRequest.id == request_id, MaintenanceRequest.shop_id == shop_id)
            .first()
        )

    @staticmethod
    def save(db: Session, obj):
        db.add(obj)
        db.commit()
        db.refresh(obj)
        return obj
