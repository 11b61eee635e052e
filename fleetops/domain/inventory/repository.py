"""Inventory repository - Database operations for stocked parts"""

from typing import Optional

from sqlalchemy import or_
from sqlalchemy.orm import Session

from ...models import InventoryItem


class InventoryRepository:
    """Repository for inventory database operations"""

    @staticmethod
    def search_items(
        db: Session,
        shop_id: int,
        search: Optional[str] = None,
        category: Optional[str] = None,
    ) -> list[InventoryItem]:
        query = db.query(InventoryItem).filter(InventoryItem.shop_id == shop_id)
        if category:
            query = query.filter(InventoryItem.category == category)
        if search:
            pattern = f"%{search}%"
            query = query.filter(
                or_(
                    InventoryItem.name.ilike(pattern),
                    InventoryItem.sku.ilike(pattern),
                    InventoryItem.supplier.ilike(pattern),
                    InventoryItem.description.ilike(pattern),
                )
            )
        return query.order_by(InventoryItem.name).all()

    @staticmethod
    def get_by_id(db: Session, item_id: int, shop_id: int) -> Optional[InventoryItem]:
        return (
            db.query(InventoryItem)
            .filter(InventoryItem.id == item_id, InventoryItem.shop_id == shop_id)
            .first()
        )

    @staticmethod
    def get_by_sku(db: Session, sku: str, shop_id: int) -> Optional[InventoryItem]:
        return (
            db.query(InventoryItem)
            .filter(InventoryItem.sku == sku, InventoryItem.shop_id == shop_id)
            .first()
        )

    @staticmethod
    def get_reorder_items(db: Session, shop_id: int) -> list[InventoryItem]:
        """Items at or below their reorder point"""
        return (
            db.query(InventoryItem)
            .filter(
                InventoryItem.shop_id == shop_id,
                InventoryItem.quantity <= InventoryItem.reorder_point,
            )
            .order_by(InventoryItem.quantity, InventoryItem.name)
            .all()
        )

    @staticmethod
    def create(db: Session, shop_id: int, **data) -> InventoryItem:
        item = InventoryItem(shop_id=shop_id, **data)
        db.add(item)
        db.commit()
        db.refresh(item)
        return item

    @staticmethod
    def update(db: Session, item: InventoryItem, **updates) -> InventoryItem:
        for key, value in updates.items():
            if hasattr(item, key):
                setattr(item, key, value)
        db.commit()
        db.refresh(item)
        return item

    @staticmethod
    def delete(db: Session, item: InventoryItem) -> None:
        db.delete(item)
        db.commit()
