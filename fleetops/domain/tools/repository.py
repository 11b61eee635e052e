"""Tool repository - Database operations for shop tools"""

from typing import Optional

from sqlalchemy import or_
from sqlalchemy.orm import Session

from ...models import TeamMember, Tool


class ToolRepository:
    @staticmethod
    def search_tools(
        db: Session,
        shop_id: int,
        search: Optional[str] = None,
        status: Optional[str] = None,
        category: Optional[str] = None,
    ) -> list[Tool]:
        query = db.query(Tool).filter(Tool.shop_id == shop_id)
        if status:
            query = query.filter(Tool.status == status)
        if category:
            query = query.filter(Tool.category == category)
        if search:
            pattern = f"%{search}%"
            query = query.filter(
                or_(
                    Tool.name.ilike(pattern),
                    Tool.tool_number.ilike(pattern),
                    Tool.serial_number.ilike(pattern),
                    Tool.manufacturer.ilike(pattern),
                )
            )
        return query.order_by(Tool.name).all()

    @staticmethod
    def get_by_id(db: Session, tool_id: int, shop_id: int) -> Optional[Tool]:
        return db.query(Tool).filter(Tool.id == tool_id, Tool.shop_id == shop_id).first()

    @staticmethod
    def get_by_number(db: Session, tool_number: str, shop_id: int) -> Optional[Tool]:
        return db.query(Tool).filter(Tool.tool_number == tool_number, Tool.shop_id == shop_id).first()

    @staticmethod
    def get_team_member(db: Session, member_id: int, shop_id: int) -> Optional[TeamMember]:
        return (
            db.query(TeamMember)
            .filter(TeamMember.id == member_id, TeamMember.shop_id == shop_id)
            .first()
        )

    @staticmethod
    def create(db: Session, shop_id: int, **data) -> Tool:
        tool = Tool(shop_id=shop_id, **data)
        db.add(tool)
        db.commit()
        db.refresh(tool)
        return tool

    @staticmethod
    def update(db: Session, tool: Tool, **updates) -> Tool:
        for key, value in updates.items():
            if hasattr(tool, key):
                setattr(tool, key, value)
        db.commit()
        db.refresh(tool)
        return tool

    @staticmethod
    def delete(db: Session, tool: Tool) -> None:
        db.delete(tool)
        db.commit()
