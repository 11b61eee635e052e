"""Tool service - Business logic for shop tools"""

import logging
from datetime import datetime
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ...models import Tool, User
from .repository import ToolRepository
from .schemas import ToolCheckin, ToolCheckout, ToolCreate, ToolUpdate

logger = logging.getLogger(__name__)


class ToolService:
    """Service layer for tool business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = ToolRepository()

    def list_tools(
        self, user: User, search: Optional[str] = None, status: Optional[str] = None, category: Optional[str] = None
    ) -> list[Tool]:
        return self.repo.search_tools(self.db, user.shop_id, search, status, category)

    def get_tool(self, tool_id: int, user: User) -> Tool:
        tool = self.repo.get_by_id(self.db, tool_id, user.shop_id)
        if not tool:
            raise HTTPException(status_code=404, detail="Tool not found")
        return tool

    def _check_number(self, tool_number: Optional[str], user: User, exclude_id: Optional[int] = None):
        if not tool_number:
            return
        existing = self.repo.get_by_number(self.db, tool_number, user.shop_id)
        if existing and existing.id != exclude_id:
            raise HTTPException(status_code=409, detail=f"Tool number {tool_number} is already in use")

    @staticmethod
    def _reject_direct_checkout(status: Optional[str]):
        if status == "checked_out":
            raise HTTPException(status_code=400, detail="Use POST /tools/{id}/checkout to check a tool out")

    def create_tool(self, data: ToolCreate, user: User) -> Tool:
        self._reject_direct_checkout(data.status)
        self._check_number(data.tool_number, user)
        tool = self.repo.create(self.db, user.shop_id, **data.model_dump())
        logger.info(f"✅ Tool {tool.id} ({tool.name}) created for shop {user.shop_id}")
        return tool

    def update_tool(self, tool_id: int, data: ToolUpdate, user: User) -> Tool:
        tool = self.get_tool(tool_id, user)
        updates = data.model_dump(exclude_unset=True)
        if "tool_number" in updates:
            self._check_number(updates["tool_number"], user, exclude_id=tool.id)
        if updates.get("status"):
            self._reject_direct_checkout(updates["status"])
            # Leaving checked_out by any route clears the holder
            updates["checked_out_to"] = None
            updates["checked_out_at"] = None
        return self.repo.update(self.db, tool, **updates)

    def delete_tool(self, tool_id: int, user: User) -> dict:
        tool = self.get_tool(tool_id, user)
        self.repo.delete(self.db, tool)
        logger.info(f"🗑️ Tool {tool_id} deleted for shop {user.shop_id}")
        return {"message": "Tool deleted"}

    def check_out(self, tool_id: int, data: ToolCheckout, user: User) -> Tool:
        tool = self.get_tool(tool_id, user)
        if tool.status != "available":
            raise HTTPException(
                status_code=400, detail=f"Tool is not available for checkout (status: {tool.status})"
            )
        if data.team_member_id is not None and not self.repo.get_team_member(
            self.db, data.team_member_id, user.shop_id
        ):
            raise HTTPException(status_code=404, detail="Team member not found")

        updates = {
            "status": "checked_out",
            "checked_out_to": data.team_member_id,
            "checked_out_at": datetime.utcnow(),
        }
        if data.notes:
            updates["notes"] = data.notes
        logger.info(f"🔧 Tool {tool.id} checked out to member {data.team_member_id}")
        return self.repo.update(self.db, tool, **updates)

    def check_in(self, tool_id: int, data: ToolCheckin, user: User) -> Tool:
        tool = self.get_tool(tool_id, user)
        if tool.status != "checked_out":
            raise HTTPException(status_code=400, detail="Tool is not checked out")

        updates = {"status": "available", "checked_out_to": None, "checked_out_at": None}
        if data.condition:
            updates["condition"] = data.condition
        if data.location:
            updates["location"] = data.location
        logger.info(f"🔧 Tool {tool.id} checked in")
        return self.repo.update(self.db, tool, **updates)
