"""Voyage log repository"""

from typing import Optional

from sqlalchemy.orm import Session, joinedload

from ...models_voyage import VoyageCommunicationLog, VoyageLog


class VoyageRepository:
    @staticmethod
    def search_voyages(
        db: Session, shop_id: int, vessel_id: Optional[int] = None, status: Optional[str] = None
    ) -> list[VoyageLog]:
        query = db.query(VoyageLog).options(joinedload(VoyageLog.vessel)).filter(VoyageLog.shop_id == shop_id)
        if vessel_id:
            query = query.filter(VoyageLog.vessel_id == vessel_id)
        if status:
            query = query.filter(VoyageLog.voyage_status == status)
        return query.order_by(VoyageLog.departure_datetime.desc(), VoyageLog.id.desc()).all()

    @staticmethod
    def get_by_id(db: Session, voyage_id: int, shop_id: int) -> Optional[VoyageLog]:
        return (
            db.query(VoyageLog)
            .options(joinedload(VoyageLog.vessel))
            .filter(VoyageLog.id == voyage_id, VoyageLog.shop_id == shop_id)
            .first()
        )

    @staticmethod
    def get_by_number(db: Session, voyage_number: str, shop_id: int) -> Optional[VoyageLog]:
        return (
            db.query(VoyageLog)
            .filter(VoyageLog.voyage_number == voyage_number, VoyageLog.shop_id == shop_id)
            .first()
        )

    @staticmethod
    def add_communication(db: Session, voyage: VoyageLog, **data) -> VoyageCommunicationLog:
        entry = VoyageCommunicationLog(voyage_id=voyage.id, **data)
        db.add(entry)
        db.commit()
        db.refresh(entry)
        return entry

    @staticmethod
    def save(db: Session, voyage: VoyageLog) -> VoyageLog:
        db.add(voyage)
        db.commit()
        db.refresh(voyage)
        return voyage
