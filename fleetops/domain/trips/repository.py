"""Trip log repository"""

from typing import Optional

from sqlalchemy.orm import Session, joinedload

from ...models_maintenance import TripLog


class TripRepository:
    @staticmethod
    def get_recent(db: Session, shop_id: int, limit: int = 10, equipment_id: Optional[int] = None) -> list[TripLog]:
        query = db.query(TripLog).options(joinedload(TripLog.equipment)).filter(TripLog.shop_id == shop_id)
        if equipment_id:
            query = query.filter(TripLog.equipment_id == equipment_id)
        return query.order_by(TripLog.trip_date.desc(), TripLog.id.desc()).limit(limit).all()

    @staticmethod
    def get_by_id(db: Session, trip_id: int, shop_id: int) -> Optional[TripLog]:
        return db.query(TripLog).filter(TripLog.id == trip_id, TripLog.shop_id == shop_id).first()

    @staticmethod
    def create(db: Session, shop_id: int, **data) -> TripLog:
        trip = TripLog(shop_id=shop_id, **data)
        db.add(trip)
        db.commit()
        db.refresh(trip)
        return trip

    @staticmethod
    def delete(db: Session, trip: TripLog) -> None:
        db.delete(trip)
        db.commit()
