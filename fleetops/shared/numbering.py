"""Human-readable document numbers: PREFIX-YYYYMMDD-NNNN, sequenced per shop per day"""

from datetime import date
from typing import Optional

from sqlalchemy import func
from sqlalchemy.orm import Session


def next_document_number(db: Session, column, shop_column, shop_id: int, prefix: str, on: Optional[date] = None) -> str:
    """
    Next number in today's sequence for a shop.

    The sequence continues from the highest number already issued today, so deleting an
    earlier document never causes a number to be reused. Past 9999 the tail grows a digit,
    so numbers are ordered by length first to keep `-10000` above `-9999`.
    """
    day_prefix = f"{prefix}-{(on or date.today()).strftime('%Y%m%d')}-"
    latest = (
        db.query(column)
        .filter(shop_column == shop_id, column.like(f"{day_prefix}%"))
        .order_by(func.length(column).desc(), column.desc())
        .first()
    )
    sequence = 1
    if latest and latest[0]:
        tail = latest[0][len(day_prefix):]
        if tail.isdigit():
            sequence = int(tail) + 1
    return f"{day_prefix}{sequence:04d}"
