"""Idempotent seeding of system roles, predefined departments and default discount types"""

import logging
from typing import Optional

from sqlalchemy.orm import Session

from .domain.team.schemas import PREDEFINED_DEPARTMENTS
from .models import Department, Role, Shop, User, UserRole
from .models_work_order import DiscountType
from .permissions import ROLE_HIERARCHY, permissions_for_role
from .pricing import FIXED_AMOUNT, PERCENTAGE, SCOPE_LABOR, SCOPE_PARTS, SCOPE_WORK_ORDER
from .security_utils import hash_password

logger = logging.getLogger(__name__)

# Shared by every shop (shop_id is null)
DEFAULT_DISCOUNT_TYPES = [
    {"name": "Senior Discount", "discount_type": PERCENTAGE, "default_value": 10, "applies_to": SCOPE_WORK_ORDER},
    {"name": "Fleet Customer", "discount_type": PERCENTAGE, "default_value": 5, "applies_to": SCOPE_LABOR},
    {"name": "Loyalty Parts Discount", "discount_type": PERCENTAGE, "default_value": 5, "applies_to": SCOPE_PARTS},
    {"name": "Service Credit", "discount_type": FIXED_AMOUNT, "default_value": 50, "applies_to": SCOPE_WORK_ORDER},
]


def seed_roles(db: Session) -> int:
    """Create missing roles and refresh level/permissions of existing ones"""
    created = 0
    for name, level in ROLE_HIERARCHY.items():
        role = db.query(Role).filter(Role.name == name).first()
        if not role:
            role = Role(name=name, display_name=name.replace("_", " ").title(), is_default=True)
            db.add(role)
            created += 1
        role.priority = level
        role.permissions = permissions_for_role(name)
    db.commit()
    logger.info(f"✅ Roles seeded ({created} new, {len(ROLE_HIERARCHY)} total)")
    return created


def seed_departments(db: Session, shop_id: int) -> int:
    existing = {d.name.lower() for d in db.query(Department).filter(Department.shop_id == shop_id)}
    created = 0
    for entry in PREDEFINED_DEPARTMENTS:
        if entry["name"].lower() in existing:
            continue
        db.add(Department(shop_id=shop_id, name=entry["name"], description=entry["description"], is_custom=False))
        created += 1
    db.commit()
    logger.info(f"✅ Departments seeded for shop {shop_id} ({created} new)")
    return created


def seed_discount_types(db: Session) -> int:
    created = 0
    for entry in DEFAULT_DISCOUNT_TYPES:
        exists = (
            db.query(DiscountType)
            .filter(DiscountType.shop_id.is_(None), DiscountType.name == entry["name"])
            .first()
        )
        if exists:
            continue
        db.add(DiscountType(shop_id=None, is_active=True, **entry))
        created += 1
    db.commit()
    logger.info(f"✅ Default discount types seeded ({created} new)")
    return created


def create_shop_owner(
    db: Session,
    shop_name: str,
    email: str,
    password: str,
    first_name: Optional[str] = None,
    last_name: Optional[str] = None,
) -> User:
    """Create a shop with an owner login; the owner role must already be seeded"""
    email = email.strip().lower()
    if db.query(User).filter(User.email == email).first():
        raise ValueError(f"User {email} already exists")
    owner_role = db.query(Role).filter(Role.name == "owner").first()
    if not owner_role:
        raise ValueError("Roles are not seeded")

    shop = Shop(name=shop_name)
    db.add(shop)
    db.flush()
    user = User(
        shop_id=shop.id,
        email=email,
        password_hash=hash_password(password),
        first_name=first_name,
        last_name=last_name,
        is_active=True,
    )
    db.add(user)
    db.flush()
    db.add(UserRole(user_id=user.id, role_id=owner_role.id))
    db.commit()
    db.refresh(user)
    logger.info(f"✅ Shop '{shop_name}' created with owner {email}")
    return user
