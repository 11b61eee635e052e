"""
Seed roles, default discount types and, optionally, a first shop with its owner
Usage: python seed_defaults.py [<shop name> <owner email> <owner password>]
"""
import sys
import logging
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent))

from fleetops import models, models_maintenance, models_voyage, models_work_order  # noqa: F401
from fleetops.database import Base, SessionLocal, engine
from fleetops.seed import create_shop_owner, seed_departments, seed_discount_types, seed_roles

logging.basicConfig(level=logging.INFO, format='%(message)s')
logger = logging.getLogger(__name__)


def run_seed(args: list[str]):
    Base.metadata.create_all(bind=engine, checkfirst=True)
    db = SessionLocal()
    try:
        seed_roles(db)
        seed_discount_types(db)
        if args:
            shop_name, email, password = args
            owner = create_shop_owner(db, shop_name, email, password)
            seed_departments(db, owner.shop_id)
    finally:
        db.close()
    logger.info("✅ Seeding completed successfully!")


if __name__ == "__main__":
    if len(sys.argv) not in (1, 4):
        logger.error("Usage: python seed_defaults.py [<shop name> <owner email> <owner password>]")
        sys.exit(1)

    try:
        run_seed(sys.argv[1:])
    except Exception as e:
        logger.error(f"❌ Seeding failed: {e}")
        sys.exit(1)
