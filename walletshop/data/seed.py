# walletshop/data/seed.py
from decimal import Decimal

from walletshop.data.database import SessionLocal
from walletshop.data.models.item import ItemModel
from walletshop.data.models.coupon import CouponModel
from walletshop.repos.catalog_repo import CatalogRepo
from walletshop.repos.coupon_repo import CouponRepo
from walletshop.utils.logging import get_logger

logger = get_logger(__name__)

DEMO_ITEMS = [
    {"id": 1, "name": "Sticker pack", "price": Decimal("10.00")},
    {"id": 2, "name": "Enamel pin", "price": Decimal("5.00")},
    {"id": 3, "name": "Hoodie", "price": Decimal("20.00")},
]

DEMO_COUPONS = [
    {"code": "WELCOME10", "percent": 10},
]


def seed(session_factory=SessionLocal) -> bool:
    db = session_factory()
    try:
        catalog = CatalogRepo(db)
        # not forcing: only seed if empty
        if catalog.has_items():
            return False

        for item in DEMO_ITEMS:
            catalog.add_item(ItemModel(active=True, **item))

        coupons = CouponRepo(db)
        for coupon in DEMO_COUPONS:
            coupons.add_coupon(CouponModel(active=True, **coupon))

        db.commit()
        logger.info(f"Seeded {len(DEMO_ITEMS)} items and {len(DEMO_COUPONS)} coupon(s)")
        return True
    finally:
        db.close()
