# walletshop/repos/coupon_repo.py
from sqlalchemy.orm import Session
from sqlalchemy import select, delete

from walletshop.data.models.coupon import CouponModel
from walletshop.data.models.coupon_redemption import CouponRedemptionModel


class CouponRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_active_coupon_by_code(self, code: str) -> CouponModel | None:
        stmt = select(CouponModel).where(CouponModel.code == code, CouponModel.active.is_(True))
        return self.db.execute(stmt).scalar_one_or_none()

    def get_redemption(self, order_id: int, coupon_id: int) -> CouponRedemptionModel | None:
        stmt = select(CouponRedemptionModel).where(
            CouponRedemptionModel.order_id == order_id,
            CouponRedemptionModel.coupon_id == coupon_id,
        )
        return self.db.execute(stmt).scalar_one_or_none()

    def add_redemption(self, redemption: CouponRedemptionModel) -> CouponRedemptionModel:
        # flush od razu, zeby unique (order_id, coupon_id) wybuchl tutaj a nie przy commicie
        self.db.add(redemption)
        self.db.flush()
        return redemption

    def delete_redemptions(self, order_id: int, coupon_id: int) -> int:
        stmt = delete(CouponRedemptionModel).where(
            CouponRedemptionModel.order_id == order_id,
            CouponRedemptionModel.coupon_id == coupon_id,
        )
        result = self.db.execute(stmt)
        return result.rowcount

    def add_coupon(self, coupon: CouponModel) -> CouponModel:
        self.db.add(coupon)
        return coupon

    def commit(self):
        self.db.commit()

    def rollback(self):
        self.db.rollback()
