from sqlalchemy import Column, Integer, ForeignKey, String, DateTime, UniqueConstraint
from sqlalchemy.orm import relationship
from datetime import datetime, timezone

from walletshop.data.database import Base


class CouponRedemptionModel(Base):
    __tablename__ = "coupon_redemptions"

    id = Column(Integer, primary_key=True)
    order_id = Column(Integer, ForeignKey("orders.id", ondelete="CASCADE"), nullable=False, index=True)
    coupon_id = Column(Integer, ForeignKey("coupons.id", ondelete="CASCADE"), nullable=False)

    coupon_code = Column(String(64), nullable=False)
    percent = Column(Integer, nullable=False)
    wallet_code = Column(String(128), nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))

    order = relationship("OrderModel", back_populates="coupons")
    coupon = relationship("CouponModel")

    # jedyne realne zabezpieczenie przed podwojnym uzyciem kuponu
    __table_args__ = (UniqueConstraint("order_id", "coupon_id", name="u_redemption_order_coupon"),)
