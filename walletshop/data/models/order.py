from sqlalchemy import Column, Integer, String, DateTime
from sqlalchemy.orm import relationship
from datetime import datetime, timezone

from walletshop.data.database import Base

ORDER_STATUS_PENDING = "PENDING"


class OrderModel(Base):
    __tablename__ = "orders"

    id = Column(Integer, primary_key=True)
    # jeden order na wallet, upsert po tym kluczu
    wallet_code = Column(String(128), nullable=False, unique=True, index=True)

    status = Column(String(20), nullable=False, default=ORDER_STATUS_PENDING)  # PENDING, reszta poza tym serwisem
    buyer_ip = Column(String(64), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))

    lines = relationship(
        "OrderLineModel",
        back_populates="order",
        cascade="all, delete-orphan",
        order_by="OrderLineModel.id",
    )
    coupons = relationship(
        "CouponRedemptionModel",
        back_populates="order",
        cascade="all, delete-orphan",
        order_by="CouponRedemptionModel.id",
    )
