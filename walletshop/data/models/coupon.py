from sqlalchemy import Column, Integer, String, Boolean

from walletshop.data.database import Base


class CouponModel(Base):
    __tablename__ = "coupons"

    id = Column(Integer, primary_key=True)
    # kod jest kluczem wyszukiwania, wiec musi byc unikalny
    code = Column(String(64), nullable=False, unique=True, index=True)

    percent = Column(Integer, nullable=False)
    active = Column(Boolean, nullable=False, default=True)
