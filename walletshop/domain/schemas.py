# walletshop/domain/schemas.py
from pydantic import BaseModel, Field, ConfigDict, StrictInt
from pydantic.alias_generators import to_camel
from typing import List
from decimal import Decimal
from datetime import datetime


class CamelModel(BaseModel):
    """JSON po stronie klienta jest w camelCase, w pythonie snake_case."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class OrderLineIn(CamelModel):
    """
    Linia zamowienia od klienta.
    Dodatkowe pola (np. cena z klienta) sa akceptowane i odrzucane -
    cena zawsze liczona po stronie serwera.
    """

    model_config = ConfigDict(extra="ignore")

    item_id: StrictInt = Field(..., description="ID produktu z katalogu")
    # strict: true/"2" z JSONa to blad schematu; dodatnia ilosc sprawdza silnik wyceny
    quantity: StrictInt = Field(..., description="Ilosc produktu")


class OrderIn(CamelModel):
    """Schema dla ustawienia zamowienia walleta."""

    wallet_code: str = Field(..., min_length=1, max_length=128)
    lines: List[OrderLineIn] = Field(..., min_length=1)


class BulkOrdersIn(CamelModel):
    """Schema dla bulk JSON."""

    model_config = ConfigDict(extra="forbid")

    orders: List[OrderIn] = Field(..., min_length=1, max_length=500)


class BulkLineRecord(CamelModel):
    """Jeden wiersz pliku CSV po rozbiciu na pola - stala lista kolumn."""

    wallet_code: str = Field(..., min_length=1, max_length=128)
    item_id: int
    quantity: int


class OrderLineOut(CamelModel):
    item_id: int
    quantity: int
    unit_price: Decimal
    total_price: Decimal


class CouponRedemptionOut(CamelModel):
    id: int
    order_id: int
    coupon_id: int
    coupon_code: str
    percent: int


class OrderOut(CamelModel):
    """Schema dla zamowienia (response)."""

    id: int
    status: str
    created_at: datetime
    lines: List[OrderLineOut]
    coupons: List[CouponRedemptionOut]


class BulkErrorOut(CamelModel):
    wallet_code: str
    error: str


class BulkResultOut(CamelModel):
    created: int
    errors: List[BulkErrorOut]


class CouponRedeemIn(CamelModel):
    wallet_code: str = Field(..., min_length=1, max_length=128)
    code: str = Field(..., min_length=1, max_length=64)


class CouponRemoveIn(CamelModel):
    wallet_code: str = Field(..., min_length=1, max_length=128)
    coupon_id: int = Field(..., gt=0)


class CouponRedeemOut(CamelModel):
    id: int
    coupon_code: str
    coupon_id: int
    percent: int
