import pytest
from sqlalchemy import func, select

from walletshop.data.database import SessionLocal
from walletshop.data.models import CouponModel, CouponRedemptionModel
from walletshop.domain.errors import BusinessError
from walletshop.domain.schemas import OrderLineIn
from walletshop.repos.coupon_repo import CouponRepo
from walletshop.services.coupon_service import CouponService
from walletshop.services.order_service import OrderService


@pytest.fixture
def order(catalog):
    return OrderService(catalog).set_order("demo", [OrderLineIn(item_id=1, quantity=2)])


def redemption_count():
    with SessionLocal() as fresh:
        return fresh.execute(select(func.count()).select_from(CouponRedemptionModel)).scalar_one()


def test_redeem_records_coupon_percent(catalog, order):
    result = CouponService(catalog).redeem_coupon("demo", "SAVE10")

    assert result == {"id": result["id"], "coupon_code": "SAVE10", "coupon_id": 1, "percent": 10}
    assert redemption_count() == 1


def test_second_redeem_is_rejected(catalog, order):
    svc = CouponService(catalog)
    svc.redeem_coupon("demo", "SAVE10")

    with pytest.raises(BusinessError, match="Already used"):
        svc.redeem_coupon("demo", "SAVE10")

    assert redemption_count() == 1


def test_storage_constraint_stops_race_past_precheck(catalog, order, monkeypatch):
    CouponService(catalog).redeem_coupon("demo", "SAVE10")

    # druga transakcja "nie widzi" pierwszego wykupienia - jak przy wyscigu
    monkeypatch.setattr(CouponRepo, "get_redemption", lambda self, order_id, coupon_id: None)

    with SessionLocal() as other:
        with pytest.raises(BusinessError, match="Already used"):
            CouponService(other).redeem_coupon("demo", "SAVE10")

    assert redemption_count() == 1


@pytest.mark.parametrize("code", ["NOPE", "OLD5"], ids=["unknown", "inactive"])
def test_invalid_coupon(catalog, order, code):
    with pytest.raises(BusinessError, match="Coupon invalid"):
        CouponService(catalog).redeem_coupon("demo", code)


def test_redeem_without_order(catalog):
    with pytest.raises(BusinessError, match="No current order"):
        CouponService(catalog).redeem_coupon("ghost", "SAVE10")


def test_percent_is_frozen_at_redemption(catalog, order):
    CouponService(catalog).redeem_coupon("demo", "SAVE10")

    coupon = catalog.get(CouponModel, 1)
    coupon.percent = 50
    catalog.commit()

    current = OrderService(catalog).get_current_order("demo")
    assert [c["percent"] for c in current["coupons"]] == [10]


def test_deactivated_coupon_hidden_from_order(catalog, order):
    CouponService(catalog).redeem_coupon("demo", "SAVE10")
    CouponService(catalog).redeem_coupon("demo", "EXTRA15")

    catalog.get(CouponModel, 1).active = False
    catalog.commit()

    current = OrderService(catalog).get_current_order("demo")
    assert [c["coupon_code"] for c in current["coupons"]] == ["EXTRA15"]


def test_remove_coupon(catalog, order):
    svc = CouponService(catalog)
    redeemed = svc.redeem_coupon("demo", "SAVE10")

    assert svc.remove_coupon("demo", redeemed["coupon_id"]) == {}

    assert redemption_count() == 0
    assert OrderService(catalog).get_current_order("demo")["coupons"] == []


def test_remove_never_redeemed_coupon_is_noop(catalog, order):
    svc = CouponService(catalog)
    svc.redeem_coupon("demo", "SAVE10")

    assert svc.remove_coupon("demo", 3) == {}

    assert redemption_count() == 1


def test_remove_without_order(catalog):
    with pytest.raises(BusinessError, match="No current order"):
        CouponService(catalog).remove_coupon("ghost", 1)
