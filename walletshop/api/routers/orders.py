# walletshop/api/routers/orders.py
from fastapi import APIRouter, Depends, File, HTTPException, Request, UploadFile
from sqlalchemy.orm import Session

from walletshop.data.database import get_db
from walletshop.domain.errors import BusinessError
from walletshop.domain.schemas import (
    OrderIn,
    OrderOut,
    BulkOrdersIn,
    BulkResultOut,
    CouponRedeemIn,
    CouponRedeemOut,
    CouponRemoveIn,
)
from walletshop.services.batch_order_service import BatchOrderService, OrderGroup, group_records
from walletshop.services.bulk_csv import parse_bulk_csv
from walletshop.services.coupon_service import CouponService
from walletshop.services.lock_service import LockService
from walletshop.services.order_service import OrderService
from walletshop.utils.settings import WALLET_LOCKS_ENABLED, BULK_MAX_FILE_BYTES, BULK_MAX_ORDERS

router = APIRouter(prefix="/api/v1/order", tags=["orders"])


def get_lock_service() -> LockService | None:
    return LockService() if WALLET_LOCKS_ENABLED else None


def get_service(db: Session):
    return OrderService(db, lock_service=get_lock_service())


def buyer_ip_from(request: Request) -> str | None:
    if not request.client or not request.client.host:
        return None
    # IPv4 zmapowane na IPv6
    return request.client.host.removeprefix("::ffff:")


@router.get("/{wallet_code}")
def current_order(wallet_code: str, db: Session = Depends(get_db)):
    """
    Aktualne zamowienie walleta, {} jesli go nie ma.
    """
    order = get_service(db).get_current_order(wallet_code)
    if not order:
        return {}
    return OrderOut.model_validate(order).model_dump(mode="json", by_alias=True)


@router.post("/change", response_model=OrderOut, status_code=201)
def set_order(payload: OrderIn, request: Request, db: Session = Depends(get_db)):
    svc = get_service(db)
    try:
        return svc.set_order(payload.wallet_code, payload.lines, buyer_ip_from(request))
    except BusinessError as e:
        raise HTTPException(status_code=400, detail=e.message)


@router.post("/bulk", response_model=BulkResultOut, status_code=207)
def bulk_orders(request: Request, file: UploadFile = File(...)):
    """
    Bulk z pliku CSV: walletCode,itemId,quantity.
    Jeden wallet = jedno zamowienie, bledy per wallet w odpowiedzi.
    """
    filename = file.filename or ""
    if not filename.lower().endswith(".csv"):
        raise HTTPException(status_code=400, detail=f"Rejected: {filename}")

    content = file.file.read(BULK_MAX_FILE_BYTES + 1)
    if len(content) > BULK_MAX_FILE_BYTES:
        raise HTTPException(status_code=413, detail="File too large")

    try:
        parsed = parse_bulk_csv(content)
    except BusinessError as e:
        raise HTTPException(status_code=400, detail=e.message)

    groups = group_records(parsed.records)
    if len(groups) + len(parsed.rejected) > BULK_MAX_ORDERS:
        raise HTTPException(status_code=400, detail=f"Too many orders (max {BULK_MAX_ORDERS})")

    rejected = [{"wallet_code": w, "error": msg} for w, msg in parsed.rejected.items()]

    svc = BatchOrderService(lock_service=get_lock_service())
    return svc.bulk_set_orders(groups, buyer_ip_from(request), rejected=rejected)


@router.post("/bulk/json", response_model=BulkResultOut, status_code=207)
def bulk_orders_json(payload: BulkOrdersIn, request: Request):
    groups = [OrderGroup(o.wallet_code, list(o.lines)) for o in payload.orders]

    svc = BatchOrderService(lock_service=get_lock_service())
    return svc.bulk_set_orders(groups, buyer_ip_from(request))


@router.post("/redeem-coupon", response_model=CouponRedeemOut, status_code=201)
def redeem_coupon(payload: CouponRedeemIn, db: Session = Depends(get_db)):
    svc = CouponService(db)
    try:
        return svc.redeem_coupon(payload.wallet_code, payload.code)
    except BusinessError as e:
        raise HTTPException(status_code=400, detail=e.message)


@router.post("/remove-coupon")
def remove_coupon(payload: CouponRemoveIn, db: Session = Depends(get_db)):
    svc = CouponService(db)
    try:
        return svc.remove_coupon(payload.wallet_code, payload.coupon_id)
    except BusinessError as e:
        raise HTTPException(status_code=400, detail=e.message)
