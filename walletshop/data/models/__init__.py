#import wszystkich modeli zeby SQLAlchemy je zarejestrowal w base metadata

from walletshop.data.models.item import ItemModel
from walletshop.data.models.order import OrderModel
from walletshop.data.models.order_line import OrderLineModel
from walletshop.data.models.coupon import CouponModel
from walletshop.data.models.coupon_redemption import CouponRedemptionModel

__all__ = ["ItemModel", "OrderModel", "OrderLineModel", "CouponModel", "CouponRedemptionModel"]
