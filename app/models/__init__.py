from app.models.user import User, UserRole
from app.models.seller import Seller, ApprovalStatus
from app.models.product import Product
from app.models.delivery_address import DeliveryAddress
from app.models.delivery_area import DeliveryArea
from app.models.delivery_person import DeliveryPerson
from app.models.order import Order, SubOrder, OrderItem
from app.models.order_tracking import OrderTrackingEvent

__all__ = [
    "User",
    "UserRole",
    "Seller",
    "ApprovalStatus",
    "Product",
    "DeliveryAddress",
    "DeliveryArea",
    "DeliveryPerson",
    "Order",
    "SubOrder",
    "OrderItem",
    "OrderTrackingEvent"
]
