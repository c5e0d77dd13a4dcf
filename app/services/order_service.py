import logging
import random
import string
from collections import OrderedDict
from datetime import datetime
from decimal import Decimal
from typing import Dict, List, Optional, Tuple

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from app.models.delivery_person import DeliveryPerson
from app.models.order import (
    Order, SubOrder, OrderItem, OrderStatus, SubOrderStatus, DeliveryStatus, PaymentMethod
)
from app.models.product import Product
from app.models.seller import Seller
from app.models.user import User, UserRole
from app.schemas.order import OrderCreate
from app.services import address_service, location_service
from app.services.tracking_service import record_event

logger = logging.getLogger(__name__)

# Seller-side sub-order transitions
SUB_ORDER_TRANSITIONS = {
    SubOrderStatus.PENDING.value: {SubOrderStatus.ACCEPTED.value, SubOrderStatus.REJECTED.value},
    SubOrderStatus.ACCEPTED.value: {SubOrderStatus.PREPARING.value, SubOrderStatus.REJECTED.value},
    SubOrderStatus.PREPARING.value: {SubOrderStatus.READY_FOR_PICKUP.value},
}

CANCELLABLE_SUB_ORDER_STATUSES = {SubOrderStatus.PENDING.value, SubOrderStatus.ACCEPTED.value}
CLOSED_SUB_ORDER_STATUSES = {SubOrderStatus.REJECTED.value, SubOrderStatus.CANCELLED.value}

STATUS_MESSAGES = {
    SubOrderStatus.ACCEPTED.value: "Seller accepted the order",
    SubOrderStatus.REJECTED.value: "Seller rejected the order",
    SubOrderStatus.PREPARING.value: "Seller is preparing the order",
    SubOrderStatus.READY_FOR_PICKUP.value: "Order is ready for pickup",
}


def generate_order_number() -> str:
    """Generate unique order number"""
    timestamp = datetime.now().strftime("%Y%m%d%H%M%S")
    random_str = ''.join(random.choices(string.ascii_uppercase + string.digits, k=6))
    return f"LK{timestamp}{random_str}"


def sub_order_suffix(index: int) -> str:
    """0 -> A, 25 -> Z, 26 -> AA"""
    suffix = ""
    index += 1
    while index > 0:
        index, remainder = divmod(index - 1, 26)
        suffix = string.ascii_uppercase[remainder] + suffix
    return suffix


def _address_snapshot(address) -> dict:
    return {
        "full_name": address.full_name,
        "phone_number": address.phone_number,
        "address_line1": address.address_line1,
        "address_line2": address.address_line2,
        "city": address.city,
        "state": address.state,
        "postal_code": address.postal_code,
        "label": address.label,
    }


def _collect_lines(db: Session, order_data: OrderCreate) -> "OrderedDict[str, List[Tuple[Product, int]]]":
    """Validate requested items and group them per seller"""
    quantities: Dict[str, int] = OrderedDict()
    for item in order_data.items:
        quantities[item.product_id] = quantities.get(item.product_id, 0) + item.quantity

    by_seller: "OrderedDict[str, List[Tuple[Product, int]]]" = OrderedDict()
    for product_id, qty in quantities.items():
        product = db.query(Product).filter(Product.id == product_id).first()
        if not product or not product.is_orderable:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Product {product_id} is not available"
            )
        if qty < product.min_order_qty:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Minimum order quantity for {product.name} is {product.min_order_qty}"
            )
        if product.max_order_qty is not None and qty > product.max_order_qty:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Maximum order quantity for {product.name} is {product.max_order_qty}"
            )
        if qty > product.stock:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Insufficient stock for {product.name}. Available: {product.stock}"
            )
        by_seller.setdefault(product.seller_id, []).append((product, qty))
    return by_seller


def place_order(db: Session, user: User, order_data: OrderCreate) -> Order:
    """
    Create a master order with one sub-order per seller.

    The delivery address is either one of the user's saved addresses or a new
    one. A new address is geocoded and saved only once its pincode is known
    to be serviceable, in the same commit as the order.
    """
    if not order_data.items:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Order must contain at least one item")

    payment_method = (order_data.payment_method or "").upper()
    if payment_method not in {m.value for m in PaymentMethod}:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Payment method must be COD or ONLINE")

    by_seller = _collect_lines(db, order_data)

    new_address_fields = None
    if order_data.delivery_address_id:
        address = address_service.get_address(db, user.id, order_data.delivery_address_id)
        postal_code = address.postal_code
    elif order_data.new_delivery_address is not None:
        new_address_fields = address_service.clean_new_address(order_data.new_delivery_address)
        postal_code = new_address_fields["postal_code"]
    else:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Delivery address is required")

    if not location_service.is_within_service_area(db, postal_code):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Delivery is not available for pincode {postal_code}"
        )

    if new_address_fields is not None:
        address = address_service.add_address(db, user.id, new_address_fields)

    order = Order(
        order_number=generate_order_number(),
        customer_id=user.id,
        delivery_address_id=address.id,
        delivery_address=_address_snapshot(address),
        delivery_latitude=address.latitude,
        delivery_longitude=address.longitude,
        delivery_instructions=order_data.delivery_instructions,
        payment_method=payment_method,
        status=OrderStatus.PENDING.value,
        subtotal=Decimal("0.00"),
        delivery_charge=Decimal("0.00"),
        total=Decimal("0.00"),
    )
    db.add(order)

    subtotal = Decimal("0.00")
    delivery_total = Decimal("0.00")
    for index, (seller_id, lines) in enumerate(by_seller.items()):
        sub_subtotal = sum((Decimal(product.price) * qty for product, qty in lines), Decimal("0.00"))
        charge = location_service.calculate_delivery_charge(db, address.postal_code, sub_subtotal)
        sub_order = SubOrder(
            sub_order_number=f"{order.order_number}-{sub_order_suffix(index)}",
            seller_id=seller_id,
            status=SubOrderStatus.PENDING.value,
            delivery_status=DeliveryStatus.PENDING.value,
            subtotal=sub_subtotal,
            delivery_charge=charge,
            total=sub_subtotal + charge,
        )
        for product, qty in lines:
            sub_order.items.append(OrderItem(
                product_id=product.id,
                product_name=product.name,
                product_price=product.price,
                product_unit=product.unit,
                quantity=qty,
                item_total=Decimal(product.price) * qty,
            ))
            product.stock -= qty
        order.sub_orders.append(sub_order)
        subtotal += sub_subtotal
        delivery_total += charge

    order.subtotal = subtotal
    order.delivery_charge = delivery_total
    order.total = subtotal + delivery_total
    db.flush()

    record_event(db, order, OrderStatus.PENDING.value, "Order placed", updated_by=user.id)
    db.commit()
    db.refresh(order)
    logger.info("Order %s placed by %s with %d sub-orders", order.order_number, user.id, len(order.sub_orders))
    return order


def get_customer_order(db: Session, user: User, order_id: str) -> Order:
    order = db.query(Order).filter(Order.id == order_id, Order.customer_id == user.id).first()
    if not order:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Order not found")
    return order


def get_order_for_viewer(db: Session, user: User, order_id: str) -> Order:
    """
    Load an order the user may watch: the customer who placed it, a seller
    with a sub-order in it, the assigned delivery person, or an admin.
    Anyone else gets 404.
    """
    order = db.query(Order).filter(Order.id == order_id).first()
    if order and can_view_order(user, order):
        return order
    raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Order not found")


def can_view_order(user: User, order: Order) -> bool:
    if user.role == UserRole.ADMIN.value or order.customer_id == user.id:
        return True
    if user.seller is not None and any(sub.seller_id == user.seller.id for sub in order.sub_orders):
        return True
    person: Optional[DeliveryPerson] = user.delivery_person
    return person is not None and order.delivery_person_id == person.id


def cancel_order(db: Session, user: User, order_id: str) -> Order:
    order = get_customer_order(db, user, order_id)

    if order.status == OrderStatus.CANCELLED.value:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Order is already cancelled")
    open_subs = [sub for sub in order.sub_orders if sub.status not in CLOSED_SUB_ORDER_STATUSES]
    if any(sub.status not in CANCELLABLE_SUB_ORDER_STATUSES for sub in open_subs):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Order can no longer be cancelled"
        )

    for sub in open_subs:
        for item in sub.items:
            if item.product is not None:
                item.product.stock += item.quantity
        sub.status = SubOrderStatus.CANCELLED.value
        sub.delivery_status = DeliveryStatus.CANCELLED.value

    order.status = OrderStatus.CANCELLED.value
    order.cancelled_at = datetime.utcnow()
    record_event(db, order, OrderStatus.CANCELLED.value, "Order cancelled by customer", updated_by=user.id)
    db.commit()
    db.refresh(order)
    return order


def _roll_up_master_status(db: Session, order: Order, user_id: str) -> bool:
    """Derive the master order status from its sub-orders; returns True if it changed"""
    active = [sub for sub in order.sub_orders if sub.status not in CLOSED_SUB_ORDER_STATUSES]
    previous = order.status

    if not active:
        order.status = OrderStatus.CANCELLED.value
        order.cancelled_at = datetime.utcnow()
        message = "All sellers rejected the order"
    elif all(sub.status == SubOrderStatus.READY_FOR_PICKUP.value for sub in active):
        order.status = OrderStatus.PROCESSING.value
        message = "All items are ready for pickup"
    elif order.status == OrderStatus.PENDING.value and any(sub.status != SubOrderStatus.PENDING.value for sub in active):
        order.status = OrderStatus.CONFIRMED.value
        message = "Order confirmed"
    else:
        return False

    if order.status == previous:
        return False
    record_event(db, order, order.status, message, updated_by=user_id)
    return True


def update_sub_order_status(db: Session, seller: Seller, user_id: str, sub_order_id: str, new_status: str) -> SubOrder:
    sub_order = db.query(SubOrder).filter(
        SubOrder.id == sub_order_id,
        SubOrder.seller_id == seller.id
    ).first()
    if not sub_order:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Sub-order not found")

    if new_status == sub_order.status:
        return sub_order

    allowed = SUB_ORDER_TRANSITIONS.get(sub_order.status, set())
    if new_status not in allowed:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Cannot change status from {sub_order.status} to {new_status}"
        )

    sub_order.status = new_status
    order = sub_order.order
    if new_status == SubOrderStatus.REJECTED.value:
        sub_order.delivery_status = DeliveryStatus.CANCELLED.value
        for item in sub_order.items:
            if item.product is not None:
                item.product.stock += item.quantity

    record_event(
        db, order, new_status,
        f"{sub_order.sub_order_number}: {STATUS_MESSAGES.get(new_status, new_status)}",
        updated_by=user_id, sub_order=sub_order,
    )
    _roll_up_master_status(db, order, user_id)
    db.commit()
    db.refresh(sub_order)
    logger.info("Sub-order %s moved to %s", sub_order.sub_order_number, new_status)
    return sub_order


def admin_update_order_status(db: Session, admin: User, order_id: str, new_status: str, message: Optional[str] = None) -> Order:
    if new_status not in {s.value for s in OrderStatus}:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=f"Invalid order status: {new_status}")

    order = db.query(Order).filter(Order.id == order_id).first()
    if not order:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Order not found")

    order.status = new_status
    if new_status == OrderStatus.DELIVERED.value:
        order.delivered_at = datetime.utcnow()
    elif new_status == OrderStatus.CANCELLED.value:
        order.cancelled_at = datetime.utcnow()
    record_event(db, order, new_status, message or f"Status set to {new_status} by admin", updated_by=admin.id)
    db.commit()
    db.refresh(order)
    return order


def viewer_seller_scope(user: User, order: Order, seller_id: Optional[str] = None) -> Optional[str]:
    """Seller scope for an order view; sellers only ever see their own sub-order"""
    if order.customer_id == user.id or user.role == UserRole.ADMIN.value:
        return seller_id
    if user.seller is not None and any(sub.seller_id == user.seller.id for sub in order.sub_orders):
        return user.seller.id
    return seller_id
