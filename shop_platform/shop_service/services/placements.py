"""
Placement consistency: keeps Product.quantity and Order.total in step
with the placements that exist.

Invariants:
    - order.total == sum(placement.quantity * product.price) over the order's placements, 0 when empty
    - product.quantity == initial stock - sum(quantity) of the placements that reference it
    - a placement is never written for a product that does not exist

These functions only flush. Run them inside transaction(db) so the
placement row, the stock change and the new total commit together or
not at all.
"""
import logging
from typing import Dict, Iterable, Tuple

from sqlalchemy import func
from sqlalchemy.orm import Session

from ..errors import InsufficientStockError, NotFoundError, ValidationError
from ..models import Order, Placement, Product, User
from ..repositories import OrderRepository, PlacementRepository, ProductRepository

logger = logging.getLogger(__name__)


def update_order_total(db: Session, order: Order) -> float:
    """Recompute an order total with one aggregate query and persist it."""
    total = (
        db.query(func.coalesce(func.sum(Placement.quantity * Product.price), 0))
        .join(Product, Placement.product_id == Product.id)
        .filter(Placement.order_id == order.id)
        .scalar()
    )
    order.total = float(total or 0)
    OrderRepository(db).save(order)
    return order.total


def add_placement(db: Session, order: Order, product_id: int, quantity: int) -> Placement:
    """
    Attach a product to an order, reserve its stock and refresh the order total.

    Raises:
        NotFoundError: product does not exist; nothing has been written
        ValidationError: placement quantity is not positive
        InsufficientStockError: stock would drop below zero
    """
    products = ProductRepository(db)
    product = products.get_for_update(product_id)
    if product is None:
        raise NotFoundError("Product", product_id)

    # Refuse before anything is written for this line
    remaining = product.quantity - quantity
    if remaining < 0:
        logger.warning(
            "Stock refused product_id=%s available=%s requested=%s order_id=%s",
            product.id, product.quantity, quantity, order.id
        )
        raise InsufficientStockError(product.id, product.quantity, quantity)

    placement = PlacementRepository(db).save(
        Placement(order=order, product=product, quantity=quantity)
    )

    product.quantity = remaining
    products.save(product)
    update_order_total(db, order)

    logger.info(
        "Placement added placement_id=%s order_id=%s product_id=%s quantity=%s stock=%s total=%s",
        placement.id, order.id, product.id, placement.quantity, product.quantity, order.total
    )
    return placement


def remove_placement(db: Session, placement: Placement) -> None:
    """Give a placement's stock back to its product, delete it and refresh the order total."""
    order = placement.order
    products = ProductRepository(db)
    product = products.get_for_update(placement.product_id)
    if product is None:
        raise NotFoundError("Product", placement.product_id)

    product.quantity += placement.quantity
    products.save(product)

    PlacementRepository(db).delete(placement)
    db.expire(order, ["placements"])
    db.expire(product, ["placements"])

    update_order_total(db, order)

    logger.info(
        "Placement removed placement_id=%s order_id=%s product_id=%s quantity=%s stock=%s total=%s",
        placement.id, order.id, product.id, placement.quantity, product.quantity, order.total
    )


def merge_items(items: Iterable[Tuple[int, int]]) -> Dict[int, int]:
    """Fold (product_id, quantity) pairs into one quantity per distinct product."""
    merged: Dict[int, int] = {}
    for product_id, quantity in items:
        merged[product_id] = merged.get(product_id, 0) + quantity
    return merged


def create_order(db: Session, user: User, items: Iterable[Tuple[int, int]]) -> Order:
    """
    Create an order with one placement per distinct product.

    Raises:
        ValidationError: empty item list, unknown product, bad quantity or not enough stock
    """
    items = list(items)
    if not items:
        raise ValidationError({"products": "should be a non-empty array of products"})

    # Every submitted line must stand on its own
    for product_id, quantity in items:
        if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity <= 0:
            raise ValidationError({"products": f"quantity for product {product_id} must be a positive number"})

    merged = merge_items(items)
    order = OrderRepository(db).save(Order(user=user, total=0))
    for product_id, quantity in merged.items():
        try:
            add_placement(db, order, product_id, quantity)
        except NotFoundError as e:
            raise ValidationError({"products": f"product {product_id} not found"}) from e

    logger.info(
        "Order created order_id=%s user_id=%s lines=%s total=%s",
        order.id, user.id, len(merged), order.total
    )
    return order


def delete_order(db: Session, order: Order) -> None:
    """Remove every placement of an order through the engine, then the order itself."""
    for placement in PlacementRepository(db).for_order(order):
        remove_placement(db, placement)
    OrderRepository(db).delete(order)
