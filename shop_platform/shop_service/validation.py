"""
Entity rules checked before every write.

The rules live here rather than on the ORM columns so any caller that
persists through a repository gets the same checks as the HTTP layer.
"""
import math
import re
from typing import Callable, Dict

from .errors import ValidationError
from .models import Order, Placement, Product, User

EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")

# Largest value an Integer column holds on every supported backend
MAX_QUANTITY = 2_147_483_647


def _is_blank(value) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _is_int(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _is_number(value) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool) and math.isfinite(value)


def user_errors(user: User) -> Dict[str, str]:
    errors = {}
    if _is_blank(user.email):
        errors["email"] = "email should not be empty"
    elif not EMAIL_PATTERN.match(user.email):
        errors["email"] = "email must be an email"
    if _is_blank(user.hashed_password):
        errors["password"] = "password should not be empty"
    return errors


def product_errors(product: Product) -> Dict[str, str]:
    errors = {}
    if _is_blank(product.title):
        errors["title"] = "title should not be empty"
    if product.price is None:
        errors["price"] = "price should not be empty"
    elif not _is_number(product.price) or product.price <= 0:
        errors["price"] = "price must be a positive number"
    quantity = product.quantity if product.quantity is not None else 0
    if not _is_int(quantity):
        errors["quantity"] = "quantity must be an integer number"
    elif quantity < 0:
        errors["quantity"] = "quantity must not be less than 0"
    elif quantity > MAX_QUANTITY:
        errors["quantity"] = f"quantity must not be greater than {MAX_QUANTITY}"
    if product.user is None and product.user_id is None:
        errors["user"] = "user should not be empty"
    return errors


def order_errors(order: Order) -> Dict[str, str]:
    errors = {}
    if order.user is None and order.user_id is None:
        errors["user"] = "user should not be empty"
    total = order.total if order.total is not None else 0
    if not _is_number(total) or total < 0:
        errors["total"] = "total must be a finite number not less than 0"
    return errors


def placement_errors(placement: Placement) -> Dict[str, str]:
    errors = {}
    if not _is_int(placement.quantity) or placement.quantity <= 0:
        errors["quantity"] = "quantity must be a positive number"
    elif placement.quantity > MAX_QUANTITY:
        errors["quantity"] = f"quantity must not be greater than {MAX_QUANTITY}"
    if placement.product is None and placement.product_id is None:
        errors["product"] = "product should not be empty"
    if placement.order is None and placement.order_id is None:
        errors["order"] = "order should not be empty"
    return errors


RULES: Dict[type, Callable[[object], Dict[str, str]]] = {
    User: user_errors,
    Product: product_errors,
    Order: order_errors,
    Placement: placement_errors,
}


def validate(entity) -> None:
    """
    Check an entity against its rules.

    Raises:
        ValidationError: with every failing field when any rule is broken
    """
    rule = RULES.get(type(entity))
    if rule is None:
        raise TypeError(f"No validation rules for {type(entity).__name__}")
    errors = rule(entity)
    if errors:
        raise ValidationError(errors)
