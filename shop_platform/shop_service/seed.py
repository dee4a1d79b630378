"""
Fill the database with fake users, products and orders.

    python -m shop_platform.shop_service.seed --orders 100
"""
import argparse
import logging
import random
import secrets
from typing import Optional

from sqlalchemy.orm import Session

from .auth import hash_password
from .config import settings
from .db import SessionLocal, init_db, transaction
from .models import Order, Product, User
from .repositories import OrderRepository, ProductRepository, UserRepository
from .services.placements import add_placement
from .utils.logging_setup import configure_logging

logger = logging.getLogger(__name__)

PRODUCTS_PER_ORDER = 5
UNITS_PER_PLACEMENT = 2


def random_string(size: int = 8) -> str:
    return secrets.token_hex(size)


def generate_user(email: Optional[str] = None) -> User:
    email = email or f"{random_string()}@random.io"
    return User(email=email, hashed_password=hash_password(email))


def generate_product(user: User, **overrides) -> Product:
    values = {
        "title": random_string(),
        "price": round(random.uniform(1, 100), 2),
        "published": random.random() > 0.5,
        "quantity": random.randint(UNITS_PER_PLACEMENT, 100),
    }
    values.update(overrides)
    return Product(user=user, **values)


def create_fake_order(db: Session) -> Order:
    """One buyer, one seller, an order holding five of the seller's products."""
    users = UserRepository(db)
    products = ProductRepository(db)

    buyer = users.save(generate_user())
    seller = users.save(generate_user())
    order = OrderRepository(db).save(Order(user=buyer, total=0))
    for _ in range(PRODUCTS_PER_ORDER):
        product = products.save(generate_product(seller))
        add_placement(db, order, product.id, UNITS_PER_PLACEMENT)
    return order


def load_fake_data(db: Session, orders: int = 100) -> int:
    for i in range(orders):
        logger.debug("Inserting %s / %s", i + 1, orders)
        with transaction(db):
            create_fake_order(db)
    logger.info("Fake data loaded orders=%s", orders)
    return orders


def main(argv=None) -> None:
    parser = argparse.ArgumentParser(description="Load fake shop data")
    parser.add_argument("--orders", type=int, default=100, help="number of orders to create")
    args = parser.parse_args(argv)

    configure_logging(settings.LOG_LEVEL, settings.LOG_DIR)
    init_db()
    db = SessionLocal()
    try:
        load_fake_data(db, args.orders)
    finally:
        db.close()


if __name__ == "__main__":
    main()
