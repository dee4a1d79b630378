"""
Builders for test records. Each helper commits so the API sees the rows.
"""
import uuid

from shop_platform.shop_service.auth import create_access_token, hash_password
from shop_platform.shop_service.models import Order, Product, User


def make_user(db, email=None, password="Secret123!"):
    unique = uuid.uuid4().hex[:8]
    user = User(email=email or f"user_{unique}@example.com", hashed_password=hash_password(password))
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def make_product(db, user=None, title=None, price=10.0, published=True, quantity=10):
    user = user or make_user(db)
    product = Product(
        title=title or f"product {uuid.uuid4().hex[:6]}",
        price=price,
        published=published,
        quantity=quantity,
        user=user,
    )
    db.add(product)
    db.commit()
    db.refresh(product)
    return product


def make_order(db, user=None):
    user = user or make_user(db)
    order = Order(user=user, total=0)
    db.add(order)
    db.commit()
    db.refresh(order)
    return order


def auth_header_for(user):
    return {"Authorization": f"Bearer {create_access_token(user)}"}
