from sqlalchemy import Column, Integer, String, Boolean, Float, ForeignKey, DateTime, Text, Index
from datetime import datetime
from .db import Base
from sqlalchemy.orm import relationship


class User(Base):
    __tablename__ = "users"
    id = Column(Integer, primary_key=True, index=True)
    email = Column(String, unique=True, index=True, nullable=False)
    hashed_password = Column(String, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    products = relationship("Product", back_populates="user", cascade="all, delete-orphan")
    orders = relationship("Order", back_populates="user", cascade="all, delete-orphan")

    def __repr__(self):
        return f"<User(id={self.id}, email={self.email})>"


class Product(Base):
    __tablename__ = "products"
    id = Column(Integer, primary_key=True, index=True)
    title = Column(Text, nullable=False)
    price = Column(Float, nullable=False)
    published = Column(Boolean, default=False, nullable=False)
    # Stock counter, also moved by placement writes
    quantity = Column(Integer, default=0, nullable=False)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    user = relationship("User", back_populates="products")
    placements = relationship("Placement", back_populates="product")

    __table_args__ = (
        Index('ix_products_user_id', 'user_id'),
        Index('ix_products_published_updated_at', 'published', 'updated_at'),
    )

    def __repr__(self):
        return f"<Product(id={self.id}, title={self.title}, price={self.price}, quantity={self.quantity})>"


class Order(Base):
    __tablename__ = "orders"
    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    # Derived from placements, never written by a route
    total = Column(Float, default=0, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    user = relationship("User", back_populates="orders")
    placements = relationship("Placement", back_populates="order", order_by="Placement.id")

    def __repr__(self):
        return f"<Order(id={self.id}, user_id={self.user_id}, total={self.total})>"


class Placement(Base):
    __tablename__ = "placements"
    id = Column(Integer, primary_key=True, index=True)
    order_id = Column(Integer, ForeignKey("orders.id"), nullable=False, index=True)
    product_id = Column(Integer, ForeignKey("products.id"), nullable=False, index=True)
    quantity = Column(Integer, default=0, nullable=False)

    order = relationship("Order", back_populates="placements")
    product = relationship("Product", back_populates="placements")

    def __repr__(self):
        return f"<Placement(id={self.id}, order_id={self.order_id}, product_id={self.product_id}, quantity={self.quantity})>"
