"""
Per-entity data access.

Repositories validate before they write and only flush; committing is
left to the caller's unit of work (see db.transaction).
"""
from typing import Generic, List, Optional, Type, TypeVar

from sqlalchemy import func
from sqlalchemy.orm import Query, Session, selectinload

from .models import Order, Placement, Product, User
from .validation import validate

T = TypeVar("T")


class Repository(Generic[T]):
    model: Type[T]

    def __init__(self, db: Session):
        self.db = db

    def get(self, entity_id: int) -> Optional[T]:
        return self.db.get(self.model, entity_id)

    def save(self, entity: T) -> T:
        validate(entity)
        self.db.add(entity)
        self.db.flush()
        return entity

    def delete(self, entity: T) -> None:
        self.db.delete(entity)
        self.db.flush()


class UserRepository(Repository[User]):
    model = User

    def get_by_email(self, email: str) -> Optional[User]:
        return self.db.query(User).filter(User.email == email).first()

    def get_with_products(self, user_id: int) -> Optional[User]:
        return (
            self.db.query(User)
            .options(selectinload(User.products))
            .filter(User.id == user_id)
            .first()
        )


class ProductRepository(Repository[Product]):
    model = Product

    def search(
        self,
        title: Optional[str] = None,
        price_min: Optional[float] = None,
        price_max: Optional[float] = None,
    ) -> Query:
        """
        Build a query over published products.

        Args:
            title: case-insensitive substring of the title
            price_min: inclusive lower price bound
            price_max: inclusive upper price bound

        Returns:
            Query ordered by most recently updated first; unset filters are skipped
        """
        query = self.db.query(Product).options(selectinload(Product.user)).filter(Product.published.is_(True))

        if title is not None:
            query = query.filter(Product.title.icontains(title, autoescape=True))

        if price_min is not None:
            query = query.filter(Product.price >= price_min)

        if price_max is not None:
            query = query.filter(Product.price <= price_max)

        return query.order_by(Product.updated_at.desc(), Product.id.desc())

    def get_for_update(self, product_id: int) -> Optional[Product]:
        """Load a product and lock its row on backends that support FOR UPDATE."""
        return (
            self.db.query(Product)
            .filter(Product.id == product_id)
            .with_for_update()
            .populate_existing()
            .first()
        )


class OrderRepository(Repository[Order]):
    model = Order

    def for_user(self, user: User) -> Query:
        return (
            self.db.query(Order)
            .options(selectinload(Order.placements))
            .filter(Order.user_id == user.id)
            .order_by(Order.created_at.desc(), Order.id.desc())
        )


class PlacementRepository(Repository[Placement]):
    model = Placement

    def for_order(self, order: Order) -> List[Placement]:
        return self.db.query(Placement).filter(Placement.order_id == order.id).order_by(Placement.id).all()

    def count_for_products(self, product_ids: List[int], exclude_order_ids: Optional[List[int]] = None) -> int:
        if not product_ids:
            return 0
        query = self.db.query(func.count(Placement.id)).filter(Placement.product_id.in_(product_ids))
        if exclude_order_ids:
            query = query.filter(Placement.order_id.notin_(exclude_order_ids))
        return query.scalar() or 0
