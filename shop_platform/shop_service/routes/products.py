"""
Product catalogue endpoints: public search and show, owner-only writes.
"""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request, Response, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..auth import get_current_user
from ..db import get_db, transaction
from ..errors import ConflictError, ForbiddenError, NotFoundError
from ..models import Product, User
from ..repositories import PlacementRepository, ProductRepository
from ..schemas import ProductCreate, ProductPage, ProductResponse, ProductUpdate
from ..utils.pagination import paginate

router = APIRouter(prefix="/products", tags=["products"])
logger = logging.getLogger(__name__)


def fetch_product(product_id: int, db: Session = Depends(get_db)) -> Product:
    product = ProductRepository(db).get(product_id)
    if not product:
        raise NotFoundError("Product", product_id)
    return product


def ensure_owner(user: User, product: Product) -> None:
    if product.user_id != user.id:
        raise ForbiddenError("You can only edit your own products")


@router.get("", response_model=ProductPage)
def list_products(
    request: Request,
    title: Optional[str] = Query(None, description="Case-insensitive part of the title"),
    price_min: Optional[float] = Query(None, alias="priceMin", description="Inclusive lower price bound"),
    price_max: Optional[float] = Query(None, alias="priceMax", description="Inclusive upper price bound"),
    page: int = Query(1, ge=1, description="1-based page number"),
    db: Session = Depends(get_db),
):
    query = ProductRepository(db).search(title=title, price_min=price_min, price_max=price_max)
    return paginate(query, request, page)


@router.post("", response_model=ProductResponse, status_code=status.HTTP_201_CREATED)
def create_product(
    payload: ProductCreate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    with transaction(db):
        product = ProductRepository(db).save(
            Product(
                title=payload.title,
                price=payload.price,
                published=payload.published,
                quantity=payload.quantity,
                user=user,
            )
        )

    logger.info("Product created product_id=%s user_id=%s", product.id, user.id)
    return product


@router.get("/{product_id}", response_model=ProductResponse)
def show_product(product: Product = Depends(fetch_product)):
    return product


@router.put("/{product_id}", status_code=status.HTTP_204_NO_CONTENT)
def update_product(
    payload: ProductUpdate,
    user: User = Depends(get_current_user),
    product: Product = Depends(fetch_product),
    db: Session = Depends(get_db),
):
    ensure_owner(user, product)

    for field, value in payload.model_dump(exclude_unset=True, exclude_none=True).items():
        setattr(product, field, value)

    with transaction(db):
        ProductRepository(db).save(product)

    logger.info("Product updated product_id=%s user_id=%s", product.id, user.id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete("/{product_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_product(
    user: User = Depends(get_current_user),
    product: Product = Depends(fetch_product),
    db: Session = Depends(get_db),
):
    ensure_owner(user, product)

    product_id, user_id = product.id, user.id
    try:
        with transaction(db):
            if PlacementRepository(db).count_for_products([product_id]):
                raise ConflictError("Product is part of existing orders")
            ProductRepository(db).delete(product)
    except IntegrityError as e:
        # An order took the product after the count above
        logger.warning("Product delete conflicted product_id=%s error=%s", product_id, e.orig)
        raise ConflictError("Product is part of existing orders") from e

    logger.info("Product deleted product_id=%s user_id=%s", product_id, user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
