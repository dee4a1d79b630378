"""
Order endpoints. Every route requires an authenticated caller; orders are
only visible to their owner. Update and delete are not exposed.
"""
import logging

from fastapi import APIRouter, Depends, Query, Request, status
from sqlalchemy.orm import Session

from ..auth import get_current_user
from ..db import get_db, transaction
from ..errors import ForbiddenError, NotFoundError
from ..models import Order, User
from ..repositories import OrderRepository
from ..schemas import OrderCreate, OrderPage, OrderResponse
from ..services.placements import create_order as place_order
from ..utils.mailer import Mailer, get_mailer
from ..utils.pagination import paginate

router = APIRouter(prefix="/orders", tags=["orders"], dependencies=[Depends(get_current_user)])
logger = logging.getLogger(__name__)


def fetch_order(order_id: int, db: Session = Depends(get_db)) -> Order:
    order = OrderRepository(db).get(order_id)
    if not order:
        raise NotFoundError("Order", order_id)
    return order


@router.get("", response_model=OrderPage)
def list_orders(
    request: Request,
    page: int = Query(1, ge=1, description="1-based page number"),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return paginate(OrderRepository(db).for_user(user), request, page)


@router.post("", response_model=OrderResponse, status_code=status.HTTP_201_CREATED)
def create_order(
    payload: OrderCreate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    mailer: Mailer = Depends(get_mailer),
):
    with transaction(db):
        order = place_order(db, user, [(item.id, item.quantity) for item in payload.products])

    # Mail goes out only once the order is committed
    try:
        mailer.send_new_order_email(order)
    except Exception as e:
        logger.warning("Order mail failed order_id=%s user_id=%s error=%s", order.id, user.id, e)

    return order


@router.get("/{order_id}", response_model=OrderResponse)
def show_order(
    user: User = Depends(get_current_user),
    order: Order = Depends(fetch_order),
):
    if order.user_id != user.id:
        raise ForbiddenError("You can only access your own orders")
    return order
