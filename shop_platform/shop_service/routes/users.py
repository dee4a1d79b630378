"""
User signup and self-service profile endpoints.
"""
import logging

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..auth import get_current_user, hash_password
from ..db import get_db, transaction
from ..errors import ConflictError, ForbiddenError, ValidationError
from ..models import User
from ..repositories import PlacementRepository, UserRepository
from ..schemas import UserCreate, UserResponse, UserUpdate
from ..services.placements import delete_order

router = APIRouter(prefix="/users", tags=["users"])
logger = logging.getLogger(__name__)


def ensure_self(user_id: int, user: User) -> None:
    if user_id != user.id:
        raise ForbiddenError("You can only access your own account")


@router.post("", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
def create_user(payload: UserCreate, db: Session = Depends(get_db)):
    users = UserRepository(db)
    if users.get_by_email(payload.email):
        raise ValidationError({"email": "Email already exists"})

    hashed = hash_password(payload.password) if payload.password else None
    try:
        with transaction(db):
            user = users.save(User(email=payload.email, hashed_password=hashed))
    except IntegrityError as e:
        # Same email registered between the lookup and the insert
        raise ValidationError({"email": "Email already exists"}) from e

    logger.info("User created user_id=%s", user.id)
    return user


@router.get("/{user_id}", response_model=UserResponse)
def show_user(user_id: int, user: User = Depends(get_current_user)):
    ensure_self(user_id, user)
    return user


@router.put("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
def update_user(
    user_id: int,
    payload: UserUpdate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    ensure_self(user_id, user)
    users = UserRepository(db)

    if payload.email is not None and payload.email != user.email:
        if users.get_by_email(payload.email):
            raise ValidationError({"email": "Email already exists"})
        user.email = payload.email
    if payload.password:
        user.hashed_password = hash_password(payload.password)

    try:
        with transaction(db):
            users.save(user)
    except IntegrityError as e:
        raise ValidationError({"email": "Email already exists"}) from e

    logger.info("User updated user_id=%s", user.id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_user(
    user_id: int,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    ensure_self(user_id, user)

    orders = list(user.orders)
    product_ids = [product.id for product in user.products]
    try:
        with transaction(db):
            if PlacementRepository(db).count_for_products(product_ids, exclude_order_ids=[o.id for o in orders]):
                raise ConflictError("Products of this user are part of other users' orders")

            for order in orders:
                delete_order(db, order)
            db.expire(user, ["orders"])
            UserRepository(db).delete(user)
    except IntegrityError as e:
        logger.warning("User delete conflicted user_id=%s error=%s", user_id, e.orig)
        raise ConflictError("Products of this user are part of other users' orders") from e

    logger.info("User deleted user_id=%s orders=%s products=%s", user_id, len(orders), len(product_ids))
    return Response(status_code=status.HTTP_204_NO_CONTENT)
