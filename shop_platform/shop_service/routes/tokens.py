"""
Token issuance: exchange e-mail and password for a signed access token.
"""
import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from ..auth import create_access_token, verify_password
from ..db import get_db
from ..errors import ValidationError
from ..repositories import UserRepository
from ..schemas import Token, TokenCreate

router = APIRouter(prefix="/tokens", tags=["tokens"])
logger = logging.getLogger(__name__)


@router.post("", response_model=Token, status_code=status.HTTP_200_OK)
def create_token(credentials: TokenCreate, db: Session = Depends(get_db)):
    user = UserRepository(db).get_by_email(credentials.email)
    if not user or not verify_password(credentials.password, user.hashed_password):
        logger.info("Token refused email=%s", credentials.email)
        raise ValidationError({"credentials": "Invalid credentials"})

    logger.info("Token issued user_id=%s", user.id)
    return Token(token=create_access_token(user))
