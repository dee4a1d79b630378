"""
Outgoing mail for order notifications.

Delivery is logged rather than sent over SMTP; swap the instance held on
app.state (or override get_mailer) to deliver for real.
"""
import logging
from typing import List

from fastapi import Request

from ..models import Order

logger = logging.getLogger(__name__)


class Mailer:
    def __init__(self, sender: str):
        self.sender = sender
        self.closed = False

    def send_email(self, to: str, subject: str, text: str) -> None:
        if self.closed:
            raise RuntimeError("Mailer is closed")
        logger.info("[Mailer] Send email from=%s to=%s subject=%s\n%s", self.sender, to, subject, text)

    def send_new_order_email(self, order: Order) -> None:
        lines: List[str] = [f"- {placement.product.title} x{placement.quantity}" for placement in order.placements]
        text = "Details of products:\n" + "\n".join(lines) + f"\nTOTAL:{order.total:.2f}€"
        self.send_email(to=order.user.email, subject="Thanks for order", text=text)

    def close(self) -> None:
        self.closed = True


def get_mailer(request: Request) -> Mailer:
    """Dependency returning the mailer created by the application lifespan."""
    return request.app.state.mailer
