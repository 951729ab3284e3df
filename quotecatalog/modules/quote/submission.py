from __future__ import annotations

import logging
import re
import time
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Dict, Optional, Protocol

from quotecatalog.modules.quote.state import QuoteState

logger = logging.getLogger(__name__)

_TAG_RE = re.compile(r"<[^>]*>")


def strip_markup(text: str) -> str:
    """Drop anything that looks like a tag; entities are left alone."""
    return _TAG_RE.sub("", text or "")


def format_krw(amount: Decimal) -> str:
    """1234567 -> '1,234,567원' (won has no minor unit)."""
    return f"{int(amount.quantize(Decimal('1'))):,}원"


def _money(amount: Decimal) -> Any:
    # Whole amounts go out as ints, anything else keeps its decimals.
    if amount == amount.to_integral_value():
        return int(amount)
    return float(amount)


def build_snapshot(state: QuoteState, now: Optional[datetime] = None) -> Dict[str, Any]:
    """Everything a quote-intake service would need, as plain JSON data."""
    now = now or datetime.now(timezone.utc)
    return {
        "customer": {
            "name": state.form.name,
            "email": state.form.email,
            "phone": state.form.phone,
            "message": state.form.message,
        },
        "items": [
            {
                "product_no": item.product.product_no,
                "product_name": strip_markup(item.product.product_name),
                "product_code": item.product.product_code,
                "price": item.product.price,
                "quantity": item.quantity,
                "subtotal": _money(item.subtotal),
            }
            for item in state.cart
        ],
        "total_amount": _money(state.total_amount),
        "request_date": now.isoformat().replace("+00:00", "Z"),
    }


class QuoteIntake(Protocol):
    def submit(self, snapshot: Dict[str, Any]) -> str:
        """Hand the snapshot off and return the acknowledgement text."""
        ...


class SimulatedQuoteIntake:
    """Logs the quote request and acknowledges it after a short delay.

    Nothing is transmitted; swap in a real intake client to send quotes
    somewhere.
    """

    def __init__(self, delay_seconds: float = 1.0, sleep=time.sleep) -> None:
        self.delay_seconds = delay_seconds
        self._sleep = sleep

    def submit(self, snapshot: Dict[str, Any]) -> str:
        logger.info("Quote request received: %s", snapshot)
        if self.delay_seconds > 0:
            self._sleep(self.delay_seconds)

        total = format_krw(Decimal(str(snapshot["total_amount"])))
        return (
            "Your quote request has been received.\n\n"
            f"We will send the quote to {snapshot['customer']['email']}.\n\n"
            f"Items selected: {len(snapshot['items'])}\n"
            f"Total: {total}"
        )
