import logging
from datetime import datetime, timezone
from decimal import Decimal

from quotecatalog.modules.quote import state as qs
from quotecatalog.modules.quote.submission import (
    SimulatedQuoteIntake,
    build_snapshot,
    format_krw,
    strip_markup,
)


def quote_ready():
    s = qs.add_product(
        qs.QuoteState(),
        qs.Product(product_no=1, product_name='<span style="color:red">Red</span> Pen', price="1000", product_code="PEN"),
        2,
    )
    s = qs.add_product(s, qs.Product(product_no=2, product_name="Ink", price="2500", product_code="INK"), 1)
    return qs.update_form(s, name="Kim", email="kim@example.com", phone="010", message="")


def test_strip_markup():
    assert strip_markup("<b>Bold</b> &amp; <i>it</i>") == "Bold &amp; it"
    assert strip_markup("") == ""
    assert strip_markup(None) == ""


def test_format_krw():
    assert format_krw(Decimal("4500")) == "4,500원"
    assert format_krw(Decimal("1234567.00")) == "1,234,567원"


def test_build_snapshot():
    now = datetime(2024, 5, 1, 12, 30, tzinfo=timezone.utc)
    snap = build_snapshot(quote_ready(), now=now)

    assert snap["customer"] == {"name": "Kim", "email": "kim@example.com", "phone": "010", "message": ""}
    assert snap["items"][0] == {
        "product_no": 1,
        "product_name": "Red Pen",
        "product_code": "PEN",
        "price": "1000",
        "quantity": 2,
        "subtotal": 2000,
    }
    assert snap["total_amount"] == 4500
    assert snap["request_date"] == "2024-05-01T12:30:00Z"


def test_simulated_intake_logs_and_acknowledges(caplog):
    waits = []
    intake = SimulatedQuoteIntake(delay_seconds=1.0, sleep=waits.append)
    snap = build_snapshot(quote_ready())

    with caplog.at_level(logging.INFO, logger="quotecatalog.modules.quote.submission"):
        message = intake.submit(snap)

    assert waits == [1.0]
    assert "kim@example.com" in message
    assert "Items selected: 2" in message
    assert "4,500원" in message
    assert "Quote request received" in caplog.text


def test_simulated_intake_without_delay():
    waits = []
    SimulatedQuoteIntake(delay_seconds=0, sleep=waits.append).submit(build_snapshot(quote_ready()))
    assert waits == []
