from __future__ import annotations

import logging

from flask import Blueprint, current_app, session

from quotecatalog.app.common.errors import abort_json
from quotecatalog.app.common.validation import get_int, get_json, require_fields
from quotecatalog.modules.quote import state as qs
from quotecatalog.modules.quote.submission import build_snapshot, strip_markup

logger = logging.getLogger(__name__)

bp = Blueprint("quote", __name__)

SESSION_KEY = "quote"

# Which status goes with which rejected transition.
_STATE_ERROR_STATUS = {
    "validation_error": 400,
    "empty_cart": 409,
    "dialog_closed": 409,
    "submit_in_progress": 409,
    "not_submitting": 409,
}


def _load() -> qs.QuoteState:
    return qs.QuoteState.from_session(session.get(SESSION_KEY))


def _save(state: qs.QuoteState) -> None:
    session[SESSION_KEY] = state.to_session()


def _apply(fn, *args, **kwargs) -> qs.QuoteState:
    """Run one transition against the session state and store the result."""
    try:
        new_state = fn(_load(), *args, **kwargs)
    except qs.QuoteStateError as err:
        abort_json(_STATE_ERROR_STATUS.get(err.code, 400), err.code, err.message, err.details)
    _save(new_state)
    return new_state


def _quote_response(state: qs.QuoteState):
    return {
        "items": [
            {
                "product_no": i.product.product_no,
                "product_name": i.product.product_name,
                "product_name_text": strip_markup(i.product.product_name),
                "product_code": i.product.product_code,
                "detail_image": i.product.detail_image,
                "price": i.product.price,
                "quantity": i.quantity,
                "subtotal": str(i.subtotal),
            }
            for i in state.cart
        ],
        "selectors": {str(k): v for k, v in state.selectors.items()},
        "summary": {
            "item_count": state.item_count,
            "total_quantity": state.total_quantity,
            "total_amount": str(state.total_amount),
        },
        "form": {
            "name": state.form.name,
            "email": state.form.email,
            "phone": state.form.phone,
            "message": state.form.message,
        },
        "dialog": state.dialog,
    }


@bp.get("/quote")
def get_quote():
    return _quote_response(_load()), 200


@bp.post("/quote/selectors/<int:product_no>")
def adjust_selector(product_no: int):
    """Row +/- buttons next to a product (never below 1)."""
    data = get_json()
    require_fields(data, ["delta"])
    state = _apply(qs.adjust_selector, product_no, get_int(data, "delta"))
    return {"product_no": product_no, "quantity": state.selector(product_no)}, 200


@bp.delete("/quote/selectors")
def reset_selectors():
    _apply(qs.reset_selectors)
    return {"message": "reset"}, 200


@bp.post("/quote/items")
def add_item():
    """Add a product row to the quote.

    Body: ``{"product": {...upstream product...}, "quantity": n}``; without
    ``quantity`` the row selector value is used.
    """
    data = get_json()
    require_fields(data, ["product"])
    raw = data["product"]
    if not isinstance(raw, dict):
        abort_json(400, "validation_error", "product must be an object")
    try:
        product = qs.Product.from_dict(raw)
    except (KeyError, TypeError, ValueError):
        abort_json(400, "validation_error", "product needs a product_no and a numeric price")

    quantity = get_int(data, "quantity") if data.get("quantity") is not None else None
    state = _apply(qs.add_product, product, quantity)
    return _quote_response(state), 201


@bp.patch("/quote/items/<int:product_no>")
def adjust_item(product_no: int):
    data = get_json()
    require_fields(data, ["delta"])
    state = _apply(qs.adjust_cart_quantity, product_no, get_int(data, "delta"))
    return _quote_response(state), 200


@bp.delete("/quote/items/<int:product_no>")
def remove_item(product_no: int):
    state = _apply(qs.remove_product, product_no)
    return _quote_response(state), 200


@bp.delete("/quote/items")
def clear_items():
    state = _apply(qs.clear_cart)
    return _quote_response(state), 200


@bp.post("/quote/dialog")
def open_dialog():
    state = _apply(qs.open_dialog)
    return _quote_response(state), 200


@bp.delete("/quote/dialog")
def close_dialog():
    state = _apply(qs.close_dialog)
    return _quote_response(state), 200


@bp.post("/quote/submit")
def submit_quote():
    """Validate the customer form, hand the snapshot to the intake, reset.

    A validation failure leaves cart, form and dialog exactly as they were.
    """
    data = get_json()
    fields = {k: data.get(k) for k in ("name", "email", "phone", "message") if k in data}

    current = _load()
    try:
        filled = qs.update_form(current, **fields)
        submitting = qs.begin_submit(filled)
    except qs.QuoteStateError as err:
        abort_json(_STATE_ERROR_STATUS.get(err.code, 400), err.code, err.message, err.details)

    _save(submitting)
    intake = current_app.extensions["quote_intake"]
    # Any failure from here on must leave the dialog open again.
    try:
        snapshot = build_snapshot(submitting)
        message = intake.submit(snapshot)
    except Exception:
        _save(qs.abort_submit(submitting))
        raise

    _save(qs.complete_submit(submitting))
    return {"message": message, "snapshot": snapshot}, 200
