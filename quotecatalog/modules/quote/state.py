"""Quote request state: cart, row quantity selectors, customer form, dialog.

Every transition is a pure function taking a ``QuoteState`` and returning a
new one, so the whole flow can be exercised without a request context. The
routes load the state from the Flask session, apply one transition and
store the result back.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field, replace
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, Mapping, Optional, Tuple

DIALOG_CLOSED = "closed"
DIALOG_OPEN = "open"
DIALOG_SUBMITTING = "submitting"

REQUIRED_FORM_FIELDS = ("name", "email", "phone")


class QuoteStateError(Exception):
    """A transition was requested that the current state does not allow."""

    def __init__(self, code: str, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.details = details or {}


def _to_decimal(raw: Any) -> Decimal:
    try:
        return Decimal(str(raw).strip() or "0")
    except InvalidOperation:
        return Decimal("0")


def _checked_price(raw: Any) -> str:
    """Price string as given, provided it is a finite number."""
    text = str(raw if raw is not None else "0").strip() or "0"
    try:
        value = Decimal(text)
    except InvalidOperation:
        raise ValueError(f"price is not a number: {raw!r}")
    if not value.is_finite():
        raise ValueError(f"price is not finite: {raw!r}")
    return text


@dataclass(frozen=True)
class Product:
    product_no: int
    product_name: str
    price: str
    display: str = "T"
    selling: str = "T"
    detail_image: str = ""
    product_code: str = ""
    created_date: str = ""

    @property
    def unit_price(self) -> Decimal:
        return _to_decimal(self.price)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Product":
        return cls(
            product_no=int(data["product_no"]),
            product_name=str(data.get("product_name") or ""),
            price=_checked_price(data.get("price")),
            display=str(data.get("display") or "T"),
            selling=str(data.get("selling") or "T"),
            detail_image=str(data.get("detail_image") or ""),
            product_code=str(data.get("product_code") or ""),
            created_date=str(data.get("created_date") or ""),
        )


@dataclass(frozen=True)
class Category:
    category_no: int
    category_name: str
    category_depth: int
    parent_category_no: int = 0

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Category":
        return cls(
            category_no=int(data["category_no"]),
            category_name=str(data.get("category_name") or ""),
            category_depth=int(data.get("category_depth") or 0),
            parent_category_no=int(data.get("parent_category_no") or 0),
        )


def top_level_categories(raw: Any) -> list:
    """Keep only depth-1 categories from an upstream ``categories`` list."""
    out = []
    for item in raw or []:
        try:
            cat = Category.from_dict(item)
        except (KeyError, TypeError, ValueError):
            continue
        if cat.category_depth == 1:
            out.append(cat)
    return out


@dataclass(frozen=True)
class CartItem:
    product: Product
    quantity: int

    @property
    def subtotal(self) -> Decimal:
        return self.product.unit_price * self.quantity


@dataclass(frozen=True)
class QuoteFormData:
    name: str = ""
    email: str = ""
    phone: str = ""
    message: str = ""

    def missing_fields(self) -> list:
        # Presence only; no format checks.
        return [f for f in REQUIRED_FORM_FIELDS if not getattr(self, f)]


@dataclass(frozen=True)
class QuoteState:
    cart: Tuple[CartItem, ...] = ()
    selectors: Mapping[int, int] = field(default_factory=dict)
    form: QuoteFormData = field(default_factory=QuoteFormData)
    dialog: str = DIALOG_CLOSED

    # --- derived values ---

    @property
    def item_count(self) -> int:
        return len(self.cart)

    @property
    def total_quantity(self) -> int:
        return sum(item.quantity for item in self.cart)

    @property
    def total_amount(self) -> Decimal:
        return sum((item.subtotal for item in self.cart), Decimal("0"))

    def find(self, product_no: int) -> Optional[CartItem]:
        for item in self.cart:
            if item.product.product_no == product_no:
                return item
        return None

    def selector(self, product_no: int) -> int:
        return self.selectors.get(product_no, 1)

    # --- session (de)serialization ---

    def to_session(self) -> Dict[str, Any]:
        return {
            "cart": [{"product": asdict(i.product), "quantity": i.quantity} for i in self.cart],
            # session JSON needs string keys
            "selectors": {str(k): v for k, v in self.selectors.items()},
            "form": asdict(self.form),
            "dialog": self.dialog,
        }

    @classmethod
    def from_session(cls, data: Optional[Mapping[str, Any]]) -> "QuoteState":
        if not data:
            return cls()
        cart = tuple(
            CartItem(product=Product.from_dict(raw["product"]), quantity=int(raw["quantity"]))
            for raw in data.get("cart") or []
        )
        selectors = {int(k): int(v) for k, v in (data.get("selectors") or {}).items()}
        form = QuoteFormData(**(data.get("form") or {}))
        dialog = data.get("dialog") or DIALOG_CLOSED
        return cls(cart=cart, selectors=selectors, form=form, dialog=dialog)


# --- row quantity selectors ---

def reset_selectors(state: QuoteState) -> QuoteState:
    """Every row back to 1 (a fresh result set)."""
    return replace(state, selectors={})


def adjust_selector(state: QuoteState, product_no: int, delta: int) -> QuoteState:
    selectors = dict(state.selectors)
    selectors[product_no] = max(1, state.selector(product_no) + delta)
    return replace(state, selectors=selectors)


# --- cart ---

def add_product(state: QuoteState, product: Product, quantity: Optional[int] = None) -> QuoteState:
    """Add ``quantity`` of ``product`` (defaults to the row selector).

    An already-present product has its quantity incremented; the row
    selector goes back to 1 either way.
    """
    qty = state.selector(product.product_no) if quantity is None else quantity
    if qty < 1:
        raise QuoteStateError("validation_error", "Quantity must be at least 1", {"quantity": qty})

    existing = state.find(product.product_no)
    if existing is not None:
        cart = tuple(
            replace(item, quantity=item.quantity + qty) if item is existing else item
            for item in state.cart
        )
    else:
        cart = state.cart + (CartItem(product=product, quantity=qty),)

    # unset means 1
    selectors = dict(state.selectors)
    selectors.pop(product.product_no, None)
    return replace(state, cart=cart, selectors=selectors)


def remove_product(state: QuoteState, product_no: int) -> QuoteState:
    cart = tuple(item for item in state.cart if item.product.product_no != product_no)
    if len(cart) == len(state.cart):
        return state
    return replace(state, cart=cart)


def adjust_cart_quantity(state: QuoteState, product_no: int, delta: int) -> QuoteState:
    """Change a cart line by ``delta``; never drops below 1."""
    cart = tuple(
        replace(item, quantity=max(1, item.quantity + delta))
        if item.product.product_no == product_no
        else item
        for item in state.cart
    )
    return replace(state, cart=cart)


def clear_cart(state: QuoteState) -> QuoteState:
    return replace(state, cart=())


# --- form + dialog ---

def update_form(state: QuoteState, **fields: str) -> QuoteState:
    unknown = set(fields) - {"name", "email", "phone", "message"}
    if unknown:
        raise QuoteStateError("validation_error", "Unknown form fields", {"fields": sorted(unknown)})
    clean = {k: "" if v is None else str(v) for k, v in fields.items()}
    return replace(state, form=replace(state.form, **clean))


def open_dialog(state: QuoteState) -> QuoteState:
    if not state.cart:
        raise QuoteStateError("empty_cart", "Add at least one product before requesting a quote")
    if state.dialog == DIALOG_SUBMITTING:
        return state
    return replace(state, dialog=DIALOG_OPEN)


def close_dialog(state: QuoteState) -> QuoteState:
    if state.dialog == DIALOG_SUBMITTING:
        raise QuoteStateError("submit_in_progress", "A quote request is being submitted")
    return replace(state, dialog=DIALOG_CLOSED)


def begin_submit(state: QuoteState) -> QuoteState:
    """open -> submitting. Fails without changing anything otherwise."""
    if state.dialog == DIALOG_SUBMITTING:
        raise QuoteStateError("submit_in_progress", "A quote request is being submitted")
    if state.dialog != DIALOG_OPEN:
        raise QuoteStateError("dialog_closed", "Open the quote dialog before submitting")
    missing = state.form.missing_fields()
    if missing:
        raise QuoteStateError("validation_error", "Please fill in the required fields", {"missing": missing})
    return replace(state, dialog=DIALOG_SUBMITTING)


def complete_submit(state: QuoteState) -> QuoteState:
    """submitting -> closed, with cart and form cleared."""
    if state.dialog != DIALOG_SUBMITTING:
        raise QuoteStateError("not_submitting", "No quote request is being submitted")
    return replace(state, cart=(), form=QuoteFormData(), dialog=DIALOG_CLOSED)


def abort_submit(state: QuoteState) -> QuoteState:
    """submitting -> open, cart and form kept (intake failed)."""
    if state.dialog != DIALOG_SUBMITTING:
        return state
    return replace(state, dialog=DIALOG_OPEN)
