import logging
from typing import Any

from pydantic import ConfigDict, Field, ValidationError

from tabsplit.core.config import settings
from tabsplit.core.errors import ExtractionError
from tabsplit.schemas.base import CamelModel

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("items", "total", "itemsIncludeTax")


class ReceiptItem(CamelModel):
    model_config = ConfigDict(frozen=True)
    id: str
    name: str
    price: float = Field(ge=0)


class Receipt(CamelModel):
    model_config = ConfigDict(frozen=True)
    restaurant_name: str | None = None
    date: str | None = None
    items: list[ReceiptItem] = Field(min_length=1)
    tax: float = Field(default=0.0, ge=0)
    tip: float = Field(default=0.0, ge=0)
    total: float
    currency: str
    items_include_tax: bool

    @property
    def subtotal(self) -> float:
        return sum(item.price for item in self.items)

    def get_item(self, item_id: str) -> ReceiptItem | None:
        for item in self.items:
            if item.id == item_id:
                return item
        return None


def _optional_text(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def receipt_from_payload(data: Any, default_currency: str | None = None) -> Receipt:
    """
    Coerce an untyped extraction payload into a Receipt.

    Required: items[].name, items[].price, total, itemsIncludeTax.
    Defaults: tax and tip to 0, currency to the configured fallback symbol.
    Each item gets a synthetic id ``item-<index>`` in extraction order.
    Raises ExtractionError when the payload cannot form a valid Receipt.
    """
    if not isinstance(data, dict):
        raise ExtractionError(f"Expected a JSON object, got {type(data).__name__}")

    missing = [key for key in REQUIRED_FIELDS if data.get(key) is None]
    if missing:
        raise ExtractionError(f"Extraction response missing required fields: {', '.join(missing)}")

    raw_items = data["items"]
    if not isinstance(raw_items, list) or not raw_items:
        raise ExtractionError("Extraction response contains no line items")

    items = []
    for index, raw in enumerate(raw_items):
        if not isinstance(raw, dict):
            raise ExtractionError(f"Line item {index} is not an object")
        items.append({"id": f"item-{index}", "name": raw.get("name"), "price": raw.get("price")})

    currency = _optional_text(data.get("currency"))
    if currency is None:
        currency = default_currency or settings.default_currency
        logger.info(f"No currency in extraction response, using {currency}")

    try:
        return Receipt.model_validate({
            "restaurantName": _optional_text(data.get("restaurantName")),
            "date": _optional_text(data.get("date")),
            "items": items,
            "tax": data.get("tax") if data.get("tax") is not None else 0,
            "tip": data.get("tip") if data.get("tip") is not None else 0,
            "total": data["total"],
            "currency": currency,
            "itemsIncludeTax": data["itemsIncludeTax"],
        })
    except ValidationError as e:
        raise ExtractionError(f"Malformed extraction response: {e.error_count()} invalid field(s)") from e
