"""
Compact, URL-safe encoding of a single person's shared breakdown.

Fields are renamed to short keys, serialized as JSON, UTF-8 encoded and
base64 encoded with the URL-safe alphabet (``-`` and ``_``) and no padding.
The resulting token can be used directly as a query parameter value.

Key scheme:

    person -> p       restaurant -> r     date -> d       currency -> c
    items -> i        subtotal -> st      tax -> tx       tip -> tp
    total -> tt       items_include_tax -> it

    item.name -> n    item.share -> s     item.split_count -> x
"""
import base64
import binascii
import json
import math
from typing import Any

import httpx

from tabsplit.core.errors import ShareDecodeError
from tabsplit.schemas.breakdown import ItemShare, SharedReceipt

SHARE_PARAM = "share"

SHARE_KEYS = {
    "person": "p",
    "restaurant": "r",
    "date": "d",
    "currency": "c",
    "items": "i",
    "subtotal": "st",
    "tax": "tx",
    "tip": "tp",
    "total": "tt",
    "items_include_tax": "it",
}
ITEM_KEYS = {"name": "n", "share": "s", "split_count": "x"}

OPTIONAL_FIELDS = {"restaurant", "date"}


def encode_share(data: SharedReceipt) -> str:
    compact: dict[str, Any] = {}
    for field, key in SHARE_KEYS.items():
        value = getattr(data, field)
        if field == "items":
            value = [{ITEM_KEYS[f]: getattr(item, f) for f in ITEM_KEYS} for item in value]
        if value is None and field in OPTIONAL_FIELDS:
            continue
        compact[key] = value

    text = json.dumps(compact, ensure_ascii=False, separators=(",", ":"), allow_nan=False)
    token = base64.urlsafe_b64encode(text.encode("utf-8")).decode("ascii")
    return token.rstrip("=")


def _number(value: Any, key: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ShareDecodeError(f"Field {key!r} must be a number")
    try:
        number = float(value)
    except OverflowError as e:
        raise ShareDecodeError(f"Field {key!r} is out of range") from e
    if not math.isfinite(number):
        raise ShareDecodeError(f"Field {key!r} must be finite")
    return number


def _text(value: Any, key: str) -> str:
    if not isinstance(value, str):
        raise ShareDecodeError(f"Field {key!r} must be a string")
    return value


def _expand_item(raw: Any) -> ItemShare:
    if not isinstance(raw, dict):
        raise ShareDecodeError("Item entry must be an object")
    if set(raw) != set(ITEM_KEYS.values()):
        raise ShareDecodeError(f"Unexpected item keys: {sorted(raw)}")
    split_count = raw["x"]
    if isinstance(split_count, bool) or not isinstance(split_count, int):
        raise ShareDecodeError("Field 'x' must be an integer")
    if split_count < 1:
        raise ShareDecodeError("Field 'x' must be at least 1")
    return ItemShare(name=_text(raw["n"], "n"), share=_number(raw["s"], "s"), split_count=split_count)


def decode_share(token: str) -> SharedReceipt:
    """
    Reverse encode_share. Missing padding is tolerated. Any malformed or
    tampered token raises ShareDecodeError; no partial record is returned.
    """
    if not isinstance(token, str) or not token:
        raise ShareDecodeError("Empty share token")

    padded = token + "=" * (-len(token) % 4)
    try:
        raw = base64.b64decode(padded.encode("ascii"), altchars=b"-_", validate=True)
        compact = json.loads(raw.decode("utf-8"))
    except (UnicodeError, binascii.Error, ValueError, RecursionError) as e:
        raise ShareDecodeError(f"Share token is not valid: {e}") from e

    if not isinstance(compact, dict):
        raise ShareDecodeError("Share token does not contain an object")
    unknown = set(compact) - set(SHARE_KEYS.values())
    if unknown:
        raise ShareDecodeError(f"Unexpected keys in share token: {sorted(unknown)}")
    missing = [k for f, k in SHARE_KEYS.items() if f not in OPTIONAL_FIELDS and k not in compact]
    if missing:
        raise ShareDecodeError(f"Share token missing keys: {missing}")

    items = compact["i"]
    if not isinstance(items, list):
        raise ShareDecodeError("Field 'i' must be a list")
    include_tax = compact["it"]
    if not isinstance(include_tax, bool):
        raise ShareDecodeError("Field 'it' must be a boolean")

    optional = {}
    for field in OPTIONAL_FIELDS:
        value = compact.get(SHARE_KEYS[field])
        optional[field] = None if value is None else _text(value, SHARE_KEYS[field])

    return SharedReceipt(
        person=_text(compact["p"], "p"),
        restaurant=optional["restaurant"],
        date=optional["date"],
        currency=_text(compact["c"], "c"),
        items=[_expand_item(item) for item in items],
        subtotal=_number(compact["st"], "st"),
        tax=_number(compact["tx"], "tx"),
        tip=_number(compact["tp"], "tp"),
        total=_number(compact["tt"], "tt"),
        items_include_tax=include_tax,
    )


def try_decode_share(token: str | None) -> SharedReceipt | None:
    """Decode a token, treating any failure as "no shared receipt"."""
    if not token:
        return None
    try:
        return decode_share(token)
    except ShareDecodeError:
        return None


def build_share_url(base_url: str, data: SharedReceipt) -> str:
    """``<origin>/<path>?share=<token>``; any existing query is replaced."""
    return str(httpx.URL(base_url, params={SHARE_PARAM: encode_share(data)}))


def shared_receipt_from_url(url: str) -> SharedReceipt | None:
    return try_decode_share(httpx.URL(url).params.get(SHARE_PARAM))
