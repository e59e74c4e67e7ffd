import base64
import json

import pytest

from tabsplit.core.errors import ShareDecodeError
from tabsplit.schemas.breakdown import ItemShare, SharedReceipt
from tabsplit.utils.share_codec import (
    build_share_url, decode_share, encode_share, shared_receipt_from_url, try_decode_share,
)


def make_shared(**overrides):
    data = dict(
        person="Alex",
        restaurant="Luigi's",
        date="March 15, 2024",
        currency="EUR",
        items=[
            ItemShare(name="Pizza", share=10 / 3, split_count=3),
            ItemShare(name="Wine", share=14.0, split_count=1),
        ],
        subtotal=10 / 3 + 14.0,
        tax=1.7333333333333334,
        tip=0.1 + 0.2,
        total=19.366666666666667,
        items_include_tax=False,
    )
    data.update(overrides)
    return SharedReceipt(**data)


def raw_token(obj):
    text = json.dumps(obj)
    return base64.urlsafe_b64encode(text.encode()).decode().rstrip("=")


@pytest.mark.parametrize("shared", [
    make_shared(),
    make_shared(person="Zoë 🍕", restaurant="東京ラーメン", currency="¥"),
    make_shared(restaurant=None, date=None),
    make_shared(items=[], subtotal=0.0, tax=0.0, tip=0.0, total=0.0),
    make_shared(items_include_tax=True, restaurant=""),
])
def test_round_trip(shared):
    decoded = decode_share(encode_share(shared))
    assert decoded.model_dump() == shared.model_dump()


def test_floats_survive_exactly():
    shared = make_shared()
    decoded = decode_share(encode_share(shared))
    assert decoded.items[0].share == 10 / 3
    assert decoded.tip == 0.1 + 0.2


@pytest.mark.parametrize("shared", [make_shared(), make_shared(person="??>>~~ÿÿ", restaurant="///+++")])
def test_token_is_url_safe(shared):
    token = encode_share(shared)
    assert not set(token) & {"+", "/", "="}


def test_uses_short_keys():
    token = encode_share(make_shared(restaurant=None))
    padded = token + "=" * (-len(token) % 4)
    compact = json.loads(base64.urlsafe_b64decode(padded))
    assert set(compact) == {"p", "d", "c", "i", "st", "tx", "tp", "tt", "it"}
    assert set(compact["i"][0]) == {"n", "s", "x"}


def test_padding_is_optional_on_decode():
    shared = make_shared()
    token = encode_share(shared)
    padded = token + "=" * (-len(token) % 4)
    assert decode_share(padded).model_dump() == shared.model_dump()


@pytest.mark.parametrize("token", [
    "",
    "!!!not-base64!!!",
    "abcde",
    raw_token([1, 2, 3]),
    raw_token({"p": "Alex"}),
    base64.urlsafe_b64encode(b"\xff\xfe\xfd").decode(),
    base64.urlsafe_b64encode(b"{not json").decode(),
])
def test_malformed_tokens_raise(token):
    with pytest.raises(ShareDecodeError):
        decode_share(token)


def test_truncated_token_raises():
    token = encode_share(make_shared())
    with pytest.raises(ShareDecodeError):
        decode_share(token[: len(token) // 2])


COMPLETE = {
    "p": "Alex", "c": "EUR", "i": [{"n": "Pizza", "s": 3.0, "x": 3}],
    "st": 3.0, "tx": 0.0, "tp": 0.0, "tt": 3.0, "it": False,
}


HUGE_NUMBER = int("9" * 400)
DEEPLY_NESTED = base64.urlsafe_b64encode(b"[" * 100000).decode().rstrip("=")


@pytest.mark.parametrize("token", [
    raw_token({**COMPLETE, "st": HUGE_NUMBER}),
    raw_token({**COMPLETE, "i": [{"n": "Pizza", "s": HUGE_NUMBER, "x": 1}]}),
    raw_token({**COMPLETE, "st": float("nan")}),
    raw_token({**COMPLETE, "tx": float("inf")}),
    raw_token({**COMPLETE, "tt": float("-inf")}),
    DEEPLY_NESTED,
])
def test_out_of_range_tokens_raise(token):
    with pytest.raises(ShareDecodeError):
        decode_share(token)
    assert try_decode_share(token) is None


def test_integer_numbers_are_accepted():
    decoded = decode_share(raw_token({**COMPLETE, "st": 3, "tt": 3}))
    assert decoded.subtotal == 3.0


@pytest.mark.parametrize("override", [
    {"st": "3.0"},
    {"tx": True},
    {"it": "false"},
    {"p": 42},
    {"i": "Pizza"},
    {"i": [{"n": "Pizza", "s": 3.0}]},
    {"i": [{"n": "Pizza", "s": 3.0, "x": 1.5}]},
    {"i": [{"n": "Pizza", "s": 3.0, "x": 0}]},
    {"i": [{"n": "Pizza", "s": 3.0, "x": -2}]},
    {"r": 7},
    {"zz": 1},
])
def test_wrongly_typed_fields_raise(override):
    with pytest.raises(ShareDecodeError):
        decode_share(raw_token({**COMPLETE, **override}))


def test_try_decode_share_treats_failure_as_absent():
    assert try_decode_share(None) is None
    assert try_decode_share("garbage!") is None
    assert try_decode_share(encode_share(make_shared())).person == "Alex"


def test_share_url_replaces_query():
    url = build_share_url("https://split.example/app?foo=1", make_shared())
    assert url.startswith("https://split.example/app?share=")
    assert "foo" not in url
    assert shared_receipt_from_url(url).person == "Alex"


def test_url_without_share_param():
    assert shared_receipt_from_url("https://split.example/app") is None
    assert shared_receipt_from_url("https://split.example/app?share=garbage") is None
