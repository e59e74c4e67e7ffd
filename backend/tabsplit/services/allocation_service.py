import math
from collections.abc import Iterable, Mapping
from typing import Any

from tabsplit.schemas.assignment import Assignment, TipConfiguration, TipMode
from tabsplit.schemas.breakdown import AllocationResult, Breakdown, ItemShare
from tabsplit.schemas.receipt import Receipt


def parse_amount(value: Any) -> float:
    """Coerce free-text tip input to a non-negative float, 0 when unusable."""
    if value is None or isinstance(value, bool):
        return 0.0
    try:
        amount = float(value)
    except (TypeError, ValueError):
        return 0.0
    if not math.isfinite(amount) or amount < 0:
        return 0.0
    return amount


def resolve_tip_amount(tip: TipConfiguration, overall_subtotal: float) -> float:
    if tip.mode == TipMode.percentage:
        return overall_subtotal * (tip.percentage_value / 100)
    return parse_amount(tip.amount_value)


def _apportion(breakdown: Breakdown, overall_subtotal: float, tax: float, tip: float, items_include_tax: bool) -> None:
    if overall_subtotal > 0:
        proportion = breakdown.subtotal / overall_subtotal
        breakdown.tax = tax * proportion
        breakdown.tip = tip * proportion
    breakdown.total = breakdown.subtotal + (0 if items_include_tax else breakdown.tax) + breakdown.tip


def calculate_totals(
    receipt: Receipt | None,
    assignments: Iterable[Assignment] | Mapping[str, Assignment],
    people: Iterable[str],
    tip: TipConfiguration,
) -> AllocationResult:
    """
    Compute every person's breakdown plus the unassigned pool.

    Shares are exact equal divisions of each item's price; no rounding is
    applied here. Tax and tip are apportioned by each subtotal's proportion of
    the overall subtotal. When item prices already include tax, tax is still
    reported per person but left out of the totals.

    Pure: identical inputs always give bit-identical output.
    """
    if receipt is None:
        return AllocationResult()

    if isinstance(assignments, Mapping):
        assignments = assignments.values()
    people_by_item = {a.item_id: list(dict.fromkeys(a.people)) for a in assignments}

    person_totals: dict[str, Breakdown] = {p: Breakdown() for p in people}

    overall_subtotal = 0.0
    for item in receipt.items:
        overall_subtotal += item.price

    unassigned_subtotal = 0.0
    tax_amount = receipt.tax
    tip_amount = resolve_tip_amount(tip, overall_subtotal)

    for item in receipt.items:
        item_people = people_by_item.get(item.id, [])
        if not item_people:
            unassigned_subtotal += item.price
            continue

        split_count = len(item_people)
        share = item.price / split_count
        for person in item_people:
            # Names missing from the registry still carry their share.
            breakdown = person_totals.setdefault(person, Breakdown())
            breakdown.subtotal += share
            breakdown.items.append(ItemShare(name=item.name, share=share, split_count=split_count))

    for breakdown in person_totals.values():
        _apportion(breakdown, overall_subtotal, tax_amount, tip_amount, receipt.items_include_tax)

    unassigned = None
    if unassigned_subtotal > 0:
        unassigned = Breakdown(subtotal=unassigned_subtotal)
        _apportion(unassigned, overall_subtotal, tax_amount, tip_amount, receipt.items_include_tax)

    return AllocationResult(
        person_totals=person_totals,
        unassigned=unassigned,
        overall_subtotal=overall_subtotal,
        calculated_tax=tax_amount,
        calculated_tip=tip_amount,
        calculated_total=overall_subtotal + (0 if receipt.items_include_tax else tax_amount) + tip_amount,
    )
