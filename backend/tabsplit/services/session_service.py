import logging
from collections.abc import Awaitable, Callable

from tabsplit.core.config import settings
from tabsplit.schemas.assignment import TipConfiguration, TipMode, ViewState
from tabsplit.schemas.breakdown import AllocationResult, SharedReceipt
from tabsplit.schemas.command import CommandResult
from tabsplit.schemas.receipt import Receipt, ReceiptItem
from tabsplit.services.allocation_service import calculate_totals
from tabsplit.services.assignment_service import AssignmentStore
from tabsplit.utils.currency_utils import build_share_message
from tabsplit.utils.share_codec import build_share_url
from tabsplit.workers.commands import process_chat_command
from tabsplit.workers.ocr import parse_receipt_image

logger = logging.getLogger(__name__)

Extractor = Callable[[bytes, str], Awaitable[Receipt]]
Interpreter = Callable[..., Awaitable[CommandResult]]


class SplitSession:
    """
    One person's editing session: the adopted receipt, the assignment store,
    the tip configuration and view state. Totals are recomputed in full on
    every query.
    """

    def __init__(self, max_people: int | None = None, share_base_url: str | None = None):
        self.receipt: Receipt | None = None
        self.store = AssignmentStore(max_people=max_people)
        self.tip = TipConfiguration()
        self.view = ViewState()
        self.share_base_url = share_base_url or settings.share_base_url

    def adopt_receipt(self, receipt: Receipt) -> None:
        """Replace the receipt wholesale, discarding people and assignments."""
        self.receipt = receipt
        self.store.reset()
        self.store.initialize(receipt.items)
        self.view = ViewState()

        subtotal = receipt.subtotal
        rate = receipt.tip / subtotal * 100 if subtotal > 0 else 0.0
        self.tip = TipConfiguration(mode=TipMode.percentage, percentage_value=rate)
        logger.info(f"Adopted receipt with {len(receipt.items)} items, tip rate {rate:.2f}%")

    async def scan(self, image_data: bytes, mime_type: str, extractor: Extractor = parse_receipt_image) -> Receipt:
        # ExtractionError propagates before any state is touched.
        receipt = await extractor(image_data, mime_type)
        self.adopt_receipt(receipt)
        return receipt

    def add_person(self, name: str) -> bool:
        return self.store.add_person(name, self.view)

    def select_person(self, name: str | None) -> None:
        if name is None or name in self.store.people:
            self.view.selected_person = name

    def toggle(self, item_id: str, person_name: str | None = None) -> bool:
        return self.store.toggle_assignment(item_id, person_name, self.view)

    def set_tip_percentage(self, value: float) -> None:
        self.tip = self.tip.model_copy(update={"mode": TipMode.percentage, "percentage_value": value})

    def set_tip_amount(self, value: str | float) -> None:
        self.tip = self.tip.model_copy(update={"mode": TipMode.amount, "amount_value": value})

    def totals(self) -> AllocationResult:
        return calculate_totals(self.receipt, self.store.assignments, self.store.people, self.tip)

    def unassigned_items(self) -> list[ReceiptItem]:
        if self.receipt is None:
            return []
        empty = set(self.store.unassigned_item_ids())
        return [item for item in self.receipt.items if item.id in empty]

    def shared_receipt(self, person: str) -> SharedReceipt | None:
        if self.receipt is None:
            return None
        breakdown = self.totals().person_totals.get(person)
        if breakdown is None:
            return None
        return SharedReceipt(
            person=person,
            restaurant=self.receipt.restaurant_name,
            date=self.receipt.date,
            currency=self.receipt.currency or "$",
            items=breakdown.items,
            subtotal=breakdown.subtotal,
            tax=breakdown.tax,
            tip=breakdown.tip,
            total=breakdown.total,
            items_include_tax=self.receipt.items_include_tax,
        )

    def share_link(self, person: str) -> str | None:
        data = self.shared_receipt(person)
        if data is None:
            return None
        return build_share_url(self.share_base_url, data)

    def share_message(self, person: str) -> str | None:
        data = self.shared_receipt(person)
        if data is None:
            return None
        return build_share_message(data)

    async def run_command(self, message: str, interpreter: Interpreter = process_chat_command) -> CommandResult | None:
        if self.receipt is None:
            return None
        result = await interpreter(message, self.receipt.items, list(self.store.people), self.store.snapshot())
        applied = self.store.apply_command(result, self.view)
        logger.info(f"Applied {applied} of {len(result.assignments)} command update(s)")
        return result
