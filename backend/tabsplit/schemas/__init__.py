from tabsplit.schemas.receipt import Receipt, ReceiptItem, receipt_from_payload
from tabsplit.schemas.assignment import Assignment, TipConfiguration, TipMode, ViewState
from tabsplit.schemas.breakdown import AllocationResult, Breakdown, ItemShare, SharedReceipt, SharedView
from tabsplit.schemas.command import AssignmentUpdate, CommandAction, CommandRequest, CommandResult
from tabsplit.schemas.scan import ScanRequest

__all__ = [
    "Receipt", "ReceiptItem", "receipt_from_payload",
    "Assignment", "TipConfiguration", "TipMode", "ViewState",
    "AllocationResult", "Breakdown", "ItemShare", "SharedReceipt", "SharedView",
    "AssignmentUpdate", "CommandAction", "CommandRequest", "CommandResult",
    "ScanRequest",
]
