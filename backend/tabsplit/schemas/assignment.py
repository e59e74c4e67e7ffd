import enum

from tabsplit.schemas.base import CamelModel


class Assignment(CamelModel):
    item_id: str
    people: list[str] = []


class TipMode(str, enum.Enum):
    percentage = "percentage"
    amount = "amount"


class TipConfiguration(CamelModel):
    mode: TipMode = TipMode.percentage
    percentage_value: float = 0.0
    # Raw text from the custom amount field; coerced when the tip is resolved.
    amount_value: str | float = ""


class ViewState(CamelModel):
    """Ephemeral UI state. Has no bearing on the computed split."""
    selected_person: str | None = None
    expanded_person: str | None = None
    tip_panel_open: bool = False
