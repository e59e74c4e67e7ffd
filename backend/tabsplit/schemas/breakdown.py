from tabsplit.schemas.base import CamelModel


class ItemShare(CamelModel):
    name: str
    share: float
    split_count: int


class Breakdown(CamelModel):
    subtotal: float = 0.0
    tax: float = 0.0
    tip: float = 0.0
    total: float = 0.0
    items: list[ItemShare] = []


class AllocationResult(CamelModel):
    person_totals: dict[str, Breakdown] = {}
    unassigned: Breakdown | None = None
    overall_subtotal: float = 0.0
    calculated_tax: float = 0.0
    calculated_tip: float = 0.0
    calculated_total: float = 0.0


class SharedReceipt(CamelModel):
    """One person's breakdown plus the receipt details needed to show it standalone."""
    person: str
    restaurant: str | None = None
    date: str | None = None
    currency: str
    items: list[ItemShare] = []
    subtotal: float
    tax: float
    tip: float
    total: float
    items_include_tax: bool

    @property
    def tip_percentage(self) -> int | None:
        if self.subtotal > 0:
            return round(self.tip / self.subtotal * 100)
        return None


class SharedView(CamelModel):
    mode: str
    receipt: SharedReceipt | None = None
    tip_percentage: int | None = None
