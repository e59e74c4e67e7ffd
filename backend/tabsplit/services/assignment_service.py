import logging
from collections.abc import Iterable

from tabsplit.core.config import settings
from tabsplit.schemas.assignment import Assignment, ViewState
from tabsplit.schemas.command import CommandAction, CommandResult
from tabsplit.schemas.receipt import ReceiptItem

logger = logging.getLogger(__name__)


class AssignmentStore:
    """
    Holds the item -> people mapping and the person registry.

    Exactly one Assignment exists per receipt item. Invalid operations
    (unknown item, duplicate or blank name, full registry) are no-ops; every
    mutator returns whether anything changed.
    """

    def __init__(self, max_people: int | None = None):
        self.max_people = max_people if max_people is not None else settings.max_people
        self.people: list[str] = []
        self.assignments: dict[str, Assignment] = {}
        self._item_names: dict[str, str] = {}

    def initialize(self, items: Iterable[ReceiptItem]) -> None:
        """Replace all assignments with one empty assignment per item."""
        items = list(items)
        self.assignments = {item.id: Assignment(item_id=item.id) for item in items}
        self._item_names = {item.id: item.name for item in items}

    def reset(self) -> None:
        self.people = []
        self.assignments = {}
        self._item_names = {}

    def add_person(self, name: str, view: ViewState | None = None) -> bool:
        name = (name or "").strip()
        if not name or name in self.people or len(self.people) >= self.max_people:
            return False
        self.people.append(name)
        if view is not None and view.selected_person is None:
            view.selected_person = name
        return True

    def toggle_assignment(
        self,
        item_id: str,
        person_name: str | None = None,
        view: ViewState | None = None,
    ) -> bool:
        """Add the person to the item if absent, remove them if present.

        Without an explicit name the view's selected person is used.
        """
        if person_name is None and view is not None:
            person_name = view.selected_person
        assignment = self.assignments.get(item_id)
        if assignment is None or not person_name:
            return False

        if person_name in assignment.people:
            assignment.people.remove(person_name)
        else:
            assignment.people.append(person_name)
        return True

    def remove_person_from_item(self, item_id: str, person_name: str) -> bool:
        assignment = self.assignments.get(item_id)
        if assignment is None or person_name not in assignment.people:
            return False
        assignment.people.remove(person_name)
        return True

    def set_people(self, item_id: str, people: Iterable[str]) -> bool:
        assignment = self.assignments.get(item_id)
        if assignment is None:
            return False
        assignment.people = [p for p in dict.fromkeys(people) if p]
        return True

    def find_item_id(self, item_name: str) -> str | None:
        """Exact name match first, then case-insensitive. No fuzzy matching."""
        for item_id, name in self._item_names.items():
            if name == item_name:
                return item_id
        lowered = item_name.strip().casefold()
        for item_id, name in self._item_names.items():
            if name.strip().casefold() == lowered:
                return item_id
        return None

    def apply_command(self, result: CommandResult, view: ViewState | None = None) -> int:
        """
        Apply an interpreted command. ``set`` replaces an item's people,
        ``add``/``remove`` are set union/difference. Returns the number of
        updates applied.
        """
        for name in result.new_people:
            self.add_person(name, view)

        applied = 0
        for update in result.assignments:
            item_id = self.find_item_id(update.item_name)
            if item_id is None:
                logger.warning(f"Command referenced unknown item {update.item_name!r}, skipping")
                continue

            people = [p.strip() for p in update.people if p and p.strip()]
            assignment = self.assignments[item_id]

            if update.action == CommandAction.remove:
                self.set_people(item_id, [p for p in assignment.people if p not in people])
            else:
                for person in people:
                    self.add_person(person, view)
                # A full registry leaves some names unregistered; they are dropped.
                people = [p for p in people if p in self.people]
                if update.action == CommandAction.set:
                    self.set_people(item_id, people)
                else:
                    self.set_people(item_id, assignment.people + people)
            applied += 1

        return applied

    def snapshot(self) -> list[Assignment]:
        return [a.model_copy(deep=True) for a in self.assignments.values()]

    def unassigned_item_ids(self) -> list[str]:
        return [item_id for item_id, a in self.assignments.items() if not a.people]
