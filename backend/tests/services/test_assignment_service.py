import pytest

from tabsplit.schemas.assignment import ViewState
from tabsplit.schemas.command import AssignmentUpdate, CommandAction, CommandResult
from tabsplit.schemas.receipt import ReceiptItem
from tabsplit.services.assignment_service import AssignmentStore

ITEMS = [
    ReceiptItem(id="item-0", name="Margherita", price=12.0),
    ReceiptItem(id="item-1", name="Tiramisu", price=6.5),
]


@pytest.fixture
def store():
    s = AssignmentStore(max_people=50)
    s.initialize(ITEMS)
    return s


def test_initialize_creates_one_empty_assignment_per_item(store):
    assert list(store.assignments) == ["item-0", "item-1"]
    assert all(a.people == [] for a in store.assignments.values())


def test_initialize_replaces_previous_assignments(store):
    store.toggle_assignment("item-0", "Alex")
    store.initialize([ReceiptItem(id="item-0", name="Soup", price=4.0)])
    assert list(store.assignments) == ["item-0"]
    assert store.assignments["item-0"].people == []


def test_add_person_rejects_duplicates(store):
    assert store.add_person("Alex") is True
    assert store.add_person("Alex") is False
    assert store.people == ["Alex"]


def test_add_person_trims_and_rejects_blank(store):
    assert store.add_person("   ") is False
    assert store.add_person("  Sam ") is True
    assert store.people == ["Sam"]


def test_add_person_is_case_sensitive(store):
    store.add_person("alex")
    store.add_person("Alex")
    assert store.people == ["alex", "Alex"]


def test_registry_cap(store):
    for i in range(50):
        assert store.add_person(f"Person {i}")
    assert store.add_person("One Too Many") is False
    assert len(store.people) == 50


def test_first_added_person_becomes_selected(store):
    view = ViewState()
    store.add_person("Alex", view)
    store.add_person("Sam", view)
    assert view.selected_person == "Alex"


def test_toggle_twice_restores_membership(store):
    store.toggle_assignment("item-0", "Sam")
    before = list(store.assignments["item-0"].people)
    store.toggle_assignment("item-0", "Alex")
    store.toggle_assignment("item-0", "Alex")
    assert store.assignments["item-0"].people == before


def test_toggle_uses_selected_person(store):
    view = ViewState(selected_person="Alex")
    assert store.toggle_assignment("item-1", view=view) is True
    assert store.assignments["item-1"].people == ["Alex"]


def test_toggle_without_person_is_noop(store):
    assert store.toggle_assignment("item-0", view=ViewState()) is False
    assert store.assignments["item-0"].people == []


def test_toggle_unknown_item_is_noop(store):
    assert store.toggle_assignment("item-99", "Alex") is False
    assert "item-99" not in store.assignments


def test_remove_person_from_item(store):
    store.toggle_assignment("item-0", "Alex")
    assert store.remove_person_from_item("item-0", "Alex") is True
    assert store.remove_person_from_item("item-0", "Alex") is False
    assert store.assignments["item-0"].people == []


def test_unassigned_item_ids(store):
    store.toggle_assignment("item-1", "Alex")
    assert store.unassigned_item_ids() == ["item-0"]


def test_snapshot_is_a_copy(store):
    snapshot = store.snapshot()
    snapshot[0].people.append("Ghost")
    assert store.assignments["item-0"].people == []


def test_apply_command_set_add_remove(store):
    store.add_person("Alex")
    store.toggle_assignment("item-0", "Alex")
    result = CommandResult(
        assignments=[
            AssignmentUpdate(item_name="tiramisu", people=["Sam", "Alex"], action=CommandAction.set),
            AssignmentUpdate(item_name="Margherita", people=["Jo"], action=CommandAction.add),
            AssignmentUpdate(item_name="Margherita", people=["Alex"], action=CommandAction.remove),
        ],
        new_people=["Sam"],
        response="Done",
    )
    assert store.apply_command(result) == 3
    assert store.people == ["Alex", "Sam", "Jo"]
    assert store.assignments["item-1"].people == ["Sam", "Alex"]
    assert store.assignments["item-0"].people == ["Jo"]


def test_apply_command_skips_unknown_items(store):
    result = CommandResult(
        assignments=[AssignmentUpdate(item_name="Lasagne", people=["Alex"], action=CommandAction.add)],
    )
    assert store.apply_command(result) == 0
    assert store.people == []


def test_apply_command_remove_does_not_register_people(store):
    result = CommandResult(
        assignments=[AssignmentUpdate(item_name="Tiramisu", people=["Ghost"], action=CommandAction.remove)],
    )
    store.apply_command(result)
    assert store.people == []


def test_apply_command_respects_registry_cap():
    store = AssignmentStore(max_people=1)
    store.initialize(ITEMS)
    result = CommandResult(
        assignments=[AssignmentUpdate(item_name="Tiramisu", people=["A", "B"], action=CommandAction.set)],
    )
    store.apply_command(result)
    assert store.people == ["A"]
    assert store.assignments["item-1"].people == ["A"]
