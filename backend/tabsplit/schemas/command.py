import enum

from pydantic import Field

from tabsplit.schemas.assignment import Assignment
from tabsplit.schemas.base import CamelModel
from tabsplit.schemas.receipt import ReceiptItem


class CommandAction(str, enum.Enum):
    add = "add"
    remove = "remove"
    set = "set"


class AssignmentUpdate(CamelModel):
    item_name: str
    people: list[str] = []
    action: CommandAction


class CommandResult(CamelModel):
    assignments: list[AssignmentUpdate] = []
    new_people: list[str] = []
    response: str = ""


class CommandRequest(CamelModel):
    message: str = Field(min_length=1)
    items: list[ReceiptItem] = []
    people: list[str] = []
    assignments: list[Assignment] = []
