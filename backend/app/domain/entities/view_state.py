"""Domain entity for the operator's navigation state."""

from dataclasses import dataclass
from enum import Enum


class ViewMode(str, Enum):
    """Which screen the operator is on."""

    LIST = "list"
    FORM = "form"
    DETAIL = "detail"


@dataclass(frozen=True)
class ViewState:
    """Snapshot of the view controller.

    ``editing`` is only meaningful in FORM mode; ``selected_id`` is set in
    DETAIL mode and in FORM mode when an existing record is being edited.
    """

    mode: ViewMode = ViewMode.LIST
    editing: bool = False
    selected_id: str | None = None
    query: str = ""
