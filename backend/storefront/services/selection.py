"""
Option-selection rules for products with option groups.

A selection maps an option group id to the option ids the customer picked.
Validation collects one violation per offending group so the UI can show
every problem at once; it never raises.
"""
from typing import Dict, Iterable, List, Mapping, Sequence

from pydantic import BaseModel

from storefront.ids import OptionGroupId, OptionId
from storefront.schemas.cart_schema import SelectedOption

Selection = Mapping[OptionGroupId, Sequence[OptionId]]


class SelectionViolation(BaseModel):
    group_id: OptionGroupId
    group_name: str
    message: str


class SelectionResult(BaseModel):
    is_valid: bool
    violations: List[SelectionViolation] = []


def _active_ids(group) -> set:
    return {o.id for o in group.options if o.is_active}


def _valid_selected(group, selection: Selection) -> List[OptionId]:
    """Active option ids picked in `group`, repeats dropped, first-seen order."""
    active = _active_ids(group)
    picked = []
    for oid in selection.get(group.id, ()):
        if oid in active and oid not in picked:
            picked.append(oid)
    return picked


def validate_selection(groups: Iterable, selection: Selection) -> SelectionResult:
    violations = []
    for group in groups:
        n = len(_valid_selected(group, selection))
        message = None
        if group.is_required and n == 0:
            message = f'Select at least one option in "{group.name}"'
        elif n < group.min_selections:
            message = f'Select at least {group.min_selections} option(s) in "{group.name}"'
        elif n > group.max_selections:
            message = f'Select at most {group.max_selections} option(s) in "{group.name}"'
        if message:
            violations.append(
                SelectionViolation(group_id=group.id, group_name=group.name, message=message)
            )
    return SelectionResult(is_valid=not violations, violations=violations)


def selected_options_snapshot(groups: Iterable, selection: Selection) -> List[SelectedOption]:
    """Resolve selected ids against the current active options of each group."""
    result = []
    for group in groups:
        by_id: Dict[int, object] = {o.id: o for o in group.options if o.is_active}
        for oid in _valid_selected(group, selection):
            opt = by_id[oid]
            result.append(
                SelectedOption(
                    group_id=group.id,
                    option_id=opt.id,
                    name=opt.name,
                    extra_price_cents=opt.extra_price_cents,
                )
            )
    return result


def can_select_option(group, current_ids: Sequence[OptionId], option_id: OptionId) -> bool:
    if option_id not in _active_ids(group):
        return False
    if option_id in current_ids:
        # already picked, so it can always be toggled off
        return True
    return len(current_ids) < group.max_selections


def toggle_option(
    group, current_ids: Sequence[OptionId], option_id: OptionId
) -> List[OptionId]:
    """
    Apply a click on `option_id` to the current picks of one group.
    Single-select groups behave like radio buttons.
    """
    current = list(current_ids)
    if option_id not in _active_ids(group):
        return current
    if option_id in current:
        current.remove(option_id)
        return current
    if group.max_selections == 1:
        return [option_id]
    if len(current) < group.max_selections:
        current.append(option_id)
    return current
