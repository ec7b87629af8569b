from types import SimpleNamespace

from storefront.services.selection import (
    can_select_option,
    selected_options_snapshot,
    toggle_option,
    validate_selection,
)


def _group(gid, name, required, min_sel, max_sel, options):
    return SimpleNamespace(
        id=gid,
        name=name,
        is_required=required,
        min_selections=min_sel,
        max_selections=max_sel,
        options=[
            SimpleNamespace(id=oid, name=f"opt-{oid}", extra_price_cents=cents, is_active=active)
            for oid, cents, active in options
        ],
    )


DONENESS = _group(1, "Ponto da Carne", True, 1, 1, [(10, 0, True), (11, 0, True), (12, 0, False)])
EXTRAS = _group(2, "Adicionais", False, 0, 5, [(20, 500, True), (21, 400, True), (22, 300, False)])
SAUCES = _group(3, "Molhos", False, 2, 3, [(30, 0, True), (31, 0, True), (32, 0, True), (33, 0, True)])


def test_required_group_without_selection_yields_one_violation():
    result = validate_selection([DONENESS], {})
    assert not result.is_valid
    assert len(result.violations) == 1
    assert result.violations[0].group_id == 1
    assert result.violations[0].group_name == "Ponto da Carne"
    assert "at least one" in result.violations[0].message


def test_one_valid_option_is_accepted():
    result = validate_selection([DONENESS], {1: [10]})
    assert result.is_valid
    assert result.violations == []


def test_two_options_in_single_select_group_is_one_at_most_violation():
    result = validate_selection([DONENESS], {1: [10, 11]})
    assert len(result.violations) == 1
    assert "at most 1" in result.violations[0].message


def test_inactive_option_does_not_count():
    result = validate_selection([DONENESS], {1: [12]})
    assert len(result.violations) == 1
    assert "at least one" in result.violations[0].message


def test_ids_from_other_groups_are_discarded():
    result = validate_selection([DONENESS], {1: [20]})
    assert not result.is_valid


def test_min_selections_violation_when_not_required():
    result = validate_selection([SAUCES], {3: [30]})
    assert len(result.violations) == 1
    assert "at least 2" in result.violations[0].message


def test_violations_accumulate_across_groups():
    result = validate_selection([DONENESS, EXTRAS, SAUCES], {2: [20], 3: [30, 31, 32, 33]})
    assert [v.group_id for v in result.violations] == [1, 3]


def test_optional_group_may_be_empty():
    assert validate_selection([EXTRAS], {}).is_valid


def test_snapshot_resolves_current_names_and_prices():
    snap = selected_options_snapshot([DONENESS, EXTRAS], {1: [10], 2: [21, 20, 22]})
    assert [(s.group_id, s.option_id, s.extra_price_cents) for s in snap] == [
        (1, 10, 0),
        (2, 21, 400),
        (2, 20, 500),
    ]
    assert snap[1].name == "opt-21"


def test_can_select_option():
    assert not can_select_option(DONENESS, [], 12)
    assert can_select_option(DONENESS, [], 10)
    assert not can_select_option(DONENESS, [10], 11)
    assert can_select_option(DONENESS, [10], 10)


def test_toggle_single_select_replaces():
    assert toggle_option(DONENESS, [10], 11) == [11]
    assert toggle_option(DONENESS, [10], 10) == []


def test_toggle_multi_select_respects_max():
    two_max = _group(4, "Frutas", False, 0, 2, [(40, 0, True), (41, 0, True), (42, 0, True)])
    picks = toggle_option(two_max, [], 40)
    picks = toggle_option(two_max, picks, 41)
    assert picks == [40, 41]
    assert toggle_option(two_max, picks, 42) == [40, 41]
    assert toggle_option(two_max, picks, 40) == [41]


def test_toggle_ignores_inactive():
    assert toggle_option(EXTRAS, [20], 22) == [20]


def test_repeated_ids_count_once():
    result = validate_selection([SAUCES], {3: [30, 30]})
    assert not result.is_valid
    assert "at least 2" in result.violations[0].message
    assert validate_selection([SAUCES], {3: [30, 31, 30]}).is_valid


def test_snapshot_drops_repeated_ids():
    snap = selected_options_snapshot([EXTRAS], {2: [20, 20, 21]})
    assert [s.option_id for s in snap] == [20, 21]
