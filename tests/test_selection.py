from planbuilder.errors import (
    CycleDetected,
    DependencyConflict,
    InvalidIndex,
    SelectionError,
    UnknownModule,
    UnknownTemplate,
)
from planbuilder.models import Catalog
from planbuilder.selection import SelectionEngine


def test_add_cascades_prerequisites(abc_catalog: Catalog) -> None:
    engine = SelectionEngine(abc_catalog)
    assert engine.add("C") == ("A", "B", "C")


def test_add_existing_is_noop(abc_catalog: Catalog) -> None:
    engine = SelectionEngine(abc_catalog, ["A", "B"])
    assert engine.add("A") == ("A", "B")


def test_add_appends_after_existing_entries(abc_catalog: Catalog) -> None:
    engine = SelectionEngine(abc_catalog, ["A"])
    assert engine.add("C") == ("A", "B", "C")


def test_add_unknown_module(abc_catalog: Catalog) -> None:
    engine = SelectionEngine(abc_catalog, ["A"])
    try:
        engine.add("missing")
        raise AssertionError("Expected UnknownModule.")
    except UnknownModule:
        pass
    assert engine.selection == ("A",)


def test_add_closure_over_multi_level_catalog(make_catalog) -> None:
    catalog = make_catalog(
        {
            "m1": [],
            "m2": ["m1"],
            "m4": ["m1"],
            "m5": ["m4"],
            "m6": ["m4"],
            "m8": ["m2", "m5"],
            "m10": ["m4", "m5", "m6"],
            "m11": ["m10"],
            "m12": ["m11"],
        }
    )
    for module_id in catalog.modules:
        engine = SelectionEngine(catalog)
        result = engine.add(module_id)
        assert len(result) == len(set(result))
        for selected in result:
            for prerequisite in catalog.modules[selected].prerequisites:
                assert prerequisite in result
                assert result.index(prerequisite) < result.index(selected)


def test_cycle_leaves_selection_unchanged(make_catalog) -> None:
    catalog = make_catalog({"base": [], "a": ["b"], "b": ["a"]})
    engine = SelectionEngine(catalog, ["base"])
    try:
        engine.add("a")
        raise AssertionError("Expected CycleDetected.")
    except CycleDetected:
        pass
    assert engine.selection == ("base",)


def test_cycle_is_not_a_selection_error(make_catalog) -> None:
    catalog = make_catalog({"a": ["b"], "b": ["a"]})
    engine = SelectionEngine(catalog)
    try:
        engine.toggle("a")
    except SelectionError:
        raise AssertionError("CycleDetected must not be caught as SelectionError.")
    except CycleDetected:
        pass


def test_remove_blocked_by_dependent(abc_catalog: Catalog) -> None:
    engine = SelectionEngine(abc_catalog, ["A", "B", "C"])
    try:
        engine.remove("A")
        raise AssertionError("Expected DependencyConflict.")
    except DependencyConflict as exc:
        assert exc.module_id == "A"
        assert exc.blocking == ("B",)
        assert "B" in str(exc)
    assert engine.selection == ("A", "B", "C")


def test_remove_lists_all_blocking_dependents(make_catalog) -> None:
    catalog = make_catalog({"base": [], "x": ["base"], "y": ["base"]})
    engine = SelectionEngine(catalog, ["y", "base", "x"])
    try:
        engine.remove("base")
        raise AssertionError("Expected DependencyConflict.")
    except DependencyConflict as exc:
        assert exc.blocking == ("y", "x")


def test_remove_in_reverse_dependency_order(abc_catalog: Catalog) -> None:
    engine = SelectionEngine(abc_catalog, ["A", "B", "C"])
    assert engine.remove("C") == ("A", "B")
    assert engine.remove("B") == ("A",)
    assert engine.remove("A") == ()


def test_remove_preserves_relative_order(make_catalog) -> None:
    catalog = make_catalog({"a": [], "b": [], "c": [], "d": []})
    engine = SelectionEngine(catalog, ["d", "b", "a", "c"])
    assert engine.remove("b") == ("d", "a", "c")


def test_remove_unselected_module(abc_catalog: Catalog) -> None:
    engine = SelectionEngine(abc_catalog, ["A"])
    try:
        engine.remove("B")
        raise AssertionError("Expected UnknownModule.")
    except UnknownModule as exc:
        assert exc.module_id == "B"


def test_remove_rejection_is_logged(abc_catalog: Catalog, log_messages: list[str]) -> None:
    engine = SelectionEngine(abc_catalog, ["A", "B"])
    try:
        engine.remove("A")
    except DependencyConflict:
        pass
    assert any("Refused removal of A" in message for message in log_messages)


def test_toggle_dispatches(abc_catalog: Catalog) -> None:
    engine = SelectionEngine(abc_catalog)
    assert engine.toggle("B") == ("A", "B")
    assert engine.toggle("B") == ("A",)


def test_toggle_pair_restores_state_for_leaf(make_catalog) -> None:
    catalog = make_catalog({"a": [], "b": ["a"], "c": [], "leaf": ["c"]})
    engine = SelectionEngine(catalog, ["c", "a", "b"])
    before = engine.selection
    engine.toggle("leaf")
    assert engine.toggle("leaf") == before


def test_move_changes_positions_only(abc_catalog: Catalog) -> None:
    engine = SelectionEngine(abc_catalog, ["A", "B", "C"])
    assert engine.move(0, 2) == ("B", "C", "A")
    assert sorted(engine.selection) == ["A", "B", "C"]


def test_move_invalid_index_keeps_selection(abc_catalog: Catalog) -> None:
    engine = SelectionEngine(abc_catalog, ["A", "B", "C"])
    try:
        engine.move(0, 5)
        raise AssertionError("Expected InvalidIndex.")
    except InvalidIndex:
        pass
    assert engine.selection == ("A", "B", "C")


def test_move_on_empty_selection(abc_catalog: Catalog) -> None:
    engine = SelectionEngine(abc_catalog)
    try:
        engine.move(0, 0)
        raise AssertionError("Expected InvalidIndex.")
    except InvalidIndex as exc:
        assert exc.length == 0


def test_load_template_replaces_selection(abc_catalog: Catalog) -> None:
    engine = SelectionEngine(abc_catalog, ["A", "B", "C"])
    assert engine.load_template("startup-launch") == ("A", "B")


def test_load_template_skips_cascade(make_catalog) -> None:
    catalog = make_catalog({"A": [], "B": ["A"]}, templates={"partial": ["B"]})
    engine = SelectionEngine(catalog, ["A"])
    assert engine.load_template("partial") == ("B",)
    assert engine.status("B").missing == ("A",)


def test_load_template_with_repeated_module_rejected(make_catalog) -> None:
    catalog = make_catalog({"A": [], "B": []}, templates={"t": ["A", "A", "B"]})
    engine = SelectionEngine(catalog, ["B"])
    try:
        engine.load_template("t")
        raise AssertionError("Expected ValueError for repeated template module.")
    except ValueError as exc:
        assert "'t'" in str(exc)
        assert "more than once" in str(exc)
    assert engine.selection == ("B",)


def test_load_template_with_unknown_module_rejected(make_catalog) -> None:
    catalog = make_catalog({"A": []}, templates={"t": ["A", "ghost"]})
    engine = SelectionEngine(catalog)
    try:
        engine.load_template("t")
        raise AssertionError("Expected ValueError for unknown template module.")
    except ValueError as exc:
        assert "ghost" in str(exc)
    assert engine.selection == ()


def test_load_unknown_template(abc_catalog: Catalog) -> None:
    engine = SelectionEngine(abc_catalog, ["A"])
    try:
        engine.load_template("nope")
        raise AssertionError("Expected UnknownTemplate.")
    except UnknownTemplate as exc:
        assert exc.template_id == "nope"
    assert engine.selection == ("A",)


def test_status_tracks_mutations(abc_catalog: Catalog) -> None:
    engine = SelectionEngine(abc_catalog)
    assert engine.status("C").missing == ("B",)
    engine.add("B")
    assert engine.status("C").satisfied is True


def test_finalize_returns_copy(abc_catalog: Catalog) -> None:
    engine = SelectionEngine(abc_catalog, ["A", "B"])
    plan = engine.finalize()
    plan.append("C")
    assert engine.selection == ("A", "B")


def test_initial_selection_validated(abc_catalog: Catalog) -> None:
    try:
        SelectionEngine(abc_catalog, ["A", "A"])
        raise AssertionError("Expected ValueError for duplicate ids.")
    except ValueError as exc:
        assert "duplicate" in str(exc)
    try:
        SelectionEngine(abc_catalog, ["Z"])
        raise AssertionError("Expected UnknownModule.")
    except UnknownModule:
        pass


def test_container_protocol(abc_catalog: Catalog) -> None:
    engine = SelectionEngine(abc_catalog, ["A"])
    assert "A" in engine
    assert "B" not in engine
    assert len(engine) == 1
