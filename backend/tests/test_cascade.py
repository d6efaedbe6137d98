"""
Cascade tests: pushing FS successors when a predecessor's dates change.
"""

from datetime import date

import pytest

from conftest import make_task
from gantt.exceptions import TaskNotFoundError
from gantt.models import ConstraintType, DependencyEdge, DependencyMap
from gantt.services.cascade import (
    DependencyAdjustment,
    apply_adjustments,
    calculate_dependency_adjustments,
    cascade_task_change,
    dedupe_adjustments,
)


def as_pairs(adjustments):
    return [(a.task_id, a.new_start_date.isoformat()) for a in adjustments]


class TestFinishToStart:
    """Direct FS successors."""

    def test_overlapping_successor_is_pushed(self):
        """
        Scenario: P ends Sep 10, S starts Sep 9
        Expected: S moves to Sep 11
        """
        p = make_task("p", "2025-09-01", "2025-09-10")
        s = make_task("s", "2025-09-09", "2025-09-12", depends_on=["p"])
        deps = DependencyMap({("p", "s"): ConstraintType.FS})

        adjustments = calculate_dependency_adjustments(p, [p, s], deps)

        assert adjustments == [DependencyAdjustment(task_id="s", new_start_date=date(2025, 9, 11))]

    def test_satisfied_successor_is_left_alone(self):
        """
        Scenario: P ends Sep 10, S starts Sep 15 (slack)
        Expected: no adjustment
        """
        p = make_task("p", "2025-09-01", "2025-09-10")
        s = make_task("s", "2025-09-15", "2025-09-18", depends_on=["p"])

        assert calculate_dependency_adjustments(p, [p, s], DependencyMap()) == []

    def test_end_equal_to_start_still_pushes(self):
        """The comparison is inclusive: ending on the successor's start day is a violation."""
        p = make_task("p", "2025-09-01", "2025-09-10")
        s = make_task("s", "2025-09-10", "2025-09-12", depends_on=["p"])

        assert as_pairs(calculate_dependency_adjustments(p, [p, s])) == [("s", "2025-09-11")]

    def test_next_day_start_is_satisfied(self):
        p = make_task("p", "2025-09-01", "2025-09-10")
        s = make_task("s", "2025-09-11", "2025-09-12", depends_on=["p"])

        assert calculate_dependency_adjustments(p, [p, s]) == []

    def test_type_given_by_name_still_pushes(self):
        p = make_task("p", "2025-09-01", "2025-09-10")
        s = make_task("s", "2025-09-09", "2025-09-12", depends_on=["p"])
        deps = DependencyMap({("p", "s"): "FS"})

        assert as_pairs(calculate_dependency_adjustments(p, [p, s], deps)) == [("s", "2025-09-11")]

    def test_missing_edge_entry_defaults_to_fs(self):
        """depends_on alone is enough; no recorded type means FS."""
        p = make_task("p", "2025-09-01", "2025-09-10")
        s = make_task("s", "2025-09-02", "2025-09-12", depends_on=["p"])

        assert as_pairs(calculate_dependency_adjustments(p, [p, s], None)) == [("s", "2025-09-11")]

    def test_edge_list_is_accepted(self):
        p = make_task("p", "2025-09-01", "2025-09-10")
        s = make_task("s", "2025-09-02", "2025-09-12", depends_on=["p"])
        edges = [DependencyEdge(predecessor_id="p", successor_id="s", dependency_type="FS")]

        assert as_pairs(calculate_dependency_adjustments(p, [p, s], edges)) == [("s", "2025-09-11")]

    def test_end_date_of_pushed_task_is_not_recomputed(self):
        p = make_task("p", "2025-09-01", "2025-09-10")
        s = make_task("s", "2025-09-09", "2025-09-12", depends_on=["p"])

        updated = apply_adjustments([p, s], calculate_dependency_adjustments(p, [p, s]))

        assert updated[1].start_date == date(2025, 9, 11)
        assert updated[1].end_date == date(2025, 9, 12)


class TestNonFinishToStart:
    """SS, FF and SF edges are drawn but never cascade."""

    @pytest.mark.parametrize("dependency_type", ["SS", "FF", "SF"])
    def test_no_adjustment_despite_overlap(self, dependency_type):
        p = make_task("p", "2025-09-01", "2025-09-10")
        s = make_task("s", "2025-09-09", "2025-09-12", depends_on=["p"])
        deps = DependencyMap()
        deps.set("p", "s", dependency_type)

        assert calculate_dependency_adjustments(p, [p, s], deps) == []

    def test_chain_stops_at_non_fs_edge(self):
        """
        Scenario: P -FS-> S1 -SS-> S2, all overlapping
        Expected: only S1 moves
        """
        p = make_task("p", "2025-09-01", "2025-09-10")
        s1 = make_task("s1", "2025-09-09", "2025-09-12", depends_on=["p"])
        s2 = make_task("s2", "2025-09-10", "2025-09-14", depends_on=["s1"])
        deps = DependencyMap({("s1", "s2"): ConstraintType.SS})

        assert as_pairs(calculate_dependency_adjustments(p, [p, s1, s2], deps)) == [("s1", "2025-09-11")]


class TestTransitivePropagation:
    """Adjustments cascade through chains and diamonds."""

    def test_chain_pushes_every_violated_link(self):
        """
        Scenario: P (ends Sep 10) -> S1 (Sep 9-12) -> S2 (Sep 12-14)
        Expected: S1 -> Sep 11, then S2 -> Sep 13 from S1's cascaded state
        """
        p = make_task("p", "2025-09-01", "2025-09-10")
        s1 = make_task("s1", "2025-09-09", "2025-09-12", depends_on=["p"])
        s2 = make_task("s2", "2025-09-12", "2025-09-14", depends_on=["s1"])

        adjustments = calculate_dependency_adjustments(p, [p, s1, s2])

        assert as_pairs(adjustments) == [("s1", "2025-09-11"), ("s2", "2025-09-13")]

    def test_direct_adjustment_precedes_its_cascade(self):
        """Depth-first: each successor is followed by what it pushes, before the next sibling."""
        p = make_task("p", "2025-09-01", "2025-09-10")
        a = make_task("a", "2025-09-05", "2025-09-12", depends_on=["p"])
        a_child = make_task("a_child", "2025-09-12", "2025-09-13", depends_on=["a"])
        b = make_task("b", "2025-09-05", "2025-09-06", depends_on=["p"])

        adjustments = calculate_dependency_adjustments(p, [p, a, a_child, b])

        assert [x.task_id for x in adjustments] == ["a", "a_child", "b"]

    def test_diamond_reaches_shared_descendant_on_both_branches(self):
        """
        Scenario:
              A (ends Sep 10)
             / \\
            B   C     (B ends Sep 12, C ends Sep 15)
             \\ /
              D
        Expected: D is adjusted once per branch; the last entry wins.
        """
        a = make_task("a", "2025-09-01", "2025-09-10")
        b = make_task("b", "2025-09-05", "2025-09-12", depends_on=["a"])
        c = make_task("c", "2025-09-05", "2025-09-15", depends_on=["a"])
        d = make_task("d", "2025-09-08", "2025-09-20", depends_on=["b", "c"])

        adjustments = calculate_dependency_adjustments(a, [a, b, c, d])

        assert as_pairs(adjustments) == [
            ("b", "2025-09-11"),
            ("d", "2025-09-13"),
            ("c", "2025-09-11"),
            ("d", "2025-09-16"),
        ]
        assert as_pairs(dedupe_adjustments(adjustments)) == [
            ("b", "2025-09-11"),
            ("d", "2025-09-16"),
            ("c", "2025-09-11"),
        ]
        updated = {t.id: t for t in apply_adjustments([a, b, c, d], adjustments)}
        assert updated["d"].start_date == date(2025, 9, 16)


class TestCycles:
    """Cyclic graphs terminate without raising."""

    def test_two_task_cycle_from_either_side(self):
        p = make_task("p", "2025-09-01", "2025-09-10", depends_on=["s"])
        s = make_task("s", "2025-09-05", "2025-09-12", depends_on=["p"])

        from_p = calculate_dependency_adjustments(p, [p, s])
        from_s = calculate_dependency_adjustments(s, [p, s])

        assert as_pairs(from_p) == [("s", "2025-09-11"), ("p", "2025-09-13")]
        assert as_pairs(from_s) == [("p", "2025-09-13"), ("s", "2025-09-11")]

    def test_self_dependency_terminates(self):
        p = make_task("p", "2025-09-01", "2025-09-10", depends_on=["p"])

        assert as_pairs(calculate_dependency_adjustments(p, [p])) == [("p", "2025-09-11")]

    def test_longer_cycle_is_bounded(self):
        tasks = [
            make_task("a", "2025-09-01", "2025-09-10", depends_on=["c"]),
            make_task("b", "2025-09-01", "2025-09-10", depends_on=["a"]),
            make_task("c", "2025-09-01", "2025-09-10", depends_on=["b"]),
        ]

        adjustments = calculate_dependency_adjustments(tasks[0], tasks)

        assert [a.task_id for a in adjustments] == ["b", "c", "a"]

    def test_already_processed_task_returns_nothing(self):
        p = make_task("p", "2025-09-01", "2025-09-10")
        s = make_task("s", "2025-09-09", "2025-09-12", depends_on=["p"])

        assert calculate_dependency_adjustments(p, [p, s], processed=frozenset({"p"})) == []


class TestIdempotence:

    def test_rerun_after_applying_is_empty(self):
        p = make_task("p", "2025-09-01", "2025-09-10")
        s1 = make_task("s1", "2025-09-09", "2025-09-12", depends_on=["p"])
        s2 = make_task("s2", "2025-09-12", "2025-09-14", depends_on=["s1"])

        settled = apply_adjustments([p, s1, s2], calculate_dependency_adjustments(p, [p, s1, s2]))

        assert calculate_dependency_adjustments(settled[0], settled) == []


class TestMissingDates:
    """Undated tasks are skipped, not fatal."""

    def test_changed_task_without_end_date(self):
        p = make_task("p", "2025-09-01", None)
        s = make_task("s", "2025-09-01", "2025-09-12", depends_on=["p"])

        assert calculate_dependency_adjustments(p, [p, s]) == []

    def test_undated_successor_is_skipped_but_siblings_still_move(self):
        p = make_task("p", "2025-09-01", "2025-09-10")
        undated = make_task("undated", None, "2025-09-12", depends_on=["p"])
        s = make_task("s", "2025-09-09", "2025-09-12", depends_on=["p"])

        assert as_pairs(calculate_dependency_adjustments(p, [p, undated, s])) == [("s", "2025-09-11")]


class TestCascadeTaskChange:
    """Direct edit plus cascade, as the request layer uses it."""

    def test_edit_is_applied_before_cascading(self):
        p = make_task("p", "2025-09-01", "2025-09-05")
        s = make_task("s", "2025-09-06", "2025-09-08", depends_on=["p"])
        untouched = make_task("x", "2025-09-01", "2025-09-02")

        result = cascade_task_change("p", "2025-09-03", "2025-09-07", [p, s, untouched])

        assert result.task.end_date == date(2025, 9, 7)
        assert as_pairs(result.final_adjustments) == [("s", "2025-09-08")]
        by_id = {t.id: t for t in result.tasks}
        assert by_id["p"].start_date == date(2025, 9, 3)
        assert by_id["s"].start_date == date(2025, 9, 8)
        assert by_id["x"] == untouched

    def test_unknown_task_raises(self):
        with pytest.raises(TaskNotFoundError):
            cascade_task_change("missing", "2025-09-01", "2025-09-02", [])

    def test_apply_ignores_unknown_ids(self):
        p = make_task("p", "2025-09-01", "2025-09-05")

        updated = apply_adjustments([p], [DependencyAdjustment("ghost", date(2025, 9, 9))])

        assert updated == [p]


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
