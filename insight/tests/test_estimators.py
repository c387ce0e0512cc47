"""
Tests for the three rank estimators.
"""

from conftest import SCENARIO_GRADES, make_standing, make_student

from insight.logic.classifier import classify_choice
from insight.logic.constants import EstimateMethod
from insight.logic.estimators import (
    estimate_candidate_list,
    estimate_grade_threshold,
    read_authoritative_rank,
)


# ── Grade threshold (Bravo) ───────────────────────────────────────────────────

class TestGradeThreshold:
    def test_clear_student_inserted_by_gpa(self):
        student = make_student(gpa=5.3)
        standing = make_standing(capacity=5, grades=SCENARIO_GRADES)
        result = estimate_grade_threshold(student, standing)
        assert result.method == EstimateMethod.BRAVO
        assert result.rank == 3
        assert result.admitted is True

    def test_failed_student_starts_at_boundary(self):
        student = make_student(gpa=6.0, has_failure=True)
        standing = make_standing(capacity=5, grades=SCENARIO_GRADES, boundary=4)
        result = estimate_grade_threshold(student, standing)
        assert result.rank == 5
        assert result.admitted is True

    def test_failed_student_without_boundary_ranks_last(self):
        student = make_student(gpa=6.0, has_failure=True)
        standing = make_standing(capacity=6, grades=SCENARIO_GRADES, boundary=-1)
        result = estimate_grade_threshold(student, standing)
        assert result.rank == 7
        assert result.admitted is False

    def test_boundary_at_list_end_matches_no_boundary(self):
        student = make_student(gpa=6.0, has_failure=True)
        at_end = make_standing(grades=SCENARIO_GRADES, boundary=len(SCENARIO_GRADES))
        none = make_standing(grades=SCENARIO_GRADES, boundary=-1)
        assert estimate_grade_threshold(student, at_end) == estimate_grade_threshold(student, none)

    def test_boundary_ignored_for_clear_student(self):
        student = make_student(gpa=6.0, has_failure=False)
        standing = make_standing(grades=SCENARIO_GRADES, boundary=4)
        assert estimate_grade_threshold(student, standing).rank == 1

    def test_ties_favor_incumbent(self):
        student = make_student(gpa=5.2)
        standing = make_standing(grades=SCENARIO_GRADES)
        # behind the 5.2 already on the list
        assert estimate_grade_threshold(student, standing).rank == 4

    def test_lowest_gpa_goes_last(self):
        student = make_student(gpa=1.0)
        standing = make_standing(capacity=3, grades=SCENARIO_GRADES)
        result = estimate_grade_threshold(student, standing)
        assert result.rank == 7
        assert result.admitted is False

    def test_empty_grades_rank_first(self):
        student = make_student(gpa=3.0, has_failure=True)
        standing = make_standing(capacity=1, grades=[])
        result = estimate_grade_threshold(student, standing)
        assert result.rank == 1
        assert result.admitted is True

    def test_capacity_edge_is_admitted(self):
        student = make_student(gpa=5.3)
        standing = make_standing(capacity=3, grades=SCENARIO_GRADES)
        assert estimate_grade_threshold(student, standing).admitted is True
        standing = make_standing(capacity=2, grades=SCENARIO_GRADES)
        assert estimate_grade_threshold(student, standing).admitted is False


# ── Candidate list (Charlie) ──────────────────────────────────────────────────

class TestCandidateList:
    def test_stops_at_first_failed_candidate(self):
        student = make_student(gpa=4.5)
        standing = make_standing(candidates=[(5.9, False), (5.0, True), (4.0, False)])
        result = estimate_candidate_list(student, standing)
        assert result.method == EstimateMethod.CHARLIE
        assert result.rank == 2

    def test_failed_student_only_passes_lower_gpa(self):
        student = make_student(gpa=4.5, has_failure=True)
        standing = make_standing(candidates=[(5.9, False), (5.0, True), (4.0, False)])
        assert estimate_candidate_list(student, standing).rank == 3

    def test_equal_gpa_goes_to_student(self):
        student = make_student(gpa=5.0)
        standing = make_standing(candidates=[(5.5, False), (5.0, False)])
        assert estimate_candidate_list(student, standing).rank == 2

    def test_no_weaker_candidate_ranks_after_all(self):
        student = make_student(gpa=3.0)
        standing = make_standing(candidates=[(5.5, False), (4.0, False)])
        assert estimate_candidate_list(student, standing).rank == 3

    def test_list_order_is_not_sorted(self):
        student = make_student(gpa=5.0)
        standing = make_standing(candidates=[(4.0, False), (5.9, False)])
        assert estimate_candidate_list(student, standing).rank == 1

    def test_empty_candidates(self):
        student = make_student()
        assert estimate_candidate_list(student, make_standing()).rank == 1


# ── Authoritative rank (Alpha) ────────────────────────────────────────────────

class TestAuthoritativeRank:
    def test_reads_rank_for_ranked_choice(self):
        student = make_student(order=("A", "B"), ranks=(6, 2))
        standing = make_standing(agreement_id="A", capacity=5)
        slot = classify_choice(student.preference_order, student.authoritative_ranks, 0)
        result = read_authoritative_rank(student, standing, slot)
        assert result.method == EstimateMethod.ALPHA
        assert result.rank == 6
        assert result.admitted is False

    def test_not_recomputed_from_grades(self):
        # the allocation says rank 1 even though the grades disagree
        student = make_student(gpa=1.0, order=("A",), ranks=(1,))
        standing = make_standing(capacity=1, grades=SCENARIO_GRADES)
        slot = classify_choice(student.preference_order, student.authoritative_ranks, 0)
        result = read_authoritative_rank(student, standing, slot)
        assert result.rank == 1
        assert result.admitted is True

    def test_spare_choice_has_no_rank(self):
        student = make_student(order=("A", "B"), ranks=(1,))
        standing = make_standing(agreement_id="B")
        slot = classify_choice(student.preference_order, student.authoritative_ranks, 1)
        assert read_authoritative_rank(student, standing, slot) is None
