"""Tests for the eligibility rules."""

from decimal import Decimal

from app.services.eligibility_service import (
    ALREADY_APPLIED,
    ALREADY_PLACED,
    BRANCH_NOT_ELIGIBLE,
    AcademicSnapshot,
    DriveConstraints,
    check_backlogs,
    check_branch,
    check_cgpa,
    evaluate,
)


def snapshot(cgpa=8.0, backlogs=0, branch="CS"):
    return AcademicSnapshot(cgpa=cgpa, active_backlogs=backlogs, branch=branch)


class TestCgpaRule:
    def test_below_minimum_reports_both_values(self):
        reason = check_cgpa(snapshot(cgpa=5.5), DriveConstraints(min_cgpa=6.0))
        assert reason == "Minimum CGPA requirement is 6.0. Your CGPA: 5.5"

    def test_equal_to_minimum_passes(self):
        assert check_cgpa(snapshot(cgpa=6.0), DriveConstraints(min_cgpa=6.0)) is None

    def test_no_minimum_skips_rule(self):
        assert check_cgpa(snapshot(cgpa=1.0), DriveConstraints(min_cgpa=None)) is None
        assert check_cgpa(snapshot(cgpa=1.0), DriveConstraints(min_cgpa=0)) is None

    def test_non_numeric_minimum_skips_rule(self):
        assert check_cgpa(snapshot(cgpa=1.0), DriveConstraints(min_cgpa="high")) is None

    def test_missing_cgpa_counts_as_zero(self):
        reason = check_cgpa(snapshot(cgpa=None), DriveConstraints(min_cgpa=6.0))
        assert reason == "Minimum CGPA requirement is 6.0. Your CGPA: not recorded"

    def test_decimal_values(self):
        reason = check_cgpa(snapshot(cgpa=Decimal("5.50")), DriveConstraints(min_cgpa=Decimal("6.00")))
        assert reason == "Minimum CGPA requirement is 6.0. Your CGPA: 5.5"


class TestBacklogRule:
    def test_above_maximum(self):
        reason = check_backlogs(snapshot(backlogs=3), DriveConstraints(max_backlogs=1))
        assert reason == "Maximum allowed backlogs: 1. Your active backlogs: 3"

    def test_equal_to_maximum_passes(self):
        assert check_backlogs(snapshot(backlogs=1), DriveConstraints(max_backlogs=1)) is None

    def test_zero_maximum_is_enforced(self):
        assert check_backlogs(snapshot(backlogs=1), DriveConstraints(max_backlogs=0)) is not None

    def test_null_maximum_is_unlimited(self):
        assert check_backlogs(snapshot(backlogs=12), DriveConstraints(max_backlogs=None)) is None


class TestBranchRule:
    def test_branch_not_in_list(self):
        reason = check_branch(snapshot(branch="ME"), DriveConstraints(allowed_branches='["CS", "IS"]'))
        assert reason == BRANCH_NOT_ELIGIBLE

    def test_branch_in_list(self):
        assert check_branch(snapshot(branch="IS"), DriveConstraints(allowed_branches='["CS", "IS"]')) is None

    def test_accepts_decoded_list(self):
        assert check_branch(snapshot(branch="ME"), DriveConstraints(allowed_branches=["CS"])) == BRANCH_NOT_ELIGIBLE

    def test_malformed_list_skips_rule(self):
        for value in ("not json", '{"CS": true}', "", None, "[]", 42):
            assert check_branch(snapshot(branch="ME"), DriveConstraints(allowed_branches=value)) is None


class TestEvaluate:
    def test_eligible_student(self):
        result = evaluate(snapshot(), DriveConstraints(min_cgpa=6.0, max_backlogs=0, allowed_branches='["CS"]'))
        assert result.eligible is True
        assert result.reasons == []

    def test_display_mode_collects_every_reason_in_order(self):
        result = evaluate(
            snapshot(cgpa=5.0, backlogs=2, branch="ME"),
            DriveConstraints(min_cgpa=6.0, max_backlogs=0, allowed_branches='["CS"]'),
            already_applied=True,
            already_placed=True,
        )
        assert result.eligible is False
        assert result.reasons == [
            ALREADY_PLACED,
            "Minimum CGPA requirement is 6.0. Your CGPA: 5.0",
            "Maximum allowed backlogs: 0. Your active backlogs: 2",
            BRANCH_NOT_ELIGIBLE,
            ALREADY_APPLIED,
        ]

    def test_stop_at_first_reports_one_reason(self):
        result = evaluate(
            snapshot(cgpa=5.0, backlogs=2),
            DriveConstraints(min_cgpa=6.0, max_backlogs=0),
            stop_at_first=True,
        )
        assert result.eligible is False
        assert result.reasons == ["Minimum CGPA requirement is 6.0. Your CGPA: 5.0"]

    def test_placed_is_reported_first(self):
        result = evaluate(snapshot(cgpa=5.0), DriveConstraints(min_cgpa=6.0), already_placed=True, stop_at_first=True)
        assert result.reasons == [ALREADY_PLACED]

    def test_already_applied_alone_makes_ineligible(self):
        result = evaluate(snapshot(), DriveConstraints(), already_applied=True)
        assert result.eligible is False
        assert result.reasons == [ALREADY_APPLIED]

    def test_same_inputs_same_result(self):
        constraints = DriveConstraints(min_cgpa=7.5, max_backlogs=1, allowed_branches='["CS"]')
        first = evaluate(snapshot(cgpa=7.0), constraints)
        second = evaluate(snapshot(cgpa=7.0), constraints)
        assert first == second
