"""
Eligibility Service

Decides whether a student may apply to a placement drive.

Used in two modes:
- display: every failing rule is collected so the drive list can explain itself
- apply validation: stops at the first failing rule, only one reason is reported

Pure functions only. Malformed optional drive data skips a rule and never raises.
"""

from dataclasses import dataclass, field
from decimal import Decimal
from numbers import Real
from typing import Any, List, Optional

from app.utils.helpers import parse_json_list


@dataclass(frozen=True)
class AcademicSnapshot:
    """The slice of a student's academic record the rules look at."""
    cgpa: Optional[float]
    active_backlogs: int
    branch: Optional[str]

    @classmethod
    def from_record(cls, record: Any) -> "AcademicSnapshot":
        return cls(
            cgpa=record.cgpa,
            active_backlogs=record.active_backlogs or 0,
            branch=record.branch,
        )


@dataclass(frozen=True)
class DriveConstraints:
    """Eligibility fields of a drive."""
    min_cgpa: Optional[float] = None
    max_backlogs: Optional[int] = None
    allowed_branches: Any = None  # JSON text or list; anything else is ignored

    @classmethod
    def from_drive(cls, drive: Any) -> "DriveConstraints":
        return cls(
            min_cgpa=drive.min_cgpa,
            max_backlogs=drive.max_backlogs,
            allowed_branches=drive.allowed_branches,
        )


@dataclass
class EligibilityResult:
    """Outcome of an eligibility check"""
    eligible: bool
    reasons: List[str] = field(default_factory=list)


# Reason messages
ALREADY_PLACED = "Already placed"
ALREADY_APPLIED = "Already applied"
BRANCH_NOT_ELIGIBLE = "Your branch is not eligible for this drive"


def _is_number(value: Any) -> bool:
    return isinstance(value, (Real, Decimal)) and not isinstance(value, bool)


def _format_number(value: Any) -> str:
    # 6.0 stays "6.0", 5.50 from Numeric becomes "5.5"
    if _is_number(value):
        return repr(float(value))
    return "not recorded" if value is None else str(value)


def check_cgpa(snapshot: AcademicSnapshot, constraints: DriveConstraints) -> Optional[str]:
    """CGPA below the drive minimum."""
    min_cgpa = constraints.min_cgpa
    if not min_cgpa or not _is_number(min_cgpa):
        return None
    # A missing CGPA counts as zero against a set minimum
    cgpa = snapshot.cgpa if _is_number(snapshot.cgpa) else 0.0
    if cgpa < min_cgpa:
        return (
            f"Minimum CGPA requirement is {_format_number(min_cgpa)}. "
            f"Your CGPA: {_format_number(snapshot.cgpa)}"
        )
    return None


def check_backlogs(snapshot: AcademicSnapshot, constraints: DriveConstraints) -> Optional[str]:
    """Active backlogs above the drive maximum. NULL maximum means unlimited."""
    max_backlogs = constraints.max_backlogs
    if max_backlogs is None or not _is_number(max_backlogs):
        return None
    if snapshot.active_backlogs > max_backlogs:
        return (
            f"Maximum allowed backlogs: {max_backlogs}. "
            f"Your active backlogs: {snapshot.active_backlogs}"
        )
    return None


def check_branch(snapshot: AcademicSnapshot, constraints: DriveConstraints) -> Optional[str]:
    """
    Branch not in the drive's allow-list.

    An absent, empty or unparseable allow-list skips the rule (fail-open).
    """
    allowed = parse_json_list(constraints.allowed_branches)
    if not allowed:
        return None
    if snapshot.branch not in allowed:
        return BRANCH_NOT_ELIGIBLE
    return None


ACADEMIC_RULES = (check_cgpa, check_backlogs, check_branch)


def evaluate(
    snapshot: AcademicSnapshot,
    constraints: DriveConstraints,
    already_applied: bool = False,
    already_placed: bool = False,
    stop_at_first: bool = False,
) -> EligibilityResult:
    """
    Evaluate a student's eligibility for a drive.

    Args:
        snapshot: Student's CGPA, active backlogs and branch
        constraints: Drive's minimum CGPA, maximum backlogs and branch allow-list
        already_applied: Student already has an application for this drive
        already_placed: Student has already been selected elsewhere
        stop_at_first: Return after the first failing rule (apply validation)

    Returns:
        EligibilityResult with every failing reason in rule order
    """
    reasons: List[str] = []

    if already_placed:
        reasons.append(ALREADY_PLACED)
        if stop_at_first:
            return EligibilityResult(eligible=False, reasons=reasons)

    for rule in ACADEMIC_RULES:
        reason = rule(snapshot, constraints)
        if reason:
            reasons.append(reason)
            if stop_at_first:
                return EligibilityResult(eligible=False, reasons=reasons)

    if already_applied:
        reasons.append(ALREADY_APPLIED)

    return EligibilityResult(eligible=not reasons, reasons=reasons)
