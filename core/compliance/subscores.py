#!/usr/bin/env python3
"""
Sub-score Calculations - coverage percentages for each compliance category.

Every percentage is 100 when its denominator is zero (nothing to be
deficient in).
"""

import math
from typing import List, Sequence, Tuple

from core.compliance.models import Chemical, SDS_CURRENT
from core.training.status import TrainingStatusInfo


def round_half_up(value: float) -> int:
    """Round .5 away from zero for positive values (banker's rounding is not wanted here)."""
    return int(math.floor(value + 0.5))


def coverage_pct(current: int, total: int) -> float:
    """Percentage of ``total`` that is covered, 100 for an empty total."""
    return (current / total) * 100 if total > 0 else 100.0


def sds_coverage(chemicals: Sequence[Chemical]) -> Tuple[int, int, float]:
    """
    SDS coverage: chemicals whose safety data sheet is current.

    Returns: (current, total, pct)
    """
    total = len(chemicals)
    current = len([c for c in chemicals if c.sds_status == SDS_CURRENT])
    return current, total, coverage_pct(current, total)


def label_coverage(chemicals: Sequence[Chemical]) -> Tuple[int, int, float]:
    """
    Container labels: every chemical entry needs a label.

    Returns: (labeled, total, pct)
    """
    total = len(chemicals)
    labeled = len([c for c in chemicals if c.labeled is True])
    return labeled, total, coverage_pct(labeled, total)


def training_coverage(statuses: List[TrainingStatusInfo]) -> Tuple[int, int, float]:
    """
    Employee training: employees whose status is current or due-soon.

    Returns: (trained, total, pct)
    """
    total = len(statuses)
    trained = len([s for s in statuses if s.is_trained])
    return trained, total, coverage_pct(trained, total)


def written_program_checks(has_chemicals: bool, has_employees: bool) -> List[bool]:
    """Checks that make up the written program sub-score.

    The third check is always satisfied: the service itself is the written
    program.
    """
    # TODO: replace the constant check once the written program document is tracked.
    return [has_chemicals, has_employees, True]


def program_coverage(has_chemicals: bool, has_employees: bool) -> Tuple[int, int, float]:
    """
    Written program: fraction of program checks that pass.

    Returns: (passed, total, pct)
    """
    checks = written_program_checks(has_chemicals, has_employees)
    passed = len([c for c in checks if c])
    return passed, len(checks), coverage_pct(passed, len(checks))


def weighted_overall(weighted_pcts: List[Tuple[float, float]]) -> int:
    """
    Combine sub-scores into the overall score.

    Formula: round(sum(weight_fraction * pct))

    Args:
        weighted_pcts: (weight in percent, pct 0-100) pairs

    Returns:
        Overall score (0-100)
    """
    return round_half_up(sum(pct * (weight / 100) for weight, pct in weighted_pcts))
