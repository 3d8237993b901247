#!/usr/bin/env python3
"""
Improvements - ranked remediation suggestions and action item counts.
"""

from typing import List, Sequence, Tuple

from core.compliance.models import Chemical, Employee, Improvement, SDS_MISSING, SDS_EXPIRED
from core.compliance.subscores import round_half_up
from core.training.status import TrainingStatusInfo, NOT_STARTED, IN_PROGRESS, OVERDUE


def points_per_item(weight: float, total: int) -> int:
    """Points recovered by fixing one item in a category of ``total`` items."""
    return round_half_up(weight / total)


def training_improvements(
    employees: Sequence[Employee],
    statuses: Sequence[TrainingStatusInfo],
    weight: float
) -> Tuple[List[Improvement], int]:
    """
    Suggestions for employees who are not trained.

    Returns: (improvements, untrained_count)
    """
    untrained = [
        (employee, info)
        for employee, info in zip(employees, statuses)
        if not info.is_trained
    ]
    if not untrained:
        return [], 0

    points = points_per_item(weight, len(employees))
    improvements = []
    for employee, info in untrained:
        if info.status == NOT_STARTED:
            text = f"Complete training for {employee.name} (new hire)"
        elif info.status == IN_PROGRESS:
            text = f"Finish training for {employee.name} ({info.remaining_count} modules left)"
        elif info.status == OVERDUE:
            text = f"Refresh training for {employee.name} (annual overdue)"
        else:
            continue
        improvements.append(Improvement(text=text, points=points))

    return improvements, len(untrained)


def sds_improvements(
    chemicals: Sequence[Chemical],
    weight: float
) -> Tuple[List[Improvement], int, int]:
    """
    Suggestions for chemicals with a missing or expired SDS.

    Returns: (improvements, missing_count, expired_count)
    """
    missing = [c for c in chemicals if c.sds_status == SDS_MISSING]
    expired = [c for c in chemicals if c.sds_status == SDS_EXPIRED]
    if not chemicals:
        return [], 0, 0

    points = points_per_item(weight, len(chemicals))
    improvements = [
        Improvement(text=f"Find SDS for {c.product_name}", points=points) for c in missing
    ]
    improvements.extend(
        Improvement(text=f"Update expired SDS for {c.product_name}", points=points) for c in expired
    )
    return improvements, len(missing), len(expired)


def label_improvements(
    chemicals: Sequence[Chemical],
    weight: float
) -> Tuple[List[Improvement], int]:
    """
    Suggestions for chemicals without a container label.

    Returns: (improvements, unlabeled_count)
    """
    unlabeled = [c for c in chemicals if not c.labeled]
    if not chemicals:
        return [], 0

    points = points_per_item(weight, len(chemicals))
    improvements = [
        Improvement(text=f"Print label for {c.product_name}", points=points) for c in unlabeled
    ]
    return improvements, len(unlabeled)


def rank_improvements(improvements: List[Improvement], limit: int) -> List[Improvement]:
    """Highest-value suggestions first; ties keep their emission order."""
    return sorted(improvements, key=lambda i: i.points, reverse=True)[:limit]
