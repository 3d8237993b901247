#!/usr/bin/env python3
"""
Compliance Scoring Service - weighted HazCom compliance score.

Combines four independently weighted sub-scores into one overall score:
- SDS coverage: chemicals with a current safety data sheet
- Container labels: chemicals with a printed label
- Employee training: employees whose training is current or due soon
- Written program: presence of an inventory and a roster

The service is a pure computation over already-loaded collections.
"""

from datetime import datetime
from typing import Optional, Sequence
import logging

from core.config_loader import ComplianceConfig
from core.compliance.models import (
    Chemical,
    Employee,
    ComplianceBreakdown,
    ComplianceResult,
    ScoreBreakdown,
)
from core.compliance import subscores
from core.compliance import improvements as improvement_calculations
from core.training.status import evaluate_training_status

logger = logging.getLogger(__name__)

INSPECTION_READY = "Inspection Ready"
GETTING_CLOSE = "Getting Close"
NEEDS_WORK = "Needs Work"
AT_RISK = "At Risk"


def _breakdown(current: int, total: int, pct: float, weight: float, label: str) -> ScoreBreakdown:
    rounded = subscores.round_half_up(pct)
    return ScoreBreakdown(
        score=rounded,
        weight=weight,
        current=current,
        total=total,
        label=label,
        pct=rounded,
    )


class ComplianceScoringService:
    """
    Scores a chemical inventory and employee roster.

    Weights and status thresholds come from ComplianceConfig.
    """

    def __init__(self, config: Optional[ComplianceConfig] = None):
        self.config = config or ComplianceConfig()

    def status_for(self, overall: int) -> str:
        thresholds = self.config.thresholds
        if overall >= thresholds.inspection_ready:
            return INSPECTION_READY
        if overall >= thresholds.getting_close:
            return GETTING_CLOSE
        if overall >= thresholds.needs_work:
            return NEEDS_WORK
        return AT_RISK

    def color_for(self, overall: int) -> str:
        thresholds = self.config.thresholds
        if overall >= thresholds.inspection_ready:
            return "green"
        if overall >= thresholds.getting_close:
            return "amber"
        return "red"

    def score(
        self,
        chemicals: Sequence[Chemical],
        employees: Sequence[Employee],
        now: Optional[datetime] = None
    ) -> ComplianceResult:
        """
        Calculate the compliance score.

        Args:
            chemicals: Chemical inventory
            employees: Employee roster
            now: Reference time for training due dates (defaults to now)

        Returns:
            ComplianceResult with overall score, breakdown, status and top improvements
        """
        weights = self.config.weights
        statuses = [evaluate_training_status(e, now=now) for e in employees]

        sds_current, sds_total, sds_pct = subscores.sds_coverage(chemicals)
        labeled, label_total, label_pct = subscores.label_coverage(chemicals)
        trained, training_total, training_pct = subscores.training_coverage(statuses)
        program_passed, program_total, program_pct = subscores.program_coverage(
            has_chemicals=len(chemicals) > 0,
            has_employees=len(employees) > 0,
        )

        overall = subscores.weighted_overall([
            (weights.sds, sds_pct),
            (weights.labels, label_pct),
            (weights.training, training_pct),
            (weights.program, program_pct),
        ])

        training_items, untrained_count = improvement_calculations.training_improvements(
            employees, statuses, weights.training
        )
        sds_items, missing_count, expired_count = improvement_calculations.sds_improvements(
            chemicals, weights.sds
        )
        label_items, unlabeled_count = improvement_calculations.label_improvements(
            chemicals, weights.labels
        )

        ranked = improvement_calculations.rank_improvements(
            training_items + sds_items + label_items,
            self.config.max_improvements,
        )

        # Not deduplicated: an unlabeled chemical without an SDS counts twice
        action_item_count = missing_count + expired_count + unlabeled_count + untrained_count

        result = ComplianceResult(
            overall=overall,
            breakdown=ComplianceBreakdown(
                sds=_breakdown(sds_current, sds_total, sds_pct, weights.sds, "SDS Coverage"),
                labels=_breakdown(labeled, label_total, label_pct, weights.labels, "Container Labels"),
                training=_breakdown(trained, training_total, training_pct, weights.training, "Employee Training"),
                program=_breakdown(program_passed, program_total, program_pct, weights.program, "Written Program"),
            ),
            status=self.status_for(overall),
            status_color=self.color_for(overall),
            improvements=ranked,
            action_item_count=action_item_count,
        )

        logger.debug(
            f"Compliance score {overall} ({result.status}) for "
            f"{len(chemicals)} chemicals, {len(employees)} employees; "
            f"{action_item_count} action items"
        )
        return result


def calculate_compliance_score(
    chemicals: Sequence[Chemical],
    employees: Sequence[Employee],
    config: Optional[ComplianceConfig] = None,
    now: Optional[datetime] = None
) -> ComplianceResult:
    """Convenience wrapper around ComplianceScoringService.score."""
    return ComplianceScoringService(config).score(chemicals, employees, now=now)
