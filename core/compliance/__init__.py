#!/usr/bin/env python3
"""
Compliance Module - weighted HazCom compliance scoring.

Public API:
- ComplianceScoringService: scores an inventory and roster
- calculate_compliance_score: functional wrapper
- Chemical, Employee: scoring inputs
- ComplianceResult: scoring output

Layout:
- models.py: Data structures
- subscores.py: Per-category coverage percentages and the weighted total
- improvements.py: Remediation suggestions and action item counts
- service.py: ComplianceScoringService orchestrator
"""

from core.compliance.models import (
    Chemical,
    Employee,
    ComplianceResult,
    ComplianceBreakdown,
    ScoreBreakdown,
    Improvement,
)
from core.compliance.service import ComplianceScoringService, calculate_compliance_score

__all__ = [
    'ComplianceScoringService',
    'calculate_compliance_score',
    'Chemical',
    'Employee',
    'ComplianceResult',
    'ComplianceBreakdown',
    'ScoreBreakdown',
    'Improvement',
]
