#!/usr/bin/env python3
"""
Compliance endpoints - inspection-readiness score and training status.
"""

from datetime import datetime, timezone

from fastapi import APIRouter, Depends

from core.compliance.service import ComplianceScoringService
from core.training.status import detect_status_drift, evaluate_training_status
from ..dependencies import get_scoring_service
from ..models.requests import ComplianceScoreRequest, TrainingStatusRequest
from ..models.responses import ComplianceScoreResponse, TrainingStatusResponse

router = APIRouter(prefix="/api", tags=["compliance"])


@router.post("/compliance/score", response_model=ComplianceScoreResponse)
def compliance_score_endpoint(
    body: ComplianceScoreRequest,
    service: ComplianceScoringService = Depends(get_scoring_service)
):
    """
    Score a chemical inventory and employee roster.

    Returns the weighted overall score (0-100), the four sub-scores, an
    inspection-readiness status and the three most valuable improvements.
    """
    result = service.score(
        [c.to_domain() for c in body.chemicals],
        [e.to_domain() for e in body.employees],
    )
    return ComplianceScoreResponse.from_result(result)


@router.post("/training/status", response_model=TrainingStatusResponse)
def training_status_endpoint(body: TrainingStatusRequest):
    """Compute an employee's training status, flagging drift from a stored value."""
    employee = body.employee.to_domain()
    now = datetime.now(timezone.utc)
    info = evaluate_training_status(employee, now=now)
    detect_status_drift(employee, body.stored_status, now=now)
    return TrainingStatusResponse.from_info(employee.id, info, body.stored_status)
