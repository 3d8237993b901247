"""Training Module - Employee training status evaluation."""
from core.training.status import (
    ALL_MODULES,
    TOTAL_MODULES,
    TRAINING_STATUSES,
    TrainingStatusInfo,
    evaluate_training_status,
    detect_status_drift,
)

__all__ = [
    'ALL_MODULES',
    'TOTAL_MODULES',
    'TRAINING_STATUSES',
    'TrainingStatusInfo',
    'evaluate_training_status',
    'detect_status_drift',
]
