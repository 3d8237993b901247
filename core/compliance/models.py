#!/usr/bin/env python3
"""
Compliance Models - Inventory inputs and scoring results.
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import List, Optional, Set, Union

SDS_CURRENT = "current"
SDS_EXPIRED = "expired"
SDS_MISSING = "missing"
SDS_STATUSES = (SDS_CURRENT, SDS_EXPIRED, SDS_MISSING)

DateLike = Union[date, datetime]


@dataclass
class Chemical:
    """A chemical product in the workplace inventory."""
    id: str
    product_name: str
    manufacturer: str = ""
    location: str = ""
    container_count: int = 0
    labeled: bool = False
    sds_status: str = SDS_MISSING
    added_date: Optional[DateLike] = None
    label_printed_date: Optional[DateLike] = None
    signal_word: Optional[str] = None
    pictogram_codes: List[str] = field(default_factory=list)


@dataclass
class Employee:
    """An employee enrolled in the HazCom training curriculum."""
    id: str
    name: str
    role: str = ""
    completed_modules: Set[str] = field(default_factory=set)
    pending_modules: Set[str] = field(default_factory=set)
    initial_training: Optional[DateLike] = None
    last_training: Optional[DateLike] = None


@dataclass
class ScoreBreakdown:
    """One weighted sub-score."""
    score: int
    weight: float
    current: int
    total: int
    label: str
    pct: int


@dataclass
class Improvement:
    """A remediation suggestion and the points it is worth."""
    text: str
    points: int


@dataclass
class ComplianceBreakdown:
    sds: ScoreBreakdown
    labels: ScoreBreakdown
    training: ScoreBreakdown
    program: ScoreBreakdown


@dataclass
class ComplianceResult:
    """Complete compliance score report."""
    overall: int
    breakdown: ComplianceBreakdown
    status: str
    status_color: str
    improvements: List[Improvement] = field(default_factory=list)
    action_item_count: int = 0
