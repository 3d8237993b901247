#!/usr/bin/env python3
"""
Response models for API endpoints.
"""

from dataclasses import asdict
from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from core.compliance.models import ComplianceResult
from core.scan.service import LabelScanResult
from core.sds.models import ResolutionResult
from core.training.status import TrainingStatusInfo
from core.uploads.service import SdsUploadRecord

CACHED_LOOKUP_NOTES = "Found in shared SDS database (cached)"


class SdsLookupResponse(BaseModel):
    """Resolved SDS reference for a product."""
    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "sds_url": "https://example.com/sds/acetone.pdf",
                "sds_source": "Manufacturer website",
                "manufacturer_sds_portal": "https://example.com/sds",
                "confidence": 0.9,
                "notes": None
            }
        }
    )

    sds_url: Optional[str]
    sds_source: Optional[str]
    manufacturer_sds_portal: Optional[str]
    confidence: float = Field(ge=0, le=1)
    notes: Optional[str]

    @classmethod
    def from_result(cls, result: ResolutionResult, cached_source_label: str) -> "SdsLookupResponse":
        record = result.record
        if result.cached:
            return cls(
                sds_url=record.sds_url,
                sds_source=record.sds_source or cached_source_label,
                manufacturer_sds_portal=record.manufacturer_portal_url,
                confidence=record.confidence,
                notes=CACHED_LOOKUP_NOTES,
            )
        return cls(
            sds_url=record.sds_url,
            sds_source=record.sds_source,
            manufacturer_sds_portal=record.manufacturer_portal_url,
            confidence=record.confidence,
            notes=record.notes,
        )


class LabelScanResponse(BaseModel):
    """Label fields read from a photo plus the SDS auto-link outcome.

    Extracted GHS fields (hazard statements, first aid, storage and so on)
    are passed through as extra keys.
    """
    model_config = ConfigDict(extra="allow")

    product_name: Optional[str] = None
    manufacturer: Optional[str] = None
    confidence: float = Field(ge=0, le=1)
    fields_uncertain: List[str] = Field(default_factory=list)
    known_match: Optional[str] = None
    sds_lookup_result: Optional[SdsLookupResponse] = None
    sds_status: Optional[str] = None
    sds_url: Optional[str] = None
    sds_uploaded: bool = False
    manufacturer_sds_portal: Optional[str] = None

    @classmethod
    def from_result(cls, result: LabelScanResult, cached_source_label: str) -> "LabelScanResponse":
        lookup = None
        if result.sds_lookup is not None:
            lookup = SdsLookupResponse.from_result(result.sds_lookup, cached_source_label)

        fields: Dict[str, Any] = dict(result.label)
        fields.update(
            product_name=result.product_name or None,
            manufacturer=result.manufacturer or None,
            confidence=result.confidence,
            fields_uncertain=result.fields_uncertain,
            known_match=result.known_match,
            sds_lookup_result=lookup,
            sds_status=result.sds_status,
            sds_url=result.sds_url,
            sds_uploaded=False,
            manufacturer_sds_portal=result.manufacturer_portal_url,
        )
        return cls(**fields)

class SdsUploadRecordResponse(BaseModel):
    """One entry of the SDS upload index (camelCase on the wire)."""
    model_config = ConfigDict(populate_by_name=True)

    sds_id: str = Field(alias="sdsId")
    file_name: str = Field(alias="fileName")
    original_name: str = Field(alias="originalName")
    uploaded_at: datetime = Field(alias="uploadedAt")
    uploaded_by: str = Field(alias="uploadedBy")
    file_size: int = Field(alias="fileSize")

    @classmethod
    def from_record(cls, record: SdsUploadRecord) -> "SdsUploadRecordResponse":
        return cls(**asdict(record))


class SdsUploadResponse(BaseModel):
    """Response after storing an SDS upload."""
    success: bool
    record: SdsUploadRecordResponse
    url: str


class SdsUploadListResponse(BaseModel):
    uploads: List[SdsUploadRecordResponse]


class ScoreBreakdownResponse(BaseModel):
    score: int
    weight: float
    current: int
    total: int
    label: str
    pct: int


class ComplianceBreakdownResponse(BaseModel):
    sds: ScoreBreakdownResponse
    labels: ScoreBreakdownResponse
    training: ScoreBreakdownResponse
    program: ScoreBreakdownResponse


class ImprovementResponse(BaseModel):
    text: str
    points: int


class ComplianceScoreResponse(BaseModel):
    """Overall compliance score with its breakdown and top improvements."""
    overall: int = Field(ge=0, le=100)
    breakdown: ComplianceBreakdownResponse
    status: str
    status_color: str
    improvements: List[ImprovementResponse]
    action_item_count: int

    @classmethod
    def from_result(cls, result: ComplianceResult) -> "ComplianceScoreResponse":
        return cls(**asdict(result))


class TrainingStatusResponse(BaseModel):
    """Computed training status for one employee."""
    employee_id: str
    status: str
    label: str
    completed_count: int
    remaining_count: int
    days_until_due: Optional[int]
    is_trained: bool
    stored_status: Optional[str] = None
    drift: bool = False

    @classmethod
    def from_info(
        cls,
        employee_id: str,
        info: TrainingStatusInfo,
        stored_status: Optional[str] = None
    ) -> "TrainingStatusResponse":
        return cls(
            employee_id=employee_id,
            status=info.status,
            label=info.label,
            completed_count=info.completed_count,
            remaining_count=info.remaining_count,
            days_until_due=info.days_until_due,
            is_trained=info.is_trained,
            stored_status=stored_status,
            drift=stored_status is not None and stored_status != info.status,
        )
