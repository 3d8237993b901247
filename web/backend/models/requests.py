#!/usr/bin/env python3
"""
Request models for API endpoints.
"""

from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from core.compliance.models import SDS_MISSING, SDS_STATUSES, Chemical, Employee
from core.training.status import TRAINING_STATUSES


class SdsLookupRequest(BaseModel):
    """Request to resolve a product's Safety Data Sheet.

    Both fields are optional here so that a missing value is reported by the
    resolver as a domain validation error rather than a schema error.
    """
    product_name: Optional[str] = Field(None, description="Product name as printed on the label")
    manufacturer: Optional[str] = Field(None, description="Manufacturer name")


class ChemicalIn(BaseModel):
    """A chemical inventory entry."""
    id: str
    product_name: str
    manufacturer: str = ""
    location: str = ""
    container_count: int = Field(default=0, ge=0)
    labeled: bool = False
    sds_status: str = SDS_MISSING
    added_date: Optional[datetime] = None
    label_printed_date: Optional[datetime] = None
    signal_word: Optional[Literal["DANGER", "WARNING"]] = None
    pictogram_codes: List[str] = Field(default_factory=list)

    def to_domain(self) -> Chemical:
        return Chemical(
            id=self.id,
            product_name=self.product_name,
            manufacturer=self.manufacturer,
            location=self.location,
            container_count=self.container_count,
            labeled=self.labeled,
            sds_status=self.sds_status,
            added_date=self.added_date,
            label_printed_date=self.label_printed_date,
            signal_word=self.signal_word,
            pictogram_codes=list(self.pictogram_codes),
        )

    @field_validator("sds_status")
    @classmethod
    def _known_sds_status(cls, value: str) -> str:
        if value not in SDS_STATUSES:
            raise ValueError(f"sds_status must be one of: {', '.join(SDS_STATUSES)}")
        return value


class EmployeeIn(BaseModel):
    """An employee and their training progress.

    Dates may be full ISO timestamps or bare dates; bare dates are read as
    midnight UTC.
    """
    id: str
    name: str
    role: str = ""
    completed_modules: List[str] = Field(default_factory=list)
    pending_modules: List[str] = Field(default_factory=list)
    initial_training: Optional[datetime] = None
    last_training: Optional[datetime] = None

    def to_domain(self) -> Employee:
        return Employee(
            id=self.id,
            name=self.name,
            role=self.role,
            completed_modules=set(self.completed_modules),
            pending_modules=set(self.pending_modules),
            initial_training=self.initial_training,
            last_training=self.last_training,
        )


class ComplianceScoreRequest(BaseModel):
    """Inventory and roster to score."""
    chemicals: List[ChemicalIn] = Field(default_factory=list)
    employees: List[EmployeeIn] = Field(default_factory=list)


class TrainingStatusRequest(BaseModel):
    """Evaluate one employee, optionally against a previously stored status."""
    employee: EmployeeIn
    stored_status: Optional[str] = Field(
        None,
        description="Status persisted elsewhere; reported as drift when it disagrees"
    )

    @field_validator("stored_status")
    @classmethod
    def _known_training_status(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and value not in TRAINING_STATUSES:
            raise ValueError(f"stored_status must be one of: {', '.join(TRAINING_STATUSES)}")
        return value


class LabelScanRequest(BaseModel):
    """A chemical label photo, as base64 or a data URI.

    Fields are optional so that a missing image is reported as a domain
    validation error.
    """
    model_config = ConfigDict(populate_by_name=True)

    image: Optional[str] = Field(None, description="Base64 image data or data URI")
    mime_type: Optional[str] = Field(None, alias="mimeType", description="Image content type")
