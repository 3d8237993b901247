"""API route handlers."""

from .sds import router as sds_router
from .uploads import router as uploads_router
from .compliance import router as compliance_router
from .scan import router as scan_router
