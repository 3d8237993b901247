from .base import Base
from .sds import SdsDatabaseRecord
from .upload import SdsUpload

__all__ = [
    'Base',
    'SdsDatabaseRecord',
    'SdsUpload',
]
