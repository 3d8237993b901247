from database.repositories.base import BaseRepository
from database.repositories.sds_record import SdsRecordRepository, PARTIAL_MATCH_LIMIT
from database.repositories.sds_upload import SdsUploadRepository

__all__ = [
    'BaseRepository',
    'SdsRecordRepository',
    'SdsUploadRepository',
    'PARTIAL_MATCH_LIMIT',
]
