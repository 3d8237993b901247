"""Uploads Module - manually uploaded SDS documents."""
from core.uploads.service import SdsUploadService, SdsUploadRecord

__all__ = ['SdsUploadService', 'SdsUploadRecord']
