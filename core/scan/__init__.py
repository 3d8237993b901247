"""Scan Module - label photo extraction with SDS auto-linking."""
from core.scan.known_chemicals import (
    KNOWN_CHEMICALS_FILE,
    find_known_chemical,
    fuzzy_match,
    load_known_chemicals,
    merge_label_data,
)
from core.scan.service import LabelScanResult, LabelScanService, strip_data_uri

__all__ = [
    'KNOWN_CHEMICALS_FILE',
    'find_known_chemical',
    'fuzzy_match',
    'load_known_chemicals',
    'merge_label_data',
    'LabelScanResult',
    'LabelScanService',
    'strip_data_uri',
]
