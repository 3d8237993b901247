"""
Known Chemicals - reference GHS data and fuzzy matching for label scans.

A scanned label often misses fields (glare, torn labels, small print). When
the product matches a known chemical, the known data fills the gaps and the
scan overrides anything it did read.
"""
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

logger = logging.getLogger(__name__)

KNOWN_CHEMICALS_FILE = Path(__file__).resolve().parent / "known_chemicals.yaml"

# Words of this length or shorter are ignored when counting shared words
_MIN_WORD_LENGTH = 3
_MIN_SHARED_WORDS = 3


def load_known_chemicals(path: Optional[str] = None) -> List[Dict[str, Any]]:
    """Read the reference chemical list (bundled YAML unless ``path`` is given)."""
    source = Path(path) if path else KNOWN_CHEMICALS_FILE
    with open(source, 'r') as f:
        data = yaml.safe_load(f) or {}

    chemicals = [c for c in data.get('chemicals') or [] if c and c.get('product_name')]
    logger.info(f"Loaded {len(chemicals)} known chemicals from {source}")
    return chemicals


def _words(name: str) -> List[str]:
    return [w for w in name.split() if len(w) >= _MIN_WORD_LENGTH]


def fuzzy_match(scanned_name: str, known_name: str) -> bool:
    """True when one name contains the other or they share three or more words.

    Words match when either contains the other ("degreaser" / "degreasers").
    """
    a = scanned_name.lower().strip()
    b = known_name.lower().strip()
    if not a or not b:
        return False

    if a in b or b in a:
        return True

    known_words = _words(b)
    shared = sum(
        1 for w in _words(a)
        if any(kw in w or w in kw for kw in known_words)
    )
    return shared >= _MIN_SHARED_WORDS


def find_known_chemical(
    product_name: str,
    known_chemicals: List[Dict[str, Any]]
) -> Optional[Dict[str, Any]]:
    """First known chemical whose name fuzzy-matches ``product_name``."""
    for known in known_chemicals:
        if fuzzy_match(product_name, known['product_name']):
            return known
    return None


def _is_empty(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, (list, tuple)) and len(value) == 0:
        return True
    if isinstance(value, str) and not value.strip():
        return True
    return False


def merge_label_data(known: Dict[str, Any], scanned: Dict[str, Any]) -> Dict[str, Any]:
    """
    Overlay scanned label fields on a known chemical's reference data.

    Empty scanned values (None, empty lists, blank strings) never replace
    known data. Nested objects such as first_aid merge key by key.
    """
    merged = dict(known)
    for key, value in scanned.items():
        if _is_empty(value):
            continue

        current = merged.get(key)
        if isinstance(value, dict) and isinstance(current, dict):
            nested = dict(current)
            for sub_key, sub_value in value.items():
                if not _is_empty(sub_value):
                    nested[sub_key] = sub_value
            merged[key] = nested
        else:
            merged[key] = value
    return merged
