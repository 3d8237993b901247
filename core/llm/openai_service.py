"""
OpenAI Service - SDS lookups and label extraction through an OpenAI-compatible API.

Builds the request, calls the chat completions API once and parses a JSON
object out of the free-form reply.
"""
from typing import Dict, Any, List, Optional, Tuple
import json
import logging
import re

import openai
from openai import OpenAI

from core.exceptions import ConfigurationError, ExternalServiceError, ParseError
from core.llm.interfaces import LabelExtractor, SdsLookupProvider, SdsSeedProvider
from core.llm.system_prompts import (
    LABEL_SCAN_PROMPT,
    SDS_LOOKUP_SYSTEM_PROMPT,
    SDS_SEED_SYSTEM_PROMPT,
    build_sds_lookup_message,
    build_sds_seed_message,
)
from core.sds.models import GhsClassification, SafetyDocumentRecord

logger = logging.getLogger(__name__)

_JSON_FENCE = re.compile(r"```json\n?")
_FENCE = re.compile(r"```\n?")

# How much of a reply is echoed into logs
_LOG_PREVIEW_CHARS = 500
_ERROR_PREVIEW_CHARS = 300

SIGNAL_WORDS = ("DANGER", "WARNING")


# ---------------------------------------------------------------------------
# Response parsing helpers
# ---------------------------------------------------------------------------

def clean_response_text(text: str) -> str:
    """Strip code fences and cut the reply down to its outermost JSON object.

    Search models often wrap the JSON in prose or markdown even when told
    not to.
    """
    cleaned = _FENCE.sub("", _JSON_FENCE.sub("", text)).strip()

    first_brace = cleaned.find("{")
    last_brace = cleaned.rfind("}")
    if first_brace != -1 and last_brace != -1 and last_brace > first_brace:
        cleaned = cleaned[first_brace:last_brace + 1]
    return cleaned


def parse_sds_payload(text: str, context: str = "SDS lookup") -> Dict[str, Any]:
    """Parse a model reply into a dict.

    Args:
        text: Raw reply text
        context: What the reply answers; used in log and error messages

    Raises:
        ParseError: the cleaned text is not a JSON object
    """
    cleaned = clean_response_text(text)
    try:
        data = json.loads(cleaned)
    except json.JSONDecodeError as e:
        logger.error(f"{context} JSON parse error. Cleaned text: {cleaned[:_ERROR_PREVIEW_CHARS]}")
        raise ParseError(f"Failed to parse {context} response: {e}", raw_text=text) from e

    if not isinstance(data, dict):
        logger.error(f"{context} response is not a JSON object: {cleaned[:_ERROR_PREVIEW_CHARS]}")
        raise ParseError(f"{context} response is not a JSON object", raw_text=text)
    return data


def _coerce_confidence(value: Any) -> float:
    """Confidence as a float clamped to [0, 1]; anything unusable becomes 0."""
    if value is None or isinstance(value, bool):
        return 0.0
    try:
        confidence = float(value)
    except (TypeError, ValueError):
        return 0.0
    if confidence != confidence:  # NaN
        return 0.0
    return min(max(confidence, 0.0), 1.0)


def _optional_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _text_list(value: Any) -> Tuple[str, ...]:
    """Non-empty strings from a list; {code, text} items become 'code - text'."""
    if not isinstance(value, list):
        return ()

    items: List[str] = []
    for item in value:
        if isinstance(item, dict):
            parts = [_optional_text(item.get("code")), _optional_text(item.get("text"))]
            text = " - ".join(p for p in parts if p)
        else:
            text = _optional_text(item) or ""
        if text:
            items.append(text)
    return tuple(items)


def record_from_payload(
    payload: Dict[str, Any],
    product_name: str,
    manufacturer: str
) -> SafetyDocumentRecord:
    """Build a record from a parsed lookup reply."""
    return SafetyDocumentRecord(
        product_name=product_name,
        manufacturer=manufacturer,
        sds_url=_optional_text(payload.get("sds_url")),
        sds_source=_optional_text(payload.get("sds_source")),
        manufacturer_portal_url=_optional_text(payload.get("manufacturer_sds_portal")),
        confidence=_coerce_confidence(payload.get("confidence")),
        notes=_optional_text(payload.get("notes")),
    )


def ghs_from_payload(payload: Dict[str, Any]) -> GhsClassification:
    """Build a GHS classification from a parsed seeding reply."""
    signal_word = (_optional_text(payload.get("signal_word")) or "").upper()
    return GhsClassification(
        signal_word=signal_word if signal_word in SIGNAL_WORDS else None,
        pictogram_codes=tuple(code.upper() for code in _text_list(payload.get("pictogram_codes"))),
        hazard_statements=_text_list(payload.get("hazard_statements")),
        cas_numbers=_text_list(payload.get("cas_numbers")),
        un_number=_optional_text(payload.get("un_number")),
        ghs_categories=_text_list(payload.get("ghs_categories")),
    )


def _extract_text(response: Any) -> str:
    """Concatenate the text of the first choice; empty string if absent."""
    try:
        content = response.choices[0].message.content
    except (IndexError, AttributeError, TypeError):
        return ""
    return content or ""


class OpenAIService(SdsLookupProvider, SdsSeedProvider, LabelExtractor):
    """
    OpenAI SDS lookup and label extraction service.

    The client is constructed by the composing application and injected. A
    None client means no credential is configured; every call then fails
    with ConfigurationError before touching the network. Calls are never
    retried here: the client is built with max_retries=0 and a bounded
    timeout.
    """

    def __init__(
        self,
        client: Optional[OpenAI] = None,
        model_config: Optional[Dict[str, Any]] = None
    ):
        self.client = client

        self.model_config = model_config or {}
        self.model = self.model_config.get('model', 'gpt-4o-mini-search-preview')
        self.web_search = self.model_config.get('web_search', True)
        self.temperature = self.model_config.get('temperature', 0.0)
        self.max_tokens = self.model_config.get('max_tokens', 1500)
        self.vision_model = self.model_config.get('vision_model', 'gpt-4o')
        self.vision_max_tokens = self.model_config.get('vision_max_tokens', 4000)

    def _build_search_request(self, system_prompt: str, user_message: str) -> Dict[str, Any]:
        request: Dict[str, Any] = {
            "model": self.model,
            "max_tokens": self.max_tokens,
            "messages": [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_message},
            ],
        }
        if self.web_search:
            request["web_search_options"] = {}
        else:
            request["temperature"] = self.temperature
        return request

    def _build_request(self, product_name: str, manufacturer: str) -> Dict[str, Any]:
        return self._build_search_request(
            SDS_LOOKUP_SYSTEM_PROMPT,
            build_sds_lookup_message(product_name, manufacturer)
        )

    def _complete(self, request: Dict[str, Any], subject: str) -> str:
        """Run one chat completion and return the reply text.

        Raises:
            ConfigurationError: no client is configured
            ExternalServiceError: the API call failed
        """
        if self.client is None:
            raise ConfigurationError("SDS lookup API key not configured")

        logger.info(f"Calling model {request['model']} for {subject}")

        try:
            response = self.client.chat.completions.create(**request)
        except openai.APITimeoutError as e:
            logger.error(f"Model call timed out for {subject}: {e}")
            raise ExternalServiceError("SDS lookup service timed out", code="timeout") from e
        except openai.APIConnectionError as e:
            logger.error(f"Model connection error for {subject}: {e}")
            raise ExternalServiceError("SDS lookup service unreachable", code="connection_error") from e
        except openai.APIStatusError as e:
            logger.error(f"Model service error for {subject}: {e.status_code} {str(e)[:200]}")
            raise ExternalServiceError(
                f"AI service error ({e.status_code})",
                status_code=e.status_code,
                code=getattr(e, 'code', None)
            ) from e
        except openai.APIError as e:
            logger.error(f"Model call failed for {subject}: {e}")
            raise ExternalServiceError(f"AI service error: {e}", code="api_error") from e

        text = _extract_text(response)
        logger.info(f"Raw model response for {subject}: {text[:_LOG_PREVIEW_CHARS]}")
        return text

    def resolve_sds(self, product_name: str, manufacturer: str) -> SafetyDocumentRecord:
        """Resolve a product to an SDS reference with a single model call.

        Args:
            product_name: Product name
            manufacturer: Manufacturer name

        Returns:
            SafetyDocumentRecord built from the model's reply
        """
        text = self._complete(
            self._build_request(product_name, manufacturer),
            f"SDS lookup of '{product_name}' by '{manufacturer}'"
        )

        payload = parse_sds_payload(text)
        record = record_from_payload(payload, product_name, manufacturer)

        logger.info(
            f"SDS lookup result for '{product_name}': url={record.sds_url} "
            f"portal={record.manufacturer_portal_url} confidence={record.confidence}"
        )
        return record

    def resolve_sds_with_ghs(
        self,
        product_name: str,
        manufacturer: str
    ) -> Tuple[SafetyDocumentRecord, GhsClassification]:
        """Resolve a product's SDS reference together with its GHS classification."""
        request = self._build_search_request(
            SDS_SEED_SYSTEM_PROMPT,
            build_sds_seed_message(product_name, manufacturer)
        )
        text = self._complete(request, f"SDS seed lookup of '{product_name}' by '{manufacturer}'")

        payload = parse_sds_payload(text)
        record = record_from_payload(payload, product_name, manufacturer)
        ghs = ghs_from_payload(payload)

        logger.info(
            f"SDS seed result for '{product_name}': url={record.sds_url} "
            f"signal_word={ghs.signal_word} pictograms={len(ghs.pictogram_codes)}"
        )
        return record, ghs

    def extract_label(self, image_base64: str, mime_type: str) -> Dict[str, Any]:
        """Read the GHS fields off a label photo with the vision model."""
        request = {
            "model": self.vision_model,
            "max_tokens": self.vision_max_tokens,
            "temperature": self.temperature,
            "messages": [
                {
                    "role": "user",
                    "content": [
                        {
                            "type": "image_url",
                            "image_url": {"url": f"data:{mime_type};base64,{image_base64}"},
                        },
                        {"type": "text", "text": LABEL_SCAN_PROMPT},
                    ],
                }
            ],
        }
        text = self._complete(request, f"label scan ({mime_type}, {len(image_base64)} base64 chars)")

        label = parse_sds_payload(text, context="label scan")
        logger.info(
            f"Label scan extracted product '{label.get('product_name')}' "
            f"by '{label.get('manufacturer')}', confidence={label.get('confidence')}"
        )
        return label
