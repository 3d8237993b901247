"""LLM Module - External SDS lookup and label extraction services."""
from core.llm.interfaces import LabelExtractor, SdsLookupProvider, SdsSeedProvider
from core.llm.openai_service import OpenAIService

__all__ = ['LabelExtractor', 'SdsLookupProvider', 'SdsSeedProvider', 'OpenAIService']
