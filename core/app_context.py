import logging
from dataclasses import dataclass
from typing import Optional

from openai import OpenAI
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker

from core.cache.sds_cache import SdsCacheService
from core.compliance.service import ComplianceScoringService
from core.config_loader import AppConfig, LlmConfig
from core.llm.openai_service import OpenAIService
from core.resolver.inflight import InFlightRegistry
from core.resolver.service import SdsResolutionService
from core.resolver.writeback import WriteBackWorker
from core.scan.known_chemicals import load_known_chemicals
from core.scan.service import LabelScanService
from core.uploads.service import SdsUploadService
from database.database import build_engine, build_session_factory
from database.init_db import init_db

logger = logging.getLogger(__name__)


@dataclass
class AppContext:
    """Application context container that holds all wired dependencies.

    The composing application owns this object's lifecycle: build it once,
    hand services to request handlers, and call close() on shutdown.
    """
    config: AppConfig
    engine: Engine
    session_factory: sessionmaker
    sds_cache: SdsCacheService
    ai_service: OpenAIService
    writeback: WriteBackWorker
    resolution_service: SdsResolutionService
    upload_service: SdsUploadService
    scoring_service: ComplianceScoringService
    scan_service: LabelScanService

    @classmethod
    def build(cls, config: AppConfig, create_tables: bool = True) -> "AppContext":
        """Build an AppContext from config.

        Args:
            config: Loaded application configuration
            create_tables: Create missing tables on startup

        Returns:
            Fully wired AppContext instance
        """
        engine = build_engine(config.database.url)
        if create_tables:
            init_db(engine)
        session_factory = build_session_factory(engine)

        sds_cache = SdsCacheService(session_factory)
        ai_service = cls._build_ai_service(config.llm)
        writeback = WriteBackWorker(sds_cache, max_workers=config.resolver.writeback_workers)

        resolution_service = SdsResolutionService(
            cache=sds_cache,
            lookup=ai_service,
            writeback=writeback,
            registry=InFlightRegistry(),
            confidence_threshold=config.resolver.confidence_threshold,
            inflight_wait_seconds=config.resolver.inflight_wait_seconds,
        )

        scan_service = LabelScanService(
            extractor=ai_service,
            resolver=resolution_service,
            known_chemicals=load_known_chemicals(config.scan.known_chemicals_path),
            auto_link_confidence=config.scan.auto_link_confidence,
            allowed_mime_types=config.scan.allowed_mime_types,
        )

        return cls(
            config=config,
            engine=engine,
            session_factory=session_factory,
            sds_cache=sds_cache,
            ai_service=ai_service,
            writeback=writeback,
            resolution_service=resolution_service,
            upload_service=SdsUploadService(session_factory, config.uploads),
            scoring_service=ComplianceScoringService(config.compliance),
            scan_service=scan_service,
        )

    @staticmethod
    def _build_openai_client(llm_config: LlmConfig) -> Optional[OpenAI]:
        """OpenAI client with a bounded timeout and SDK retries disabled.

        Returns None when no API key is configured.
        """
        if not llm_config.api_key:
            logger.warning("SDS lookup API key not configured; external lookups will be rejected")
            return None

        client_kwargs = {
            'api_key': llm_config.api_key,
            'timeout': llm_config.timeout_seconds,
            'max_retries': 0,
        }
        if llm_config.base_url:
            client_kwargs['base_url'] = llm_config.base_url
        return OpenAI(**client_kwargs)

    @classmethod
    def _build_ai_service(cls, llm_config: LlmConfig) -> OpenAIService:
        """Build OpenAI service from LLM configuration."""
        model_config = {
            'model': llm_config.model,
            'web_search': llm_config.web_search,
            'temperature': llm_config.temperature,
            'max_tokens': llm_config.max_tokens,
            'vision_model': llm_config.vision_model,
            'vision_max_tokens': llm_config.vision_max_tokens,
        }
        return OpenAIService(
            client=cls._build_openai_client(llm_config),
            model_config=model_config
        )

    def close(self) -> None:
        """Drain pending write-backs and release database connections."""
        self.writeback.shutdown(wait=True)
        self.engine.dispose()
