import yaml
import os
from typing import List, Optional, Dict, Any
from pydantic import BaseModel, Field


class DatabaseConfig(BaseModel):
    url: str = "sqlite:///./hazcom.db"


class LlmConfig(BaseModel):
    """External SDS lookup service (OpenAI-compatible chat completions API)."""
    base_url: Optional[str] = None
    api_key: Optional[str] = None
    model: str = "gpt-4o-mini-search-preview"
    # Search-capable models accept web_search_options and reject temperature
    web_search: bool = True
    temperature: float = 0.0
    max_tokens: int = 1500
    timeout_seconds: float = 60.0
    # Label scans need an image-capable model
    vision_model: str = "gpt-4o"
    vision_max_tokens: int = 4000


class ResolverConfig(BaseModel):
    """Confidence gate and concurrency settings for SDS resolution."""
    confidence_threshold: float = Field(default=0.5, ge=0.0, le=1.0)
    writeback_workers: int = Field(default=2, ge=1)
    # How long a joined caller waits for another caller's in-flight lookup
    inflight_wait_seconds: float = 90.0
    cached_source_label: str = "Shared SDS Database"


class UploadConfig(BaseModel):
    directory: str = "uploads/sds"
    max_size_bytes: int = 25 * 1024 * 1024
    allowed_content_types: List[str] = Field(default_factory=lambda: ["application/pdf"])
    public_url_prefix: str = "/sds-uploads"


class ScanConfig(BaseModel):
    """Label scanning and SDS auto-linking."""
    # Fresh external lookups must beat this to be linked automatically
    auto_link_confidence: float = Field(default=0.7, ge=0.0, le=1.0)
    allowed_mime_types: List[str] = Field(
        default_factory=lambda: ["image/jpeg", "image/png", "image/webp", "image/gif"]
    )
    # Defaults to the reference list bundled with core.scan
    known_chemicals_path: Optional[str] = None


class CategoryWeights(BaseModel):
    """Weights (in percent) for each compliance sub-score."""
    sds: float = 30.0
    labels: float = 25.0
    training: float = 30.0
    program: float = 15.0


class StatusThresholds(BaseModel):
    inspection_ready: int = 90
    getting_close: int = 70
    needs_work: int = 50


class ComplianceConfig(BaseModel):
    weights: CategoryWeights = Field(default_factory=CategoryWeights)
    thresholds: StatusThresholds = Field(default_factory=StatusThresholds)
    max_improvements: int = 3


class WebConfig(BaseModel):
    host: str = "0.0.0.0"
    port: int = 8080
    lookup_rate_limit: str = "20/minute"
    upload_rate_limit: str = "10/minute"
    scan_rate_limit: str = "10/minute"


class AppConfig(BaseModel):
    database: DatabaseConfig = Field(default_factory=DatabaseConfig)
    llm: LlmConfig = Field(default_factory=LlmConfig)
    resolver: ResolverConfig = Field(default_factory=ResolverConfig)
    uploads: UploadConfig = Field(default_factory=UploadConfig)
    scan: ScanConfig = Field(default_factory=ScanConfig)
    compliance: ComplianceConfig = Field(default_factory=ComplianceConfig)
    web: WebConfig = Field(default_factory=WebConfig)


def normalize_database_url(url: str) -> str:
    """Hosted Postgres providers hand out 'postgres://', SQLAlchemy needs 'postgresql://'."""
    if url.startswith("postgres://"):
        return url.replace("postgres://", "postgresql://", 1)
    return url


def _set(data: Dict[str, Any], section: str, key: str, value: Any) -> None:
    if section not in data or data[section] is None:
        data[section] = {}
    data[section][key] = value


def _apply_env_overrides(data: Dict[str, Any]) -> Dict[str, Any]:
    # Allow env var override for DB URL
    env_db_url = os.environ.get("DATABASE_URL")
    if env_db_url:
        _set(data, 'database', 'url', env_db_url)

    env_llm_base_url = os.environ.get("SDS_LLM_BASE_URL")
    if env_llm_base_url:
        _set(data, 'llm', 'base_url', env_llm_base_url)

    env_llm_api_key = os.environ.get("SDS_LLM_API_KEY") or os.environ.get("OPENAI_API_KEY")
    if env_llm_api_key and not (data.get('llm') or {}).get('api_key'):
        _set(data, 'llm', 'api_key', env_llm_api_key)

    env_llm_model = os.environ.get("SDS_LLM_MODEL")
    if env_llm_model:
        _set(data, 'llm', 'model', env_llm_model)

    env_upload_dir = os.environ.get("SDS_UPLOAD_DIR")
    if env_upload_dir:
        _set(data, 'uploads', 'directory', env_upload_dir)

    if 'WEB_HOST' in os.environ:
        _set(data, 'web', 'host', os.environ['WEB_HOST'])

    if 'WEB_PORT' in os.environ:
        _set(data, 'web', 'port', int(os.environ['WEB_PORT']))

    return data


def load_config(config_path: str = "config.yaml") -> AppConfig:
    # If not found at relative path (e.g. running from a subdirectory), try the project root
    if not os.path.exists(config_path):
        base_dir = os.path.dirname(os.path.abspath(__file__))
        config_path = os.path.join(base_dir, "..", "config.yaml")

    data: Dict[str, Any] = {}
    if os.path.exists(config_path):
        with open(config_path, "r") as f:
            data = yaml.safe_load(f) or {}

    data = _apply_env_overrides(data)

    config = AppConfig(**data)
    config.database.url = normalize_database_url(config.database.url)
    return config
