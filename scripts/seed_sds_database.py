#!/usr/bin/env python3
"""
Seed the shared SDS database from a list of common workplace products.

Each product not already cached is resolved through the external lookup
service and stored with its GHS classification and industry tags, so later
lookups hit the cache. A starter list ships as scripts/products.yaml.
Safe to re-run: products already in the database are skipped.

Products file format (YAML):

    products:
      - product_name: "Acetone"
        manufacturer: "Sunnyside"
        industry_tags: ["auto-body", "manufacturing"]

Example usage:
    python scripts/seed_sds_database.py
    python scripts/seed_sds_database.py --products my_products.yaml --delay 10
    python scripts/seed_sds_database.py --dry-run
"""
import argparse
import logging
import sys
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, List, Optional

import yaml
from tenacity import (
    Retrying,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
)

# Ensure we can import from the project root
project_root = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(project_root))

from core.cache.sds_cache import SdsCacheService
from core.exceptions import ExternalServiceError, SafetyProgramError
from core.llm.interfaces import SdsSeedProvider
from core.resolver.service import is_confident

logger = logging.getLogger(__name__)

# Rate limited / overloaded
RETRYABLE_STATUS_CODES = frozenset({429, 503, 529})
MAX_ATTEMPTS = 5

DEFAULT_PRODUCTS_FILE = Path(__file__).resolve().parent / "products.yaml"


@dataclass
class SeedProduct:
    product_name: str
    manufacturer: str
    industry_tags: List[str] = field(default_factory=list)


@dataclass
class SeedSummary:
    seeded: int = 0
    not_found: int = 0
    skipped: int = 0
    failed: int = 0

    @property
    def processed(self) -> int:
        return self.seeded + self.not_found + self.failed


def load_products(path: str) -> List[SeedProduct]:
    """Read the products YAML file."""
    with open(path, 'r') as f:
        data = yaml.safe_load(f) or {}

    products = []
    for i, entry in enumerate(data.get('products') or []):
        name = (entry or {}).get('product_name')
        manufacturer = (entry or {}).get('manufacturer')
        if not name or not manufacturer:
            logger.warning(f"Skipping products[{i}]: product_name and manufacturer are required")
            continue
        products.append(SeedProduct(
            product_name=str(name),
            manufacturer=str(manufacturer),
            industry_tags=[str(tag) for tag in entry.get('industry_tags') or []],
        ))
    return products


def is_retryable(exc: BaseException) -> bool:
    """Only rate-limit and overload responses are worth retrying."""
    return isinstance(exc, ExternalServiceError) and exc.status_code in RETRYABLE_STATUS_CODES


def _log_retry(retry_state) -> None:
    logger.warning(
        f"Lookup rate limited (attempt {retry_state.attempt_number}/{MAX_ATTEMPTS}), "
        f"retrying in {retry_state.next_action.sleep:.0f}s"
    )


def build_retryer(wait=None) -> Retrying:
    return Retrying(
        retry=retry_if_exception(is_retryable),
        stop=stop_after_attempt(MAX_ATTEMPTS),
        wait=wait or wait_exponential(multiplier=5, min=5, max=120),
        before_sleep=_log_retry,
        reraise=True,
    )


def seed_products(
    products: List[SeedProduct],
    cache: SdsCacheService,
    lookup: SdsSeedProvider,
    delay: float = 5.0,
    dry_run: bool = False,
    retryer: Optional[Retrying] = None,
    sleep: Callable[[float], None] = time.sleep
) -> SeedSummary:
    """
    Resolve and store every product that is not already cached.

    Args:
        products: Products to seed
        cache: Shared SDS cache
        lookup: External lookup reporting SDS references with GHS data
        delay: Seconds to pause between external lookups
        dry_run: Report what would be looked up without calling the provider
        retryer: tenacity Retrying used around each lookup
        sleep: Sleep function (injected for tests)

    Returns:
        SeedSummary with per-outcome counts
    """
    retryer = retryer or build_retryer()
    summary = SeedSummary()
    total = len(products)

    for i, product in enumerate(products, start=1):
        prefix = f"[{i}/{total}] {product.product_name}"

        if cache.exists(product.product_name):
            logger.info(f"{prefix}: already in database, skipping")
            summary.skipped += 1
            continue

        if dry_run:
            logger.info(f"{prefix}: would look up ({product.manufacturer})")
            continue

        try:
            record, ghs = retryer(
                lookup.resolve_sds_with_ghs, product.product_name, product.manufacturer
            )
        except SafetyProgramError as e:
            logger.error(f"{prefix}: lookup failed: {e}")
            summary.failed += 1
        else:
            if not cache.store(record, industry_tags=product.industry_tags, ghs=ghs):
                summary.failed += 1
            elif is_confident(record):
                logger.info(f"{prefix}: SDS found (confidence {record.confidence})")
                summary.seeded += 1
            else:
                portal = record.manufacturer_portal_url or "no portal"
                logger.info(f"{prefix}: SDS not found ({portal})")
                summary.not_found += 1

        if i < total and delay > 0:
            sleep(delay)

    return summary


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        description="Seed the shared SDS database",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__
    )
    parser.add_argument(
        '--products',
        default=str(DEFAULT_PRODUCTS_FILE),
        help="YAML file listing products to seed (default: scripts/products.yaml)"
    )
    parser.add_argument('--delay', type=float, default=5.0, help="Seconds between lookups (default: 5)")
    parser.add_argument('--dry-run', action='store_true', help="List products that would be looked up")
    parser.add_argument('--config', default='config.yaml', help="Path to config.yaml")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    from core.app_context import AppContext
    from core.config_loader import load_config

    products = load_products(args.products)
    logger.info(f"Loaded {len(products)} products from {args.products}")

    ctx = AppContext.build(load_config(args.config))
    try:
        if ctx.ai_service.client is None and not args.dry_run:
            logger.error("No lookup API key configured (set SDS_LLM_API_KEY or OPENAI_API_KEY)")
            return 1

        summary = seed_products(
            products,
            cache=ctx.sds_cache,
            lookup=ctx.ai_service,
            delay=args.delay,
            dry_run=args.dry_run,
        )
    finally:
        ctx.close()

    print("=" * 60)
    print(f"Seeded:    {summary.seeded}")
    print(f"Not found: {summary.not_found}")
    print(f"Skipped:   {summary.skipped}")
    print(f"Failed:    {summary.failed}")
    print("=" * 60)
    return 0 if summary.failed == 0 else 2


if __name__ == "__main__":
    sys.exit(main())
