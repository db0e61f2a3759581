import asyncio
import logging
from typing import List

from .config import Settings
from .document import Document
from .enricher import enrich_all
from .fetcher import browser_session, fetch_html, fetch_static
from .normalizer import clamp_limit, normalize, unique_by_url
from .scanner import scan_listing
from .schema import Product, Snapshot, build_snapshot
from .storage import save_raw, write_snapshot
from .stores import StoreProfile, pick_profile

logger = logging.getLogger(__name__)


def _keep_raw(settings: Settings, url: str, html: str):
    if settings.raw_dir:
        p = save_raw(settings.raw_dir, url, html)
        logger.info("[RAW] %s -> %s", url, p)


async def harvest_browser(profile: StoreProfile, settings: Settings) -> List[Product]:
    url = profile.listing_url(settings.target)
    limit = clamp_limit(settings.limit, profile.max_limit, profile.default_limit)
    async with browser_session(settings) as ctx:
        html = await fetch_html(url, ctx, timeout_ms=settings.nav_timeout_ms, settle_ms=settings.settle_ms)
        _keep_raw(settings, url, html)
        candidates = unique_by_url(scan_listing(Document(html), profile))[:limit]
        if profile.enrich_details and candidates:
            logger.info("[DETAIL] enriching %d items", len(candidates))
            candidates = await enrich_all(candidates, ctx, settings, profile.origin)
    return normalize(candidates, limit, profile.source, profile.max_limit, profile.default_limit)


def harvest_static(profile: StoreProfile, settings: Settings) -> List[Product]:
    url = profile.listing_url(settings.target)
    html = fetch_static(url, timeout_s=settings.http_timeout_s)
    _keep_raw(settings, url, html)
    candidates = scan_listing(Document(html), profile)
    return normalize(candidates, settings.limit, profile.source, profile.max_limit, profile.default_limit)


def harvest(profile: StoreProfile, settings: Settings) -> List[Product]:
    """Products for one run; any listing-level failure yields an empty list."""
    try:
        if profile.mode == "browser":
            return asyncio.run(harvest_browser(profile, settings))
        return harvest_static(profile, settings)
    except Exception as e:
        logger.warning("[SKIP] %s listing unavailable | %s: %s", profile.key, type(e).__name__, e)
        return []


def run(settings: Settings) -> Snapshot:
    profile = pick_profile(settings.store)
    settings = settings.for_store(profile)
    logger.info("[INIT] %s -> %s", profile.key, profile.listing_url(settings.target))

    items = harvest(profile, settings)
    snap = build_snapshot(items)

    out = write_snapshot(settings.out_file or profile.default_out_file, snap)
    logger.info("[DONE] %d items (active=%s) -> %s", len(snap.items), snap.active, out)
    return snap
