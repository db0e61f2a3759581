import asyncio
import logging
from typing import List, Optional, Sequence

from .config import Settings
from .document import Document, collapse_ws, resolve_url
from .fetcher import fetch_html
from .prices import guess_price
from .schema import DetailRecord, RawCandidate, DEFAULT_TITLE

logger = logging.getLogger(__name__)

IMAGE_META = ("og:image", "twitter:image")


def extract_detail(html: str, origin: str = "") -> DetailRecord:
    """Title / image / price from a product page's preview metadata and body text."""
    doc = Document(html)

    title = collapse_ws(doc.meta("og:title"))
    if not title:
        title = doc.text(doc.find("h1"))

    image = ""
    for key in IMAGE_META:
        image = resolve_url(doc.meta(key), origin)
        if image:
            break

    return DetailRecord(
        title=title or DEFAULT_TITLE,
        image=image,
        price=guess_price(doc.body_text(), allow_usd=False),
    )


async def enrich(url: str, context, settings: Settings, origin: str = "") -> Optional[DetailRecord]:
    """None means skip the item; a half-right detail record is worse than none."""
    try:
        html = await fetch_html(url, context, timeout_ms=settings.nav_timeout_ms, settle_ms=settings.settle_ms)
        return extract_detail(html, origin)
    except Exception as e:
        logger.warning("[DETAIL] SKIP %s | %s: %s", url, type(e).__name__, e)
        return None


async def enrich_all(candidates: Sequence[RawCandidate], context, settings: Settings,
                     origin: str = "") -> List[RawCandidate]:
    out: List[RawCandidate] = []
    for i, cand in enumerate(candidates):
        if i and settings.detail_pause_s > 0:
            await asyncio.sleep(settings.detail_pause_s)
        detail = await enrich(cand.url, context, settings, origin)
        if detail is None:
            continue
        out.append(RawCandidate(url=cand.url, image=detail.image, title=detail.title, price=detail.price))
        logger.info("[DETAIL] OK   %s | %s | %s", cand.url, detail.title, detail.price or "-")
    return out
