import logging
import re
from typing import List, Optional

import tldextract
from bs4 import Tag

from .document import Document, collapse_ws, resolve_url
from .prices import guess_price
from .schema import RawCandidate, DEFAULT_TITLE
from .stores import StoreProfile

logger = logging.getLogger(__name__)

# bundled public suffix snapshot only; no network lookup on first use
_tld = tldextract.TLDExtract(suffix_list_urls=())


def registered_domain(url: str) -> str:
    return _tld(url or "").registered_domain.lower()


def _img_src(doc: Document, img: Tag) -> str:
    src = doc.attr(img, "src") or doc.attr(img, "data-src")
    if not src:
        srcset = doc.attr(img, "srcset")
        if srcset:
            src = srcset.split(",")[0].strip().split(" ")[0]
    return src


def pick_image(doc: Document, card: Tag, profile: StoreProfile) -> Optional[Tag]:
    imgs = doc.find_all("img", within=card)
    for img in imgs:
        src = resolve_url(_img_src(doc, img), profile.origin)
        if registered_domain(src) == profile.asset_domain:
            return img
    return imgs[0] if imgs else None


def pick_title(doc: Document, card: Tag, anchor: Tag, img: Optional[Tag], profile: StoreProfile) -> str:
    heading = doc.find(profile.heading_selector, within=card)
    for cand in (doc.text(heading), doc.attr(img, "alt"), doc.text(anchor)):
        cand = collapse_ws(cand)
        if cand:
            return cand
    return DEFAULT_TITLE


def scan_listing(doc: Document, profile: StoreProfile) -> List[RawCandidate]:
    """
    One RawCandidate per product anchor, in document order.

    No dedup here; the same product is usually linked from both its image
    and its caption, the normalizer folds those.
    """
    pattern = re.compile(profile.product_url_pattern, re.I)
    out: List[RawCandidate] = []
    for a in doc.find_all(profile.anchor_selector):
        url = resolve_url(doc.attr(a, "href"), profile.origin)
        if not url or not pattern.search(url):
            continue

        card = doc.closest(a, profile.card_selector) or a
        img = pick_image(doc, card, profile)
        image = resolve_url(_img_src(doc, img), profile.origin) if img is not None else ""
        if profile.require_image and not image:
            logger.debug("[SCAN] drop %s (no image)", url)
            continue

        out.append(RawCandidate(
            url=url,
            image=image,
            title=pick_title(doc, card, a, img, profile),
            price=guess_price(doc.text(card)),
        ))

    logger.info("[SCAN] %s: %d candidate anchors", profile.key, len(out))
    return out
