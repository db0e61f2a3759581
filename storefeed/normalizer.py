import logging
import re
from typing import Iterable, List, Optional, Sequence

from .document import collapse_ws
from .prices import is_price
from .schema import Product, RawCandidate, DEFAULT_LIMIT, DEFAULT_TITLE, MAX_ITEMS

logger = logging.getLogger(__name__)

LEADING_PRICE = re.compile(r"^\$\s?\d[\d,]*(?:\.\d{1,2})?\s*")
SOLD = re.compile(r"\b\d[\d,]*\s*sold\b", re.I)
# "Cute Sticker - Maker's Ko-fi Shop"; tried before the generic one since
# "Ko-fi" itself contains a dash
STORE_SUFFIXES = [
    re.compile(r"\s*-\s+.*?'s\s+Ko-fi\s+Shop\s*$", re.I),
    re.compile(r"\s+-\s*[^-]*\bShop\s*$", re.I),
]
DESCRIPTION_SEP = " - "


def unique_by_url(items: Iterable[RawCandidate]) -> List[RawCandidate]:
    seen = set()
    out = []
    for it in items:
        url = (it.url or "").strip()
        if not url or url in seen:
            continue
        seen.add(url)
        out.append(it if it.url == url else it.model_copy(update={"url": url}))
    return out


def clamp_limit(value, ceiling: int = MAX_ITEMS, default: int = DEFAULT_LIMIT) -> int:
    try:
        n = int(str(value).strip())
    except (TypeError, ValueError):
        n = 0
    # like parseInt(...) || 8: zero and garbage both mean "unset"
    if n == 0:
        n = default
    ceiling = min(ceiling, MAX_ITEMS)
    return max(1, min(n, ceiling))


def _strip_once(t: str, price: str) -> str:
    t = collapse_ws(t)
    t = LEADING_PRICE.sub("", t)
    t = collapse_ws(SOLD.sub(" ", t))
    if price:
        # naive: every occurrence goes, not only a trailing one
        t = collapse_ws(t.replace(price, " "))
    for pat in STORE_SUFFIXES:
        stripped = pat.sub("", t)
        if stripped != t:
            t = stripped
            break
    if DESCRIPTION_SEP in t:
        t = t.split(DESCRIPTION_SEP, 1)[0]
    return t.strip()


def clean_title(title: Optional[str], price: Optional[str] = "") -> str:
    """
    Strip price / sold-count / shop-name noise from a listing title.

    Runs to a fixed point so clean_title(clean_title(t, p), p) == clean_title(t, p).
    """
    price = price if is_price(price or "") else ""
    t = title or ""
    while True:
        nxt = _strip_once(t, price)
        if nxt == t:
            break
        t = nxt
    return t or DEFAULT_TITLE


def normalize(candidates: Sequence[RawCandidate], limit, source: Optional[str] = None,
              ceiling: int = MAX_ITEMS, default: int = DEFAULT_LIMIT) -> List[Product]:
    picked = unique_by_url(candidates)[:clamp_limit(limit, ceiling, default)]
    products = [
        Product(
            url=c.url,
            image=c.image or "",
            title=clean_title(c.title, c.price),
            price=c.price or "",
            source=source,
        )
        for c in picked
    ]
    logger.info("[NORM] %d candidates -> %d products", len(candidates), len(products))
    return products
