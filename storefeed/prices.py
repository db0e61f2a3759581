import re
from typing import Optional

_AMOUNT = r"(\d{1,3}(?:,\d{3})+|\d+)(?:\.(\d{1,2}))?"
DOLLAR_RE = re.compile(r"\$\s?" + _AMOUNT)
USD_RE = re.compile(r"\bUSD\s?" + _AMOUNT + r"\b", re.I)
# what a formatted price looks like; anything else is not treated as a price
PRICE_SHAPE = re.compile(r"^\$\d+(?:\.\d{1,2})?$")


def format_amount(whole: str, frac: Optional[str] = None) -> str:
    value = float(whole.replace(",", "") + "." + (frac or "0"))
    return f"${value:.2f}"


def guess_price(text: str, allow_usd: bool = True) -> str:
    """First "$12.34"-style amount in free text, else "USD 12.34", as "$X.XX"."""
    text = text or ""
    m = DOLLAR_RE.search(text)
    if not m and allow_usd:
        m = USD_RE.search(text)
    if not m:
        return ""
    return format_amount(m.group(1), m.group(2))


def is_price(s: str) -> bool:
    return bool(s) and bool(PRICE_SHAPE.match(s))
