"""
Thin DOM capability over BeautifulSoup.

Scanner and enricher only need four things from a page: query by selector,
walk up to the closest container, read an attribute, read visible text.
Both the rendered (playwright) and fetched (requests) pipelines hand their
HTML to this wrapper so the extraction code is shared.
"""
import re
from typing import List, Optional

from bs4 import BeautifulSoup, Comment, Tag

INVISIBLE = {"script", "style", "noscript", "template", "head"}
_WS = re.compile(r"\s+")


def collapse_ws(s: Optional[str]) -> str:
    return _WS.sub(" ", s or "").strip()


def resolve_url(href: Optional[str], origin: str) -> str:
    href = (href or "").strip()
    if not href:
        return ""
    if re.match(r"^https?://", href, re.I):
        return href
    if href.startswith("//"):
        return "https:" + href
    if href.startswith("/"):
        return origin.rstrip("/") + href
    return href


class Document:
    def __init__(self, html: str):
        self.soup = BeautifulSoup(html or "", "lxml")

    def find_all(self, selector: str, within: Optional[Tag] = None) -> List[Tag]:
        root = within if within is not None else self.soup
        return root.select(selector)

    def find(self, selector: str, within: Optional[Tag] = None) -> Optional[Tag]:
        root = within if within is not None else self.soup
        return root.select_one(selector)

    def closest(self, element: Tag, roles: str) -> Optional[Tag]:
        # soupsieve's closest() includes the element itself
        return element.css.closest(roles)

    @staticmethod
    def attr(element: Optional[Tag], name: str) -> str:
        if element is None:
            return ""
        v = element.get(name)
        if isinstance(v, list):
            v = " ".join(v)
        return (v or "").strip()

    @staticmethod
    def text(element: Optional[Tag]) -> str:
        if element is None:
            return ""
        parts = []
        for s in element.find_all(string=True):
            if isinstance(s, Comment):
                continue
            if any(p.name in INVISIBLE for p in s.parents if isinstance(p, Tag)):
                continue
            parts.append(str(s))
        return collapse_ws(" ".join(parts))

    def body_text(self) -> str:
        return self.text(self.soup.body or self.soup)

    def meta(self, key: str) -> str:
        tag = self.soup.find("meta", attrs={"property": key}) or self.soup.find("meta", attrs={"name": key})
        return self.attr(tag, "content")
