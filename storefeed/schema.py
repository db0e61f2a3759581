from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator, model_validator
from typing import Optional, List
from datetime import datetime, timezone

MAX_ITEMS = 24                   # hard ceiling on snapshot size, whatever the config says
DEFAULT_LIMIT = 8                # used when neither config nor store says otherwise
DEFAULT_TITLE = "Product"


class RawCandidate(BaseModel):
    url: str = ""
    image: str = ""              # may be empty
    title: str = ""              # noisy, cleaned later
    price: str = ""              # "$X.XX" or empty


class DetailRecord(BaseModel):
    title: str = DEFAULT_TITLE
    image: str = ""
    price: str = ""


class Product(BaseModel):
    model_config = ConfigDict(frozen=True)

    url: str                     # absolute where resolvable; not HttpUrl so it round-trips unchanged
    image: str = ""
    title: str = DEFAULT_TITLE
    price: str = ""
    source: Optional[str] = None # e.g. "acggoods"

    @field_validator("title")
    @classmethod
    def _title_not_blank(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("title must not be empty")
        return v


def _now() -> datetime:
    return datetime.now(timezone.utc)


class Snapshot(BaseModel):
    updated_at: datetime = Field(default_factory=_now)
    active: bool
    items: List[Product] = Field(default_factory=list)

    @model_validator(mode="after")
    def _check_invariants(self):
        if self.active != bool(self.items):
            raise ValueError("active must be true iff items is non-empty")
        if len(self.items) > MAX_ITEMS:
            raise ValueError(f"snapshot holds {len(self.items)} items, ceiling is {MAX_ITEMS}")
        urls = [p.url for p in self.items]
        if len(set(urls)) != len(urls):
            raise ValueError("item urls must be unique")
        return self

    @field_serializer("updated_at")
    def _iso(self, ts: datetime) -> str:
        # 2026-10-19T12:00:00.000Z
        return ts.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def build_snapshot(items: List[Product]) -> Snapshot:
    """Wrap normalized products into a snapshot, keeping their order."""
    items = list(items)
    return Snapshot(active=len(items) > 0, items=items)
