import os
from functools import lru_cache
from pathlib import Path
from typing import Dict, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from .stores import StoreProfile

# older per-script variable names; which one applies depends on the store
LEGACY_NAMES = ("KOFI_USERNAME", "KOFI_LIMIT", "ACG_STORE_SLUG", "ACG_LIMIT")


def _parse_limit(v) -> Optional[int]:
    # parseInt-style: garbage or 0 means "unset", clamping happens per store
    try:
        n = int(str(v).strip())
    except (TypeError, ValueError):
        return None
    return n or None


class Settings(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    store: str = Field(default="kofi", alias="STOREFEED_STORE")
    target: Optional[str] = Field(default=None, alias="STOREFEED_TARGET")
    limit: Optional[int] = Field(default=None, alias="STOREFEED_LIMIT")
    out_file: Optional[str] = Field(default=None, alias="OUT_FILE")
    nav_timeout_ms: int = Field(default=60000, alias="STOREFEED_NAV_TIMEOUT_MS")
    settle_ms: int = Field(default=2500, alias="STOREFEED_SETTLE_MS")
    detail_pause_s: float = Field(default=0.8, alias="STOREFEED_DETAIL_PAUSE_S")
    http_timeout_s: float = Field(default=30.0, alias="STOREFEED_HTTP_TIMEOUT_S")
    raw_dir: Optional[str] = Field(default=None, alias="STOREFEED_RAW_DIR")
    legacy_env: Dict[str, str] = Field(default_factory=dict)

    @model_validator(mode="before")
    @classmethod
    def _collect_legacy(cls, data):
        if isinstance(data, dict):
            data = dict(data)
            legacy = dict(data.get("legacy_env") or {})
            for name in LEGACY_NAMES:
                if data.get(name):
                    legacy[name] = str(data[name])
            data["legacy_env"] = legacy
        return data

    @field_validator("limit", mode="before")
    @classmethod
    def _lenient_limit(cls, v):
        return _parse_limit(v)

    @field_validator("target", "out_file", "raw_dir", mode="before")
    @classmethod
    def _blank_is_unset(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v

    def for_store(self, profile: StoreProfile) -> "Settings":
        """Fill target / limit from the store's own legacy variables, then its defaults."""
        target = self.target or self.legacy_env.get(profile.legacy_target_env) or profile.default_target
        limit = self.limit
        if limit is None:
            limit = _parse_limit(self.legacy_env.get(profile.legacy_limit_env))
        if limit is None:
            limit = profile.default_limit
        return self.model_copy(update={"target": target, "limit": limit})


def _load_dotenv():
    # Load from repo root if present, otherwise rely on environment variables.
    root_env = Path(__file__).resolve().parents[1] / ".env"
    if root_env.exists():
        load_dotenv(root_env)
    else:
        load_dotenv()


@lru_cache()
def get_settings() -> Settings:
    _load_dotenv()
    try:
        return Settings(**os.environ)
    except ValidationError as exc:
        bad = [str(e["loc"][0]) for e in exc.errors() if e["loc"]]
        detail = f"Invalid environment variables: {', '.join(bad)}"
        raise RuntimeError(detail) from exc
