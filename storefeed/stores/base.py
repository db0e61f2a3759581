from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict

from ..schema import DEFAULT_LIMIT


class StoreProfile(BaseModel):
    """
    Per-storefront heuristics for the listing scanner and pipeline.

    Selectors are CSS (soupsieve); product_url_pattern is a regex searched
    in the resolved anchor URL.
    """
    model_config = ConfigDict(frozen=True)

    key: str
    mode: Literal["browser", "static"]
    origin: str                          # e.g. "https://ko-fi.com"
    listing_path: str                    # formatted with target=...
    anchor_selector: str
    product_url_pattern: str
    card_selector: str
    heading_selector: str
    asset_domain: str                    # registered domain of the image CDN
    require_image: bool = False
    enrich_details: bool = False
    default_limit: int = DEFAULT_LIMIT
    max_limit: int = 8
    source: Optional[str] = None
    default_target: str = "yumykon"
    default_out_file: str = "data/store_products.json"
    legacy_target_env: Optional[str] = None   # per-script env names, e.g. KOFI_USERNAME
    legacy_limit_env: Optional[str] = None

    def listing_url(self, target: Optional[str] = None) -> str:
        return self.origin + self.listing_path.format(target=target or self.default_target)
