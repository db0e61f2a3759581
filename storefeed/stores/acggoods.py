from .base import StoreProfile

# Server-rendered store page; each product card is the tracked anchor itself.
ACGGOODS = StoreProfile(
    key="acggoods",
    mode="static",
    origin="https://acggoods.com",
    listing_path="/store/{target}",
    anchor_selector="a.track-show-product[href]",
    product_url_pattern=r"^https?://(www\.)?acggoods\.com/",
    card_selector="a.track-show-product",
    heading_selector=".acg-product-c-w__name, h1, h2, h3, h4, h5, h6",
    asset_domain="acggoods.com",
    require_image=True,
    default_limit=8,
    max_limit=24,
    source="acggoods",
    default_out_file="data/store_products.json",
    legacy_target_env="ACG_STORE_SLUG",
    legacy_limit_env="ACG_LIMIT",
)
