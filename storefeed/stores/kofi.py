from .base import StoreProfile

# Listing is client-rendered, so this one goes through the browser and
# each product page is visited for og:title / og:image.
KOFI = StoreProfile(
    key="kofi",
    mode="browser",
    origin="https://ko-fi.com",
    listing_path="/{target}/shop/newproducts",
    anchor_selector='a[href*="ko-fi.com/s/"], a[href^="/s/"]',
    product_url_pattern=r"^https?://(www\.)?ko-fi\.com/s/[^/?#]+",
    card_selector="article, li, div",
    heading_selector="h1, h2, h3, h4, h5, h6, [class*='title'], [class*='name']",
    asset_domain="ko-fi.com",
    enrich_details=True,
    default_limit=8,
    max_limit=8,
    default_out_file="data/kofi_newproducts.json",
    legacy_target_env="KOFI_USERNAME",
    legacy_limit_env="KOFI_LIMIT",
)
