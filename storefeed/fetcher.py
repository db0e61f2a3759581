import logging
from contextlib import asynccontextmanager

import requests
from playwright.async_api import async_playwright

from .config import Settings

logger = logging.getLogger(__name__)

UA = "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120 Safari/537.36"
LOCALE = "en-US"
ACCEPT_LANGUAGE = "en-US,en;q=0.9"
VIEWPORT = {"width": 1280, "height": 720}


@asynccontextmanager
async def browser_session(settings: Settings):
    """Headless Chromium context for one run; the browser is closed on every exit path."""
    async with async_playwright() as pw:
        browser = await pw.chromium.launch(headless=True)
        try:
            ctx = await browser.new_context(user_agent=UA, locale=LOCALE, viewport=VIEWPORT)
            yield ctx
        finally:
            logger.info("[SHUTDOWN] Closing browser...")
            await browser.close()


async def fetch_html(url: str, context, timeout_ms: int = 60000, settle_ms: int = 2500) -> str:
    # no retries: a failed page is reported to the caller and the next scheduled run retries
    page = await context.new_page()
    try:
        logger.info("[FETCH] %s", url)
        await page.goto(url, timeout=timeout_ms, wait_until="domcontentloaded")
        # give client-side rendering a moment to fill the grid
        if settle_ms:
            await page.wait_for_timeout(settle_ms)
        return await page.content()
    finally:
        await page.close()


def fetch_static(url: str, timeout_s: float = 30.0) -> str:
    logger.info("[FETCH] %s", url)
    r = requests.get(url, headers={"user-agent": UA, "accept-language": ACCEPT_LANGUAGE}, timeout=timeout_s)
    r.raise_for_status()
    return r.text
