import json
import os
import tempfile
import unittest
from contextlib import asynccontextmanager
from pathlib import Path
from unittest.mock import patch

import requests

from storefeed.__main__ import main
from storefeed.config import Settings, get_settings
from storefeed.pipeline import run
from storefeed.stores import UnknownStoreError

from fakes import FakeContext, fake_session
from pages import ACG_LISTING, KOFI_DETAIL_ABC, KOFI_DETAIL_GHI, KOFI_LISTING

KOFI_URL = "https://ko-fi.com/yumykon/shop/newproducts"


class PipelineCase(unittest.TestCase):
    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.out = Path(self._tmp.name) / "data" / "snapshot.json"

    def tearDown(self):
        self._tmp.cleanup()

    def settings(self, **kw):
        kw.setdefault("out_file", str(self.out))
        return Settings(settle_ms=0, detail_pause_s=0, **kw)

    def written(self):
        return json.loads(self.out.read_text(encoding="utf-8"))


class TestStaticPipeline(PipelineCase):
    def test_listing_to_file(self):
        with patch("storefeed.pipeline.fetch_static", return_value=ACG_LISTING) as fetch:
            snap = run(self.settings(store="acggoods", target="shop1"))
        fetch.assert_called_once()
        self.assertEqual(fetch.call_args[0][0], "https://acggoods.com/store/shop1")
        self.assertTrue(snap.active)
        data = self.written()
        self.assertEqual(
            [(i["url"], i["title"], i["price"], i["source"]) for i in data["items"]],
            [
                ("https://acggoods.com/product/111", "Figure & Stand", "$24.00", "acggoods"),
                ("https://acggoods.com/product/333", "Keychain", "$6.50", "acggoods"),
            ],
        )

    def test_limit(self):
        with patch("storefeed.pipeline.fetch_static", return_value=ACG_LISTING):
            snap = run(self.settings(store="acggoods", limit=1))
        self.assertEqual(len(snap.items), 1)

    def test_source_unavailable_gives_empty_snapshot(self):
        err = requests.HTTPError("503 Server Error")
        with patch("storefeed.pipeline.fetch_static", side_effect=err):
            snap = run(self.settings(store="acggoods"))
        self.assertEqual(snap.items, [])
        self.assertFalse(snap.active)
        data = self.written()
        self.assertEqual((data["items"], data["active"]), ([], False))

    def test_store_reads_its_own_legacy_variables(self):
        env = {"STOREFEED_STORE": "acggoods", "OUT_FILE": str(self.out), "STOREFEED_SETTLE_MS": "0",
               "KOFI_USERNAME": "kofiuser", "KOFI_LIMIT": "1",
               "ACG_STORE_SLUG": "acgshop", "ACG_LIMIT": "20"}
        with patch("storefeed.pipeline.fetch_static", return_value=ACG_LISTING) as fetch:
            snap = run(Settings(**env))
        self.assertEqual(fetch.call_args[0][0], "https://acggoods.com/store/acgshop")
        self.assertEqual(len(snap.items), 2)

    def test_raw_dump(self):
        raw_dir = Path(self._tmp.name) / "raw"
        with patch("storefeed.pipeline.fetch_static", return_value=ACG_LISTING):
            run(self.settings(store="acggoods", raw_dir=str(raw_dir)))
        self.assertEqual(len(list(raw_dir.glob("*.html"))), 1)


class TestBrowserPipeline(PipelineCase):
    def test_enriched_items_and_skipped_detail(self):
        ctx = FakeContext({
            KOFI_URL: KOFI_LISTING,
            "https://ko-fi.com/s/abc123": KOFI_DETAIL_ABC,
            # def456 has no page: navigation times out
            "https://ko-fi.com/s/ghi789": KOFI_DETAIL_GHI,
        })
        state = {}
        with patch("storefeed.pipeline.browser_session", fake_session(ctx, state)):
            snap = run(self.settings(store="kofi"))

        self.assertTrue(state["closed"])
        self.assertEqual(
            [(p.url, p.title, p.price) for p in snap.items],
            [
                ("https://ko-fi.com/s/abc123", "Cute Sticker", "$3.59"),
                ("https://ko-fi.com/s/ghi789", "Art Print A5", "$8.00"),
            ],
        )
        self.assertEqual(snap.items[1].image, "https://storage.ko-fi.com/cdn/useruploads/post/ghi-large.png")
        self.assertNotIn("https://ko-fi.com/s/def456", [i["url"] for i in self.written()["items"]])

    def test_only_limited_items_are_visited(self):
        ctx = FakeContext({KOFI_URL: KOFI_LISTING, "https://ko-fi.com/s/abc123": KOFI_DETAIL_ABC})
        with patch("storefeed.pipeline.browser_session", fake_session(ctx)):
            snap = run(self.settings(store="kofi", limit=1))
        self.assertEqual([p.url for p in snap.items], ["https://ko-fi.com/s/abc123"])
        self.assertEqual(ctx.visited, [KOFI_URL, "https://ko-fi.com/s/abc123"])

    def test_limit_never_exceeds_store_ceiling(self):
        cards = "".join(
            f'<li><a href="/s/p{i}"><img src="https://storage.ko-fi.com/{i}.png" alt="Item {i}"></a></li>'
            for i in range(12)
        )
        pages = {KOFI_URL: f"<ul>{cards}</ul>"}
        pages.update({f"https://ko-fi.com/s/p{i}": f"<h1>Item {i}</h1>" for i in range(12)})
        ctx = FakeContext(pages)
        with patch("storefeed.pipeline.browser_session", fake_session(ctx)):
            snap = run(self.settings(store="kofi", limit=20))
        self.assertEqual(len(snap.items), 8)

    def test_listing_timeout_gives_empty_snapshot(self):
        state = {}
        with patch("storefeed.pipeline.browser_session", fake_session(FakeContext({}), state)):
            snap = run(self.settings(store="kofi"))
        self.assertEqual((snap.items, snap.active), ([], False))
        self.assertTrue(state["closed"])

    def test_browser_launch_failure_gives_empty_snapshot(self):
        @asynccontextmanager
        async def broken(settings):
            raise RuntimeError("Executable doesn't exist")
            yield

        with patch("storefeed.pipeline.browser_session", broken):
            snap = run(self.settings(store="kofi"))
        self.assertFalse(snap.active)
        self.assertFalse(self.written()["active"])

    def test_empty_listing(self):
        ctx = FakeContext({KOFI_URL: "<html><body></body></html>"})
        with patch("storefeed.pipeline.browser_session", fake_session(ctx)):
            snap = run(self.settings(store="kofi"))
        self.assertEqual((snap.items, snap.active), ([], False))
        self.assertEqual(ctx.visited, [KOFI_URL])


class TestEntryPoints(PipelineCase):
    def test_unknown_store(self):
        with self.assertRaises(UnknownStoreError):
            run(self.settings(store="etsy"))

    def test_cli_unknown_store_exits_nonzero(self):
        self.assertEqual(main(["etsy"]), 2)

    def test_cli_bad_config_exits_nonzero(self):
        get_settings.cache_clear()
        try:
            with patch.dict(os.environ, {"STOREFEED_SETTLE_MS": "abc"}), \
                    patch("storefeed.__main__.run") as fake_run:
                self.assertEqual(main([]), 2)
            fake_run.assert_not_called()
        finally:
            get_settings.cache_clear()

    def test_cli_store_override(self):
        with patch("storefeed.__main__.run") as fake_run:
            self.assertEqual(main(["acggoods"]), 0)
        self.assertEqual(fake_run.call_args[0][0].store, "acggoods")


if __name__ == "__main__":
    unittest.main()
