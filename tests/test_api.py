"""HTTP routes with the chain client swapped for a fake."""
from __future__ import annotations

import dataclasses

import httpx
import pytest
from fastapi.testclient import TestClient

from app.config import get_settings
from app.main import app, get_chain_client
from app.sources.chain import ChainDataClient

from conftest import WALLET, FakeChainClient


@pytest.fixture()
def chain(fake_client) -> FakeChainClient:
    return fake_client


@pytest.fixture()
def client(settings, chain):
    app.dependency_overrides[get_settings] = lambda: settings
    app.dependency_overrides[get_chain_client] = lambda: chain
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


class TestHealth:
    @pytest.mark.parametrize("path", ["/health", "/api/health"])
    def test_ok(self, client, path) -> None:
        r = client.get(path)
        assert r.status_code == 200
        assert r.json() == {"ok": True}

    def test_head(self, client) -> None:
        assert client.head("/health").status_code == 200


class TestSummaryRoutes:
    @pytest.mark.parametrize("path", [
        f"/api/wallet/{WALLET}/summary",
        f"/api/address/{WALLET}/summary",
        f"/api/check?address={WALLET}",
        f"/check?address={WALLET}",
    ])
    def test_get_variants_share_one_shape(self, client, path) -> None:
        r = client.get(path)
        assert r.status_code == 200
        body = r.json()
        assert body["address"] == WALLET
        assert body["network"] == "TRON"
        assert set(body) >= {"status", "risk", "totals", "tokens", "blacklisted",
                             "blacklist_timestamp", "transactions", "meta"}

    @pytest.mark.parametrize("path", ["/api/check", "/check"])
    def test_post_json(self, client, path) -> None:
        r = client.post(path, json={"address": WALLET})
        assert r.status_code == 200
        assert r.json()["address"] == WALLET

    def test_post_form(self, client) -> None:
        r = client.post("/api/check", data={"address": WALLET})
        assert r.status_code == 200

    @pytest.mark.parametrize("path", ["/api/wallet/short/summary", "/api/check?address=short", "/check"])
    def test_invalid_address_is_400_without_calls(self, client, chain, path) -> None:
        r = client.get(path)
        assert r.status_code == 400
        assert r.json()["error"].startswith("Invalid TRON address")
        assert chain.calls == []

    def test_upstream_failure_is_500(self, client, chain, upstream_error) -> None:
        chain.errors["blacklist"] = upstream_error
        r = client.get(f"/api/wallet/{WALLET}/summary")
        assert r.status_code == 500
        body = r.json()
        assert "tronscan" in body["error"]
        assert body["details"]["provider"] == "tronscan"
        assert body["details"]["body"] == "<html>busy</html>"

    def test_summary_is_cached_for_report(self, client, settings) -> None:
        client.get(f"/api/wallet/{WALLET}/summary")
        assert list(settings.snapshot_dir.glob("*.json"))

    def test_unwritable_cache_still_returns_summary(self, client, settings, caplog) -> None:
        blocker = settings.snapshot_dir.parent / "blocker"
        blocker.write_text("not a directory")
        app.dependency_overrides[get_settings] = lambda: dataclasses.replace(
            settings, snapshot_dir=blocker / "snapshots")
        r = client.get(f"/api/wallet/{WALLET}/summary")
        assert r.status_code == 200
        assert r.json()["address"] == WALLET
        assert "could not cache snapshot" in caplog.text


class TestChainClientDependency:
    @pytest.mark.asyncio
    async def test_one_client_per_request_with_timeout(self, settings) -> None:
        deps = get_chain_client(settings)
        chain = await deps.__anext__()
        assert isinstance(chain, ChainDataClient)
        http = chain.grid.http
        assert http.timeout == httpx.Timeout(settings.http_timeout)
        assert chain.grid.base == "https://grid.test"
        assert chain.scan.http is http
        await deps.aclose()
        assert http.is_closed


class TestReport:
    @pytest.mark.parametrize("path", [f"/api/wallet/{WALLET}/report", f"/report/{WALLET}"])
    def test_pdf(self, client, path) -> None:
        r = client.get(path)
        assert r.status_code == 200
        assert r.headers["content-type"] == "application/pdf"
        assert r.content.startswith(b"%PDF")

    def test_report_consumes_snapshot(self, client, chain, settings) -> None:
        client.get(f"/api/wallet/{WALLET}/summary")
        calls_before = len(chain.calls)
        r = client.get(f"/report/{WALLET}")
        assert r.status_code == 200
        assert len(chain.calls) == calls_before
        assert not list(settings.snapshot_dir.glob("*.json"))

    def test_invalid_address(self, client) -> None:
        assert client.get("/report/short").status_code == 400


class TestFrontendFallback:
    def test_serves_asset_and_index_fallback(self, client, settings) -> None:
        settings.static_dir.mkdir()
        (settings.static_dir / "index.html").write_text("<html>app</html>")
        (settings.static_dir / "app.js").write_text("console.log(1)")

        assert client.get("/app.js").text == "console.log(1)"
        assert client.get("/").text == "<html>app</html>"
        assert client.get("/wallet/some/deep/link").text == "<html>app</html>"

    def test_unknown_api_path_is_404(self, client, settings) -> None:
        settings.static_dir.mkdir()
        (settings.static_dir / "index.html").write_text("<html>app</html>")
        assert client.get("/api/nope").status_code == 404

    def test_no_frontend_is_404(self, client) -> None:
        assert client.get("/anything").status_code == 404
