"""
Moz Client Tests

Requests go through httpx.MockTransport; no network access.
"""

import json

import httpx
import pytest

from marketscope.integrations.moz import MozClient, MozError, RetryConfig

NO_WAIT = RetryConfig(max_retries=2, initial_delay=0.0)


def make_client(handler, access_id="moz-id", secret_key="moz-secret") -> MozClient:
    return MozClient(
        access_id=access_id,
        secret_key=secret_key,
        timeout=5.0,
        retry_config=NO_WAIT,
        transport=httpx.MockTransport(handler),
    )


def metrics_response(**overrides) -> httpx.Response:
    result = {
        "page": "acme.com/",
        "domain_authority": 72,
        "page_authority": 61,
        "spam_score": 1,
        "root_domains_to_root_domain": 2310,
        "external_pages_to_root_domain": 58000,
    }
    result.update(overrides)
    return httpx.Response(200, json={"results": [result]})


class TestMozClient:

    @pytest.mark.asyncio
    async def test_analyze_maps_metrics(self):
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return metrics_response()

        async with make_client(handler) as moz:
            metrics = await moz.analyze("acme.com")

        assert metrics.domain_authority == 72
        assert metrics.page_authority == 61
        assert metrics.linking_domains == 2310
        assert metrics.total_links == 58000
        assert metrics.seo_strength == "Very Strong"
        assert metrics.degraded is False

        request = seen[0]
        assert request.url.path.endswith("/v2/url_metrics")
        assert request.headers["Authorization"].startswith("Basic ")
        assert json.loads(request.content) == {"targets": ["https://acme.com"]}

    @pytest.mark.asyncio
    async def test_existing_scheme_kept(self):
        seen = []

        def handler(request):
            seen.append(json.loads(request.content))
            return metrics_response()

        async with make_client(handler) as moz:
            await moz.analyze("http://acme.com/pricing")
            await moz.analyze("HTTPS://acme.com")

        assert seen[0]["targets"] == ["http://acme.com/pricing"]
        assert seen[1]["targets"] == ["HTTPS://acme.com"]

    @pytest.mark.asyncio
    async def test_retries_server_errors_then_succeeds(self):
        attempts = []

        def handler(request):
            attempts.append(request)
            if len(attempts) < 3:
                return httpx.Response(503, json={"message": "busy"})
            return metrics_response(domain_authority=40)

        async with make_client(handler) as moz:
            metrics = await moz.analyze("acme.com")

        assert len(attempts) == 3
        assert metrics.seo_strength == "Medium"

    @pytest.mark.asyncio
    async def test_gives_up_after_three_attempts(self):
        attempts = []

        def handler(request):
            attempts.append(request)
            return httpx.Response(429, json={"message": "rate limited"})

        async with make_client(handler) as moz:
            with pytest.raises(MozError) as exc_info:
                await moz.analyze("acme.com")

        assert len(attempts) == 3
        assert exc_info.value.status_code == 429

    @pytest.mark.asyncio
    async def test_auth_error_not_retried(self):
        attempts = []

        def handler(request):
            attempts.append(request)
            return httpx.Response(401, json={"message": "bad credentials"})

        async with make_client(handler) as moz:
            with pytest.raises(MozError, match="bad credentials"):
                await moz.analyze("acme.com")

        assert len(attempts) == 1

    @pytest.mark.asyncio
    async def test_transport_errors_retried(self):
        attempts = []

        def handler(request):
            attempts.append(request)
            raise httpx.ConnectError("connection refused", request=request)

        async with make_client(handler) as moz:
            with pytest.raises(MozError, match="Request failed"):
                await moz.analyze("acme.com")

        assert len(attempts) == 3

    @pytest.mark.asyncio
    async def test_empty_results_is_an_error(self):
        def handler(request):
            return httpx.Response(200, json={"results": []})

        async with make_client(handler) as moz:
            with pytest.raises(MozError, match="No metrics"):
                await moz.analyze("acme.com")

    @pytest.mark.asyncio
    async def test_missing_credentials(self):
        def handler(request):
            raise AssertionError("no request expected")

        async with make_client(handler, access_id=None, secret_key=None) as moz:
            assert moz.is_configured is False
            with pytest.raises(MozError, match="credentials"):
                await moz.analyze("acme.com")
