"""Tests de la cadena de resolución de imágenes."""

import httpx
import pytest

from thermal_api.images.chain import ChainStatus, ImageResolutionChain
from thermal_api.images.prober import probe_image
from thermal_api.images.resolver import (
    AccessMode,
    candidate_urls,
    extract_drive_id,
    is_drive_ref,
    resolve_image_url,
)


FILE_ID = "1AbCdEfGhIjKlMnOpQrStUvWxYz012345"
VIEW_URL = f"https://drive.google.com/file/d/{FILE_ID}/view?usp=sharing"


class FakeClock:
    def __init__(self):
        self.now = 0.0

    def __call__(self):
        return self.now


# =============================================================================
# RESOLVER
# =============================================================================

class TestResolver:

    @pytest.mark.parametrize(
        "ref",
        [
            VIEW_URL,
            f"https://drive.google.com/open?id={FILE_ID}",
            f"https://drive.google.com/uc?export=view&id={FILE_ID}",
        ],
    )
    def test_extracts_file_id(self, ref):
        assert extract_drive_id(ref) == FILE_ID

    def test_short_ids_ignored(self):
        assert extract_drive_id("https://drive.google.com/file/d/short/view") is None

    def test_modes(self):
        assert resolve_image_url(VIEW_URL, AccessMode.DIRECT) == f"https://drive.google.com/uc?id={FILE_ID}"
        assert resolve_image_url(VIEW_URL, AccessMode.THUMBNAIL) == f"https://drive.google.com/thumbnail?id={FILE_ID}&sz=s1600"
        assert resolve_image_url(VIEW_URL, AccessMode.IFRAME) == f"https://drive.google.com/file/d/{FILE_ID}/preview"
        proxy = resolve_image_url(VIEW_URL, AccessMode.PROXY)
        assert proxy.startswith("https://images1-focus-opensocial.googleusercontent.com/gadgets/proxy")
        assert FILE_ID in proxy

    def test_bare_id_is_treated_as_drive_file(self):
        assert resolve_image_url(FILE_ID, AccessMode.IFRAME).endswith(f"/d/{FILE_ID}/preview")

    def test_data_uri_and_foreign_urls_pass_through(self):
        data = "data:image/png;base64,iVBORw0KGgo="
        other = "https://example.com/a.jpg"
        for mode in AccessMode:
            assert resolve_image_url(data, mode) == data
            assert resolve_image_url(other, mode) == other

    def test_empty_reference(self):
        assert resolve_image_url(None) == ""
        assert resolve_image_url("") == ""

    def test_candidates_in_order(self):
        modes = [mode for mode, _ in candidate_urls(VIEW_URL)]
        assert modes == [AccessMode.DIRECT, AccessMode.THUMBNAIL, AccessMode.PROXY, AccessMode.IFRAME]


# =============================================================================
# MÁQUINA DE ESTADOS
# =============================================================================

class TestChain:

    def test_starts_in_direct(self):
        chain = ImageResolutionChain()
        chain.open(VIEW_URL)
        assert chain.status is ChainStatus.LOADING
        assert chain.mode is AccessMode.DIRECT

    def test_two_failures_reach_proxy(self):
        chain = ImageResolutionChain()
        chain.open(VIEW_URL)
        chain.failed()
        chain.failed()
        assert chain.mode is AccessMode.PROXY
        assert chain.status is ChainStatus.LOADING

    def test_load_is_terminal(self):
        chain = ImageResolutionChain()
        chain.open(VIEW_URL)
        chain.failed()
        chain.loaded()
        chain.failed()
        assert chain.status is ChainStatus.LOADED
        assert chain.mode is AccessMode.THUMBNAIL
        assert chain.is_terminal

    def test_iframe_is_terminal_success(self):
        chain = ImageResolutionChain()
        chain.open(VIEW_URL)
        for _ in range(3):
            chain.failed()
        assert chain.mode is AccessMode.IFRAME
        assert chain.is_terminal
        assert chain.fallback_link is None

    def test_exhausted_chain_offers_fallback_link(self):
        chain = ImageResolutionChain()
        chain.open(VIEW_URL)
        for _ in range(4):
            chain.failed()
        assert chain.status is ChainStatus.UNAVAILABLE
        assert chain.mode is None
        assert chain.fallback_link == VIEW_URL

    def test_timeout_advances_like_error(self):
        clock = FakeClock()
        chain = ImageResolutionChain(attempt_timeout=5, clock=clock)
        chain.open(VIEW_URL)

        clock.now = 4.9
        assert chain.check_timeout() is False
        clock.now = 5.0
        assert chain.check_timeout() is True
        assert chain.mode is AccessMode.THUMBNAIL

        # el timeout se reinicia al cambiar de modo
        clock.now = 9.0
        assert chain.check_timeout() is False

    def test_events_from_previous_reference_ignored(self):
        chain = ImageResolutionChain()
        old = chain.open(VIEW_URL)
        new = chain.open("https://drive.google.com/file/d/1ZyXwVuTsRqPoNmLkJiHgFeDcBa987654/view")
        chain.failed(old)
        chain.loaded(old)
        assert chain.status is ChainStatus.LOADING
        assert chain.mode is AccessMode.DIRECT
        chain.loaded(new)
        assert chain.status is ChainStatus.LOADED


# =============================================================================
# PROBER
# =============================================================================

def _client(handler) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


class TestProber:

    @pytest.mark.asyncio
    async def test_direct_success(self):
        client = _client(lambda req: httpx.Response(200, headers={"content-type": "image/jpeg"}, content=b"\xff\xd8"))
        result = await probe_image(VIEW_URL, client)
        assert result.status is ChainStatus.LOADED
        assert result.mode is AccessMode.DIRECT

    @pytest.mark.asyncio
    async def test_html_response_falls_back_to_thumbnail(self):
        def handler(request):
            if request.url.path == "/uc":
                return httpx.Response(200, headers={"content-type": "text/html"}, text="quota")
            return httpx.Response(200, headers={"content-type": "image/png"}, content=b"png")

        result = await probe_image(VIEW_URL, _client(handler))
        assert result.mode is AccessMode.THUMBNAIL
        assert result.to_dict()["status"] == "loaded"

    @pytest.mark.asyncio
    async def test_timeouts_fall_back_to_iframe(self):
        def handler(request):
            if request.url.path.endswith("/preview"):
                return httpx.Response(200, headers={"content-type": "text/html"}, text="<html></html>")
            raise httpx.ReadTimeout("slow", request=request)

        result = await probe_image(VIEW_URL, _client(handler), attempt_timeout=0.1)
        assert result.status is ChainStatus.LOADED
        assert result.mode is AccessMode.IFRAME

    @pytest.mark.asyncio
    async def test_everything_fails(self):
        result = await probe_image(VIEW_URL, _client(lambda req: httpx.Response(403)))
        assert result.status is ChainStatus.UNAVAILABLE
        assert result.to_dict() == {
            "status": "unavailable",
            "mode": None,
            "url": None,
            "fallbackLink": VIEW_URL,
        }

    @pytest.mark.asyncio
    async def test_data_uri_needs_no_request(self):
        calls = []

        def handler(request):
            calls.append(request)
            return httpx.Response(500)

        result = await probe_image("data:image/png;base64,AAAA", _client(handler))
        assert result.status is ChainStatus.LOADED
        assert calls == []

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "ref",
        [
            "http://169.254.169.254/latest/meta-data/",
            "http://localhost:8080/admin",
            "https://example.com/a.jpg",
        ],
    )
    async def test_foreign_url_is_never_requested(self, ref):
        calls = []

        def handler(request):
            calls.append(request)
            return httpx.Response(200, headers={"content-type": "image/png"}, content=b"png")

        result = await probe_image(ref, _client(handler))
        assert calls == []
        assert result.status is ChainStatus.LOADED
        assert result.mode is AccessMode.DIRECT
        assert result.url == ref
        assert result.fallback_link is None


class TestDriveRef:

    def test_drive_url_and_bare_id(self):
        assert is_drive_ref(VIEW_URL)
        assert is_drive_ref(FILE_ID)

    def test_foreign_and_data_refs(self):
        assert not is_drive_ref("http://169.254.169.254/latest/meta-data/")
        assert not is_drive_ref("data:image/png;base64,AAAA")
        assert not is_drive_ref("")
        assert not is_drive_ref(None)
