"""
Tests for the Amazon page fetcher.

All requests go through an httpx.MockTransport; nothing reaches Amazon.
"""

import httpx
import pytest

from listing_optimizer.config import FETCH_MAX_REDIRECTS
from listing_optimizer.errors import FetchFailed, InvalidAsin, ProductInaccessible, ProductNotFound
from listing_optimizer.services import AmazonFetcher, looks_blocked

from conftest import ROBOT_CHECK_PAGE, product_page


@pytest.fixture
def fetcher(http_client):
    return AmazonFetcher(domain="amazon.in", client=http_client)


@pytest.mark.unit
class TestFetch:

    async def test_returns_page_html(self, fetcher, amazon, widget_html):
        html = await fetcher.fetch("B08N5WRWNW")
        assert html == widget_html
        assert str(amazon.requests[0].url) == "https://www.amazon.in/dp/B08N5WRWNW"

    async def test_sends_browser_headers(self, fetcher, amazon):
        await fetcher.fetch("B08N5WRWNW")
        headers = amazon.requests[0].headers
        assert "Mozilla/5.0" in headers["user-agent"]
        assert headers["accept-language"].startswith("en-US")

    async def test_other_domain(self, http_client, amazon):
        fetcher = AmazonFetcher(domain="amazon.com", client=http_client)
        await fetcher.fetch("B08N5WRWNW")
        assert amazon.requests[0].url.host == "www.amazon.com"

    @pytest.mark.parametrize("asin", ["", "abc", "b08n5wrwnw", "B08N5WRWNW1"])
    async def test_invalid_asin_makes_no_request(self, fetcher, amazon, asin):
        with pytest.raises(InvalidAsin):
            await fetcher.fetch(asin)
        assert amazon.requests == []

    async def test_404_is_not_found(self, fetcher, amazon):
        amazon.status_code = 404
        with pytest.raises(ProductNotFound):
            await fetcher.fetch("B08N5WRWNW")

    async def test_403_is_inaccessible(self, fetcher, amazon):
        amazon.status_code = 403
        with pytest.raises(ProductInaccessible):
            await fetcher.fetch("B08N5WRWNW")

    @pytest.mark.parametrize("status_code", [200, 503])
    async def test_robot_check_is_inaccessible(self, fetcher, amazon, status_code):
        amazon.status_code = status_code
        amazon.text = ROBOT_CHECK_PAGE
        with pytest.raises(ProductInaccessible):
            await fetcher.fetch("B08N5WRWNW")

    @pytest.mark.parametrize("status_code", [500, 502, 503])
    async def test_server_errors_fail(self, fetcher, amazon, status_code):
        amazon.status_code = status_code
        amazon.text = "<html><body>Oops</body></html>"
        with pytest.raises(FetchFailed):
            await fetcher.fetch("B08N5WRWNW")

    async def test_timeout_fails_without_retry(self, fetcher, amazon):
        amazon.error = httpx.ReadTimeout("timed out")
        with pytest.raises(FetchFailed):
            await fetcher.fetch("B08N5WRWNW")
        assert len(amazon.requests) == 1

    async def test_connection_error_fails(self, fetcher, amazon):
        amazon.error = httpx.ConnectError("connection refused")
        with pytest.raises(FetchFailed):
            await fetcher.fetch("B08N5WRWNW")

    async def test_product_page_mentioning_robot_check(self, fetcher, amazon):
        amazon.text = product_page(title="Robot Checkers Board Game for Kids")
        html = await fetcher.fetch("B08N5WRWNW")
        assert "Robot Checkers" in html

    async def test_injected_client_redirect_limit_is_capped(self):
        requests = []

        def loop(request):
            requests.append(request)
            return httpx.Response(302, headers={"Location": str(request.url)}, request=request)

        client = httpx.AsyncClient(transport=httpx.MockTransport(loop), follow_redirects=True)
        fetcher = AmazonFetcher(client=client)
        assert client.max_redirects == FETCH_MAX_REDIRECTS
        with pytest.raises(FetchFailed):
            await fetcher.fetch("B08N5WRWNW")
        assert len(requests) == FETCH_MAX_REDIRECTS + 1

    async def test_redirect_loop_fails(self):
        requests = []

        def loop(request):
            requests.append(request)
            return httpx.Response(301, headers={"Location": str(request.url)}, request=request)

        client = httpx.AsyncClient(
            transport=httpx.MockTransport(loop),
            follow_redirects=True,
            max_redirects=FETCH_MAX_REDIRECTS,
        )
        fetcher = AmazonFetcher(client=client)
        with pytest.raises(FetchFailed):
            await fetcher.fetch("B08N5WRWNW")
        assert len(requests) == FETCH_MAX_REDIRECTS + 1


@pytest.mark.unit
def test_fetcher_validates_asin(fetcher):
    assert fetcher.is_valid_asin("B08N5WRWNW")
    assert not fetcher.is_valid_asin("B08N5WRWN")


@pytest.mark.unit
class TestLooksBlocked:

    def test_robot_check(self):
        assert looks_blocked(ROBOT_CHECK_PAGE)

    def test_product_page(self, widget_html):
        assert not looks_blocked(widget_html)

    def test_title_element_wins_over_markers(self):
        html = '<span id="productTitle">Robot Check Kit</span><p>Enter the characters you see below</p>'
        assert not looks_blocked(html)

    def test_ebook_title_element(self):
        assert not looks_blocked("<span id=ebooksProductTitle>Robot Check: A Novel</span>")

    def test_empty(self):
        assert not looks_blocked("")
