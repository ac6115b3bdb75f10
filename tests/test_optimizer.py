"""
Tests for the AI listing optimizer.

Uses a fake chat-completions client; no network calls.
"""

import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest

from listing_optimizer.errors import OptimizationFailed
from listing_optimizer.models import ProductListing
from listing_optimizer.services import ListingOptimizer, build_client

from conftest import make_ai_client, completion


@pytest.fixture
def listing():
    return ProductListing(
        title="Widget",
        bullets=["Long battery life", "Fits in any pocket"],
        description="A small widget for everyday tasks.",
    )


@pytest.mark.unit
class TestOptimize:

    async def test_happy_path(self, listing, ai_client):
        optimizer = ListingOptimizer(ai_client, model="test-model")
        optimized = await optimizer.optimize(listing)

        assert optimized.title == "Widget Pro - Compact Everyday Tool"
        assert optimized.bullets == ["Lasts all day", "Slips into any pocket"]
        assert optimized.description == "Meet the widget that keeps up with your day."
        assert optimized.keywords == ["pocket widget", "everyday tool"]
        assert ai_client.chat.completions.create.await_count == 4

    async def test_four_calls_are_in_flight_together(self, listing):
        in_flight = 0
        peak = 0
        all_started = asyncio.Event()

        async def create(**kwargs):
            nonlocal in_flight, peak
            in_flight += 1
            peak = max(peak, in_flight)
            if in_flight == 4:
                all_started.set()
            # Released only once every call has started; sequential calls time out
            await asyncio.wait_for(all_started.wait(), timeout=2.0)
            in_flight -= 1
            return completion('["a", "b"]')

        client = MagicMock()
        client.chat.completions.create = AsyncMock(side_effect=create)
        optimized = await ListingOptimizer(client).optimize(listing)

        assert peak == 4
        assert optimized.keywords == ["a", "b"]
        assert client.chat.completions.create.await_count == 4

    async def test_request_shape(self, listing, ai_client):
        optimizer = ListingOptimizer(ai_client, model="test-model")
        await optimizer.optimize_title(listing.title)

        kwargs = ai_client.chat.completions.create.call_args.kwargs
        assert kwargs["model"] == "test-model"
        assert kwargs["messages"][0]["role"] == "system"
        assert '"Widget"' in kwargs["messages"][1]["content"]

    async def test_no_bullets_uses_placeholder_without_call(self, listing, ai_client):
        listing.bullets = []
        optimizer = ListingOptimizer(ai_client)
        optimized = await optimizer.optimize(listing)

        assert optimized.bullets == ["Feature information not available"]
        assert ai_client.chat.completions.create.await_count == 3

    async def test_line_fallback_for_bullets(self, listing):
        client = make_ai_client({"bullets": "1. foo\n2. bar"})
        optimized = await ListingOptimizer(client).optimize(listing)
        assert optimized.bullets == ["foo", "bar"]

    async def test_quoted_title_is_unwrapped(self, listing):
        client = make_ai_client({"title": '"Widget Pro"'})
        assert await ListingOptimizer(client).optimize_title(listing.title) == "Widget Pro"

    async def test_keyword_prompt_truncates_description(self, listing, ai_client):
        listing.description = "x" * 500
        await ListingOptimizer(ai_client).suggest_keywords(listing.title, listing.bullets, listing.description)
        prompt = ai_client.chat.completions.create.call_args.kwargs["messages"][1]["content"]
        assert "x" * 200 + "..." in prompt
        assert "x" * 201 not in prompt

    async def test_any_failure_fails_the_whole_optimization(self, listing):
        client = make_ai_client({"description": RuntimeError("upstream 500")})
        with pytest.raises(OptimizationFailed):
            await ListingOptimizer(client).optimize(listing)

    async def test_empty_completion_fails(self, listing):
        client = make_ai_client({"title": "   "})
        with pytest.raises(OptimizationFailed):
            await ListingOptimizer(client).optimize(listing)

    async def test_no_choices_fails(self, listing):
        client = MagicMock()
        client.chat.completions.create = AsyncMock(return_value=completion(None))
        client.chat.completions.create.return_value.choices = []
        with pytest.raises(OptimizationFailed):
            await ListingOptimizer(client).optimize_title(listing.title)

    async def test_unconfigured_client_fails(self, listing):
        with pytest.raises(OptimizationFailed):
            await ListingOptimizer(None).optimize(listing)


@pytest.mark.unit
class TestBuildClient:

    def test_without_key(self):
        assert build_client("") is None

    def test_with_key_disables_retries(self):
        client = build_client("sk-test", timeout=5.0)
        assert client is not None
        assert client.max_retries == 0
