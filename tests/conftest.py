"""
Shared fixtures for the listing optimizer test suite.

Provides product page markup, a fake chat-completions client, a mocked
Amazon transport and a temp SQLite database so that all tests run
WITHOUT any external services.
"""

import json
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest

from listing_optimizer.config import FETCH_MAX_REDIRECTS
from listing_optimizer.db import OptimizationRepository, create_engine, create_session_factory, migrate


# ---------------------------------------------------------------------------
# Product page markup
# ---------------------------------------------------------------------------

DEFAULT_BULLETS = ("Long battery life", "Fits in any pocket")
DEFAULT_DESCRIPTION = "A small widget for everyday tasks."


def product_page(title="Widget", bullets=DEFAULT_BULLETS, description=DEFAULT_DESCRIPTION):
    """Build a product page shaped like Amazon's detail page."""
    parts = ["<html><head><title>Amazon.in</title></head><body>"]
    if title is not None:
        parts.append(f'<div id="titleSection"><h1><span id="productTitle">  {title}  </span></h1></div>')
    if bullets:
        items = "".join(f'<li><span class="a-list-item"> {b} </span></li>' for b in bullets)
        parts.append(
            '<div id="feature-bullets">'
            '<h1 class="a-size-base-plus a-text-bold"> About this item </h1>'
            f'<ul class="a-unordered-list a-vertical">{items}</ul>'
            '</div>'
        )
    if description:
        parts.append(
            '<div id="productDescription_feature_div">'
            '<h2>Product description</h2>'
            f'<div id="productDescription"><p><span>{description}</span></p></div>'
            '</div>'
        )
    parts.append("</body></html>")
    return "".join(parts)


ROBOT_CHECK_PAGE = (
    "<html><body><h4>Enter the characters you see below</h4>"
    "<p>Sorry, we just need to make sure you're not a robot.</p>"
    '<form action="/errors/validateCaptcha"></form></body></html>'
)


@pytest.fixture
def widget_html():
    return product_page()


# ---------------------------------------------------------------------------
# Amazon transport
# ---------------------------------------------------------------------------

class AmazonStub:
    """Serves canned responses to an httpx.MockTransport and records requests."""

    def __init__(self, status_code=200, text=""):
        self.status_code = status_code
        self.text = text
        self.error = None
        self.requests = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        return httpx.Response(self.status_code, text=self.text, request=request)


@pytest.fixture
def amazon(widget_html):
    return AmazonStub(status_code=200, text=widget_html)


@pytest.fixture
def http_client(amazon):
    """httpx.AsyncClient whose requests never leave the process."""
    return httpx.AsyncClient(
        transport=httpx.MockTransport(amazon),
        follow_redirects=True,
        max_redirects=FETCH_MAX_REDIRECTS,
    )


# ---------------------------------------------------------------------------
# Chat completions
# ---------------------------------------------------------------------------

def completion(text):
    """Shape of an openai ChatCompletion, as far as the optimizer reads it."""
    return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=text))])


DEFAULT_REPLIES = {
    "title": "Widget Pro - Compact Everyday Tool",
    "bullets": json.dumps(["Lasts all day", "Slips into any pocket"]),
    "description": "Meet the widget that keeps up with your day.",
    "keywords": 'Here you go: ["pocket widget", "everyday tool"]',
}

PROMPT_MARKERS = {
    "title": "Generate an improved product title",
    "bullets": "Rewrite these bullet points",
    "description": "Enhance this Amazon product description",
    "keywords": "Suggest 3-5 high-intent keywords",
}


def make_ai_client(replies=None):
    """
    Fake AsyncOpenAI client answering each prompt kind from ``replies``.

    A reply that is an Exception instance is raised instead of returned.
    """
    table = dict(DEFAULT_REPLIES)
    table.update(replies or {})

    async def create(**kwargs):
        prompt = kwargs["messages"][-1]["content"]
        for kind, marker in PROMPT_MARKERS.items():
            if marker in prompt:
                reply = table[kind]
                if isinstance(reply, Exception):
                    raise reply
                return completion(reply)
        raise AssertionError(f"Unexpected prompt: {prompt[:80]}")

    client = MagicMock()
    client.chat.completions.create = AsyncMock(side_effect=create)
    return client


@pytest.fixture
def ai_client():
    return make_ai_client()


# ---------------------------------------------------------------------------
# Database
# ---------------------------------------------------------------------------

@pytest.fixture
def database_url(tmp_path):
    return f"sqlite+aiosqlite:///{tmp_path / 'test.db'}"


@pytest.fixture
async def engine(database_url):
    """Migrated temp SQLite engine."""
    engine = create_engine(database_url)
    await migrate(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def repository(engine):
    return OptimizationRepository(create_session_factory(engine))
