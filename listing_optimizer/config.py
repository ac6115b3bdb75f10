"""
Configuration, constants, and scraping/AI settings
Centralizes all environment variables for the listing optimizer service.
"""
import os
import re

from dotenv import load_dotenv

load_dotenv()

# Service
SERVICE_NAME = "Amazon Listing Optimizer API"
SERVICE_VERSION = "1.0.0"

# ASIN validation
ASIN_PATTERN = re.compile(r"^[A-Z0-9]{10}$")

# Amazon scraping
AMAZON_PRODUCT_URL = "https://www.{domain}/dp/{asin}"
FETCH_TIMEOUT_SECONDS = 15.0
FETCH_MAX_REDIRECTS = 5
BROWSER_HEADERS = {
    "User-Agent": (
        "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/131.0.0.0 Safari/537.36"
    ),
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,image/avif,image/webp,image/apng,*/*;q=0.8",
    "Accept-Language": "en-US,en;q=0.9",
    "Accept-Encoding": "gzip, deflate",
    "DNT": "1",
    "Connection": "keep-alive",
    "Upgrade-Insecure-Requests": "1",
    "Sec-Fetch-Dest": "document",
    "Sec-Fetch-Mode": "navigate",
    "Sec-Fetch-Site": "none",
    "Cache-Control": "max-age=0",
}

# Robot-check / CAPTCHA interstitial markers (lowercase)
BLOCK_INDICATORS = (
    "validatecaptcha",
    "enter the characters you see below",
    "robot check",
    "sorry, we just need to make sure you're not a robot",
    "automated access to amazon data",
)

# Extraction landmarks
TITLE_SELECTORS = ("#productTitle", "#ebooksProductTitle")
BULLETS_LANDMARK = "About this item"
DESCRIPTION_LANDMARK = "Product description"
LANDMARK_MAX_SIBLING_DISTANCE = 5
NO_DESCRIPTION_PLACEHOLDER = "No description available"

# AI optimization
NO_BULLETS_PLACEHOLDER = ["Feature information not available"]
FALLBACK_LIST_LIMIT = 5
KEYWORD_CONTEXT_DESCRIPTION_CHARS = 200
OPENAI_TEMPERATURE = 0.7
OPENAI_MAX_TOKENS = 1200

# History listing
HISTORY_DEFAULT_LIMIT = 10
HISTORY_MAX_LIMIT = 100


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


class Config:
    """Application configuration read from the environment"""

    def __init__(self):
        # Server
        self.PORT: int = int(os.getenv("PORT", "5000"))
        self.LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()
        self.CORS_ORIGINS = [
            origin.strip() for origin in os.getenv("CORS_ORIGINS", "*").split(",") if origin.strip()
        ]

        # Amazon
        self.AMAZON_DOMAIN: str = os.getenv("AMAZON_DOMAIN", "amazon.in")

        # OpenAI-compatible generation endpoint
        self.OPENAI_API_KEY: str = os.getenv("OPENAI_API_KEY", "")
        self.OPENAI_MODEL: str = os.getenv("OPENAI_MODEL", "gpt-4o-mini")
        self.OPENAI_BASE_URL: str = os.getenv("OPENAI_BASE_URL", "")
        self.OPENAI_TIMEOUT: float = float(os.getenv("OPENAI_TIMEOUT", "60"))

        # Storage
        self.DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite+aiosqlite:///./listing_optimizer.db")
        self.DATABASE_ECHO: bool = _env_bool("DATABASE_ECHO", "false")
        self.AUTO_MIGRATE: bool = _env_bool("AUTO_MIGRATE", "true")

    @property
    def ai_configured(self) -> bool:
        return bool(self.OPENAI_API_KEY)


config = Config()

# Backwards compatible alias for settings
settings = config
