"""
Amazon Listing Optimizer
Scrapes an Amazon product page by ASIN and rewrites the listing with AI
"""
from .config import SERVICE_VERSION

__version__ = SERVICE_VERSION
