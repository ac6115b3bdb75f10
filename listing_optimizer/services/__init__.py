"""
Pipeline services: fetch, extract, optimize and orchestrate
"""
from .amazon_fetcher import AmazonFetcher, looks_blocked
from .listing_extractor import ListingExtractor
from .listing_optimizer import ListingOptimizer, build_client
from .product_service import ProductService

__all__ = [
    "AmazonFetcher",
    "looks_blocked",
    "ListingExtractor",
    "ListingOptimizer",
    "build_client",
    "ProductService",
]
