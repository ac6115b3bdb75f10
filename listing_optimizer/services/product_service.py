"""
Product Optimization Service
validate -> fetch -> extract -> optimize -> persist, with no retries
"""
import logging

from ..db.repository import OptimizationRepository
from ..models import OptimizationRecord
from ..utils.validators import validate_asin
from .amazon_fetcher import AmazonFetcher
from .listing_extractor import ListingExtractor
from .listing_optimizer import ListingOptimizer

logger = logging.getLogger(__name__)


class ProductService:
    """Orchestrates one optimize-by-ASIN request over injected collaborators"""

    def __init__(
        self,
        fetcher: AmazonFetcher,
        extractor: ListingExtractor,
        optimizer: ListingOptimizer,
        repository: OptimizationRepository,
    ):
        self.fetcher = fetcher
        self.extractor = extractor
        self.optimizer = optimizer
        self.repository = repository

    async def optimize_product_by_asin(self, asin: str, request_id: str = "unknown") -> OptimizationRecord:
        """
        Optimize one Amazon listing and record the result
        Args:
            asin: Amazon Standard Identification Number
            request_id: Correlation id for log lines
        Returns:
            OptimizationRecord with the new id, original and optimized listing
        Raises:
            ListingOptimizerError subclasses from whichever stage failed
        """
        logger.info(f"[{request_id}] Validating ASIN format")
        validate_asin(asin)

        logger.info(f"[{request_id}] Fetching product details from Amazon")
        html = await self.fetcher.fetch(asin, request_id)
        listing = self.extractor.extract(html, request_id)

        logger.info(f"[{request_id}] Optimizing product with AI")
        optimized = await self.optimizer.optimize(listing, request_id)

        logger.info(f"[{request_id}] Saving optimization to database")
        optimization_id = await self.repository.save(asin, listing, optimized)

        return OptimizationRecord(
            id=optimization_id,
            asin=asin,
            original=listing,
            optimized=optimized,
        )
