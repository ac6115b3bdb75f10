"""
Optimize Router
Scrape an Amazon listing by ASIN and return the AI-optimized version
"""
import logging

from fastapi import APIRouter, Depends, Request

from ..dependencies import get_product_service
from ..errors import InvalidAsin
from ..middleware import get_request_id
from ..models import ApiResponse, OptimizeRequest
from ..services.product_service import ProductService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Optimization"])


@router.post("/optimize", response_model=ApiResponse, response_model_exclude_none=True)
async def optimize_product(
    body: OptimizeRequest,
    request: Request,
    service: ProductService = Depends(get_product_service),
):
    """
    Optimize an Amazon listing

    Fetches the product page, extracts title, bullets and description,
    generates optimized copy plus keyword suggestions, and stores the pair.
    """
    request_id = get_request_id(request)

    if not body.asin:
        logger.info(f"[{request_id}] Validation failed: ASIN is required")
        raise InvalidAsin("ASIN is required")

    logger.info(f"[{request_id}] Starting optimization for ASIN: {body.asin}")
    result = await service.optimize_product_by_asin(body.asin, request_id)
    logger.info(f"[{request_id}] Optimization completed successfully for ASIN: {body.asin}")

    return ApiResponse(success=True, data=result.model_dump(mode="json", exclude_none=True))
