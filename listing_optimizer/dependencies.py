"""
FastAPI dependencies resolving the collaborators built in the app lifespan
"""
from fastapi import Request

from .db.repository import OptimizationRepository
from .errors import ListingOptimizerError
from .services.product_service import ProductService


def get_product_service(request: Request) -> ProductService:
    service = getattr(request.app.state, "product_service", None)
    if service is None:
        raise ListingOptimizerError("Product service not initialized")
    return service


def get_repository(request: Request) -> OptimizationRepository:
    repository = getattr(request.app.state, "repository", None)
    if repository is None:
        raise ListingOptimizerError("Repository not initialized")
    return repository
