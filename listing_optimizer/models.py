from datetime import datetime
from typing import Any, List, Optional

from pydantic import BaseModel, Field

# ============ Listing Models ============
class ProductListing(BaseModel):
    """Listing scraped from a product page; never persisted directly"""
    title: str
    bullets: List[str] = Field(default_factory=list)
    description: str = ""

class OptimizedListing(BaseModel):
    title: str
    bullets: List[str] = Field(default_factory=list)
    description: str = ""
    keywords: List[str] = Field(default_factory=list)

class ListingTitle(BaseModel):
    title: str = ""

# ============ History Models ============
class OptimizationRecord(BaseModel):
    id: int
    asin: str
    original: ProductListing
    optimized: OptimizedListing
    createdAt: Optional[datetime] = None

class OptimizationSummary(BaseModel):
    id: int
    asin: str
    original: ListingTitle
    createdAt: Optional[datetime] = None

# ============ Request / Response Models ============
class OptimizeRequest(BaseModel):
    asin: Optional[str] = None

class ApiResponse(BaseModel):
    success: bool
    data: Optional[Any] = None
    error: Optional[str] = None

class HealthResponse(BaseModel):
    status: str
    version: Optional[str] = None
    openai_configured: Optional[bool] = None
    database_reachable: Optional[bool] = None
