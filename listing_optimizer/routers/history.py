"""
History Router
Browse stored optimizations
"""
import logging
import re
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request

from ..config import HISTORY_DEFAULT_LIMIT, HISTORY_MAX_LIMIT
from ..db.repository import OptimizationRepository
from ..dependencies import get_repository
from ..middleware import get_request_id
from ..models import ApiResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/history", tags=["History"])

# ASCII digits only; larger ids cannot exist in a signed 64-bit key
OPTIMIZATION_ID_PATTERN = re.compile(r"[0-9]+")
MAX_OPTIMIZATION_ID = 2**63 - 1


def _dump(items):
    return [item.model_dump(mode="json") for item in items]


def parse_optimization_id(value: str) -> Optional[int]:
    """Integer id from a path segment, or None when it cannot name a row"""
    if not OPTIMIZATION_ID_PATTERN.fullmatch(value):
        return None
    optimization_id = int(value)
    if optimization_id > MAX_OPTIMIZATION_ID:
        return None
    return optimization_id


@router.get("", response_model=ApiResponse, response_model_exclude_none=True)
async def get_all_history(
    request: Request,
    limit: int = Query(HISTORY_DEFAULT_LIMIT, ge=1, le=HISTORY_MAX_LIMIT),
    offset: int = Query(0, ge=0),
    repository: OptimizationRepository = Depends(get_repository),
):
    """Page of optimization summaries, ascending by id"""
    history = await repository.list_all(limit=limit, offset=offset)
    logger.info(f"[{get_request_id(request)}] Returning {len(history)} history entries (limit={limit}, offset={offset})")
    return ApiResponse(success=True, data=_dump(history))


@router.get("/asin/{asin}", response_model=ApiResponse, response_model_exclude_none=True)
async def get_history_by_asin(
    asin: str,
    request: Request,
    repository: OptimizationRepository = Depends(get_repository),
):
    """Optimization summaries for one ASIN, newest first"""
    history = await repository.list_by_asin(asin)
    logger.info(f"[{get_request_id(request)}] Returning {len(history)} history entries for ASIN {asin}")
    return ApiResponse(success=True, data=_dump(history))


@router.get("/{optimization_id}", response_model=ApiResponse, response_model_exclude_none=True)
async def get_optimization_by_id(
    optimization_id: str,
    repository: OptimizationRepository = Depends(get_repository),
):
    """Full optimization record"""
    record = None
    parsed_id = parse_optimization_id(optimization_id)
    if parsed_id is not None:
        record = await repository.get_by_id(parsed_id)

    if record is None:
        raise HTTPException(status_code=404, detail="Optimization not found")

    return ApiResponse(success=True, data=record.model_dump(mode="json"))
