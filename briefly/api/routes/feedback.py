"""
Feedback and analytics endpoints for the learning cache.

Feedback is stored and counted; nothing in the generation pipelines reads
it back.
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, Request
from starlette.concurrency import run_in_threadpool

from briefly.api.dependencies import get_learning_cache
from briefly.api.payloads import read_json_object
from briefly.learning.cache import LearningCache
from briefly.observability.logging import get_logger

router = APIRouter(prefix="/api", tags=["feedback"])
logger = get_logger(__name__)


@router.post("/notegen-feedback")
async def submit_feedback(
    request: Request,
    learning: LearningCache = Depends(get_learning_cache),
) -> dict[str, Any]:
    """
    Record a ``{rating: 0-10, features: [str]}`` rating.

    Invalid payloads answer 400 and leave the cache untouched.
    """
    body = await read_json_object(request)
    entry = await run_in_threadpool(
        learning.record_feedback, body.get("rating"), body.get("features")
    )
    logger.info("Feedback recorded: rating=%s features=%s", entry.rating, entry.features)
    return {"success": True, "message": "Feedback recorded successfully"}


@router.get("/notegen-analytics")
async def get_analytics(
    learning: LearningCache = Depends(get_learning_cache),
) -> dict[str, Any]:
    return {
        "success": True,
        "analytics": learning.analytics().model_dump(by_alias=True),
    }
