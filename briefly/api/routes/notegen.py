"""
Study-notes generation endpoints.

Both endpoints accept multipart or JSON submissions with an ``options``
object. With ``generatePDF`` set they answer with a PDF attachment,
otherwise with the rendered HTML as JSON.
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, Request
from fastapi.responses import Response
from starlette.concurrency import run_in_threadpool

from briefly.advanced.engine import AGENT_PIPELINE, AdvancedNoteEngine
from briefly.api.dependencies import (
    get_advanced_engine,
    get_pdf_exporter,
    get_study_notes_pipeline,
)
from briefly.api.payloads import read_submission
from briefly.notegen.pipeline import StudyNotesPipeline
from briefly.observability.logging import get_logger
from briefly.observability.telemetry import counter
from briefly.pdf.exporter import PdfExporter
from briefly.utils.filenames import content_disposition

router = APIRouter(prefix="/api", tags=["notegen"])
logger = get_logger(__name__)


def _pdf_response(pdf_bytes: bytes, filename: str) -> Response:
    return Response(
        content=pdf_bytes,
        media_type="application/pdf",
        headers={"Content-Disposition": content_disposition(filename)},
    )


@router.post("/generate-study-notes", response_model=None)
async def generate_study_notes(
    request: Request,
    pipeline: StudyNotesPipeline = Depends(get_study_notes_pipeline),
    exporter: PdfExporter = Depends(get_pdf_exporter),
) -> Response | dict[str, Any]:
    """
    Run the classifier/segmenter/formatter/layout pipeline.

    Side Effects:
        - Calls Gemini API (up to 4 calls)
        - Launches Chromium when generatePDF is set
        - Saves the learning cache
    """
    submission = await read_submission(request)
    options = submission.options

    result = await run_in_threadpool(pipeline.run, submission.acquired.text, options)
    counter("api.notegen.study_notes")

    if options.generate_pdf:
        pdf_bytes = await run_in_threadpool(exporter.export, result.html)
        logger.info("Study notes PDF ready: %s (%d bytes)", result.filename, len(pdf_bytes))
        return _pdf_response(pdf_bytes, result.filename)

    return {
        "success": True,
        "html": result.html,
        "filename": result.filename,
        "message": "Study notes generated successfully",
    }


@router.post("/generate-advanced-notes", response_model=None)
async def generate_advanced_notes(
    request: Request,
    engine: AdvancedNoteEngine = Depends(get_advanced_engine),
) -> Response | dict[str, Any]:
    """
    Run the layout/styling/diagram engine.

    Title precedence: submitted title, uploaded file name, first layout
    heading, "Study Notes".
    """
    submission = await read_submission(request)
    title = submission.title or submission.file_stem

    result = await run_in_threadpool(
        engine.generate, submission.acquired.text, submission.options, title
    )
    counter("api.notegen.advanced_notes")

    if result.pdf_bytes is not None:
        logger.info("Advanced notes PDF ready: %s (%d bytes)", result.filename, len(result.pdf_bytes))
        return _pdf_response(result.pdf_bytes, result.filename)

    return {
        "success": True,
        "html": result.html,
        "filename": result.filename,
        "message": "Advanced notes generated successfully",
        "processingMetrics": result.processing_metrics,
        "agentPipeline": AGENT_PIPELINE,
    }
