"""
Note endpoints.

Provides endpoints for:
- Listing, fetching and deleting notes
- Processing uploaded or pasted content into a summarized note
- Regenerating a stored note as a study-notes PDF
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import Response
from starlette.concurrency import run_in_threadpool

from briefly.api.dependencies import (
    get_note_repository,
    get_pdf_exporter,
    get_study_notes_pipeline,
    get_summarizer,
)
from briefly.api.payloads import read_submission
from briefly.notegen.models import NoteGenOptions
from briefly.notegen.pipeline import StudyNotesPipeline
from briefly.notes.models import Note, NoteCreate, ProcessingStatus
from briefly.notes.repository import NoteRepository
from briefly.notes.summarizer import NoteSummarizer
from briefly.observability.logging import get_logger
from briefly.observability.telemetry import counter
from briefly.pdf.exporter import PdfExporter
from briefly.utils.filenames import content_disposition

router = APIRouter(prefix="/api", tags=["notes"])
logger = get_logger(__name__)


def _get_or_404(repository: NoteRepository, note_id: str) -> Note:
    note = repository.get(note_id)
    if note is None:
        raise HTTPException(status_code=404, detail="Note not found")
    return note


@router.get("/notes", response_model=list[Note])
async def list_notes(
    repository: NoteRepository = Depends(get_note_repository),
) -> list[Note]:
    """All notes, newest first."""
    return repository.list_all()


@router.get("/notes/{note_id}", response_model=Note)
async def get_note(
    note_id: str,
    repository: NoteRepository = Depends(get_note_repository),
) -> Note:
    return _get_or_404(repository, note_id)


@router.delete("/notes/{note_id}")
async def delete_note(
    note_id: str,
    repository: NoteRepository = Depends(get_note_repository),
) -> dict[str, Any]:
    if not repository.delete(note_id):
        raise HTTPException(status_code=404, detail="Note not found")
    logger.info("Deleted note %s", note_id)
    return {"success": True}


@router.post("/process", response_model=Note)
async def process_content(
    request: Request,
    repository: NoteRepository = Depends(get_note_repository),
    summarizer: NoteSummarizer = Depends(get_summarizer),
) -> Note:
    """
    Acquire content (file upload or JSON), summarize it and store the note.

    Side Effects:
        - Calls Gemini API (summary, plus transcription for audio)
        - Creates a note in the repository
    """
    submission = await read_submission(request)
    acquired = submission.acquired

    summary = await run_in_threadpool(summarizer.summarize, acquired.text, acquired.content_type)
    note = repository.create(
        NoteCreate(
            title=summary.title,
            summary=summary.summary,
            key_points=summary.key_points,
            action_items=summary.action_items,
            visual_cards=summary.visual_cards,
            original_content=acquired.text,
            content_type=acquired.content_type,
            processing_status=ProcessingStatus.COMPLETED,
        )
    )

    counter("api.notes.created")
    logger.info("Created note %s from %s content", note.id, acquired.content_type.value)
    return note


@router.get("/notes/{note_id}/download-pdf")
async def download_note_pdf(
    note_id: str,
    repository: NoteRepository = Depends(get_note_repository),
    pipeline: StudyNotesPipeline = Depends(get_study_notes_pipeline),
    exporter: PdfExporter = Depends(get_pdf_exporter),
) -> Response:
    """Regenerate study notes from the stored note's original content as a PDF."""
    note = _get_or_404(repository, note_id)

    result = await run_in_threadpool(
        pipeline.run, note.original_content, NoteGenOptions(generate_pdf=True)
    )
    pdf_bytes = await run_in_threadpool(exporter.export, result.html)

    counter("api.notes.pdf_downloaded")
    return Response(
        content=pdf_bytes,
        media_type="application/pdf",
        headers={"Content-Disposition": content_disposition(result.filename)},
    )
