"""
FastAPI application for SurfSensei.

This file defines the web server and HTML routes.  One page carries the
session form, the results panel and the feedback control; each button posts
the whole form back so the page can be re-rendered with the user's values.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, Optional

from fastapi import FastAPI, Request
from fastapi.responses import HTMLResponse
from fastapi.staticfiles import StaticFiles
from fastapi.templating import Jinja2Templates
from starlette.concurrency import run_in_threadpool

from . import __version__
from .autofill import get_conditions
from .config import load_settings
from .errors import AutofillFailed, SurfSenseiError, recommendation_error_message
from .feedback import FeedbackStore, record_feedback
from .gemini import GeminiClient
from .models import ACCURACY_CHOICES, SKILL_LEVELS, SessionInput, merge_conditions
from .recommend import RecommendationView, build_view, get_recommendation

settings = load_settings()

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(title="SurfSensei", version=__version__)

_HERE = Path(__file__).resolve().parent
templates = Jinja2Templates(directory=str(_HERE / "templates"))
app.mount("/static", StaticFiles(directory=str(_HERE / "static")), name="static")

NO_SPOT_MESSAGE = "Please enter a spot name first."
FEEDBACK_COMMENT_REQUIRED = "Please tell us what SurfSensei got wrong."
FEEDBACK_CHOICE_REQUIRED = "Please choose Spot On or Off Base."


def get_client() -> GeminiClient:
    return GeminiClient.from_settings(settings)


def get_store() -> FeedbackStore:
    return FeedbackStore(settings.feedback_path)


def _carried_view(form: Any) -> Optional[RecommendationView]:
    text = str(form.get("recommendationText") or "")
    return build_view(text) if text else None


def _render(request: Request, session: SessionInput, **extra: Any) -> HTMLResponse:
    context: Dict[str, Any] = {
        "form": session.to_form(),
        "skills": SKILL_LEVELS,
        "error": None,
        "autofill_error": None,
        "view": None,
        "feedback_submitted": False,
        "feedback_error": None,
        "feedback_accuracy": None,
        "feedback_comments": "",
        "version": __version__,
    }
    context.update(extra)
    return templates.TemplateResponse(request, "index.html", context)


@app.get("/", response_class=HTMLResponse)
async def index(request: Request):
    """Render the empty form with default session values."""
    return _render(request, SessionInput.default())


@app.post("/recommend", response_class=HTMLResponse)
async def recommend(request: Request):
    form = await request.form()
    session = SessionInput.from_form(form)
    records = await run_in_threadpool(get_store().all)
    try:
        text = await run_in_threadpool(get_recommendation, session, records, get_client().generate)
    except SurfSenseiError as exc:
        logger.error("Submission error: %s", exc)
        return _render(request, session, error=recommendation_error_message(exc))
    return _render(request, session, view=build_view(text))


@app.post("/autofill", response_class=HTMLResponse)
async def autofill(request: Request):
    form = await request.form()
    session = SessionInput.from_form(form)
    # Autofill only touches the form; a recommendation on screen stays
    view = _carried_view(form)
    if not session.spots.strip():
        return _render(request, session, view=view, autofill_error=NO_SPOT_MESSAGE)
    try:
        suggestion = await run_in_threadpool(get_conditions, session.spots, get_client().generate_with_search)
    except AutofillFailed as exc:
        return _render(request, session, view=view, autofill_error=str(exc))
    return _render(request, merge_conditions(session, suggestion), view=view)


@app.post("/feedback", response_class=HTMLResponse)
async def feedback(request: Request):
    """Store a Spot On / Off Base judgment for the recommendation on screen.

    The acknowledgement is shown even if the judgment could not be saved.
    """
    form = await request.form()
    session = SessionInput.from_form(form)
    view = _carried_view(form)
    accuracy = str(form.get("accuracy") or "")
    comments = str(form.get("comments") or "")

    feedback_error: Optional[str] = None
    if accuracy not in ACCURACY_CHOICES:
        feedback_error = FEEDBACK_CHOICE_REQUIRED
    elif accuracy == "inaccurate" and not comments.strip():
        feedback_error = FEEDBACK_COMMENT_REQUIRED
    if feedback_error:
        return _render(
            request,
            session,
            view=view,
            feedback_error=feedback_error,
            feedback_accuracy=accuracy or None,
            feedback_comments=comments,
        )

    await run_in_threadpool(record_feedback, get_store(), accuracy, comments)
    return _render(request, session, view=view, feedback_submitted=True)


@app.get("/healthz")
async def healthz() -> Dict[str, str]:
    return {"status": "ok"}
