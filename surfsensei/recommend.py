"""
Getting a recommendation from the model and splitting it into sections.

The model is told to answer with four bold headings in a fixed order.  The
parser walks those headings one after the other; if any heading is missing
the whole answer is treated as unstructured and shown as raw text.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Sequence

from .models import FeedbackRecord, Recommendation, SessionInput
from .prompts import build_system_instruction, build_user_query

logger = logging.getLogger(__name__)

GenerateFn = Callable[[str, str], str]

SECTION_MARKERS = (
    "**Spot Recommendation:**",
    "**Board Recommendation:**",
    "**Spot Comparison:**",
    "**Session Strategy:**",
)
SECTION_TITLES = ("Spot Recommendation", "Board Recommendation", "Spot Comparison", "Session Strategy")

PARSE_NOTICE = "Could not parse the recommendation. Displaying raw text."


def get_recommendation(
    session: SessionInput, records: Sequence[FeedbackRecord], generate: GenerateFn
) -> str:
    """Ask the model once for a recommendation and return its raw text.

    Args:
        session: The submitted form.
        records: Feedback history; inaccurate comments become corrections.
        generate: Callable taking (system_instruction, user_query).

    Raises:
        EmptyResponse, TransportError: passed through from ``generate``.
    """
    system_instruction = build_system_instruction(records)
    user_query = build_user_query(session)
    logger.info("Requesting recommendation for spots=%r", session.spots)
    return generate(system_instruction, user_query)


def parse_recommendation(text: str) -> Optional[Recommendation]:
    """Split ``text`` at the four section headings, or return None."""
    if not text:
        return None
    sections: List[str] = []
    start: Optional[int] = None
    pos = 0
    for marker in SECTION_MARKERS:
        idx = text.find(marker, pos)
        if idx < 0:
            return None
        if start is not None:
            sections.append(text[start:idx].strip())
        start = idx + len(marker)
        pos = start
    sections.append(text[start:].strip())
    spot, board, comparison, strategy = sections
    return Recommendation(spot=spot, board=board, comparison=comparison, strategy=strategy)


def split_paragraphs(text: str) -> List[str]:
    return [line for line in text.splitlines() if line.strip()]


@dataclass
class RecommendationView:
    """What the results panel renders for one model answer."""

    raw_text: str
    recommendation: Optional[Recommendation] = None
    notice: Optional[str] = None
    sections: List[Dict[str, object]] = field(default_factory=list)


def build_view(text: str) -> RecommendationView:
    parsed = parse_recommendation(text)
    if parsed is None:
        logger.warning("Recommendation did not contain all four sections; showing raw text")
        return RecommendationView(raw_text=text, notice=PARSE_NOTICE)
    bodies = (parsed.spot, parsed.board, parsed.comparison, parsed.strategy)
    sections = [
        {"title": title, "paragraphs": split_paragraphs(body)}
        for title, body in zip(SECTION_TITLES, bodies)
    ]
    return RecommendationView(raw_text=text, recommendation=parsed, sections=sections)
