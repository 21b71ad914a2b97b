"""Parsing of raw Gemini output into planner models."""

import json
import logging
from typing import Dict, List, Optional, Tuple

from models.lesson import AssessmentOption, VideoAnalysis
from models.video import VideoCandidate, VideoCandidateBuilder

logger = logging.getLogger(__name__)

MAX_VIDEO_CANDIDATES = 5

# Field -> accepted labels (English, Korean). First match wins.
VIDEO_LABEL_SYNONYMS: Dict[str, Tuple[str, ...]] = {
    "title": ("Title:", "제목:"),
    "channel": ("Channel:", "채널:"),
    "url": ("URL:", "Link:", "링크:"),
    "description": ("Description:", "설명:"),
}

VIDEO_MARKER = "video"
SHORT_MARKER_LENGTH = 10


class ResponseParseError(ValueError):
    """Raised when a model response cannot be turned into the expected shape."""
    pass


def strip_markdown_code_blocks(text: str) -> str:
    """Strip markdown code blocks from AI response text.

    Args:
        text: Raw text that may contain markdown code blocks

    Returns:
        Cleaned text with markdown code blocks removed
    """
    text = text.strip()
    if text.startswith('```json'):
        text = text[7:]  # Remove ```json
    elif text.startswith('```'):
        text = text[3:]  # Remove ```
    if text.endswith('```'):
        text = text[:-3]  # Remove ```
    return text.strip()


def _normalize_line(line: str) -> str:
    """Trim whitespace, list bullets and bold markers the model likes to add."""
    clean = line.strip()
    clean = clean.lstrip("-*• ").strip()
    return clean.replace("**", "")


def _is_marker_line(line: str, counter: int) -> bool:
    return line.lower().startswith(VIDEO_MARKER) and (
        str(counter) in line or len(line) < SHORT_MARKER_LENGTH
    )


def _match_label(line: str) -> Optional[Tuple[str, str]]:
    """Return (field, value) for a labeled line, or None."""
    for field_name, labels in VIDEO_LABEL_SYNONYMS.items():
        for label in labels:
            if line.startswith(label):
                return field_name, line[len(label):].strip()
    return None


def parse_video_list(raw_text: str) -> List[VideoCandidate]:
    """Parse the labeled plain-text search response into video candidates.

    Entries missing a title or url are dropped. At most five candidates are
    returned and their ids always run 1..N in the order they appear.
    """
    if not raw_text:
        return []

    completed: List[VideoCandidateBuilder] = []
    current = VideoCandidateBuilder()
    counter = 1

    for raw_line in raw_text.splitlines():
        line = _normalize_line(raw_line)
        if not line:
            continue

        if _is_marker_line(line, counter):
            if current.is_complete():
                completed.append(current)
            elif current != VideoCandidateBuilder():
                logger.debug(f"Discarding incomplete video entry: {current}")
            current = VideoCandidateBuilder()
            counter += 1
            continue

        match = _match_label(line)
        if match:
            field_name, value = match
            setattr(current, field_name, value)

    if current.is_complete():
        completed.append(current)

    return [
        builder.build(index)
        for index, builder in enumerate(completed[:MAX_VIDEO_CANDIDATES], start=1)
    ]


def parse_analysis(raw_json: str) -> VideoAnalysis:
    """Parse the JSON analysis response.

    Args:
        raw_json: JSON text, optionally wrapped in a markdown code block

    Returns:
        VideoAnalysis with assessment ids re-sequenced from 1

    Raises:
        ResponseParseError: If the text is not a JSON object
    """
    try:
        data = json.loads(strip_markdown_code_blocks(raw_json or ""))
    except json.JSONDecodeError as e:
        raise ResponseParseError(f"Analysis response is not valid JSON: {e}") from e

    if not isinstance(data, dict):
        raise ResponseParseError(
            f"Analysis response must be a JSON object, got {type(data).__name__}"
        )

    raw_assessments = data.get("assessments")
    if not isinstance(raw_assessments, list):
        raw_assessments = []

    assessments = []
    for item in raw_assessments:
        if not isinstance(item, dict):
            logger.warning(f"Skipping invalid assessment entry: {item}")
            continue
        assessments.append(
            AssessmentOption(
                id=len(assessments) + 1,
                title=str(item.get("title") or ""),
                description=str(item.get("description") or ""),
            )
        )

    summary = data.get("summary")
    return VideoAnalysis(
        summary=summary if isinstance(summary, str) else ("" if summary is None else str(summary)),
        assessments=assessments,
    )
