"""Video-related data models."""

from dataclasses import dataclass
from typing import Optional


@dataclass
class VideoCandidate:
    """Represents a video suggestion parsed from the AI search response."""

    id: int  # 1-based, assigned in emission order
    title: str
    url: str
    channel: str = ""
    description: str = ""


@dataclass
class VideoCandidateBuilder:
    """In-progress video entry collected while parsing a search response."""

    title: Optional[str] = None
    channel: Optional[str] = None
    url: Optional[str] = None
    description: Optional[str] = None

    def is_complete(self) -> bool:
        """Return True once both required fields are present."""
        return bool(self.title) and bool(self.url)

    def build(self, candidate_id: int) -> VideoCandidate:
        """Convert the builder into a finished candidate."""
        if not self.is_complete():
            raise ValueError("Video entry requires both title and url")
        return VideoCandidate(
            id=candidate_id,
            title=self.title,
            url=self.url,
            channel=self.channel or "",
            description=self.description or "",
        )
