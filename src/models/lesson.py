"""Lesson planning state models."""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Dict, FrozenSet, List, Optional

from models.video import VideoCandidate


class Step(IntEnum):
    """Screens of the planning flow, in order."""
    INPUT_TOPIC = 0
    SELECT_VIDEO = 1
    SELECT_ASSESSMENT = 2
    VIEW_PLAN = 3

    @property
    def label(self) -> str:
        return STEP_LABELS[self]


STEP_LABELS: Dict[Step, str] = {
    Step.INPUT_TOPIC: "주제 입력",
    Step.SELECT_VIDEO: "영상 선택",
    Step.SELECT_ASSESSMENT: "평가 선택",
    Step.VIEW_PLAN: "지도안 확인",
}

# Forward by one, back by one. Nothing else.
ALLOWED_TRANSITIONS: Dict[Step, FrozenSet[Step]] = {
    Step.INPUT_TOPIC: frozenset({Step.SELECT_VIDEO}),
    Step.SELECT_VIDEO: frozenset({Step.SELECT_ASSESSMENT, Step.INPUT_TOPIC}),
    Step.SELECT_ASSESSMENT: frozenset({Step.VIEW_PLAN, Step.SELECT_VIDEO}),
    Step.VIEW_PLAN: frozenset({Step.SELECT_ASSESSMENT}),
}


@dataclass
class AssessmentOption:
    """A performance assessment task suggested for the selected video."""

    id: int
    title: str
    description: str = ""


@dataclass
class VideoAnalysis:
    """Summary of a video plus the assessment tasks suggested for it."""

    summary: str = ""
    assessments: List[AssessmentOption] = field(default_factory=list)

    def find_assessment(self, assessment_id: int) -> Optional[AssessmentOption]:
        for option in self.assessments:
            if option.id == assessment_id:
                return option
        return None


@dataclass
class PipelineState:
    """Everything the planner knows about the current session."""

    step: Step = Step.INPUT_TOPIC
    topic: str = ""
    video_candidates: List[VideoCandidate] = field(default_factory=list)
    selected_video: Optional[VideoCandidate] = None
    analysis: Optional[VideoAnalysis] = None
    selected_assessment: Optional[AssessmentOption] = None
    plan: str = ""
    error: Optional[str] = None

    def find_candidate(self, candidate_id: int) -> Optional[VideoCandidate]:
        for candidate in self.video_candidates:
            if candidate.id == candidate_id:
                return candidate
        return None

    def clear_after_topic(self) -> None:
        """Drop everything derived from a previous search."""
        self.video_candidates = []
        self.selected_video = None
        self.clear_after_video()

    def clear_after_video(self) -> None:
        """Drop everything derived from a previous video analysis."""
        self.analysis = None
        self.selected_assessment = None
        self.plan = ""

    def to_dict(self) -> dict:
        """Snapshot of the state, used for debug logging."""
        return {
            'step': self.step.name,
            'topic': self.topic,
            'video_candidates': len(self.video_candidates),
            'selected_video': self.selected_video.id if self.selected_video else None,
            'assessments': len(self.analysis.assessments) if self.analysis else 0,
            'selected_assessment': self.selected_assessment.id if self.selected_assessment else None,
            'plan_length': len(self.plan),
            'error': self.error,
        }
