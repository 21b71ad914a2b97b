"""Main LessonPlanner class for driving the step-by-step planning flow."""

import asyncio
import logging
from typing import Any, Callable, Dict, Optional

from models.lesson import (
    ALLOWED_TRANSITIONS,
    AssessmentOption,
    PipelineState,
    Step,
)
from models.video import VideoCandidate
from services.ai_service import AIService
from utils.config import load_config, validate_config
from utils.errors import (
    AnalysisFailedError,
    LessonPlannerError,
    NoResultsFoundError,
    PlanGenerationFailedError,
    SearchFailedError,
    TransitionError,
)

logger = logging.getLogger(__name__)

RESET_CONFIRMATION = "처음으로 돌아가시겠습니까? 현재 진행 상황은 저장되지 않습니다."

DEFAULT_REQUEST_TIMEOUT = 180.0


class LessonPlanner:
    """State machine for one planning session.

    Owns the PipelineState. Network-backed transitions are coroutines; only one
    of them may be outstanding at a time, and every other action except reset
    is refused until it settles. A reset bumps the generation so that a result
    arriving afterwards is dropped instead of applied.
    """

    def __init__(
        self,
        config: Optional[Dict] = None,
        ai_service: Optional[AIService] = None,
    ):
        """Initialize the planner with configuration."""
        self.config = config or load_config()
        self.state = PipelineState()
        self.is_busy = False
        self._generation = 0

        if ai_service is None:
            config_errors = validate_config(self.config)
            if config_errors:
                error_msg = "Configuration errors: " + "; ".join(config_errors)
                logger.error(error_msg)
                raise ValueError(error_msg)

            ai_service = AIService(
                self.config["gemini_api_key"],
                self.config.get("gemini_model", "gemini-2.5-flash"),
                self.config.get("gemini_plan_model", "gemini-3-pro-preview"),
            )
        self.ai_service = ai_service
        self.request_timeout = float(
            self.config.get("request_timeout_seconds", DEFAULT_REQUEST_TIMEOUT)
        )

        logger.info("Lesson planner initialized")

    @property
    def step(self) -> Step:
        return self.state.step

    @property
    def generation(self) -> int:
        return self._generation

    async def submit_topic(self, topic: str) -> None:
        """Search videos for the topic and move to video selection."""
        self._begin_action(Step.INPUT_TOPIC)
        if not topic or not topic.strip():
            raise TransitionError("Topic must not be empty")
        topic = topic.strip()

        logger.info(f"Searching videos for topic: {topic}")
        completed, candidates = await self._call_ai(
            SearchFailedError, self.ai_service.search_videos, topic
        )
        if not completed:
            return

        if not candidates:
            self._fail(NoResultsFoundError())
            return

        self.state.topic = topic
        self.state.clear_after_topic()
        self.state.video_candidates = list(candidates)
        self._move_to(Step.SELECT_VIDEO)

    def select_video(self, candidate: VideoCandidate) -> None:
        """Mark a candidate as selected. No network call, no step change."""
        self._begin_action(Step.SELECT_VIDEO)
        match = self.state.find_candidate(candidate.id)
        if match is None:
            raise TransitionError(f"Video {candidate.id} is not one of the candidates")
        self.state.selected_video = match

    async def confirm_video(self) -> None:
        """Analyze the selected video and move to assessment selection."""
        self._begin_action(Step.SELECT_VIDEO)
        video = self.state.selected_video
        if video is None:
            raise TransitionError("No video selected")

        logger.info(f"Analyzing video: {video.title}")
        completed, analysis = await self._call_ai(
            AnalysisFailedError, self.ai_service.analyze_video, video.title, video.url
        )
        if not completed:
            return

        self.state.clear_after_video()
        self.state.analysis = analysis
        self._move_to(Step.SELECT_ASSESSMENT)

    def select_assessment(self, option: AssessmentOption) -> None:
        """Mark an assessment as selected. No network call, no step change."""
        self._begin_action(Step.SELECT_ASSESSMENT)
        match = self.state.analysis.find_assessment(option.id) if self.state.analysis else None
        if match is None:
            raise TransitionError(f"Assessment {option.id} is not one of the suggestions")
        self.state.selected_assessment = match

    async def confirm_assessment(self) -> None:
        """Generate the lesson plan and move to the plan view."""
        self._begin_action(Step.SELECT_ASSESSMENT)
        assessment = self.state.selected_assessment
        video = self.state.selected_video
        if assessment is None or video is None:
            raise TransitionError("No assessment selected")

        logger.info(f"Generating lesson plan for assessment: {assessment.title}")
        completed, plan = await self._call_ai(
            PlanGenerationFailedError,
            self.ai_service.generate_lesson_plan,
            self.state.topic,
            video.title,
            assessment.title,
        )
        if not completed:
            return

        self.state.plan = plan
        self._move_to(Step.VIEW_PLAN)

    def go_back(self) -> None:
        """Return to the previous step, keeping fetched candidates and analysis."""
        self._ensure_idle()
        self.state.error = None
        if self.state.step == Step.INPUT_TOPIC:
            raise TransitionError("Already on the first step")
        if self.state.step == Step.VIEW_PLAN:
            self.state.plan = ""
        self._move_to(Step(self.state.step - 1))

    def reset(self, confirm: Callable[[str], Any]) -> bool:
        """Clear the whole session after the user confirms.

        Returns:
            True if the session was reset
        """
        if not confirm(RESET_CONFIRMATION):
            return False

        self._generation += 1
        self.state = PipelineState()
        logger.info("Planner reset to the first step")
        return True

    def dismiss_error(self) -> None:
        self.state.error = None

    def _begin_action(self, expected_step: Step) -> None:
        """Common guard for user actions: clears the banner, checks the step."""
        self._ensure_idle()
        self.state.error = None
        if self.state.step != expected_step:
            raise TransitionError(
                f"Action requires step {expected_step.name}, current step is {self.state.step.name}"
            )

    def _ensure_idle(self) -> None:
        # Only reset may interleave with a pending request; it bumps the generation.
        if self.is_busy:
            raise TransitionError("Another request is already in progress")

    def _move_to(self, target: Step) -> None:
        current = self.state.step
        if target not in ALLOWED_TRANSITIONS[current]:
            raise TransitionError(f"Cannot move from {current.name} to {target.name}")
        self.state.step = target
        logger.debug(f"Planner state: {self.state.to_dict()}")

    def _fail(self, error: LessonPlannerError) -> None:
        logger.warning(f"Transition failed on {self.state.step.name}: {error.message}")
        self.state.error = error.message

    async def _call_ai(self, error_type, func, *args):
        """Run a blocking AIService call off the event loop.

        Returns:
            (completed, result). completed is False when the call failed or the
            session was reset while it was running.
        """
        self._ensure_idle()

        name = getattr(func, "__name__", repr(func))
        self.is_busy = True
        generation = self._generation
        loop = asyncio.get_running_loop()
        try:
            result = await asyncio.wait_for(
                loop.run_in_executor(None, func, *args),
                timeout=self.request_timeout,
            )
        except asyncio.TimeoutError:
            logger.error(f"{name} timed out after {self.request_timeout}s")
            if generation == self._generation:
                self._fail(error_type())
            return False, None
        except LessonPlannerError as e:
            if generation == self._generation:
                self._fail(e if isinstance(e, error_type) else error_type())
            return False, None
        finally:
            self.is_busy = False

        if generation != self._generation:
            logger.info(f"Discarding {name} result from a reset session")
            return False, None
        return True, result
