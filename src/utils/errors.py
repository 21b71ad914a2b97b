"""Error types surfaced to the user while planning a lesson."""


class LessonPlannerError(Exception):
    """Base class for failures that end up in the error banner."""

    default_message = "오류가 발생했습니다."

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class SearchFailedError(LessonPlannerError):
    """Raised when the video search request fails."""
    default_message = "비디오 검색 중 오류가 발생했습니다. 잠시 후 다시 시도해주세요."


class NoResultsFoundError(LessonPlannerError):
    """Raised when a search succeeds but yields no usable videos."""
    default_message = "관련 영상을 찾을 수 없습니다. 다른 주제로 시도해보세요."


class AnalysisFailedError(LessonPlannerError):
    """Raised when a video cannot be summarized or its response cannot be parsed."""
    default_message = "영상 분석에 실패했습니다."


class PlanGenerationFailedError(LessonPlannerError):
    """Raised when the lesson plan request fails."""
    default_message = "수업 지도안 생성에 실패했습니다."


class ExportFailedError(LessonPlannerError):
    """Raised when neither clipboard format could be written."""
    default_message = "텍스트가 복사되었습니다. 새 문서에 붙여넣기 해주세요."


class TransitionError(Exception):
    """Raised when an action is not allowed in the current planner state."""
    pass
