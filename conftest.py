"""Shared fakes for the planner tests."""

import threading
from types import SimpleNamespace

import pytest

from models.lesson import AssessmentOption, VideoAnalysis
from models.video import VideoCandidate
from services.clipboard import HTML_FLAVOR, PLAIN_FLAVOR, ClipboardError


class FakeModels:
    """Stands in for google.genai Client.models, replaying canned responses."""

    def __init__(self, responses):
        self.responses = list(responses)
        self.calls = []

    def generate_content(self, model, contents, config=None):
        self.calls.append({"model": model, "contents": contents, "config": config})
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return SimpleNamespace(text=response)


class FakeGenAIClient:
    def __init__(self, *responses):
        self.models = FakeModels(responses)


class FakeAIService:
    """In-memory AIService double recording every call."""

    def __init__(self, videos=None, analysis=None, plan="# 수업 지도안",
                 search_error=None, analysis_error=None, plan_error=None):
        self.videos = videos if videos is not None else make_videos(3)
        self.analysis = analysis or make_analysis(3)
        self.plan = plan
        self.search_error = search_error
        self.analysis_error = analysis_error
        self.plan_error = plan_error
        self.calls = []
        # Set release to hold a blocked call until the test lets it finish
        self.block_search = False
        self.block_analysis = False
        self.block_plan = False
        self.started = threading.Event()
        self.release = threading.Event()

    def _hold(self, blocked):
        self.started.set()
        if blocked:
            self.release.wait(timeout=5)

    def search_videos(self, topic):
        self.calls.append(("search_videos", topic))
        self._hold(self.block_search)
        if self.search_error:
            raise self.search_error
        return list(self.videos)

    def analyze_video(self, title, url):
        self.calls.append(("analyze_video", title, url))
        self._hold(self.block_analysis)
        if self.analysis_error:
            raise self.analysis_error
        return self.analysis

    def generate_lesson_plan(self, topic, video_title, assessment_title):
        self.calls.append(("generate_lesson_plan", topic, video_title, assessment_title))
        self._hold(self.block_plan)
        if self.plan_error:
            raise self.plan_error
        return self.plan


class FakeClipboard:
    def __init__(self, rich_fails=False, text_fails=False, html_only=False):
        self.rich_fails = rich_fails
        self.text_fails = text_fails
        self.html_only = html_only
        self.rich_writes = []
        self.text_writes = []

    def write_rich(self, html, text):
        if self.rich_fails:
            raise ClipboardError("text/html rejected")
        self.rich_writes.append((html, text))
        if self.html_only:
            return (HTML_FLAVOR,)
        return (HTML_FLAVOR, PLAIN_FLAVOR)

    def write_text(self, text):
        if self.text_fails:
            raise ClipboardError("clipboard unavailable")
        self.text_writes.append(text)


def make_videos(count):
    return [
        VideoCandidate(
            id=i,
            title=f"Video title {i}",
            url=f"https://www.youtube.com/watch?v=vid{i}",
            channel=f"Channel {i}",
            description=f"설명 {i}",
        )
        for i in range(1, count + 1)
    ]


def make_analysis(count):
    return VideoAnalysis(
        summary="영상 요약입니다.",
        assessments=[
            AssessmentOption(id=i, title=f"수행평가 {i}", description=f"과제 설명 {i}")
            for i in range(1, count + 1)
        ],
    )


@pytest.fixture
def fake_ai():
    return FakeAIService()


@pytest.fixture
def fake_clipboard():
    return FakeClipboard()
