"""AI service for video search, video analysis and lesson plan generation using Google GenAI."""

import logging
from typing import List, Optional

from google.genai import Client
from google.genai import types

from models.lesson import VideoAnalysis
from models.video import VideoCandidate
from services.response_parser import ResponseParseError, parse_analysis, parse_video_list
from utils.errors import AnalysisFailedError, PlanGenerationFailedError, SearchFailedError

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "gemini-2.5-flash"
DEFAULT_PLAN_MODEL = "gemini-3-pro-preview"

EMPTY_PLAN_FALLBACK = "수업 지도안을 생성하지 못했습니다."

ANALYSIS_SCHEMA = types.Schema(
    type=types.Type.OBJECT,
    properties={
        "summary": types.Schema(
            type=types.Type.STRING,
            description="Summary of the video content in Korean",
        ),
        "assessments": types.Schema(
            type=types.Type.ARRAY,
            items=types.Schema(
                type=types.Type.OBJECT,
                properties={
                    "id": types.Schema(type=types.Type.INTEGER),
                    "title": types.Schema(
                        type=types.Type.STRING,
                        description="Title of the assessment task in Korean",
                    ),
                    "description": types.Schema(
                        type=types.Type.STRING,
                        description="Brief explanation of the task in Korean",
                    ),
                },
                required=["id", "title", "description"],
            ),
        ),
    },
    required=["summary", "assessments"],
)


class AIService:
    """Service for the three Gemini requests behind the planning flow."""

    def __init__(
        self,
        api_key: str,
        model_name: str = DEFAULT_MODEL,
        plan_model_name: str = DEFAULT_PLAN_MODEL,
        client: Optional[Client] = None,
    ):
        """Initialize Google GenAI client.

        Args:
            api_key: Google GenAI API key
            model_name: Gemini model used for search and analysis
            plan_model_name: Gemini model used for lesson plan generation
            client: Pre-built client, created from api_key when omitted
        """
        self.api_key = api_key
        self.model_name = model_name
        self.plan_model_name = plan_model_name
        self.client = client or Client(api_key=api_key)

        logger.info(
            f"Initialized AI service with models: {model_name} (search/analysis), "
            f"{plan_model_name} (plan)"
        )

    def search_videos(self, topic: str) -> List[VideoCandidate]:
        """Find YouTube videos for a lesson topic using Google Search grounding.

        Args:
            topic: Lesson topic entered by the user

        Returns:
            Up to five video candidates, empty when nothing could be parsed

        Raises:
            SearchFailedError: If the Gemini request fails
        """
        if not topic or not topic.strip():
            raise ValueError("Topic must not be empty")

        prompt = f"""Find exactly 5 YouTube videos related to the school lesson topic: "{topic}".

Return a list in the following plain text format for each video.
IMPORTANT: Write the "Description" in Korean.

Format:
Video 1
Title: [Video Title]
Channel: [Channel Name]
URL: [YouTube URL]
Description: [Short 1 sentence description in Korean]

Video 2
...

Ensure you find valid YouTube links."""

        try:
            response = self.client.models.generate_content(
                model=self.model_name,
                contents=prompt,
                config=types.GenerateContentConfig(
                    tools=[types.Tool(google_search=types.GoogleSearch())],
                ),
            )
        except Exception as e:
            logger.error(f"Video search failed for topic '{topic}': {e}")
            raise SearchFailedError() from e

        text = response.text or ""
        candidates = parse_video_list(text)
        if not candidates:
            logger.warning(f"No video candidates parsed for topic '{topic}'")
            logger.debug(f"Raw search response: {text}")
        else:
            logger.info(f"Found {len(candidates)} videos for topic '{topic}'")
        return candidates

    def analyze_video(self, title: str, url: str) -> VideoAnalysis:
        """Summarize a video and suggest three performance assessment tasks.

        Args:
            title: Video title
            url: Video URL

        Returns:
            Summary and assessment options with ids 1..N

        Raises:
            AnalysisFailedError: If the request fails or the JSON cannot be parsed
        """
        prompt = f"""Analyze the YouTube video titled "{title}" (URL: {url}).
1. Provide a concise summary of the educational content in Korean (max 3 sentences).
2. Suggest 3 distinct performance assessment tasks (수행평가) students could do based on this video, described in Korean.

Return JSON."""

        try:
            response = self.client.models.generate_content(
                model=self.model_name,
                contents=prompt,
                config=types.GenerateContentConfig(
                    response_mime_type="application/json",
                    response_schema=ANALYSIS_SCHEMA,
                ),
            )
        except Exception as e:
            logger.error(f"Video analysis failed for '{title}': {e}")
            raise AnalysisFailedError() from e

        if not response.text:
            logger.error("AI analysis response is empty")
            raise AnalysisFailedError()

        try:
            analysis = parse_analysis(response.text)
        except ResponseParseError as e:
            logger.error(f"Failed to parse analysis response: {e}")
            logger.debug(f"Raw response: {response.text}")
            raise AnalysisFailedError() from e

        logger.info(
            f"Analyzed '{title}': {len(analysis.assessments)} assessment suggestions"
        )
        return analysis

    def generate_lesson_plan(
        self, topic: str, video_title: str, assessment_title: str
    ) -> str:
        """Write the full lesson plan and assessment guide as Markdown.

        Args:
            topic: Lesson topic
            video_title: Title of the selected video
            assessment_title: Title of the selected assessment task

        Returns:
            Markdown document, or a fallback notice when the model returned nothing

        Raises:
            PlanGenerationFailedError: If the Gemini request fails
        """
        prompt = f"""Create a detailed Lesson Plan and Performance Assessment Guide **strictly in Korean language**.

Context:
- Subject/Topic: {topic}
- Resource Video: {video_title}
- Selected Assessment Task: {assessment_title}

Please write a professional document using **Standard Markdown**.

CRITICAL FORMATTING RULES:
1. **Do NOT use HTML tags** like <br>, <div>, or <span>. Use standard Markdown syntax only.
2. **Tables**: Use standard Markdown table syntax. Do NOT use HTML tables.
   Example:
   | Header 1 | Header 2 |
   | :--- | :--- |
   | Content | Content |
3. **Line Breaks**: Use two spaces at the end of a line for a line break, or leave a blank line for a new paragraph.

Required Sections (Translate headers to Korean):
1. **수업 개요 (Lesson Overview)**
   - 학습 목표 (Learning Objectives)
   - 영상 활용 방안 (Connection to Video)

2. **수업 지도안 (Detailed Lesson Plan)**
   - Create a Markdown Table with columns: [단계, 시간, 교수-학습 활동, 유의점].
   - Include Introduction (도입), Development (전개), Conclusion (정리).

3. **준비물 (Materials)**
   - Bulleted list.

4. **수행 평가 계획 (Performance Assessment)**
   - Procedure detail.
   - Timeline.

5. **평가 기준 (Grading Criteria)**
   - Create a Markdown Table for Grading Criteria (상/중/하).
   - Columns: [등급, 평가 기준].

Ensure the tone is professional (educational formal Korean)."""

        try:
            response = self.client.models.generate_content(
                model=self.plan_model_name,
                contents=prompt,
            )
        except Exception as e:
            logger.error(f"Lesson plan generation failed for topic '{topic}': {e}")
            raise PlanGenerationFailedError() from e

        if not response.text:
            logger.warning("Lesson plan response is empty, using fallback document")
            return EMPTY_PLAN_FALLBACK

        logger.info(f"Generated lesson plan for '{topic}' ({len(response.text)} characters)")
        return response.text
