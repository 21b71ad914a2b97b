"""Tests for parsing raw Gemini output."""

import pytest

from services.response_parser import (
    ResponseParseError,
    parse_analysis,
    parse_video_list,
    strip_markdown_code_blocks,
)

SEARCH_RESPONSE = """Here are videos for your lesson:

Video 1
Title: Newton's First Law
Channel: Khan Academy
URL: https://www.youtube.com/watch?v=aaa
Description: 관성의 법칙을 설명합니다.

Video 2
Title: Newton's Second Law
Channel: CrashCourse
URL: https://www.youtube.com/watch?v=bbb
Description: 가속도의 법칙을 설명합니다.

Video 3
Title: Newton's Third Law
Channel: Physics Girl
URL: https://www.youtube.com/watch?v=ccc
Description: 작용 반작용 법칙을 설명합니다.
"""


def test_parses_labeled_blocks():
    videos = parse_video_list(SEARCH_RESPONSE)

    assert [v.id for v in videos] == [1, 2, 3]
    assert videos[0].title == "Newton's First Law"
    assert videos[0].channel == "Khan Academy"
    assert videos[0].url == "https://www.youtube.com/watch?v=aaa"
    assert videos[0].description == "관성의 법칙을 설명합니다."
    assert videos[2].title == "Newton's Third Law"


def test_empty_text_returns_no_candidates():
    assert parse_video_list("") == []


def test_korean_labels():
    text = """Video 1
제목: 뉴턴의 운동 법칙
채널: EBS
링크: https://youtu.be/xyz
설명: 세 가지 법칙 정리
"""
    videos = parse_video_list(text)

    assert len(videos) == 1
    assert videos[0].title == "뉴턴의 운동 법칙"
    assert videos[0].channel == "EBS"
    assert videos[0].url == "https://youtu.be/xyz"
    assert videos[0].description == "세 가지 법칙 정리"


def test_link_label_is_a_url_synonym():
    videos = parse_video_list("Video 1\nTitle: A\nLink: https://youtu.be/a\n")
    assert videos[0].url == "https://youtu.be/a"


def test_never_more_than_five_and_renumbered():
    blocks = [
        f"Video {i}\nTitle: T{i}\nURL: https://youtu.be/{i}\n"
        for i in range(1, 8)
    ]
    videos = parse_video_list("\n".join(blocks))

    assert len(videos) == 5
    assert [v.id for v in videos] == [1, 2, 3, 4, 5]
    assert [v.title for v in videos] == ["T1", "T2", "T3", "T4", "T5"]
    assert all(v.title and v.url for v in videos)


def test_source_numbering_is_ignored():
    text = """Video 4
Title: Late entry
URL: https://youtu.be/late

Video 9
Title: Later entry
URL: https://youtu.be/later
"""
    videos = parse_video_list(text)

    assert [v.id for v in videos] == [1, 2]
    assert [v.title for v in videos] == ["Late entry", "Later entry"]


def test_block_without_url_is_dropped_and_next_block_survives():
    text = """Video 1
Title: Missing link
Channel: Lost Channel

Video 2
Title: Complete
URL: https://youtu.be/ok
"""
    videos = parse_video_list(text)

    assert len(videos) == 1
    assert videos[0].id == 1
    assert videos[0].title == "Complete"
    assert videos[0].channel == ""


def test_optional_fields_default_to_empty():
    videos = parse_video_list("Video 1\nTitle: Only required\nURL: https://youtu.be/r\n")

    assert videos[0].channel == ""
    assert videos[0].description == ""


def test_block_without_title_is_dropped():
    text = "Video 1\nURL: https://youtu.be/x\nChannel: C\n"
    assert parse_video_list(text) == []


def test_markdown_decorations_around_labels():
    text = """**Video 1**
- **Title:** Bold title
- **Channel:** Bold channel
- **URL:** https://youtu.be/bold
"""
    videos = parse_video_list(text)

    assert len(videos) == 1
    assert videos[0].title == "Bold title"
    assert videos[0].channel == "Bold channel"
    assert videos[0].url == "https://youtu.be/bold"


def test_unlabeled_lines_are_ignored():
    text = """I found these videos.
Video 1
Title: Kept
Some commentary the model added
URL: https://youtu.be/k
"""
    videos = parse_video_list(text)
    assert [v.title for v in videos] == ["Kept"]


def test_analysis_ids_are_resequenced():
    raw = '{"summary":"x","assessments":[{"title":"a","description":"b"},{"title":"c","description":"d"}]}'
    analysis = parse_analysis(raw)

    assert analysis.summary == "x"
    assert [(a.id, a.title, a.description) for a in analysis.assessments] == [
        (1, "a", "b"),
        (2, "c", "d"),
    ]


def test_analysis_incoming_ids_are_replaced():
    raw = '{"summary":"s","assessments":[{"id":7,"title":"a","description":"b"},{"id":3,"title":"c","description":"d"}]}'
    assert [a.id for a in parse_analysis(raw).assessments] == [1, 2]


def test_empty_object_gives_empty_analysis():
    analysis = parse_analysis("{}")

    assert analysis.summary == ""
    assert analysis.assessments == []


def test_non_array_assessments_are_treated_as_empty():
    analysis = parse_analysis('{"summary":"s","assessments":"none"}')
    assert analysis.assessments == []


def test_code_fenced_json_is_accepted():
    raw = '```json\n{"summary":"fenced","assessments":[]}\n```'
    assert parse_analysis(raw).summary == "fenced"


def test_malformed_json_raises():
    with pytest.raises(ResponseParseError):
        parse_analysis("this is not json")


def test_json_array_raises():
    with pytest.raises(ResponseParseError):
        parse_analysis("[1, 2, 3]")


def test_strip_markdown_code_blocks():
    assert strip_markdown_code_blocks("```\n[1]\n```") == "[1]"
    assert strip_markdown_code_blocks("  plain  ") == "plain"
