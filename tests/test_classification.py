import pytest

from crp.classification import (
    classify,
    confidence_for_score,
    detect_urgency,
    expected_resolution_days,
    score_text,
)


def test_janakpuri_pothole_routes_to_pwd():
    result = classify("Massive pothole in Janakpuri near District Centre", "caused accidents")
    assert result.is_civic is True
    assert result.department == "PWD"
    assert result.department_full == "Public Works Department"
    assert result.urgency in {"medium", "high"}
    assert result.confidence == 60


def test_dwarka_water_outage_is_high_urgency_jal_board():
    result = classify("No water supply for 5 days in Dwarka", "paani nahi aa raha")
    assert result.is_civic is True
    assert result.department == "Jal Board"
    assert result.urgency == "high"
    assert result.confidence == 95


def test_meme_is_not_civic():
    result = classify("Check out this funny meme", "lol")
    assert result.is_civic is False
    assert result.rejection_reason == "No civic keywords detected"
    assert result.department is None
    assert result.urgency is None
    assert result.confidence == 0


def test_single_civic_keyword_is_below_threshold():
    result = classify("Nice road trip photos", "")
    assert result.is_civic is False


def test_civic_post_without_department_match_falls_back_to_general():
    result = classify("Filed a complaint with the municipal authority", "")
    assert result.is_civic is True
    assert result.department == "General"
    assert result.department_full == "Municipal Corporation"
    assert result.confidence == 40


def test_department_tie_keeps_first_rule():
    result = classify("water on the road", "")
    assert result.department == "PWD"


def test_keywords_match_whole_words_only():
    assert score_text("roadside stall", ["road"]) == 0
    assert score_text("ROAD and road", ["road"]) == 2


def test_keywords_are_matched_literally():
    assert score_text("speed 5.0 limit", ["5.0"]) == 1
    assert score_text("speed 5x0 limit", ["5.0"]) == 0


def test_phrases_weigh_double():
    assert score_text("there is no water here", ["no water"]) == 2


@pytest.mark.parametrize(
    "score,expected",
    [(0, 40), (1, 60), (2, 75), (3, 85), (4, 95), (9, 95)],
)
def test_confidence_step_function(score, expected):
    assert confidence_for_score(score) == expected


def test_urgency_tiers():
    assert detect_urgency("urgent danger near school") == "high"
    assert detect_urgency("the drain is blocked again") == "medium"
    assert detect_urgency("streetlight needs paint") == "low"


def test_expected_resolution_days_defaults_to_medium():
    assert expected_resolution_days("high") == 3
    assert expected_resolution_days("low") == 15
    assert expected_resolution_days(None) == 7
