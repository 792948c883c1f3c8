"""
Unit tests for the team classifier
"""

import pytest

from match_tracker.common.team_classifier import (
    DEFAULT_RULES,
    TeamClassifier,
    TeamProfile,
    TeamRule,
    classify_team,
    fallback_key,
    normalize_team_name,
)


@pytest.fixture(scope="module")
def classifier():
    return TeamClassifier.for_club()


def test_normalize_team_name():
    assert normalize_team_name("  C.E. Badalonès   Sènior A (Masculí) ") == "C E BADALONES SENIOR A MASCULI"


def test_accent_and_punctuation_variants_share_a_key(classifier):
    assert classifier.key_for("CE Badalonès Sènior A Masculí") == classifier.key_for("C.E. BADALONES SENIOR A MASCULI")
    assert classifier.key_for("CE Badalonès Sènior A Masculí") == "senior-a-masc"


@pytest.mark.parametrize(
    "raw_name, expected",
    [
        ("AE BADALONÈS SÈNIOR A MASCULÍ", "senior-a-masc"),
        ("AE BADALONÈS SÈNIOR B MASCULÍ", "senior-b-masc"),
        ("AE BADALONÈS SÈNIOR C MASCULÍ", "senior-c-masc"),
        ("AE BADALONÈS SÈNIOR FEMENÍ", "senior-fem"),
        ("AE BADALONÈS SÈNIOR A FEMENÍ", "senior-fem"),
        ("AE BADALONÈS U20 MASCULÍ", "u20-masc"),
        ("AE BADALONÈS JÚNIOR MASCULÍ", "junior-masc"),
        ("AE BADALONÈS JÚNIOR FEMENÍ", "junior-fem"),
        ("AE BADALONÈS CADET A MASCULÍ", "cadet-a-masc"),
        ("AE BADALONÈS CADET B MASCULÍ", "cadet-b-masc"),
        ("AE BADALONÈS CADET FEMENÍ", "cadet-fem"),
        ("AE BADALONÈS INFANTIL A MASCULÍ", "infantil-a-masc"),
        ("AE BADALONÈS INFANTIL B FEMENÍ", "infantil-b-fem"),
        ("AE BADALONÈS PREINFANTIL MASCULÍ", "preinfantil-masc"),
        ("AE BADALONÈS ALEVÍ MASCULÍ", "alevin-masc"),
        ("AE Badalonès Alevín Femení", "alevin-fem"),
    ],
)
def test_rule_table(classifier, raw_name, expected):
    assert classifier.key_for(raw_name) == expected


def test_preinfantil_wins_over_infantil(classifier):
    # "PREINFANTIL A MASCULI" also contains "INFANTIL A" and "MASCUL"
    assert classifier.key_for("AE BADALONÈS PREINFANTIL A MASCULÍ") == "preinfantil-masc"


def test_fallback_key_is_slug(classifier):
    key = classifier.key_for("AE Badalonès Escola de Bàsquet Mixt 2015")
    assert key == "ae-badalones-escola-de-basquet"
    assert len(key) <= 30
    assert key == key.lower()


@pytest.mark.parametrize(
    "raw_name",
    ["CE Badalonès Mini", "C.E. BADALONES MINI", "c.e. badalonès mini", "  CE  Badalonès  Mini "],
)
def test_fallback_key_ignores_punctuation(classifier, raw_name):
    assert classifier.key_for(raw_name) == "ce-badalones-mini"


def test_fallback_key_helper():
    assert fallback_key("MINI MIXT") == "mini-mixt"
    assert fallback_key("Mini (Mixt)") == "mini-mixt"
    assert fallback_key("") == ""


def test_profiles(classifier):
    key, profile = classifier.classify("AE BADALONÈS JÚNIOR FEMENÍ")
    assert key == "junior-fem"
    assert profile == TeamProfile(icon="🏀", keywords=("badalones", "corbacho"))

    key, profile = classifier.classify("Bàsquet Mini Mixt")
    assert key == "basquet-mini-mixt"
    assert profile == TeamProfile(icon="🏀", keywords=("badalones",))


def test_rules_are_checked_in_order():
    rules = (TeamRule("generic", "CADET", "MASCUL"), *DEFAULT_RULES)
    classifier = TeamClassifier.for_club(rules=rules)
    assert classifier.key_for("AE BADALONÈS CADET A MASCULÍ") == "generic"


def test_classify_team_uses_default_classifier():
    key, profile = classify_team("AE BADALONÈS CADET A MASCULÍ")
    assert key == "cadet-a-masc"
    assert profile.icon == "🏀"
