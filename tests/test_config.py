from __future__ import annotations

import dataclasses
import json
from pathlib import Path

import pytest

from prospect.errors import ConfigValidationError
from prospect.scoring.config import (
    DEFAULT_CONFIG,
    MissingDataPolicy,
    Modifiers,
    ScoringConfig,
    Thresholds,
    TierWeights,
    load_scoring_profile,
    ranking_weights_from_mapping,
    scoring_config_from_mapping,
)

REPO_ROOT = Path(__file__).resolve().parent.parent


def test_default_profile_values() -> None:
    assert DEFAULT_CONFIG.name == "Standard Scoring"
    assert DEFAULT_CONFIG.tier_weights.as_dict() == {
        "quality": 30.0,
        "compliance": 30.0,
        "operational": 20.0,
        "market": 20.0,
    }
    assert DEFAULT_CONFIG.ranking_weights.total == pytest.approx(100.0)
    assert DEFAULT_CONFIG.missing_data_policy is MissingDataPolicy.PASS_THROUGH


def test_yellow_thresholds_are_derived_once() -> None:
    yellow = Thresholds(adc_max=40.0, min_overall=60.0).yellow()

    assert yellow.adc_max == pytest.approx(60.0)
    assert yellow.min_overall == pytest.approx(42.0)
    assert DEFAULT_CONFIG.yellow_thresholds().adc_max == pytest.approx(90.0)
    assert DEFAULT_CONFIG.yellow_thresholds().min_overall == pytest.approx(45.5)


def test_weights_must_sum_to_one_hundred() -> None:
    with pytest.raises(ConfigValidationError, match="sum to 100"):
        TierWeights(quality=50.0)


def test_weights_within_tolerance_are_accepted() -> None:
    weights = TierWeights(quality=30.005, compliance=30.0, operational=20.0, market=19.999)

    assert weights.total == pytest.approx(100.004)


def test_zero_total_weight_is_reported_explicitly() -> None:
    with pytest.raises(ConfigValidationError, match="zero"):
        TierWeights(quality=0, compliance=0, operational=0, market=0)


@pytest.mark.parametrize(
    "factory",
    [
        lambda: Thresholds(adc_max=-1.0),
        lambda: Modifiers(chain_penalty=float("nan")),
        lambda: TierWeights(quality=True, compliance=30, operational=20, market=19),
        lambda: TierWeights(quality="30"),
    ],
)
def test_invalid_numbers_are_rejected(factory) -> None:
    with pytest.raises(ConfigValidationError):
        factory()


def test_configs_are_immutable() -> None:
    with pytest.raises(dataclasses.FrozenInstanceError):
        DEFAULT_CONFIG.name = "Changed"  # type: ignore[misc]


def test_profile_mapping_accepts_camel_case_and_legacy_names() -> None:
    config = scoring_config_from_mapping(
        {
            "name": "Aggressive",
            "weights": {
                "qualityWeight": 40,
                "complianceWeight": 20,
                "operationalWeight": 20,
                "marketWeight": 20,
            },
            "thresholds": {"adcMax": "80", "minOverallScore": 60},
            "modifiers": {"peBakedPenalty": 0},
            "missingDataPolicy": "FailClosed",
        }
    )

    assert config.name == "Aggressive"
    assert config.tier_weights.quality == 40.0
    assert config.thresholds.adc_max == 80.0
    assert config.thresholds.min_overall == 60.0
    assert config.thresholds.min_quality == DEFAULT_CONFIG.thresholds.min_quality
    assert config.modifiers.pe_backed_penalty == 0.0
    assert config.modifiers.con_state_bonus == DEFAULT_CONFIG.modifiers.con_state_bonus
    assert config.missing_data_policy is MissingDataPolicy.FAIL_CLOSED
    assert config.ranking_weights == DEFAULT_CONFIG.ranking_weights


@pytest.mark.parametrize(
    "payload",
    [
        {"weights": {"quality": 50}},
        {"thresholds": {"maxAdc": 80}},
        {"colour": "green"},
        {"modifiers": {"chainPenalty": "lots"}},
        {"missingDataPolicy": "ignore"},
        {"weights": [30, 30, 20, 20]},
    ],
)
def test_invalid_profiles_are_rejected_whole(payload) -> None:
    with pytest.raises(ConfigValidationError):
        scoring_config_from_mapping(payload)


def test_ranking_weights_accept_weight_suffix() -> None:
    weights = ranking_weights_from_mapping(
        {
            "adc_weight": 30,
            "quality_weight": 20,
            "market_weight": 20,
            "financial_weight": 10,
            "ownership_weight": 10,
            "demographics_weight": 10,
        }
    )

    assert weights.adc == 30.0
    assert weights.financial == 10.0


def test_saved_ranking_profile_keeps_weights_under_weights_key() -> None:
    config = scoring_config_from_mapping(
        {
            "id": "p1",
            "name": "Saved",
            "is_default": False,
            "weights": {
                "adc_weight": 25,
                "quality_weight": 20,
                "market_weight": 20,
                "financial_weight": 15,
                "ownership_weight": 10,
                "demographics_weight": 10,
            },
        }
    )

    assert config.name == "Saved"
    assert config.ranking_weights.as_dict() == {
        "adc": 25.0,
        "quality": 20.0,
        "market": 20.0,
        "financial": 15.0,
        "ownership": 10.0,
        "demographics": 10.0,
    }
    assert config.tier_weights == DEFAULT_CONFIG.tier_weights


@pytest.mark.parametrize(
    "payload",
    [
        {"weights": {"adc": 50, "compliance": 50}},
        {"weights": {"adcWeight": 100}, "rankingWeights": {"adc": 100, "quality": 0}},
    ],
)
def test_ambiguous_weight_sections_are_rejected(payload) -> None:
    with pytest.raises(ConfigValidationError):
        scoring_config_from_mapping(payload)


def test_load_yaml_profile(tmp_path: Path) -> None:
    path = tmp_path / "cautious.yaml"
    path.write_text(
        "thresholds:\n  min_overall: 75\nmodifiers:\n  con_state_bonus: 5\n",
        encoding="utf-8",
    )

    config = load_scoring_profile(path)

    assert config.name == "cautious"
    assert config.thresholds.min_overall == 75.0
    assert config.modifiers.con_state_bonus == 5.0


def test_load_json_profile(tmp_path: Path) -> None:
    path = tmp_path / "profile.json"
    path.write_text(
        json.dumps({"name": "JSON", "rankingWeights": {"adc": 35, "demographics": 0}}),
        encoding="utf-8",
    )

    config = load_scoring_profile(path)

    assert config.name == "JSON"
    assert config.ranking_weights.adc == 35.0
    assert config.ranking_weights.demographics == 0.0


def test_load_profile_errors(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        load_scoring_profile(tmp_path / "missing.yaml")

    broken = tmp_path / "broken.yaml"
    broken.write_text("weights: [unclosed\n", encoding="utf-8")
    with pytest.raises(ConfigValidationError):
        load_scoring_profile(broken)


def test_shipped_profiles_load() -> None:
    standard = load_scoring_profile(REPO_ROOT / "config" / "scoring_profile.yaml")
    growth = load_scoring_profile(REPO_ROOT / "config" / "growth_profile.json")

    assert standard == DEFAULT_CONFIG
    assert growth.name == "Growth Markets"
    assert growth.thresholds.adc_max == 80.0


def test_to_mapping_round_trips() -> None:
    custom = ScoringConfig(name="Custom", thresholds=Thresholds(adc_max=75.0))

    assert scoring_config_from_mapping(custom.to_mapping()) == custom
