import pytest

from image_screening.aggregation import Aggregator, ProbabilityMode
from image_screening.detectors import SkinToneDetector
from image_screening.pipeline import PipelineController
from image_screening.scoring import (
    CONFIDENCE_KEY,
    FEATURE_SPECS,
    TARGET_PROBABILITY_KEY,
    FeatureScorer,
    FixedScoringProvider,
)
from image_screening.settings import Settings


@pytest.fixture
def settings(monkeypatch, tmp_path) -> Settings:
    """Settings with defaults only; a temp cwd keeps stray .env files out."""
    monkeypatch.chdir(tmp_path)
    return Settings()


@pytest.fixture
def fixed_provider() -> FixedScoringProvider:
    values = {spec.name: 0.5 for spec in FEATURE_SPECS}
    values[CONFIDENCE_KEY] = 0.9
    values[TARGET_PROBABILITY_KEY] = 0.25
    return FixedScoringProvider(values)


@pytest.fixture
def controller(fixed_provider) -> PipelineController:
    return PipelineController(
        detector=SkinToneDetector(),
        scorer=FeatureScorer(fixed_provider),
        aggregator=Aggregator(ProbabilityMode.DERIVED),
    )
