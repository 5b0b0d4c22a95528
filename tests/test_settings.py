import pytest
from pydantic import ValidationError

from image_screening.settings import Settings


@pytest.fixture(autouse=True)
def isolated_cwd(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)


def test_defaults():
    settings = Settings()
    assert settings.min_skin_ratio == 0.10
    assert settings.model_threshold == 0.5
    assert settings.probability_mode == "derived"
    assert settings.high_risk_threshold is None
    assert settings.max_image_bytes == 10 * 1024 * 1024
    assert ".webp" in settings.accepted_extensions


def test_env_prefix(monkeypatch):
    monkeypatch.setenv("SCREENING_MIN_SKIN_RATIO", "0.25")
    monkeypatch.setenv("SCREENING_PROBABILITY_MODE", "independent")
    settings = Settings()
    assert settings.min_skin_ratio == 0.25
    assert settings.probability_mode == "independent"


def test_env_file(tmp_path):
    (tmp_path / ".env").write_text("SCREENING_HIGH_RISK_THRESHOLD=0.45\n", encoding="utf-8")
    assert Settings().high_risk_threshold == 0.45


@pytest.mark.parametrize("value", [-0.1, 1.5])
def test_skin_ratio_must_be_fraction(value):
    with pytest.raises(ValidationError):
        Settings(min_skin_ratio=value)


@pytest.mark.parametrize("value", [0.2, 0.30, 1.2])
def test_high_risk_threshold_must_exceed_moderate(value):
    with pytest.raises(ValidationError):
        Settings(high_risk_threshold=value)


def test_unknown_probability_mode_rejected():
    with pytest.raises(ValidationError):
        Settings(probability_mode="random")
