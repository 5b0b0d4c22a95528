"""Pipeline controller sequencing detection, scoring and aggregation."""

from __future__ import annotations

import asyncio
import logging
from typing import Optional, Union

from .aggregation import Aggregator, ProbabilityMode
from .detectors import DetectionModel, SubjectDetector, build_detector
from .errors import InvalidTransitionError, StageExecutionError
from .scoring import FeatureScorer, ScoringProvider
from .settings import Settings
from .types import (
    DetectionResult,
    Image,
    ImageLike,
    PipelinePhase,
    PipelineSnapshot,
    PredictionResult,
    as_image,
)

logger = logging.getLogger(__name__)


class PipelineController:
    """Owns one image at a time and moves it through the pipeline stages.

    Stage calls run in a worker thread and are the only suspension points.
    Every ``load_image``/``reset`` bumps a generation counter; a stage call
    whose generation is outdated when it resumes is discarded.
    """

    def __init__(
        self,
        detector: SubjectDetector,
        scorer: FeatureScorer,
        aggregator: Aggregator,
    ) -> None:
        self.detector = detector
        self.scorer = scorer
        self.aggregator = aggregator

        self._generation = 0
        self._phase = PipelinePhase.IDLE
        self._image: Optional[Image] = None
        self._detection: Optional[DetectionResult] = None
        self._prediction: Optional[PredictionResult] = None
        self._error: Optional[str] = None

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        model: Optional[DetectionModel] = None,
        provider: Optional[ScoringProvider] = None,
    ) -> "PipelineController":
        mode = ProbabilityMode(settings.probability_mode)
        return cls(
            detector=build_detector(settings, model),
            scorer=FeatureScorer(
                provider,
                draw_target_probability=mode is ProbabilityMode.INDEPENDENT,
            ),
            aggregator=Aggregator(mode, settings.high_risk_threshold),
        )

    @property
    def phase(self) -> PipelinePhase:
        return self._phase

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def image(self) -> Optional[Image]:
        return self._image

    @property
    def detection(self) -> Optional[DetectionResult]:
        return self._detection

    @property
    def prediction(self) -> Optional[PredictionResult]:
        return self._prediction

    @property
    def error(self) -> Optional[str]:
        return self._error

    def snapshot(self) -> PipelineSnapshot:
        return PipelineSnapshot(
            phase=self._phase,
            generation=self._generation,
            image_name=self._image.name if self._image else None,
            detection=self._detection,
            prediction=self._prediction,
            error=self._error,
        )

    def load_image(self, image: Image) -> None:
        self._require(PipelinePhase.IDLE, "load an image")
        self._clear()
        self._generation += 1
        self._image = image
        self._set_phase(PipelinePhase.IMAGE_LOADED)

    def reset(self) -> None:
        self._clear()
        self._generation += 1
        self._set_phase(PipelinePhase.IDLE)

    async def run_detection(self) -> Optional[DetectionResult]:
        """Run the detection stage on the loaded image.

        Returns the detection result, or ``None`` when the run was superseded
        by a ``reset`` before the stage finished.
        """
        self._require(PipelinePhase.IMAGE_LOADED, "run detection")
        generation = self._generation
        image = self._image
        self._set_phase(PipelinePhase.DETECTING)

        try:
            result = await asyncio.to_thread(self.detector.detect, image)
        except Exception as exc:
            if self._is_stale(generation, "detection"):
                return None
            self._fail(StageExecutionError("detection", str(exc)))
            return None

        if self._is_stale(generation, "detection"):
            return None

        self._detection = result
        logger.info(
            "%s: subject %s (confidence %.2f, %s)",
            image.name,
            "present" if result.subject_present else "absent",
            result.confidence,
            result.method.value,
        )
        if result.error:
            self._fail(result.error)
        elif result.subject_present:
            self._set_phase(PipelinePhase.DETECTED_POSITIVE)
        else:
            self._set_phase(PipelinePhase.DETECTED_NEGATIVE)
        return result

    async def run_scoring(self) -> Optional[PredictionResult]:
        """Score the image and aggregate the features.

        Only legal after a positive detection. Returns ``None`` when the stage
        failed or the run was superseded.
        """
        self._require(PipelinePhase.DETECTED_POSITIVE, "run scoring")
        generation = self._generation
        image = self._image
        self._set_phase(PipelinePhase.SCORING)

        try:
            prediction = await asyncio.to_thread(self._score_and_aggregate, image)
        except Exception as exc:
            if self._is_stale(generation, "scoring"):
                return None
            if not isinstance(exc, StageExecutionError):
                exc = StageExecutionError("scoring", str(exc))
            self._fail(exc)
            return None

        if self._is_stale(generation, "scoring"):
            return None

        self._prediction = prediction
        logger.info(
            "%s: risk %s, target probability %.3f",
            image.name,
            prediction.risk_level.value,
            prediction.class_probabilities.target,
        )
        self._set_phase(PipelinePhase.COMPLETE)
        return prediction

    async def run(self, image: ImageLike) -> PipelineSnapshot:
        """Drive a fresh run from load to the furthest reachable phase."""

        if self._phase is not PipelinePhase.IDLE:
            self.reset()
        self.load_image(as_image(image))
        await self.run_detection()
        if self._phase is PipelinePhase.DETECTED_POSITIVE:
            await self.run_scoring()
        return self.snapshot()

    def _score_and_aggregate(self, image: Image) -> PredictionResult:
        scores = self.scorer.score(image)
        return self.aggregator.aggregate(scores)

    def _require(self, phase: PipelinePhase, operation: str) -> None:
        if self._phase is not phase:
            raise InvalidTransitionError(operation, self._phase.value)

    def _is_stale(self, generation: int, stage: str) -> bool:
        if generation == self._generation:
            return False
        logger.debug(
            "Discarding %s result from generation %d (current %d)",
            stage,
            generation,
            self._generation,
        )
        return True

    def _fail(self, error: Union[str, Exception]) -> None:
        self._error = str(error)
        logger.warning("Pipeline failed for %s: %s", self._image_name(), self._error)
        self._set_phase(PipelinePhase.FAILED)

    def _clear(self) -> None:
        self._image = None
        self._detection = None
        self._prediction = None
        self._error = None

    def _set_phase(self, phase: PipelinePhase) -> None:
        logger.debug("%s: %s -> %s", self._image_name(), self._phase.value, phase.value)
        self._phase = phase

    def _image_name(self) -> str:
        return self._image.name if self._image else "<no image>"
