"""Run the screening pipeline over every image in a folder.

Usage:
    image-screening FOLDER                            # heuristic detection
    image-screening FOLDER --yolo yolov8n.pt          # YOLO person detection
    image-screening FOLDER --probability-mode independent
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
from pathlib import Path
from typing import Dict, List, Optional

from .detectors import YoloPersonModel
from .pipeline import PipelineController
from .settings import Settings
from .types import PipelinePhase

logger = logging.getLogger(__name__)


def find_images(folder: Path, settings: Settings) -> List[Path]:
    """Images the provider would accept: known extension and within the size limit."""

    images = []
    for path in sorted(folder.iterdir()):
        if not path.is_file() or path.suffix.lower() not in settings.accepted_extensions:
            continue
        if path.stat().st_size > settings.max_image_bytes:
            logger.warning("Skipping %s: larger than %d bytes", path.name, settings.max_image_bytes)
            continue
        images.append(path)
    return images


async def analyze_images_in_folder(
    folder: Path,
    settings: Settings,
    controller: Optional[PipelineController] = None,
) -> Dict[str, dict]:
    """Run the pipeline on each image and collect one snapshot dict per file."""

    if controller is None:
        model = None
        if settings.yolo_model:
            try:
                model = YoloPersonModel(settings.yolo_model, device=settings.device)
            except Exception as exc:
                logger.warning(
                    "Could not load YOLO model %s, using skin-tone detection: %s",
                    settings.yolo_model,
                    exc,
                )
        controller = PipelineController.from_settings(settings, model=model)

    image_files = find_images(folder, settings)
    logger.info("Found %d images in %s", len(image_files), folder)

    all_results: Dict[str, dict] = {}
    for idx, image_file in enumerate(image_files, 1):
        logger.info("[%d/%d] %s", idx, len(image_files), image_file.name)
        snapshot = await controller.run(image_file)
        all_results[image_file.name] = snapshot.to_dict()
    controller.reset()
    return all_results


def reorganize_results(results: Dict[str, dict]) -> dict:
    """Group per-image snapshots into screened, no-subject and failed images."""

    screened = []
    no_subject = []
    failed = []

    for image_name, data in results.items():
        phase = data["phase"]
        if phase == PipelinePhase.COMPLETE.value:
            screened.append({"image": image_name, **data["prediction"]})
        elif phase == PipelinePhase.DETECTED_NEGATIVE.value:
            no_subject.append({"image": image_name, "detection": data["detection"]})
        else:
            failed.append({"image": image_name, "error": data["error"]})

    return {
        "screened": screened,
        "no_subject": no_subject,
        "failed": failed,
        "summary": {
            "total": len(results),
            "screened_count": len(screened),
            "no_subject_count": len(no_subject),
            "failed_count": len(failed),
        },
    }


def save_results_to_json(results: Dict[str, dict], output_file: Path) -> None:
    organized = reorganize_results(results)
    output_file.write_text(json.dumps(organized, ensure_ascii=False, indent=2), encoding="utf-8")
    logger.info("Results written to %s", output_file)


def print_summary(results: Dict[str, dict]) -> None:
    risk_counts: Dict[str, int] = {}
    for data in results.values():
        prediction = data.get("prediction")
        if prediction:
            risk = prediction["risk_level"]
            risk_counts[risk] = risk_counts.get(risk, 0) + 1

    summary = reorganize_results(results)["summary"]
    print("=" * 60)
    print(f"Images:             {summary['total']}")
    print(f"  screened:         {summary['screened_count']}")
    print(f"  no subject found: {summary['no_subject_count']}")
    print(f"  failed:           {summary['failed_count']}")
    for risk, count in sorted(risk_counts.items()):
        print(f"  risk {risk}: {count}")
    print("=" * 60)


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description=__doc__, formatter_class=argparse.RawDescriptionHelpFormatter)
    parser.add_argument("folder", type=Path, help="Folder containing the images to screen")
    parser.add_argument("--output", type=Path, default=Path("screening_results.json"))
    parser.add_argument("--yolo", dest="yolo_model", default=None,
                        help="YOLO weights for model-based person detection")
    parser.add_argument("--probability-mode", choices=["derived", "independent"], default=None)
    args = parser.parse_args(argv)

    overrides = {"yolo_model": args.yolo_model, "probability_mode": args.probability_mode}
    settings = Settings(**{key: value for key, value in overrides.items() if value is not None})

    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s  %(levelname)-8s  %(name)s  %(message)s",
        datefmt="%H:%M:%S",
    )

    if not args.folder.is_dir():
        logger.error("Folder does not exist: %s", args.folder)
        return 1

    results = asyncio.run(analyze_images_in_folder(args.folder, settings))
    if not results:
        logger.warning("No images found in %s", args.folder)
        return 0

    print_summary(results)
    save_results_to_json(results, args.output)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
