"""
Bulk Processor: Run OCR + extraction over a directory of receipt images.

Strategy:
1. Enumerate image files recursively in sorted order (fatal if the directory
   cannot be read)
2. OCR each image, optionally on a small thread pool
3. Extract records and feed the aggregator strictly in enumeration order,
   so a run is reproducible regardless of the worker count
4. An OCR failure skips that image only; it is logged and reported
"""
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Callable, Iterator, List, Optional, Sequence, Tuple, Union
import logging
import os

from ..config import settings
from ..models import AnalysisReport, ImageFailure
from ..processors.aggregation.fuzzy_aggregator import FuzzyAggregator
from ..processors.aggregation.result_sorter import build_report
from ..processors.extraction.pipeline import ExtractionPipeline, sum_prices
from ..services.ocr.tesseract_client import OcrFailure, recognize

logger = logging.getLogger(__name__)

Recognizer = Callable[[Path, str], str]


class DirectoryUnreadable(OSError):
    """Raised when the input directory cannot be enumerated."""


def _raise_walk_error(error: OSError) -> None:
    raise DirectoryUnreadable(f"Failed to read directory entry: {error}") from error


def iter_receipt_images(
    directory: Union[str, Path],
    extensions: Optional[Sequence[str]] = None,
) -> Iterator[Path]:
    """
    Yield image files under a directory, recursively, in sorted order.

    Args:
        directory: Root directory
        extensions: Allowed extensions without dot (case-insensitive);
            defaults to settings.image_extension_list

    Raises:
        DirectoryUnreadable: If the root is missing, not a directory or any
            entry cannot be read
    """
    root = Path(directory)
    if not root.exists():
        raise DirectoryUnreadable(f"Directory does not exist: {root}")
    if not root.is_dir():
        raise DirectoryUnreadable(f"Not a directory: {root}")
    if not os.access(root, os.R_OK | os.X_OK):
        raise DirectoryUnreadable(f"Permission denied: {root}")

    allowed = {e.lower().lstrip(".") for e in (extensions or settings.image_extension_list)}
    for dirpath, dirnames, filenames in os.walk(root, onerror=_raise_walk_error):
        dirnames.sort()
        for filename in sorted(filenames):
            suffix = Path(filename).suffix.lower().lstrip(".")
            if suffix in allowed:
                yield Path(dirpath) / filename


def _ocr_one(
    recognizer: Recognizer,
    image_path: Path,
    language: str,
) -> Tuple[Path, Optional[str], Optional[str]]:
    """OCR one image, capturing OcrFailure so it stays scoped to this image."""
    try:
        return image_path, recognizer(image_path, language), None
    except OcrFailure as e:
        return image_path, None, e.reason


class BulkProcessor:
    """Processes a finite batch of receipt images into an AnalysisReport."""

    def __init__(
        self,
        pipeline: Optional[ExtractionPipeline] = None,
        aggregator: Optional[FuzzyAggregator] = None,
        recognizer: Optional[Recognizer] = None,
        language: Optional[str] = None,
        max_workers: Optional[int] = None,
    ):
        self.pipeline = pipeline or ExtractionPipeline()
        self.aggregator = aggregator or FuzzyAggregator()
        self.recognizer = recognizer or recognize
        self.language = language or settings.ocr_language
        self.max_workers = max_workers or settings.max_workers
        self.images_processed = 0
        self.failures: List[ImageFailure] = []

    def _ocr_results(self, images: List[Path]) -> Iterator[Tuple[Path, Optional[str], Optional[str]]]:
        """OCR results in input order."""
        if self.max_workers <= 1 or len(images) <= 1:
            for image_path in images:
                logger.info(f"Processing: {image_path}")
                yield _ocr_one(self.recognizer, image_path, self.language)
            return

        logger.info(f"Running OCR on {len(images)} images with {self.max_workers} workers")
        with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            futures = [
                executor.submit(_ocr_one, self.recognizer, image_path, self.language)
                for image_path in images
            ]
            for future in futures:
                image_path, text, error = future.result()
                logger.info(f"Processing: {image_path}")
                yield image_path, text, error

    def process_text(self, text: str, source: str = "<text>") -> int:
        """
        Extract and absorb the records of one OCR text block.

        Returns:
            Number of records absorbed
        """
        records = self.pipeline.extract_records(text)
        for record in records:
            self.aggregator.absorb(record)
        logger.info(f"{source}: {len(records)} products ({sum_prices(records):.2f})")
        return len(records)

    def process_directory(self, directory: Union[str, Path]) -> AnalysisReport:
        """
        Process every receipt image under a directory.

        Raises:
            DirectoryUnreadable: If the directory cannot be enumerated
        """
        logger.info(f"Analyzing receipts in: {directory}")
        images = list(iter_receipt_images(directory))
        if not images:
            logger.warning(f"No receipt images found in {directory}")

        for image_path, text, error in self._ocr_results(images):
            if error is not None:
                logger.error(f"Error processing {image_path}: {error}")
                self.failures.append(ImageFailure(path=str(image_path), error=error))
                continue
            self.images_processed += 1
            self.process_text(text, source=str(image_path))

        return self.report()

    def report(self) -> AnalysisReport:
        """Report of everything absorbed so far."""
        return build_report(
            self.aggregator.entries(),
            images_processed=self.images_processed,
            failures=list(self.failures),
        )


def process_receipt_directory(
    directory: Union[str, Path],
    recognizer: Optional[Recognizer] = None,
    rule_set_id: Optional[str] = None,
    **kwargs,
) -> AnalysisReport:
    """
    Convenience entry point: build a processor and run it over a directory.

    Args:
        directory: Directory with receipt images
        recognizer: OCR callable (path, language) -> text; defaults to Tesseract
        rule_set_id: Extraction rule set; defaults to settings.rule_set
        **kwargs: Passed to BulkProcessor (language, max_workers)
    """
    from ..processors.extraction.rule_loader import get_rule_set
    pipeline = ExtractionPipeline(rule_set=get_rule_set(rule_set_id))
    processor = BulkProcessor(pipeline=pipeline, recognizer=recognizer, **kwargs)
    return processor.process_directory(directory)
