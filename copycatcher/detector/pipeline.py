"""End-to-end detection for one or more submission filenames.

Integrates:
- Submission discovery and labelling
- Comment stripping and shingling
- Signature building
- Two-pass clustering
- Report writing
"""
from __future__ import annotations

import logging
import random
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Tuple, Union

from tqdm import tqdm

from .clusters import ClusterResult, cluster_documents
from .config import DetectorConfig
from .errors import EmptyInputError
from .file_ingest import enumerate_paths, filter_paths_by_filename, read_document, submission_labels
from .hashing import HashFamily
from .report import write_report
from .shingle import shingle_document, strip_comments
from .signature import SignatureBuilder

logger = logging.getLogger(__name__)


def build_corpus(
    paths: Sequence[Path],
    config: DetectorConfig,
) -> Tuple[SignatureBuilder, List[str]]:
    """Register every readable, non-empty submission in a fresh builder.

    Returns the builder and the label of each registered document, indexed
    by document id. Files that produce no shingles are skipped.
    """
    builder = SignatureBuilder(HashFamily(random.Random(config.seed)))
    labels: List[str] = []
    all_labels = submission_labels(paths)

    progress = tqdm(
        zip(paths, all_labels),
        total=len(paths),
        desc="Reading files",
        disable=not config.show_progress,
    )
    for path, label in progress:
        text = strip_comments(read_document(path))
        try:
            builder.add_document(shingle_document(text, config.shingle_width))
        except EmptyInputError:
            logger.warning("Skipping %s: no %d-word shingles", path, config.shingle_width)
            continue
        labels.append(label)
    return builder, labels


def process_submission(
    paths: Sequence[Path],
    filename: str,
    config: DetectorConfig,
    *,
    write: bool = True,
) -> Optional[ClusterResult]:
    """Cluster all submissions of *filename* found among *paths*.

    Returns ``None`` when fewer than two comparable submissions exist.
    """
    logger.info("Processing %s submissions...", filename)
    matching = filter_paths_by_filename(paths, filename)
    if len(matching) < 2:
        logger.warning("Cannot cluster %s: %d matching file(s)", filename, len(matching))
        return None

    builder, labels = build_corpus(matching, config)
    if builder.document_count < 2:
        logger.warning("Cannot cluster %s: %d non-empty file(s)", filename, builder.document_count)
        return None

    logger.info("Generating MinHash matrix (%d permutations)...", config.permutation_count)
    matrix = builder.build(config.permutation_count)

    logger.info("Clustering %d submissions...", matrix.document_count())
    result = cluster_documents(
        matrix,
        labels.__getitem__,
        std_factor=config.std_factor,
        workers=config.workers,
    )
    logger.info("%d submissions have suspicious similarity", result.flagged_count)

    if write:
        for out_path in write_report(config.out_dir, filename, result, json_report=config.json_report):
            logger.info("Report written to %s", out_path)
    return result


def run_detection(
    root: Union[str, Path],
    filenames: Sequence[str],
    config: Optional[DetectorConfig] = None,
    *,
    write: bool = True,
) -> Dict[str, Optional[ClusterResult]]:
    """Enumerate *root* once and process every submission filename."""
    config = config or DetectorConfig()
    logger.info("Enumerating files under %s...", root)
    paths = enumerate_paths(root, config.file_glob)
    logger.info("%d files found", len(paths))
    return {name: process_submission(paths, name, config, write=write) for name in filenames}
