"""Threshold-based clustering of anomalously similar document pairs.

Clustering is two explicit passes over the same immutable matrix:

1. :func:`~copycatcher.detector.stats.top_similarities` samples every
   document's maximum similarity and the threshold is derived from it.
2. :func:`assemble_clusters` rescans all ordered pairs against that
   threshold.

The threshold is a global aggregate, so pass 2 cannot start before pass 1
has finished. Both passes are quadratic in the number of documents. An
LSH-bucketed assembler with the same call signature is the natural
replacement once corpora outgrow that.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Dict, List, NamedTuple, Tuple

from .signature import SignatureMatrix
from .stats import DEFAULT_STD_FACTOR, map_rows, mean, stddev, threshold, top_similarities


# Similarities never exceed this, so neither does the clustering cutoff
MAX_SIMILARITY = 1.0


class SimilarityInfo(NamedTuple):
    """One flagged relationship: the other document's label and the score."""

    label: str
    similarity: float


Clusters = Dict[str, List[SimilarityInfo]]


@dataclass
class ClusterResult:
    """Output of one clustering run."""

    clusters: Clusters
    mean: float
    stddev: float
    threshold: float
    std_factor: float
    document_count: int
    sample: List[float] = field(default_factory=list, repr=False)

    @property
    def flagged_count(self) -> int:
        return len(self.clusters)


def assemble_clusters(
    matrix: SignatureMatrix,
    cutoff: float,
    label_of: Callable[[int], str],
    workers: int = 1,
) -> Clusters:
    """Group every pair whose similarity reaches *cutoff* under its first document.

    Ordered pairs ``(i, j)``, ``i != j``, are scanned with ``i`` then ``j``
    ascending. A pair is flagged when ``s >= cutoff``; the entry for
    ``label_of(i)`` gets ``(label_of(j), s)`` appended. A flagged pair
    therefore shows up under both labels. Pairs within an entry keep
    ascending ``j`` order rather than being sorted by score.
    """
    count = matrix.document_count()

    def _row_hits(i: int) -> List[Tuple[int, float]]:
        row = matrix.similarities_to(i)
        return [
            (j, float(row[j]))
            for j in range(count)
            if j != i and row[j] >= cutoff
        ]

    clusters: Clusters = {}
    for i, hits in enumerate(map_rows(_row_hits, range(count), workers)):
        if not hits:
            continue
        entry = clusters.setdefault(label_of(i), [])
        entry.extend(SimilarityInfo(label_of(j), s) for j, s in hits)
    return clusters


def cluster_documents(
    matrix: SignatureMatrix,
    label_of: Callable[[int], str],
    std_factor: float = DEFAULT_STD_FACTOR,
    workers: int = 1,
) -> ClusterResult:
    """Run both passes and bundle clusters with the corpus statistics.

    The cutoff handed to the assembler is the estimator's threshold capped
    at 1.0: a handful of exact duplicates can push ``mean + k * stddev``
    past the largest attainable similarity, and an uncapped cutoff would
    then flag nothing. When no document shares anything with any other
    (every sampled maximum is 0) there is nothing to flag and assembly is
    skipped; a 0.0 cutoff would otherwise report every pair.
    """
    sample = top_similarities(matrix, workers=workers)
    if not sample:
        return ClusterResult(
            clusters={},
            mean=0.0,
            stddev=0.0,
            threshold=0.0,
            std_factor=std_factor,
            document_count=0,
        )

    cutoff = min(threshold(sample, std_factor), MAX_SIMILARITY)
    if max(sample) > 0.0:
        clusters = assemble_clusters(matrix, cutoff, label_of, workers=workers)
    else:
        clusters = {}
    return ClusterResult(
        clusters=clusters,
        mean=mean(sample),
        stddev=stddev(sample),
        threshold=cutoff,
        std_factor=std_factor,
        document_count=matrix.document_count(),
        sample=sample,
    )
