"""Top-similarity sampling and the outlier threshold derived from it."""
from __future__ import annotations

import statistics
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, Iterable, List, Optional, Sequence, TypeVar

from .errors import EmptyInputError, InvalidParameterError
from .signature import SignatureMatrix

DEFAULT_STD_FACTOR = 2.0

_T = TypeVar("_T")


def map_rows(func: Callable[[int], _T], rows: Iterable[int], workers: int = 1) -> List[_T]:
    """Apply *func* to each row id, optionally on a thread pool, keeping order."""
    if workers < 1:
        raise InvalidParameterError(f"workers must be >= 1, got {workers}")
    if workers == 1:
        return [func(row) for row in rows]
    with ThreadPoolExecutor(max_workers=workers) as pool:
        return list(pool.map(func, rows))


# -----------------------------------------------------------
# Similarity sampler
# -----------------------------------------------------------


def top_similarities(
    matrix: SignatureMatrix,
    num_samples: Optional[int] = None,
    workers: int = 1,
) -> List[float]:
    """Return each document's highest similarity to any *other* document.

    One value per document id, in id order; *num_samples* restricts the
    sample to the first ``num_samples`` ids. A document with no peers (a
    one-document corpus) gets ``0.0``.

    This is an ``O(N^2)`` scan; *workers* spreads rows over threads.
    """
    count = matrix.document_count()
    if num_samples is None:
        num_samples = count
    if not 0 <= num_samples <= count:
        raise InvalidParameterError(f"num_samples must be in [0, {count}], got {num_samples}")

    def _row_max(document_id: int) -> float:
        if count < 2:
            return 0.0
        row = matrix.similarities_to(document_id)
        row[document_id] = 0.0
        return float(row.max())

    return map_rows(_row_max, range(num_samples), workers)


# -----------------------------------------------------------
# Threshold estimator
# -----------------------------------------------------------


def mean(sample: Sequence[float]) -> float:
    if len(sample) == 0:
        raise EmptyInputError("Cannot average an empty sample")
    return float(statistics.mean(sample))


def stddev(sample: Sequence[float]) -> float:
    """Population standard deviation (divisor ``n``, not ``n - 1``)."""
    if len(sample) == 0:
        raise EmptyInputError("Cannot take the deviation of an empty sample")
    return float(statistics.pstdev(sample))


def threshold(sample: Sequence[float], std_factor: float = DEFAULT_STD_FACTOR) -> float:
    """Outlier cutoff ``mean + std_factor * stddev``.

    Both statistics use exact rational arithmetic, so a sample of equal
    values ``[v, v, v]`` yields exactly ``v``.
    """
    if std_factor < 0:
        raise InvalidParameterError(f"std_factor must be non-negative, got {std_factor}")
    return mean(sample) + std_factor * stddev(sample)
