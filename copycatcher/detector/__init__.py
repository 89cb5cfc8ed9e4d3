"""copycatcher detector package.

Core public API lives here so external users can::

    from copycatcher.detector import SignatureBuilder, cluster_documents

    builder = SignatureBuilder(HashFamily(random.Random(7)))
    for tokens in token_sets:
        builder.add_document(tokens)
    result = cluster_documents(builder.build(2500), labels.__getitem__)

File discovery, shingling and reporting wrap the core:
    from copycatcher.detector.pipeline import run_detection
"""

from importlib.metadata import PackageNotFoundError, version as _pkg_version

# Semantic version of the installed package
try:
    __version__: str = _pkg_version("copycatcher")
except PackageNotFoundError:  # pragma: no cover – local dev path
    __version__ = "0.1.0"

from .errors import DetectorError, EmptyInputError, InvalidParameterError, UnknownDocumentError
from .hashing import PRIME, HashFamily, HashFunction, apply
from .signature import DEFAULT_PERMUTATIONS, SignatureBuilder, SignatureMatrix
from .stats import DEFAULT_STD_FACTOR, mean, stddev, threshold, top_similarities
from .clusters import ClusterResult, SimilarityInfo, assemble_clusters, cluster_documents
from .config import DetectorConfig
from .pipeline import process_submission, run_detection

__all__ = [
    "__version__",
    # Errors
    "DetectorError",
    "EmptyInputError",
    "InvalidParameterError",
    "UnknownDocumentError",
    # Core
    "PRIME",
    "HashFamily",
    "HashFunction",
    "apply",
    "DEFAULT_PERMUTATIONS",
    "SignatureBuilder",
    "SignatureMatrix",
    "DEFAULT_STD_FACTOR",
    "top_similarities",
    "mean",
    "stddev",
    "threshold",
    "ClusterResult",
    "SimilarityInfo",
    "assemble_clusters",
    "cluster_documents",
    # Pipeline
    "DetectorConfig",
    "process_submission",
    "run_detection",
]
