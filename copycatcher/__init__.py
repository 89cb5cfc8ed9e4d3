"""copycatcher - MinHash similarity clustering for plagiarism screening.

Flags submissions whose similarity to a peer is an outlier relative to the
whole corpus:
- MinHash signatures over word n-gram shingles
- Approximate Jaccard similarity for every pair
- Mean + k * stddev cutoff over each submission's best match
- Plain-text and JSON cluster reports

Quick Start:
    # CLI usage
    copycatcher scan submissions/ Main.java Util.java

    # Python API
    from copycatcher import run_detection
    results = run_detection('submissions/', ['Main.java'])
"""

from .detector import __version__

# Re-export main API
from .detector import (
    ClusterResult,
    DetectorConfig,
    DetectorError,
    HashFamily,
    SignatureBuilder,
    SignatureMatrix,
    cluster_documents,
    process_submission,
    run_detection,
)

__all__ = [
    "__version__",
    "ClusterResult",
    "DetectorConfig",
    "DetectorError",
    "HashFamily",
    "SignatureBuilder",
    "SignatureMatrix",
    "cluster_documents",
    "process_submission",
    "run_detection",
]
