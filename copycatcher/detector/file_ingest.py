"""Submission discovery and reading.

Submissions are laid out one directory per submitter, e.g.
``root/alice/hw1/Main.java`` and ``root/bob/Main.java``. Every file sharing a
name is one corpus; the submitter label is the first path component that
differs between neighbouring paths.
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Sequence, Union

import chardet

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


def detect_encoding(raw: bytes) -> str:
    """Detect the encoding of *raw* using chardet, defaulting to utf-8."""
    result = chardet.detect(raw)
    return result.get("encoding") or "utf-8"


def read_document(path: PathLike) -> str:
    """Read *path* as text with a detected encoding."""
    raw = Path(path).read_bytes()
    encoding = detect_encoding(raw)
    try:
        return raw.decode(encoding, errors="replace")
    except LookupError:
        logger.warning("Unknown encoding %r for %s; decoding as utf-8", encoding, path)
        return raw.decode("utf-8", errors="replace")


def enumerate_paths(root: PathLike, pattern: str = "*") -> List[Path]:
    """Recursively list files under *root* matching the glob *pattern*, sorted."""
    root = Path(root)
    if not root.is_dir():
        raise FileNotFoundError(root)
    return sorted(p for p in root.rglob(pattern) if p.is_file())


def filter_paths_by_filename(paths: Sequence[Path], filename: str) -> List[Path]:
    """Keep paths whose file name equals *filename*, ignoring case."""
    target = filename.lower()
    return [p for p in paths if p.name.lower() == target]


def least_common_path_name(path1: PathLike, path2: PathLike) -> str:
    """Return the first component of *path1* that differs from *path2*.

    Raises ``ValueError`` when one path is a prefix of the other.
    """
    parts1 = Path(path1).absolute().parts
    parts2 = Path(path2).absolute().parts
    for name1, name2 in zip(parts1, parts2):
        if name1 != name2:
            return name1
    raise ValueError(f"No differing component between {path1} and {path2}")


def submission_labels(paths: Sequence[Path]) -> List[str]:
    """Label each path by comparing it with its successor (wrapping around)."""
    return [
        least_common_path_name(path, paths[(i + 1) % len(paths)])
        for i, path in enumerate(paths)
    ]
