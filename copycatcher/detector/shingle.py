"""Comment stripping and word n-gram shingling for source submissions."""
from __future__ import annotations

import re
from collections import deque
from typing import Deque, Iterable, List, Set

from .errors import InvalidParameterError

DEFAULT_SHINGLE_WIDTH = 3

# Block comments (Javadoc included) whose body holds no '/', and line comments.
_COMMENT_RE = re.compile(r"(/\*[^/]*\*/)|(//.*)")
_WHITESPACE_RE = re.compile(r"\s+")


def strip_comments(text: str) -> str:
    """Remove ``/* ... */`` and ``// ...`` comments from *text*."""
    return _COMMENT_RE.sub("", text)


def tokenize(text: str) -> List[str]:
    """Lowercased whitespace-separated words of *text*."""
    return [tok.lower() for tok in _WHITESPACE_RE.split(text.strip()) if tok]


def ngrams(words: Iterable[str], width: int = DEFAULT_SHINGLE_WIDTH) -> Iterable[str]:
    """Yield every window of *width* consecutive words joined by one space."""
    if width <= 0:
        raise InvalidParameterError(f"shingle width must be positive, got {width}")
    window: Deque[str] = deque(maxlen=width)
    for word in words:
        window.append(word)
        if len(window) == width:
            yield " ".join(window)


def shingle_document(text: str, width: int = DEFAULT_SHINGLE_WIDTH) -> Set[str]:
    """Return the set of *width*-word shingles of *text*.

    No stemming and no stop-word removal. Documents shorter than *width*
    words produce an empty set.
    """
    if width <= 0:
        raise InvalidParameterError(f"shingle width must be positive, got {width}")
    return set(ngrams(tokenize(text), width))
