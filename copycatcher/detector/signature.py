"""MinHash signature builder and the immutable signature matrix.

Documents are accumulated in a :class:`SignatureBuilder` and turned into a
read-only :class:`SignatureMatrix` in one batch. Once built, the matrix is
never mutated, so any number of threads may query it without locking.
"""
from __future__ import annotations

import operator
from typing import AbstractSet, Dict, FrozenSet, Iterable, List, Optional, Tuple

import numpy as np
from datasketch import MinHash

from .errors import EmptyInputError, InvalidParameterError, UnknownDocumentError
from .hashing import PRIME, HashFamily

# Upper bound on the (terms x permutations) block materialised at once
_CHUNK_ELEMENTS = 1 << 20

DEFAULT_PERMUTATIONS = 2_500


# -----------------------------------------------------------
# Matrix
# -----------------------------------------------------------


class SignatureMatrix:
    """Read-only mapping of document id to MinHash signature."""

    def __init__(self, signatures: np.ndarray, permutation_count: int) -> None:
        signatures = np.array(signatures, dtype=np.int64, copy=True)
        if signatures.ndim != 2 or signatures.shape[1] != permutation_count:
            raise InvalidParameterError(
                f"signatures must have shape (documents, {permutation_count}), got {signatures.shape}"
            )
        signatures.flags.writeable = False
        self._signatures = signatures
        self._permutation_count = permutation_count

    def __len__(self) -> int:
        return self.document_count()

    def __repr__(self) -> str:
        return (
            f"SignatureMatrix(documents={self.document_count()}, "
            f"permutations={self._permutation_count})"
        )

    # --------------------------------------------------
    # Accessors
    # --------------------------------------------------

    def document_count(self) -> int:
        return int(self._signatures.shape[0])

    def permutation_count(self) -> int:
        return self._permutation_count

    @property
    def signatures(self) -> np.ndarray:
        """The full ``(documents, permutations)`` array (read-only view)."""
        return self._signatures

    def _index(self, document_id: int) -> int:
        try:
            index = operator.index(document_id)
        except TypeError:
            raise UnknownDocumentError(f"Invalid document id {document_id!r}") from None
        if not 0 <= index < self.document_count():
            raise UnknownDocumentError(
                f"Invalid document id {index} (matrix holds {self.document_count()} documents)"
            )
        return index

    def signature_of(self, document_id: int) -> Tuple[int, ...]:
        """Return the signature of *document_id* as a tuple of ints."""
        return tuple(int(v) for v in self._signatures[self._index(document_id)])

    # --------------------------------------------------
    # Similarity
    # --------------------------------------------------

    def estimate_jaccard(self, id1: int, id2: int) -> float:
        """Fraction of signature coordinates on which the two documents agree.

        This is the unbiased MinHash estimator; its standard error is roughly
        ``sqrt(J * (1 - J) / permutation_count)``. Nothing is cached.
        """
        row1 = self._signatures[self._index(id1)]
        row2 = self._signatures[self._index(id2)]
        matches = int(np.count_nonzero(row1 == row2))
        return matches / self._permutation_count

    def similarities_to(self, document_id: int) -> np.ndarray:
        """Estimates of *document_id* against every document, in id order.

        Equal, value for value, to calling :meth:`estimate_jaccard` per pair;
        the scan is just vectorised over all rows at once.
        """
        row = self._signatures[self._index(document_id)]
        matches = np.count_nonzero(self._signatures == row, axis=1)
        return matches / self._permutation_count

    def as_minhash(self, document_id: int) -> MinHash:
        """Export a signature as a ``datasketch.MinHash`` for interop."""
        row = self._signatures[self._index(document_id)]
        return MinHash(num_perm=self._permutation_count, hashvalues=row.astype(np.uint64))


# -----------------------------------------------------------
# Builder
# -----------------------------------------------------------


class SignatureBuilder:
    """Accumulates token sets and builds a :class:`SignatureMatrix`.

    Parameters
    ----------
    hash_family : HashFamily, optional
        Source of the permutation functions. Defaults to an unseeded family.
    """

    def __init__(self, hash_family: Optional[HashFamily] = None) -> None:
        self.hash_family = hash_family if hash_family is not None else HashFamily()
        self._documents: List[FrozenSet[str]] = []
        self._vocabulary: set[str] = set()

    @property
    def document_count(self) -> int:
        return len(self._documents)

    @property
    def vocabulary_size(self) -> int:
        return len(self._vocabulary)

    def add_document(self, tokens: AbstractSet[str] | Iterable[str]) -> int:
        """Register *tokens* and return the new document id."""
        terms = frozenset(tokens)
        if not terms:
            raise EmptyInputError("Cannot add empty document")
        document_id = len(self._documents)
        self._documents.append(terms)
        self._vocabulary.update(terms)
        return document_id

    def build(self, permutation_count: int = DEFAULT_PERMUTATIONS) -> SignatureMatrix:
        """Compute all signatures and freeze them into a matrix.

        Cost is ``O(permutation_count x total token occurrences)``.
        """
        if isinstance(permutation_count, bool) or not isinstance(permutation_count, int):
            raise InvalidParameterError(f"permutation count must be an int, got {permutation_count!r}")
        if permutation_count <= 0:
            raise InvalidParameterError(f"permutation count must be positive, got {permutation_count}")
        if len(self._vocabulary) >= PRIME:
            raise InvalidParameterError("vocabulary too large for the hash modulus")

        term_index = _index_terms(self._vocabulary)
        scalars, constants = self.hash_family.arrays(permutation_count)

        signatures = np.empty((len(self._documents), permutation_count), dtype=np.int64)
        for document_id, terms in enumerate(self._documents):
            if not terms:
                raise EmptyInputError(f"Cannot minhash empty document {document_id}")
            indices = np.fromiter((term_index[t] for t in terms), dtype=np.int64, count=len(terms))
            signatures[document_id] = _min_ranks(indices, scalars, constants)

        return SignatureMatrix(signatures, permutation_count)


# -----------------------------------------------------------
# Internal
# -----------------------------------------------------------


def _index_terms(vocabulary: Iterable[str]) -> Dict[str, int]:
    # Sorted so a seeded family yields the same signatures in every process,
    # whatever PYTHONHASHSEED says.
    return {term: i for i, term in enumerate(sorted(vocabulary))}


def _min_ranks(indices: np.ndarray, scalars: np.ndarray, constants: np.ndarray) -> np.ndarray:
    """Per-function minimum of ``(index * scalar + constant) mod PRIME``.

    Indices are below 2**31 and the coefficients are 32-bit, so every
    intermediate fits in int64; numpy's ``%`` is a floor modulo and agrees
    with :func:`copycatcher.detector.hashing.apply`.
    """
    chunk = max(1, _CHUNK_ELEMENTS // scalars.shape[0])
    result = np.full(scalars.shape[0], PRIME, dtype=np.int64)
    for start in range(0, indices.shape[0], chunk):
        block = indices[start : start + chunk, None]  # noqa: E203
        ranks = (block * scalars[None, :] + constants[None, :]) % PRIME
        np.minimum(result, ranks.min(axis=0), out=result)
    return result
