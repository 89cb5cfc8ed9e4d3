"""Signature builder and matrix tests."""
from __future__ import annotations

import random

import numpy as np
import pytest

from copycatcher.detector.errors import EmptyInputError, InvalidParameterError, UnknownDocumentError
from copycatcher.detector.hashing import PRIME, HashFamily, apply
from copycatcher.detector.signature import SignatureBuilder, SignatureMatrix


def _builder(seed: int = 7) -> SignatureBuilder:
    return SignatureBuilder(HashFamily(random.Random(seed)))


def test_add_document_assigns_sequential_ids() -> None:
    b = _builder()
    assert b.add_document({"a b c"}) == 0
    assert b.add_document(["b c d", "c d e"]) == 1
    assert b.document_count == 2
    assert b.vocabulary_size == 3


def test_add_empty_document_rejected() -> None:
    b = _builder()
    with pytest.raises(EmptyInputError):
        b.add_document(set())
    assert b.document_count == 0


@pytest.mark.parametrize("count", [0, -1])
def test_build_rejects_non_positive_permutations(count: int) -> None:
    b = _builder()
    b.add_document({"x"})
    with pytest.raises(InvalidParameterError):
        b.build(count)


def test_build_rejects_non_int_permutations() -> None:
    b = _builder()
    b.add_document({"x"})
    with pytest.raises(InvalidParameterError):
        b.build("16")  # type: ignore[arg-type]


def test_build_rechecks_empty_documents() -> None:
    b = _builder()
    b.add_document({"x"})
    b._documents.append(frozenset())  # bypass add_document
    with pytest.raises(EmptyInputError):
        b.build(8)


def test_signature_matches_reference_computation() -> None:
    docs = [{"alpha", "beta", "gamma"}, {"beta", "delta"}]
    family = HashFamily(random.Random(3))
    b = SignatureBuilder(family)
    for d in docs:
        b.add_document(d)
    matrix = b.build(32)

    index = {t: i for i, t in enumerate(sorted(set().union(*docs)))}
    functions = family.generate(32)
    for doc_id, d in enumerate(docs):
        expected = tuple(min(apply(fn, index[t]) for t in d) for fn in functions)
        assert matrix.signature_of(doc_id) == expected


def test_matrix_shape_and_range() -> None:
    b = _builder()
    for i in range(5):
        b.add_document({f"tok{i}", f"tok{i + 1}"})
    matrix = b.build(100)
    assert matrix.document_count() == 5
    assert len(matrix) == 5
    assert matrix.permutation_count() == 100
    assert matrix.signatures.shape == (5, 100)
    assert matrix.signatures.min() >= 0
    assert matrix.signatures.max() < PRIME


def test_large_documents_are_chunked_consistently() -> None:
    tokens = {f"t{i}" for i in range(3000)}
    b = _builder()
    b.add_document(tokens)
    b.add_document(set(tokens))
    matrix = b.build(600)
    assert matrix.estimate_jaccard(0, 1) == 1.0


def test_empty_builder_builds_empty_matrix() -> None:
    matrix = _builder().build(10)
    assert matrix.document_count() == 0


@pytest.mark.parametrize("bad", [2, -1, 99, "0", None, 1.0])
def test_unknown_document_ids(bad) -> None:
    b = _builder()
    b.add_document({"a"})
    b.add_document({"b"})
    matrix = b.build(8)
    with pytest.raises(UnknownDocumentError):
        matrix.signature_of(bad)
    with pytest.raises(UnknownDocumentError):
        matrix.estimate_jaccard(0, bad)
    with pytest.raises(UnknownDocumentError):
        matrix.similarities_to(bad)


def test_numpy_integer_ids_accepted() -> None:
    b = _builder()
    b.add_document({"a"})
    matrix = b.build(8)
    assert matrix.estimate_jaccard(np.int64(0), 0) == 1.0


def test_matrix_is_read_only() -> None:
    b = _builder()
    b.add_document({"a"})
    matrix = b.build(8)
    with pytest.raises(ValueError):
        matrix.signatures[0, 0] = 1


def test_builder_reuse_does_not_touch_built_matrix() -> None:
    b = _builder()
    b.add_document({"a", "b"})
    first = b.build(16)
    before = first.signature_of(0)
    b.add_document({"c"})
    second = b.build(16)
    assert first.document_count() == 1
    assert first.signature_of(0) == before
    assert second.document_count() == 2


def test_matrix_rejects_mismatched_shape() -> None:
    with pytest.raises(InvalidParameterError):
        SignatureMatrix(np.zeros((2, 3), dtype=np.int64), permutation_count=4)


def test_similarities_to_matches_pairwise_estimates() -> None:
    rng = random.Random(5)
    vocab = [f"w{i}" for i in range(60)]
    b = _builder()
    for _ in range(8):
        b.add_document(set(rng.sample(vocab, 20)))
    matrix = b.build(128)
    for i in range(8):
        row = matrix.similarities_to(i)
        assert row.tolist() == [matrix.estimate_jaccard(i, j) for j in range(8)]


def test_as_minhash_round_trips_through_datasketch() -> None:
    b = _builder()
    b.add_document({"a", "b", "c", "d"})
    b.add_document({"c", "d", "e", "f"})
    matrix = b.build(256)
    mh0, mh1 = matrix.as_minhash(0), matrix.as_minhash(1)
    assert len(mh0) == 256
    assert mh0.hashvalues.tolist() == list(matrix.signature_of(0))
    assert mh0.jaccard(mh1) == pytest.approx(matrix.estimate_jaccard(0, 1))
