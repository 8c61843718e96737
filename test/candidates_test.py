# -*- mode: python; indent-tabs-mode: nil -*-

import numpy
import numpy.testing
import pytest

from tdoa.candidates import CandidateStore, PositionCandidate


def candidate(x, y, z, cid=0, residual=0.0, stations=('A', 'B', 'C', 'D')):
    return PositionCandidate(x, y, z, 0.0, cid, residual, stations)


def test_distance_and_matrix():
    store = CandidateStore([candidate(0, 0, 0, 0), candidate(3, 4, 0, 1), candidate(0, 0, 12, 2)])

    assert store.distance(0, 1) == pytest.approx(5.0)
    assert store.distance(1, 2) == pytest.approx(13.0)

    matrix = store.distance_matrix()
    assert matrix.shape == (3, 3)
    assert matrix[0, 2] == pytest.approx(12.0)
    numpy.testing.assert_allclose(matrix, matrix.T)


def test_centroid():
    store = CandidateStore([candidate(0, 0, 0), candidate(2, 4, 6), candidate(100, 100, 100)])

    numpy.testing.assert_allclose(store.centroid([0, 1]), (1, 2, 3))
    numpy.testing.assert_allclose(store.centroid(), (34, 104 / 3, 106 / 3))


def test_centroid_of_nothing():
    with pytest.raises(ValueError):
        CandidateStore().centroid()


def test_no_deduplication():
    store = CandidateStore([candidate(1, 1, 1, 0), candidate(1, 1, 1, 1)])
    assert len(store) == 2
    assert store.combination_ids == (0, 1)


def test_sealed_store_is_read_only():
    store = CandidateStore([candidate(1, 1, 1)]).seal()
    with pytest.raises(RuntimeError):
        store.add(candidate(2, 2, 2))


def test_single_candidate_matrix():
    assert CandidateStore([candidate(1, 1, 1)]).distance_matrix().shape == (1, 1)
