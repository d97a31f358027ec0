import logging

import numpy as np
import pytest

from colorquant.errors import InvalidArgumentError
from colorquant.kmeans import (
    assign_points,
    cluster,
    has_converged,
    init_centroids,
    relative_shift,
    squared_distances,
    update_centroids,
)


def _sorted_rows(a: np.ndarray) -> np.ndarray:
    return a[np.lexsort(a.T[::-1])]


def test_two_groups_scenario(two_groups, scripted_rng) -> None:
    result = cluster(two_groups, k=2, max_iterations=100, rng=scripted_rng([0, 3]))

    assert result.converged
    assert result.n_iter == 2
    assert np.allclose(result.centroids, [[1 / 3, 1 / 3], [31 / 3, 31 / 3]])
    assert result.labels.tolist() == [0, 0, 0, 1, 1, 1]
    assert np.array_equal(result.clusters[0], two_groups[:3])
    assert np.array_equal(result.clusters[1], two_groups[3:])
    assert result.empty_cluster_count == 0


def test_iteration_cap_reports_not_converged(two_groups, scripted_rng) -> None:
    result = cluster(two_groups, k=2, max_iterations=1, rng=scripted_rng([0, 3]))

    assert not result.converged
    assert result.n_iter == 1
    assert np.allclose(result.centroids, [[1 / 3, 1 / 3], [31 / 3, 31 / 3]])


def test_single_cluster_is_overall_mean() -> None:
    data = np.random.default_rng(0).uniform(1, 255, size=(50, 3))
    result = cluster(data, k=1, max_iterations=10, rng=1)

    assert result.converged
    assert 1 <= result.n_iter <= 2
    assert len(result.clusters) == 1
    assert len(result.clusters[0]) == 50
    assert np.allclose(result.centroids[0], data.mean(axis=0))


def test_k_equals_point_count_gives_singletons() -> None:
    data = np.array([[1, 2, 3], [40, 50, 60], [0, 0, 0], [255, 128, 7]], dtype=float)
    result = cluster(data, k=4, max_iterations=10, rng=3)

    assert result.converged
    assert result.n_iter == 1
    assert all(len(c) == 1 for c in result.clusters)
    assert np.array_equal(_sorted_rows(result.centroids), _sorted_rows(data))
    for idx, members in enumerate(result.clusters):
        assert np.array_equal(members[0], result.centroids[idx])


def test_partition_is_complete_and_consistent() -> None:
    data = np.random.default_rng(5).integers(0, 256, size=(300, 3)).astype(float)
    result = cluster(data, k=6, max_iterations=50, rng=11)

    assert sum(len(c) for c in result.clusters) == len(data)
    merged = np.concatenate(result.clusters)
    assert np.array_equal(_sorted_rows(merged), _sorted_rows(data))
    for idx, members in enumerate(result.clusters):
        assert np.array_equal(members, data[result.labels == idx])


def test_centroids_are_means_of_their_clusters() -> None:
    data = np.random.default_rng(2).normal(100, 40, size=(200, 3))
    result = cluster(data, k=4, max_iterations=3, rng=7)

    for idx, members in enumerate(result.clusters):
        if len(members):
            assert np.allclose(result.centroids[idx], members.mean(axis=0))


def test_iteration_count_bounds() -> None:
    data = np.random.default_rng(9).uniform(0, 255, size=(120, 3))
    for cap in (1, 2, 5, 40):
        result = cluster(data, k=5, max_iterations=cap, rng=4)
        assert 1 <= result.n_iter <= cap
        if result.n_iter < cap:
            assert result.converged


def test_same_seed_same_result() -> None:
    data = np.random.default_rng(1).uniform(0, 255, size=(150, 3))
    first = cluster(data, k=5, max_iterations=100, rng=42)
    second = cluster(data, k=5, max_iterations=100, rng=np.random.default_rng(42))

    assert np.array_equal(first.centroids, second.centroids)
    assert np.array_equal(first.labels, second.labels)
    assert first.n_iter == second.n_iter
    assert first.converged == second.converged


def test_reassignment_at_convergence_is_stable(two_groups, scripted_rng) -> None:
    result = cluster(two_groups, k=2, max_iterations=100, rng=scripted_rng([1, 4]))
    assert result.converged

    labels = assign_points(two_groups, result.centroids)
    new_centroids, _ = update_centroids(two_groups, labels, result.centroids)
    assert has_converged(result.centroids, new_centroids)


def test_input_is_not_modified_and_centroids_not_aliased(two_groups, scripted_rng) -> None:
    original = two_groups.copy()
    result = cluster(two_groups, k=2, max_iterations=100, rng=scripted_rng([0, 3]))

    assert np.array_equal(two_groups, original)
    assert not np.shares_memory(result.centroids, two_groups)


def test_empty_cluster_centroid_stays_frozen() -> None:
    data = [[0, 0], [0, 1], [1, 0]]
    result = cluster(data, k=2, max_iterations=10, initial_centroids=[[0, 0], [100, 100]])

    assert result.converged
    assert result.n_iter == 2
    assert np.array_equal(result.centroids[1], [100, 100])
    assert result.clusters[1].shape == (0, 2)
    assert result.empty_cluster_count == 2


# ============================================================================
# Steps
# ============================================================================

def test_init_resamples_duplicate_values(scripted_rng) -> None:
    data = np.array([[5, 5], [5, 5], [7, 7]], dtype=float)
    centroids = init_centroids(data, 2, scripted_rng([0, 1, 2]))

    assert np.array_equal(centroids, [[5, 5], [7, 7]])
    assert not np.shares_memory(centroids, data)


def test_assignment_picks_nearest_centroid() -> None:
    rng = np.random.default_rng(3)
    data = rng.uniform(0, 255, size=(100, 3))
    centroids = rng.uniform(0, 255, size=(5, 3))

    labels = assign_points(data, centroids)
    distances = squared_distances(data, centroids)
    for j, label in enumerate(labels):
        assert distances[j, label] <= distances[j].min()


def test_assignment_ties_go_to_lowest_index() -> None:
    point = np.array([[0.0, 0.0]])

    assert assign_points(point, np.array([[1, 0], [-1, 0], [0, 1]], dtype=float))[0] == 0
    assert assign_points(point, np.array([[2, 0], [1, 0], [0, -1]], dtype=float))[0] == 1


def test_squared_distance_has_no_square_root() -> None:
    d = squared_distances(np.array([[0.0, 0.0]]), np.array([[3.0, 4.0]]))
    assert d[0, 0] == 25.0


def test_update_keeps_empty_centroid_and_returns_new_array() -> None:
    data = np.array([[1, 1], [3, 3]], dtype=float)
    centroids = np.array([[0, 0], [9, 9]], dtype=float)

    new_centroids, n_empty = update_centroids(data, np.array([0, 0]), centroids)

    assert np.array_equal(new_centroids, [[2, 2], [9, 9]])
    assert n_empty == 1
    assert np.array_equal(centroids, [[0, 0], [9, 9]])


def test_relative_shift_zero_denominator_policy() -> None:
    old = np.array([[0.0, 0.0, 2.0]])
    new = np.array([[0.0, 1.0, 2.01]])

    shift = relative_shift(old, new)

    assert shift[0, 0] == 0.0
    assert np.isinf(shift[0, 1])
    assert shift[0, 2] == pytest.approx(0.005)
    assert not has_converged(old, new)
    assert has_converged(np.zeros((2, 3)), np.zeros((2, 3)))


def test_convergence_threshold_is_relative() -> None:
    old = np.array([[100.0, 200.0, 50.0]])

    assert has_converged(old, np.array([[100.5, 199.0, 50.25]]))
    assert not has_converged(old, np.array([[100.5, 199.0, 51.0]]))


# ============================================================================
# Validation
# ============================================================================

@pytest.mark.parametrize(
    "points",
    [
        [],
        [[]],
        [[1, 2], [3]],
        [1, 2, 3],
        [[1.0, float("nan")], [2.0, 2.0]],
        [[1.0, float("inf")], [2.0, 2.0]],
    ],
)
def test_rejects_malformed_points(points) -> None:
    with pytest.raises(InvalidArgumentError):
        cluster(points, k=1, max_iterations=10)


@pytest.mark.parametrize("k", [0, -1, 2.5, True])
def test_rejects_bad_k(two_groups, k) -> None:
    with pytest.raises(InvalidArgumentError):
        cluster(two_groups, k=k, max_iterations=10)


def test_rejects_bad_max_iterations(two_groups) -> None:
    with pytest.raises(InvalidArgumentError):
        cluster(two_groups, k=2, max_iterations=0)


def test_rejects_k_above_distinct_point_count() -> None:
    data = [[1, 1], [1, 1], [2, 2]]

    with pytest.raises(InvalidArgumentError, match="distinct"):
        cluster(data, k=3, max_iterations=10)
    assert cluster(data, k=2, max_iterations=10, rng=0).n_clusters == 2


def test_rejects_misshapen_initial_centroids(two_groups) -> None:
    with pytest.raises(InvalidArgumentError):
        cluster(two_groups, k=2, max_iterations=10, initial_centroids=[[0, 0, 0], [1, 1, 1]])


def test_rejects_duplicate_initial_centroids(two_groups) -> None:
    with pytest.raises(InvalidArgumentError, match="distinct"):
        cluster(two_groups, k=2, max_iterations=10, initial_centroids=[[0, 0], [0, 0]])


def test_rejects_non_finite_initial_centroids(two_groups) -> None:
    with pytest.raises(InvalidArgumentError, match="finite"):
        cluster(
            two_groups, k=2, max_iterations=10,
            initial_centroids=[[float("nan"), 0], [10, 10]]
        )


def test_invalid_argument_is_a_value_error(two_groups) -> None:
    with pytest.raises(ValueError):
        cluster(two_groups, k=0, max_iterations=10)


def test_non_convergence_is_logged(two_groups, scripted_rng, caplog) -> None:
    with caplog.at_level(logging.INFO, logger="colorquant"):
        cluster(two_groups, k=2, max_iterations=1, rng=scripted_rng([0, 3]))

    assert any(
        record.levelno == logging.INFO and "did not converge within 1 iterations" in record.getMessage()
        for record in caplog.records
    )


def test_convergence_logs_nothing_at_info(two_groups, scripted_rng, caplog) -> None:
    with caplog.at_level(logging.INFO, logger="colorquant"):
        cluster(two_groups, k=2, max_iterations=100, rng=scripted_rng([0, 3]))

    assert not [r for r in caplog.records if r.levelno >= logging.INFO]
