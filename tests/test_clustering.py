"""Tests for the clustering engine."""

import logging

import pytest

from blokus_vision.errors import InvalidInputError
from blokus_vision.inference.clustering import (
    DEFAULT_DELTA_THRESHOLD,
    ClusteringConfig,
    cluster_colors,
    nearest_tag,
    reshape_labels,
)
from blokus_vision.models.palette import TAGS


class TestNearestTag:
    """Assignment picks the closest centre, first tag on ties."""

    def test_closest(self, grid_seeds):
        assert TAGS[nearest_tag((9.0, 1.0, 0.0), grid_seeds.centers)] == "G"

    def test_tie_resolves_to_first_tag(self, grid_seeds):
        """Equidistant from R and G resolves to R."""
        sample = (5.0, 0.0, 0.0)
        assert TAGS[nearest_tag(sample, grid_seeds.centers)] == "R"

    def test_tie_between_later_tags(self, grid_seeds):
        """Equidistant from B and Y (and farther from the rest) resolves to B."""
        sample = (-1.0, 10.0, 10.0)
        assert TAGS[nearest_tag(sample, grid_seeds.centers)] == "B"


class TestReshapeLabels:
    """Test cases for reshape_labels."""

    def test_shape_and_order(self):
        """N/W rows of W columns; flattening restores the input."""
        labels = [TAGS[i % 5] for i in range(24)]
        board = reshape_labels(labels, 6)
        assert len(board) == 4
        assert all(len(row) == 6 for row in board)
        assert [tag for row in board for tag in row] == labels

    def test_width_must_divide(self):
        with pytest.raises(InvalidInputError, match="does not divide"):
            reshape_labels(["R"] * 10, 3)

    @pytest.mark.parametrize("width", [0, -4])
    def test_width_must_be_positive(self, width):
        with pytest.raises(InvalidInputError, match="positive"):
            reshape_labels(["R"] * 4, width)


class TestClusterColors:
    """End-to-end behaviour of cluster_colors."""

    def test_samples_at_seeds(self, seeds):
        """Samples placed on the seeds converge in one step with delta 0."""
        result = cluster_colors(list(seeds.centers), seeds)
        assert result.iterations == 1
        assert result.deltas == [0.0]
        assert result.labels == list(TAGS)
        assert result.converged

    def test_all_white(self, seeds):
        """Identical near-white samples: everything W, others frozen."""
        L, a, b = seeds["W"]
        point = (L + 1.0, a, b)
        result = cluster_colors([point] * 400, seeds, width=20)

        assert len(result.board) == 20
        assert all(tag == "W" for row in result.board for tag in row)
        assert result.centers[TAGS.index("W")] == pytest.approx(point)
        for tag in "RGBY":
            assert result.centers[TAGS.index(tag)] == seeds[tag]
        assert result.deltas[0] == pytest.approx(1.0)
        assert result.deltas[-1] == pytest.approx(0.0)

    def test_deterministic(self, seeds):
        """Repeated runs give identical boards and centres."""
        samples = [
            (30.0 + i % 7, 40.0 - i % 11, 10.0 + (i * 3) % 13) for i in range(100)
        ] + list(seeds.centers) * 4
        first = cluster_colors(samples, seeds, width=10)
        second = cluster_colors(samples, seeds, width=10)
        assert first.board == second.board
        assert first.centers == second.centers
        assert first.deltas == second.deltas

    def test_tie_break_on_cluster(self, grid_seeds):
        """A sample between R and G is labelled R."""
        result = cluster_colors([(5.0, 0.0, 0.0)], grid_seeds)
        assert result.labels == ["R"]

    def test_progress_callback_controls_stop(self, grid_seeds):
        """The callback sees each delta and its truthy return stops."""
        seen = []

        def progress(delta):
            seen.append(delta)
            return len(seen) == 1

        samples = [(1.0, 0.0, 0.0), (9.0, 0.0, 0.0)]
        result = cluster_colors(samples, grid_seeds, progress=progress)
        assert seen == [2.0]
        assert result.iterations == 1
        assert result.converged
        # Centres of the stopping iteration are already committed
        assert result.centers[0] == (1.0, 0.0, 0.0)
        assert result.centers[1] == (9.0, 0.0, 0.0)

    def test_progress_replaces_default_threshold(self, grid_seeds):
        """A falsy callback keeps iterating past delta == 0."""
        calls = []

        def progress(delta):
            calls.append(delta)
            return len(calls) >= 3

        result = cluster_colors([(0.0, 0.0, 0.0)], grid_seeds, progress=progress)
        assert calls == [0.0, 0.0, 0.0]
        assert result.iterations == 3

    def test_custom_threshold(self, grid_seeds):
        """A large threshold stops after the first iteration."""
        samples = [(1.0, 0.0, 0.0)]
        result = cluster_colors(
            samples, grid_seeds, config=ClusteringConfig(delta_threshold=5.0),
        )
        assert result.iterations == 1

    def test_iteration_cap(self, grid_seeds, caplog):
        """Hitting max_iterations stops without converging."""
        with caplog.at_level(logging.WARNING):
            result = cluster_colors(
                [(1.0, 0.0, 0.0)],
                grid_seeds,
                progress=lambda delta: False,
                config=ClusteringConfig(max_iterations=4),
            )
        assert result.iterations == 4
        assert not result.converged
        assert "without converging" in caplog.text

    def test_default_threshold_constant(self):
        assert ClusteringConfig().delta_threshold == DEFAULT_DELTA_THRESHOLD == 0.01

    def test_invalid_max_iterations(self):
        with pytest.raises(InvalidInputError):
            ClusteringConfig(max_iterations=0)

    @pytest.mark.parametrize("threshold", [0.0, -0.5, float("nan"), float("inf")])
    def test_invalid_delta_threshold(self, threshold):
        """A threshold that could never (or always) stop the loop is rejected."""
        with pytest.raises(InvalidInputError, match="delta_threshold"):
            ClusteringConfig(delta_threshold=threshold)

    def test_empty_samples(self, seeds):
        with pytest.raises(InvalidInputError, match="No samples"):
            cluster_colors([], seeds)

    def test_malformed_sample(self, seeds):
        with pytest.raises(InvalidInputError, match="Sample 1"):
            cluster_colors([(1.0, 2.0, 3.0), (1.0, 2.0)], seeds)

    @pytest.mark.parametrize("bad", [
        (float("nan"), 0.0, 0.0),
        (50.0, float("inf"), 0.0),
        (50.0, 0.0, float("-inf")),
    ])
    def test_non_finite_sample(self, seeds, bad):
        """A NaN or infinite component is rejected before clustering."""
        samples = [bad] + list(seeds.centers[1:])
        calls = []
        with pytest.raises(InvalidInputError, match="Sample 0 is not finite"):
            cluster_colors(
                samples, seeds, progress=calls.append,
                config=ClusteringConfig(max_iterations=None),
            )
        assert calls == []

    @pytest.mark.parametrize("bad", [("a", 0.0, 0.0), (None, 1.0, 2.0), (1.0, [2.0], 3.0)])
    def test_non_numeric_sample(self, seeds, bad):
        with pytest.raises(InvalidInputError, match="Sample 1 is not numeric"):
            cluster_colors([(1.0, 2.0, 3.0), bad], seeds)

    def test_finite_neighbours_keep_their_tags(self, seeds):
        """Samples on the G/B/Y/W seeds are labelled by their own seed."""
        result = cluster_colors(list(seeds.centers[1:]), seeds)
        assert result.labels == ["G", "B", "Y", "W"]

    def test_width_must_divide(self, seeds):
        """The width is checked before clustering runs."""
        calls = []
        with pytest.raises(InvalidInputError):
            cluster_colors(
                list(seeds.centers), seeds, width=3, progress=calls.append,
            )
        assert calls == []
