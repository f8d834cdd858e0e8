"""Tests for high-outlier detection."""

import math

import pytest


class TestFindHighOutliers:
    """Tests for the outlier rule on in-memory rates."""

    def test_population_stddev(self):
        """Standard deviation divides by N."""
        from src.analysis import mean_and_stddev

        mean, std = mean_and_stddev([2.0, 4.0, 4.0, 4.0, 5.0, 5.0, 7.0, 9.0])

        assert mean == pytest.approx(5.0)
        assert std == pytest.approx(2.0)

    def test_empty_peer_group(self):
        """No peers gives zero statistics and no outliers."""
        from src.analysis import mean_and_stddev, find_high_outliers

        assert mean_and_stddev([]) == (0.0, 0.0)
        assert find_high_outliers({}) == []

    def test_identical_rates_have_no_outliers(self):
        """With stddev 0 nothing exceeds the mean."""
        from src.analysis import find_high_outliers

        assert find_high_outliers({"a": 7.5, "b": 7.5, "c": 7.5}) == []

    def test_single_peer_is_never_an_outlier(self):
        """A peer group of one has no outliers."""
        from src.analysis import find_high_outliers

        assert find_high_outliers({"a": 100.0}) == []

    def test_outliers_annotated_and_sorted(self):
        """Outliers carry the shared mean and stddev, highest first."""
        from src.analysis import find_high_outliers

        rates = {"a": 1.0, "b": 1.0, "c": 1.0, "d": 1.0, "e": 1.0, "f": 1.0, "g": 20.0, "h": 30.0}
        outliers = find_high_outliers(rates)

        assert [o.name for o in outliers] == ["h", "g"]
        assert outliers[0].mean == outliers[1].mean == pytest.approx(56.0 / 8)
        assert outliers[0].rate > outliers[0].mean + outliers[0].stddev

    def test_undefined_rates_excluded(self):
        """None rates neither join the peer group nor appear as outliers."""
        from src.analysis import find_high_outliers

        outliers = find_high_outliers({"a": 10.0, "b": 10.0, "c": 10.0, "d": 50.0, "e": None})

        assert [o.name for o in outliers] == ["d"]
        assert outliers[0].mean == pytest.approx(20.0)


class TestHighOutlierRegions:
    """Tests against the fixture database."""

    def test_high_outlier_regions(self, test_db, edge_year):
        """Alpha (50) is above mean 20 + stddev sqrt(300)."""
        from src.analysis import get_high_outlier_regions

        outliers = get_high_outlier_regions("Flu", 2023, conn=test_db, edge_year=edge_year)

        assert [o.name for o in outliers] == ["Alpha"]
        assert outliers[0].rate == pytest.approx(50.0)
        assert outliers[0].mean == pytest.approx(20.0)
        assert outliers[0].stddev == pytest.approx(math.sqrt(300))

    def test_no_data_for_year(self, test_db, edge_year):
        """A year without observations gives no outliers."""
        from src.analysis import get_high_outlier_regions

        assert get_high_outlier_regions("Flu", 2010, conn=test_db, edge_year=edge_year) == []

    def test_unknown_disease(self, test_db):
        """Unknown disease names raise NotFoundError."""
        from src.analysis import get_high_outlier_regions, NotFoundError

        with pytest.raises(NotFoundError):
            get_high_outlier_regions("Plague", 2023, conn=test_db)
