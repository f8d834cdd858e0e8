"""Tests for per-capita rates and the population year-fallback."""

import pytest


class TestRateHelpers:
    """Tests for pure rate functions."""

    def test_per_100k(self):
        """Cases are scaled to 100,000 population."""
        from src.analysis.rates import per_100k

        assert per_100k(500, 1_000_000) == pytest.approx(50.0)
        assert per_100k(0, 1_000_000) == 0.0

    def test_per_100k_undefined(self):
        """Zero or missing population gives None instead of raising."""
        from src.analysis.rates import per_100k

        assert per_100k(10, 0) is None
        assert per_100k(10, None) is None

    def test_per_100k_missing_cases_count_as_zero(self):
        """Missing case counts are read as 0."""
        from src.analysis.rates import per_100k

        assert per_100k(None, 1000) == 0.0

    def test_effective_population_year(self):
        """Years past the edge fall back to the edge year."""
        from src.analysis.rates import effective_population_year

        assert effective_population_year(2024, 2023) == 2023
        assert effective_population_year(2023, 2023) == 2023
        assert effective_population_year(2019, 2023) == 2019

    def test_sort_by_rate_puts_undefined_last(self):
        """Descending by rate, None rates at the end."""
        from src.analysis.rates import RateRecord, sort_by_rate

        def record(name, rate):
            return RateRecord(name, "Flu", 2023, 2023, 0, None, rate)

        ordered = sort_by_rate([record("a", None), record("b", 5.0), record("c", 9.0)])

        assert [r.region_name for r in ordered] == ["c", "b", "a"]


class TestGetRates:
    """Tests for get_rates against the fixture database."""

    def test_end_to_end_rate(self, test_db, edge_year):
        """Population 1,000,000 and 500 cases give 50.0 per 100k."""
        from src.analysis import get_rates

        records = get_rates(2023, [1], conn=test_db, edge_year=edge_year)
        alpha = next(r for r in records if r.region_name == "Alpha")

        assert alpha.total_cases == 500
        assert alpha.population == 1_000_000
        assert alpha.cases_per_100k == pytest.approx(50.0)

    def test_fallback_year_gives_same_rate(self, test_db, edge_year):
        """2024 uses 2023 population, so the same cases give the same rate."""
        from src.analysis import get_rates

        records = get_rates(2024, [1], conn=test_db, edge_year=edge_year)

        assert len(records) == 1
        assert records[0].population_year == 2023
        assert records[0].cases_per_100k == pytest.approx(50.0)

    def test_sorted_descending_with_name_tiebreak(self, test_db, edge_year):
        """Highest rate first; equal rates ordered by region name."""
        from src.analysis import get_rates

        records = get_rates(2023, [1], conn=test_db, edge_year=edge_year)

        assert [r.region_name for r in records] == ["Alpha", "Beta", "Delta", "Gamma"]
        assert all(r.cases_per_100k >= 0 for r in records)

    def test_undefined_rate_sorted_last(self, test_db, edge_year):
        """A region without population has an undefined rate, listed last."""
        from src.analysis import get_rates

        records = get_rates(2023, [2], conn=test_db, edge_year=edge_year)

        assert records[-1].region_name == "Epsilon"
        assert records[-1].cases_per_100k is None
        assert records[0].region_name == "Beta"
        assert records[0].cases_per_100k == pytest.approx(20.0)

    def test_null_cases_read_as_zero(self, test_db, edge_year):
        """Unreported weeks contribute 0 cases."""
        from src.analysis import get_rates

        records = get_rates(2023, [1], region_names=["Gamma"], conn=test_db, edge_year=edge_year)

        assert records[0].total_cases == 50

    def test_single_week(self, test_db, edge_year):
        """Restricting to one week uses only that week's cases."""
        from src.analysis import get_rates

        records = get_rates(2023, [1], week=2, conn=test_db, edge_year=edge_year)
        alpha = next(r for r in records if r.region_name == "Alpha")

        assert alpha.total_cases == 300
        assert alpha.week == 2

    def test_zero_population_gives_undefined_rate(self, test_db, edge_year):
        """A population of 0 is not an error."""
        from src.analysis import get_rates

        test_db.execute("UPDATE fact_population_state_year SET population = 0 WHERE region_id = 3")
        records = get_rates(2023, [1], region_names=["Gamma"], conn=test_db, edge_year=edge_year)

        assert records[0].cases_per_100k is None

    def test_invalid_parameters(self, test_db):
        """Malformed parameters raise ValidationError before querying."""
        from src.analysis import get_rates, ValidationError

        with pytest.raises(ValidationError):
            get_rates(2023, [], conn=test_db)
        with pytest.raises(ValidationError):
            get_rates("2023", [1], conn=test_db)
        with pytest.raises(ValidationError):
            get_rates(2023, [1], week=53, conn=test_db)


class TestRegionRate:
    """Tests for a single region's rate."""

    def test_region_rate(self, test_db, edge_year):
        """One region and disease."""
        from src.analysis import get_region_rate

        record = get_region_rate("Alpha", 1, 2023, conn=test_db, edge_year=edge_year)

        assert record.disease_name == "Flu"
        assert record.cases_per_100k == pytest.approx(50.0)

    def test_no_cases_is_zero(self, test_db, edge_year):
        """A valid region with no observations has 0 cases and rate 0."""
        from src.analysis import get_region_rate

        record = get_region_rate("Gamma", 2, 2023, conn=test_db, edge_year=edge_year)

        assert record.total_cases == 0
        assert record.cases_per_100k == 0.0

    def test_unknown_region(self, test_db):
        """Unknown names are not-found, not zero."""
        from src.analysis import get_region_rate, NotFoundError

        with pytest.raises(NotFoundError):
            get_region_rate("Atlantis", 1, 2023, conn=test_db)


class TestTopDisease:
    """Tests for the top disease per region."""

    def test_top_disease_by_region(self, test_db, edge_year):
        """The highest-rate disease per region, ordered by region."""
        from src.analysis import get_top_disease_by_region

        records = get_top_disease_by_region(2023, conn=test_db, edge_year=edge_year)
        top = {r.region_name: r.disease_name for r in records}

        assert [r.region_name for r in records] == ["Alpha", "Beta", "Delta", "Epsilon", "Gamma"]
        assert top["Alpha"] == "Flu"
        assert top["Beta"] == "Measles"
        assert top["Epsilon"] == "Measles"
