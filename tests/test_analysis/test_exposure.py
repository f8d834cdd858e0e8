"""Tests for demographic over/under-exposure."""

import pytest


class TestComputeExposure:
    """Tests for share arithmetic."""

    def test_two_cell_split(self):
        """Populations [60, 40] and cases [70, 30] give exposures [0.1, -0.1]."""
        from src.analysis import compute_exposure

        records = compute_exposure([("a", 70, 60), ("b", 30, 40)])

        assert [r.share_of_population for r in records] == [0.6, 0.4]
        assert [r.share_of_cases for r in records] == [0.7, 0.3]
        assert [r.over_under_exposure for r in records] == [0.1, -0.1]
        assert sum(r.over_under_exposure for r in records) == pytest.approx(0.0)

    def test_zero_cases(self):
        """No cases gives case shares of 0 and negative population exposure."""
        from src.analysis import compute_exposure

        records = compute_exposure([("a", 0, 25), ("b", 0, 75)])

        assert [r.share_of_cases for r in records] == [0.0, 0.0]
        assert [r.over_under_exposure for r in records] == [-0.25, -0.75]

    def test_unrounded(self):
        """decimals=None keeps full precision."""
        from src.analysis import compute_exposure

        records = compute_exposure([("a", 1, 1), ("b", 2, 2)], decimals=None)

        assert records[0].share_of_cases == pytest.approx(1 / 3)

    def test_missing_values_count_as_zero(self):
        """None cases or populations are read as 0."""
        from src.analysis import compute_exposure

        records = compute_exposure([("a", None, 50), ("b", 10, None)])

        assert records[0].share_of_population == 1.0
        assert records[1].share_of_cases == 1.0


class TestDemographicExposure:
    """Tests against the fixture database."""

    def test_proportional_allocation_has_no_exposure(self, test_db, edge_year):
        """Allocated cases match population shares, so every exposure is 0."""
        from src.analysis import get_demographic_exposure

        records = get_demographic_exposure("Alpha", "Flu", 2023, conn=test_db, edge_year=edge_year)

        assert len(records) == 4
        assert [r.share_of_population for r in records] == [0.3, 0.2, 0.2, 0.3]
        assert all(r.over_under_exposure == 0.0 for r in records)
        assert sum(r.cases for r in records) == pytest.approx(500.0)

    def test_cells_ordered_by_demographics(self, test_db, edge_year):
        """Cells come back ordered by race, sex, age group."""
        from src.analysis import get_demographic_exposure

        records = get_demographic_exposure("Alpha", "Flu", 2023, conn=test_db, edge_year=edge_year)

        assert (records[0].cell.race, records[0].cell.sex) == ("Black", "Female")
        assert (records[-1].cell.race, records[-1].cell.sex) == ("White", "Male")

    def test_region_without_cases(self, test_db, edge_year):
        """A disease with no cases still returns population shares."""
        from src.analysis import get_demographic_exposure

        records = get_demographic_exposure("Alpha", "Rare", 2023, conn=test_db, edge_year=edge_year)

        assert all(r.share_of_cases == 0.0 for r in records)
        assert sum(r.over_under_exposure for r in records) == pytest.approx(-1.0)

    def test_unknown_region(self, test_db):
        """Unknown region raises NotFoundError."""
        from src.analysis import get_demographic_exposure, NotFoundError

        with pytest.raises(NotFoundError):
            get_demographic_exposure("Atlantis", "Flu", 2023, conn=test_db)
