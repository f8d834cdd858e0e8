"""Pytest configuration and fixtures for Epi Analytics tests."""

import pytest
import duckdb
import pandas as pd

from src.database.schema import initialize_database

# Latest year with population data in the fixture
EDGE_YEAR = 2023

REGIONS = [
    (1, "Alpha", "AA"),
    (2, "Beta", "BB"),
    (3, "Gamma", "GG"),
    (4, "Delta", "DD"),
    (5, "Epsilon", "EE"),  # no population rows
]

DISEASES = [
    (1, "Flu"),
    (2, "Measles"),
    (3, "Rare"),  # no case rows
]

# (region_id, disease_id, year, week, current_week_cases)
CASES = [
    # Flu, Alpha: 10, 20, 30, 50 per 100k for 2020-2023 and 50 again in 2024
    (1, 1, 2020, 1, 100),
    (1, 1, 2021, 1, 200),
    (1, 1, 2022, 1, 300),
    (1, 1, 2023, 1, 200),
    (1, 1, 2023, 2, 300),
    (1, 1, 2024, 1, 500),
    # Flu, Beta: 20, 15, 25, 10
    (2, 1, 2020, 1, 400),
    (2, 1, 2021, 1, 300),
    (2, 1, 2022, 1, 500),
    (2, 1, 2023, 1, 100),
    (2, 1, 2023, 2, 100),
    # Flu, Gamma: 2023 only, one week unreported
    (3, 1, 2023, 1, 50),
    (3, 1, 2023, 2, None),
    # Flu, Delta: 1, 2, 2, 10 (flat step)
    (4, 1, 2020, 1, 10),
    (4, 1, 2021, 1, 20),
    (4, 1, 2022, 1, 20),
    (4, 1, 2023, 1, 100),
    # Measles
    (1, 2, 2023, 2, 10),
    (2, 2, 2023, 3, 400),
    (5, 2, 2023, 1, 30),
]

POPULATION = {
    1: 1_000_000,
    2: 2_000_000,
    3: 500_000,
    4: 1_000_000,
}

# (region_id, race, sex, age_group, population) for 2023
DEMOGRAPHIC_POPULATION = [
    (1, "White", "Female", "5-9", 200_000),
    (1, "White", "Male", "30-34", 300_000),
    (1, "Black", "Female", "30-34", 300_000),
    (1, "Black", "Male", "85+", 200_000),
    (2, "White", "Female", "5-9", 500_000),
    (2, "White", "Male", "30-34", 500_000),
    (2, "Black", "Female", "30-34", 500_000),
    (2, "Black", "Male", "85+", 500_000),
]

# (disease_id, year, month, demographic_type, demographic_value, deaths)
DEATHS_DEMOGRAPHIC = [
    (1, 2023, 1, "Race/Ethnicity", "White", 60),
    (1, 2023, 2, "Race/Ethnicity", "White", 0),
    (1, 2023, 1, "Race/Ethnicity", "Black", 40),
    (1, 2023, 1, "Sex", "Female", 45),
    (1, 2023, 1, "Sex", "Male", 55),
    (1, 2023, 1, "Age Group", "0-17 years", 10),
    (1, 2023, 1, "Age Group", "18-64 years", 30),
    (1, 2023, 1, "Age Group", "65+ years", 60),
]

# (region_id, disease_id, year, race, sex, age_group, deaths)
DEATHS_REGION = [
    (1, 1, 2023, "White", "Female", "5-9", 3),
    (1, 1, 2023, "White", "Male", "30-34", 2),
    (1, 1, 2023, "Black", "Female", "30-34", 5),
    (2, 1, 2023, "White", "Female", "5-9", 30),
    (2, 1, 2023, "Black", "Male", "85+", 25),
]


@pytest.fixture
def empty_db():
    """In-memory DuckDB with the star schema and no rows."""
    conn = duckdb.connect(":memory:")
    initialize_database(conn)
    yield conn
    conn.close()


@pytest.fixture
def test_db(empty_db):
    """In-memory DuckDB seeded with a small surveillance dataset."""
    conn = empty_db
    conn.executemany("INSERT INTO dim_region VALUES (?, ?, ?)", REGIONS)
    conn.executemany("INSERT INTO dim_disease VALUES (?, ?)", DISEASES)
    conn.executemany("INSERT INTO fact_cases_weekly VALUES (?, ?, ?, ?, ?)", CASES)
    conn.executemany(
        "INSERT INTO fact_population_state_year VALUES (?, ?, ?)",
        [
            (region_id, year, population)
            for region_id, population in POPULATION.items()
            for year in range(2020, EDGE_YEAR + 1)
        ],
    )
    conn.executemany(
        "INSERT INTO fact_population_state_demo_year VALUES (?, ?, ?, ?, ?, ?)",
        [(r, EDGE_YEAR, race, sex, age, pop) for r, race, sex, age, pop in DEMOGRAPHIC_POPULATION],
    )
    conn.executemany(
        """
        INSERT INTO fact_deaths_demographic
            (disease_id, year, month, demographic_type, demographic_value, deaths)
        VALUES (?, ?, ?, ?, ?, ?)
        """,
        DEATHS_DEMOGRAPHIC,
    )
    conn.executemany("INSERT INTO fact_deaths_region VALUES (?, ?, ?, ?, ?, ?, ?)", DEATHS_REGION)
    return conn


@pytest.fixture
def edge_year():
    """Edge year matching the fixture's population data."""
    return EDGE_YEAR


@pytest.fixture
def extracts_dir(tmp_path):
    """A directory of CSV extracts for the loader."""
    pd.DataFrame(
        [{"region_id": r, "state_name": n, "state_code": c} for r, n, c in REGIONS[:2]]
    ).to_csv(tmp_path / "dim_region.csv", index=False)
    pd.DataFrame(
        [{"disease_id": d, "disease_name": n} for d, n in DISEASES[:1]]
    ).to_csv(tmp_path / "dim_disease.csv", index=False)
    pd.DataFrame(
        [
            {"region_id": 1, "disease_id": 1, "year": 2023, "week": 1, "current_week_cases": 200},
            {"region_id": 1, "disease_id": 1, "year": 2023, "week": 2, "current_week_cases": None},
            {"region_id": 2, "disease_id": 1, "year": 2023, "week": 1, "current_week_cases": 100},
        ]
    ).to_csv(tmp_path / "fact_cases_weekly.csv", index=False)
    pd.DataFrame(
        [
            {"region_id": 1, "year": 2023, "population": 1_000_000, "source": "census"},
            {"region_id": 2, "year": 2023, "population": 2_000_000, "source": "census"},
        ]
    ).to_csv(tmp_path / "fact_population_state_year.csv", index=False)
    return tmp_path
