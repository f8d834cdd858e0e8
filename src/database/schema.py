"""DuckDB star-schema definitions for the epidemiological dataset.

Dimensions:
- dim_region: states / reporting regions
- dim_disease: tracked pathogens

Facts:
- fact_cases_weekly: weekly case counts per region/disease
- fact_population_state_year: population per region/year
- fact_population_state_demo_year: population per region/year/demographic cell
- fact_deaths_demographic: national deaths by demographic type/value
- fact_deaths_region: region deaths by demographic cell
"""

from typing import Optional
import duckdb

from config.logging_config import get_logger

logger = get_logger("schema")

SCHEMA_VERSION = "1.0"

# =============================================================================
# CONSTRAINT NOTES
# =============================================================================
# Facts reference dimensions by id. DuckDB does not enforce the foreign keys
# beyond documentation; the batch loader is responsible for consistency.
#
# fact_cases_weekly may hold several rows for the same
# (region_id, disease_id, year, week); aggregation always sums them.
# current_week_cases may be NULL and is read as 0.
# =============================================================================

CREATE_DIM_REGION = """
CREATE TABLE IF NOT EXISTS dim_region (
    region_id INTEGER PRIMARY KEY,
    state_name VARCHAR NOT NULL UNIQUE,
    state_code VARCHAR
)
"""

CREATE_DIM_DISEASE = """
CREATE TABLE IF NOT EXISTS dim_disease (
    disease_id INTEGER PRIMARY KEY,
    disease_name VARCHAR NOT NULL UNIQUE
)
"""

CREATE_FACT_CASES_WEEKLY = """
CREATE TABLE IF NOT EXISTS fact_cases_weekly (
    region_id INTEGER NOT NULL,
    disease_id INTEGER NOT NULL,
    year INTEGER NOT NULL,
    week INTEGER NOT NULL CHECK (week BETWEEN 1 AND 53),
    current_week_cases BIGINT CHECK (current_week_cases IS NULL OR current_week_cases >= 0)
)
"""

CREATE_FACT_POPULATION_STATE_YEAR = """
CREATE TABLE IF NOT EXISTS fact_population_state_year (
    region_id INTEGER NOT NULL,
    year INTEGER NOT NULL,
    population BIGINT CHECK (population IS NULL OR population >= 0),
    PRIMARY KEY (region_id, year)
)
"""

CREATE_FACT_POPULATION_STATE_DEMO_YEAR = """
CREATE TABLE IF NOT EXISTS fact_population_state_demo_year (
    region_id INTEGER NOT NULL,
    year INTEGER NOT NULL,
    race VARCHAR NOT NULL,
    sex VARCHAR NOT NULL,
    age_group VARCHAR NOT NULL,
    population BIGINT CHECK (population IS NULL OR population >= 0)
)
"""

CREATE_FACT_DEATHS_DEMOGRAPHIC = """
CREATE TABLE IF NOT EXISTS fact_deaths_demographic (
    disease_id INTEGER NOT NULL,
    year INTEGER NOT NULL,
    month INTEGER,
    demographic_type VARCHAR NOT NULL,
    demographic_value VARCHAR NOT NULL,
    deaths BIGINT CHECK (deaths IS NULL OR deaths >= 0)
)
"""

CREATE_FACT_DEATHS_REGION = """
CREATE TABLE IF NOT EXISTS fact_deaths_region (
    region_id INTEGER NOT NULL,
    disease_id INTEGER NOT NULL,
    year INTEGER NOT NULL,
    race VARCHAR NOT NULL,
    sex VARCHAR NOT NULL,
    age_group VARCHAR NOT NULL,
    deaths BIGINT CHECK (deaths IS NULL OR deaths >= 0)
)
"""

CREATE_SCHEMA_VERSION = """
CREATE TABLE IF NOT EXISTS schema_version (
    version VARCHAR PRIMARY KEY,
    applied_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
)
"""

# Table name -> DDL, in creation order
TABLES = {
    "dim_region": CREATE_DIM_REGION,
    "dim_disease": CREATE_DIM_DISEASE,
    "fact_cases_weekly": CREATE_FACT_CASES_WEEKLY,
    "fact_population_state_year": CREATE_FACT_POPULATION_STATE_YEAR,
    "fact_population_state_demo_year": CREATE_FACT_POPULATION_STATE_DEMO_YEAR,
    "fact_deaths_demographic": CREATE_FACT_DEATHS_DEMOGRAPHIC,
    "fact_deaths_region": CREATE_FACT_DEATHS_REGION,
}

INDEXES = [
    "CREATE INDEX IF NOT EXISTS idx_cases_disease_year ON fact_cases_weekly(disease_id, year)",
    "CREATE INDEX IF NOT EXISTS idx_cases_region ON fact_cases_weekly(region_id)",
    "CREATE INDEX IF NOT EXISTS idx_demo_pop_region_year ON fact_population_state_demo_year(region_id, year)",
    "CREATE INDEX IF NOT EXISTS idx_deaths_region_year ON fact_deaths_region(disease_id, year)",
]


def create_all_tables(conn: duckdb.DuckDBPyConnection) -> None:
    """Create all star-schema tables."""
    for name, ddl in TABLES.items():
        conn.execute(ddl)
        logger.debug(f"Created table {name}")
    conn.execute(CREATE_SCHEMA_VERSION)


def create_all_indexes(conn: duckdb.DuckDBPyConnection) -> None:
    """Create secondary indexes on fact tables."""
    for ddl in INDEXES:
        conn.execute(ddl)


def initialize_database(conn: duckdb.DuckDBPyConnection) -> None:
    """Create tables and indexes, and record the schema version."""
    create_all_tables(conn)
    create_all_indexes(conn)
    conn.execute(
        "INSERT INTO schema_version (version) VALUES (?) ON CONFLICT DO NOTHING",
        [SCHEMA_VERSION],
    )
    logger.info(f"Database initialized (schema v{SCHEMA_VERSION})")


def get_schema_version(conn: duckdb.DuckDBPyConnection) -> Optional[str]:
    """Return the most recently applied schema version, if any."""
    try:
        row = conn.execute(
            "SELECT version FROM schema_version ORDER BY applied_at DESC LIMIT 1"
        ).fetchone()
    except duckdb.CatalogException:
        return None
    return row[0] if row else None


def get_table_counts(conn: duckdb.DuckDBPyConnection) -> dict:
    """Get row counts for every star-schema table that exists."""
    counts = {}
    for table in TABLES:
        try:
            counts[table] = conn.execute(f"SELECT COUNT(*) FROM {table}").fetchone()[0]
        except duckdb.CatalogException:
            counts[table] = None
    return counts


def drop_all_tables(conn: duckdb.DuckDBPyConnection) -> None:
    """Drop all star-schema tables. Facts are dropped before dimensions."""
    for table in reversed(list(TABLES)):
        conn.execute(f"DROP TABLE IF EXISTS {table}")
    conn.execute("DROP TABLE IF EXISTS schema_version")
    logger.warning("All tables dropped")
