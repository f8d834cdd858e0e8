"""High-outlier detection across a peer group of regions."""

from dataclasses import dataclass
from typing import List, Mapping, Optional, Sequence, Tuple

import duckdb
import numpy as np

from config.logging_config import get_logger
from src.database import borrow_connection
from .errors import data_source_errors
from .rates import fetch_rate_rows, to_rate_records, effective_population_year, resolve_edge_year
from .reference import resolve_disease_by_name
from .validation import require_name, require_year

logger = get_logger("outliers")


@dataclass
class OutlierRecord:
    """An entity whose rate exceeds mean + one standard deviation."""

    name: str
    rate: float
    mean: float
    stddev: float


def mean_and_stddev(values: Sequence[float]) -> Tuple[float, float]:
    """
    Mean and population standard deviation (divide by N).

    An empty peer group gives ``(0.0, 0.0)``.
    """
    if len(values) == 0:
        return 0.0, 0.0
    arr = np.asarray(values, dtype=float)
    return float(arr.mean()), float(arr.std(ddof=0))


def find_high_outliers(rates: Mapping[str, Optional[float]]) -> List[OutlierRecord]:
    """
    Entities whose rate is strictly above ``mean + stddev`` of the peer group.

    Entities with an undefined rate are left out of the peer group. The
    threshold is fixed at one standard deviation. Sorted descending by rate.
    """
    peers = {name: rate for name, rate in rates.items() if rate is not None}
    if not peers:
        return []

    mean, std = mean_and_stddev(list(peers.values()))
    outliers = [
        OutlierRecord(name=name, rate=rate, mean=mean, stddev=std)
        for name, rate in peers.items()
        if rate - mean > std
    ]
    outliers.sort(key=lambda o: (-o.rate, o.name))
    logger.debug(f"{len(outliers)} of {len(peers)} entities above mean={mean:.4f} std={std:.4f}")
    return outliers


def get_high_outlier_regions(
    disease_name: str,
    year: int,
    conn: Optional[duckdb.DuckDBPyConnection] = None,
    edge_year: Optional[int] = None,
) -> List[OutlierRecord]:
    """Regions with unusually high cases per 100k for a disease and year."""
    require_name(disease_name, "disease_name")
    require_year(year)
    edge = resolve_edge_year(edge_year)

    with borrow_connection(conn) as c, data_source_errors("outlier query"):
        disease_id = resolve_disease_by_name(c, disease_name)
        rows = fetch_rate_rows(c, year, edge, disease_ids=[disease_id])

    records = to_rate_records(rows, year, effective_population_year(year, edge), None)
    return find_high_outliers({r.region_name: r.cases_per_100k for r in records})
