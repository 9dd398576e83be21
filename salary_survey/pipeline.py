"""Run the five cleaning stages over the survey, top to bottom."""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

import polars as pl

from salary_survey.categories import assign_categories
from salary_survey.config import OUTPUT_COLUMNS, PipelineConfig
from salary_survey.currency import canonicalize_currency
from salary_survey.geography import resolve_geography
from salary_survey.keywords import KeywordIndex, extract_keywords
from salary_survey.loader import load_survey, normalize_records
from salary_survey.logger import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class DropReport:
    """Where the input records went.

    Keyword frequency never removes a record, so there is no count for it.
    """

    input_rows: int
    malformed_salary: int
    insufficient_currency: int
    geography_mismatch: int

    @property
    def retained(self) -> int:
        return self.input_rows - self.malformed_salary - self.insufficient_currency - self.geography_mismatch

    def as_dict(self) -> dict[str, int]:
        return {
            "input_rows": self.input_rows,
            "malformed_salary": self.malformed_salary,
            "insufficient_currency": self.insufficient_currency,
            "geography_mismatch": self.geography_mismatch,
            "retained": self.retained,
        }


@dataclass(frozen=True)
class PipelineResult:
    records: pl.DataFrame
    keywords: KeywordIndex
    drops: DropReport

    @property
    def output(self) -> pl.DataFrame:
        """The analysis table: demographics, USD salary, category and region."""
        return self.records.select(OUTPUT_COLUMNS)


def run_pipeline(
    source: Union[str, Path, pl.DataFrame],
    config: Optional[PipelineConfig] = None,
) -> PipelineResult:
    if config is None:
        config = PipelineConfig()

    raw = source if isinstance(source, pl.DataFrame) else load_survey(source)
    init_rows = raw.height
    logger.info("Initial dataframe rows: %s", f"{init_rows:,}")

    normalized = normalize_records(raw, config)
    converted = canonicalize_currency(normalized, config)

    index = extract_keywords(converted, "Industry")
    categorized = assign_categories(converted, index, config)

    resolved = resolve_geography(categorized, config)

    drops = DropReport(
        input_rows=init_rows,
        malformed_salary=init_rows - normalized.height,
        insufficient_currency=normalized.height - converted.height,
        geography_mismatch=categorized.height - resolved.height,
    )
    logger.info(
        "Filtered dataframe rows: %s (Lost %s rows)",
        f"{resolved.height:,}",
        f"{init_rows - resolved.height:,}",
    )
    return PipelineResult(records=resolved, keywords=index, drops=drops)
