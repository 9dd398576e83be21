"""Stage 1: load the raw survey and normalize its fields.

Columns are renamed positionally to the names in
:data:`salary_survey.config.RAW_COLUMNS`, salary fields become integers and
unanswered optional questions get sentinel categories.
"""

from pathlib import Path
from typing import Optional, Union

import polars as pl

from salary_survey.config import (
    RAW_COLUMNS,
    RECORD_ID,
    SALARY_COLUMNS,
    PipelineConfig,
)
from salary_survey.errors import SchemaError
from salary_survey.logger import get_logger

logger = get_logger(__name__)


def load_survey(path: Union[str, Path]) -> pl.DataFrame:
    """Read the survey CSV with every column kept as text."""
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Survey file not found at {path}")

    df = pl.read_csv(path, infer_schema=False, encoding="utf8-lossy")
    logger.info("Loaded %s: %s rows, %s columns", path.name, f"{df.height:,}", df.width)
    return df


def _salary_text(column: str) -> pl.Expr:
    # "85,000" and "85 000" are both common
    return pl.col(column).str.replace_all(r"[,\s]", "")


def _salary_number(column: str) -> pl.Expr:
    """Numeric value of a salary field; unparseable or absent answers are null."""
    return _salary_text(column).cast(pl.Float64, strict=False)


def normalize_records(raw: pl.DataFrame, config: Optional[PipelineConfig] = None) -> pl.DataFrame:
    """Rename, type and fill the raw survey table.

    Salary fields that are absent or do not parse as a number count as 0.
    The one record deletion here is a combined salary that is not finite or
    is larger than ``config.salary_integer_limit``.
    """
    if config is None:
        config = PipelineConfig()

    if raw.width != len(RAW_COLUMNS):
        raise SchemaError(f"Expected {len(RAW_COLUMNS)} survey columns, got {raw.width}: {raw.columns}")

    init_rows = raw.height
    df = (
        raw.rename(dict(zip(raw.columns, RAW_COLUMNS)))
        .with_columns(pl.col(RAW_COLUMNS).cast(pl.String))
        .with_row_index(RECORD_ID)
    )

    combined = pl.sum_horizontal([_salary_number(column).fill_null(0) for column in SALARY_COLUMNS])
    outlier = ~combined.is_finite() | (combined.abs() > config.salary_integer_limit)
    df = df.filter(~outlier)

    dropped = init_rows - df.height
    if dropped:
        logger.warning(
            "Dropped %s records with a combined salary above %s",
            f"{dropped:,}",
            f"{config.salary_integer_limit:,}",
        )

    df = df.with_columns(
        [_salary_number(column).fill_null(0).cast(pl.Int64).alias(column) for column in SALARY_COLUMNS]
    ).with_columns(
        pl.sum_horizontal(SALARY_COLUMNS).alias("TotalSalary"),
        pl.col("Industry").fill_null(config.industry_default),
        *[pl.col(column).fill_null(value) for column, value in config.fill_values.items()],
    )

    logger.info("Normalized records: %s rows (Lost %s rows)", f"{df.height:,}", f"{dropped:,}")
    return df
