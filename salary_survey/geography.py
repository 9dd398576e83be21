"""Stage 5: derive a region from the currency and reconcile the country field.

Survey respondents spell the United States in dozens of ways ("USA",
"U.S.", "Unites States", "United States of America" ...). Normalizing the
free text to a letters-only key and treating every key that starts with "u"
as the US, minus a short list of real countries, recovers nearly all of them.
Records paid in USD whose country still is not the US after that are dropped.
"""

from typing import Optional

import polars as pl

from salary_survey.config import UNITED_STATES, PipelineConfig
from salary_survey.errors import ConfigurationError
from salary_survey.logger import get_logger

logger = get_logger(__name__)


def attach_region(df: pl.DataFrame, config: PipelineConfig) -> pl.DataFrame:
    present = set(df["cleaned_currency"].drop_nulls().unique().to_list())
    missing = sorted(present - set(config.currency_regions))
    if missing:
        raise ConfigurationError(f"No region for currencies: {missing}")

    return df.with_columns(
        pl.col("cleaned_currency")
        .replace_strict(dict(config.currency_regions), return_dtype=pl.String)
        .alias("Region")
    )


def country_key(expr: pl.Expr) -> pl.Expr:
    """Lowercase and keep letters only: ``"U.S.A."`` becomes ``"usa"``."""
    return expr.str.to_lowercase().str.replace_all(r"[^a-z]", "")


def united_states_spellings(df: pl.DataFrame, config: PipelineConfig) -> set[str]:
    keys = df.select(country_key(pl.col("Country_of_Work")).alias("key"))["key"].drop_nulls().unique()
    excluded = set(config.non_us_u_countries)
    spellings = {key for key in keys.to_list() if key.startswith("u") and key not in excluded}
    return spellings | set(config.extra_us_spellings)


def normalize_countries(df: pl.DataFrame, config: PipelineConfig) -> pl.DataFrame:
    spellings = united_states_spellings(df, config)
    logger.debug("Spellings read as %s: %s", UNITED_STATES, ", ".join(sorted(spellings)))

    return df.with_columns(
        pl.when(country_key(pl.col("Country_of_Work")).is_in(list(spellings)))
        .then(pl.lit(UNITED_STATES))
        .otherwise(pl.col("Country_of_Work"))
        .alias("Country_of_Work")
    )


def filter_consistent(df: pl.DataFrame) -> pl.DataFrame:
    """Keep records whose country agrees with a US region, and all non-US ones."""
    return df.filter(
        (pl.col("Region") != UNITED_STATES)
        | (pl.col("Country_of_Work") == UNITED_STATES).fill_null(False)
    )


def resolve_geography(df: pl.DataFrame, config: Optional[PipelineConfig] = None) -> pl.DataFrame:
    if config is None:
        config = PipelineConfig()

    init_rows = df.height
    df = filter_consistent(normalize_countries(attach_region(df, config), config))

    lost = init_rows - df.height
    logger.info(
        "Rows after geography check: %s (Lost %s rows, %.1f%%)",
        f"{df.height:,}",
        f"{lost:,}",
        lost / init_rows * 100 if init_rows else 0.0,
    )
    return df
