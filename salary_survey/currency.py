"""Stage 2: collapse free-text currencies and convert salaries to USD."""

from typing import Optional

import polars as pl

from salary_survey.config import PipelineConfig
from salary_survey.errors import ConfigurationError
from salary_survey.logger import get_logger

logger = get_logger(__name__)


def resolve_currency(df: pl.DataFrame) -> pl.DataFrame:
    """Use the write-in currency whenever the respondent picked "Other"."""
    return df.with_columns(
        pl.when(pl.col("Currency") == "Other")
        .then(pl.col("Other_Currency"))
        .otherwise(pl.col("Currency"))
        .alias("new_currency")
    )


def collapse_variants(df: pl.DataFrame, config: PipelineConfig) -> pl.DataFrame:
    """Map known spellings onto currency codes; anything else passes through."""
    return df.with_columns(
        pl.col("new_currency")
        .str.strip_chars()
        .replace(dict(config.currency_variants))
        .alias("cleaned_currency")
    )


def currency_frequencies(df: pl.DataFrame) -> pl.DataFrame:
    return df["cleaned_currency"].value_counts().sort(["count", "cleaned_currency"], descending=[True, False])


def select_currencies(df: pl.DataFrame, config: PipelineConfig) -> pl.DataFrame:
    """Keep allow-listed currencies with more than ``min_currency_sample`` responses."""
    counts = currency_frequencies(df)
    sampled = set(
        counts.filter(
            pl.col("cleaned_currency").is_not_null()
            & (pl.col("count") > config.min_currency_sample)
        )["cleaned_currency"].to_list()
    )
    selected = [currency for currency in config.analysis_currencies if currency in sampled]

    too_small = [currency for currency in config.analysis_currencies if currency not in sampled]
    if too_small:
        logger.info(
            "Currencies below %s responses left out: %s",
            config.min_currency_sample,
            ", ".join(too_small),
        )

    return df.filter(pl.col("cleaned_currency").is_in(selected))


def convert_salaries(df: pl.DataFrame, config: PipelineConfig) -> pl.DataFrame:
    """Add ``TranslatedSalary``, the total salary in USD.

    Every currency still present must have a rate; a missing one is a defect
    in the rate table and raises instead of producing a zero or null salary.
    """
    present = set(df["cleaned_currency"].drop_nulls().unique().to_list())
    missing = sorted(present - set(config.conversion_rates))
    if missing or df["cleaned_currency"].null_count():
        raise ConfigurationError(f"No conversion rate for currencies: {missing or [None]}")

    rate = pl.col("cleaned_currency").replace_strict(dict(config.conversion_rates), return_dtype=pl.Float64)
    return df.with_columns((pl.col("TotalSalary") * rate).alias("TranslatedSalary"))


def canonicalize_currency(df: pl.DataFrame, config: Optional[PipelineConfig] = None) -> pl.DataFrame:
    if config is None:
        config = PipelineConfig()

    init_rows = df.height
    df = collapse_variants(resolve_currency(df), config)
    df = select_currencies(df, config)
    df = convert_salaries(df, config)

    logger.info(
        "Rows after currency selection: %s (Lost %s rows)",
        f"{df.height:,}",
        f"{init_rows - df.height:,}",
    )
    return df
