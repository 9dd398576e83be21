"""Stage 4: assign each record an industry category from its keywords."""

from typing import Optional

import polars as pl

from salary_survey.config import RECORD_ID, PipelineConfig
from salary_survey.keywords import KeywordIndex
from salary_survey.logger import get_logger

logger = get_logger(__name__)


def eligible_mapping(index: KeywordIndex, config: PipelineConfig) -> dict[str, str]:
    """The keyword mapping restricted to keywords frequent enough to trust."""
    frequent = set(index.above(config.min_keyword_frequency))
    return {keyword: label for keyword, label in config.keyword_categories.items() if keyword in frequent}


def unmapped_keywords(index: KeywordIndex, config: PipelineConfig) -> list[str]:
    """Frequent keywords that the mapping does not cover yet."""
    return [
        keyword
        for keyword in index.above(config.min_keyword_frequency)
        if keyword not in config.keyword_categories
    ]


def assign_categories(
    df: pl.DataFrame,
    index: KeywordIndex,
    config: Optional[PipelineConfig] = None,
) -> pl.DataFrame:
    """Add ``group`` to every record.

    The first keyword of a record (by position) that has a category decides
    it. Records without such a keyword fall into the catch-all category.
    """
    if config is None:
        config = PipelineConfig()

    mapping = eligible_mapping(index, config)
    mapping_df = pl.DataFrame(
        {"Keyword": list(mapping.keys()), "group": list(mapping.values())},
        schema={"Keyword": pl.String, "group": pl.String},
    )

    matches = index.tokens.join(mapping_df, on="Keyword", how="inner")
    first_match = (
        matches.sort([RECORD_ID, "Position"])
        .group_by(RECORD_ID, maintain_order=True)
        .agg(pl.col("group").first())
    )

    ambiguous = (
        matches.group_by(RECORD_ID)
        .agg(pl.col("group").n_unique().alias("labels"))
        .filter(pl.col("labels") > 1)
        .height
    )
    if ambiguous:
        logger.info("%s records matched more than one category; kept the first keyword's", f"{ambiguous:,}")

    skipped = unmapped_keywords(index, config)
    if skipped:
        logger.debug("Frequent keywords without a category: %s", ", ".join(skipped))

    df = (
        df.join(first_match, on=RECORD_ID, how="left")
        .with_columns(pl.col("group").fill_null(config.catch_all_category))
        .sort(RECORD_ID)
    )
    logger.info(
        "Assigned categories: %s of %s records fell back to %s",
        f"{df.filter(pl.col('group') == config.catch_all_category).height:,}",
        f"{df.height:,}",
        config.catch_all_category,
    )
    return df
