"""Stage 3: split a free-text column into lowercase keywords.

Punctuation is deleted rather than treated as a separator, so
``"Health-Care"`` is the single keyword ``healthcare`` while ``"Health Care"``
is ``health`` and ``care``.
"""

import re
from dataclasses import dataclass
from typing import Optional

import polars as pl

from salary_survey.config import RECORD_ID
from salary_survey.logger import get_logger

logger = get_logger(__name__)

# Only ASCII whitespace separates keywords
NON_KEYWORD_CHARS: str = r"[^a-z \t\n\r\f\v]"

_NON_KEYWORD_RE = re.compile(NON_KEYWORD_CHARS)


def tokenize(text: Optional[str]) -> list[str]:
    """Keywords of a single value, in the order they appear."""
    if text is None:
        return []
    return _NON_KEYWORD_RE.sub("", text.lower()).split()


def keyword_expr(column: str) -> pl.Expr:
    """:func:`tokenize` as a polars expression producing a list column."""
    return (
        pl.col(column)
        .str.to_lowercase()
        .str.replace_all(NON_KEYWORD_CHARS, "")
        .str.extract_all(r"[a-z]+")
    )


@dataclass(frozen=True)
class KeywordIndex:
    """Token-level view of one text column.

    ``tokens`` has one row per keyword occurrence and is keyed by record id,
    so its height differs from the record table whenever a value yields zero
    or several keywords.
    """

    column: str
    tokens: pl.DataFrame
    frequencies: pl.DataFrame
    record_ids: pl.Series

    def above(self, threshold: int) -> list[str]:
        """Keywords occurring at least ``threshold`` times, most frequent first."""
        return self.frequencies.filter(pl.col("Count") >= threshold)["Keyword"].to_list()

    @property
    def records_without_tokens(self) -> pl.Series:
        return self.record_ids.filter(~self.record_ids.is_in(self.tokens[RECORD_ID].unique()))

    def for_record(self, record_id: int) -> list[str]:
        return (
            self.tokens.filter(pl.col(RECORD_ID) == record_id)
            .sort("Position")["Keyword"]
            .to_list()
        )


def extract_keywords(df: pl.DataFrame, column: str, id_column: str = RECORD_ID) -> KeywordIndex:
    tokens = (
        df.select(pl.col(id_column).alias(RECORD_ID), keyword_expr(column).alias("Keyword"))
        .with_columns(pl.int_ranges(0, pl.col("Keyword").list.len()).alias("Position"))
        .explode(["Keyword", "Position"])
        .drop_nulls("Keyword")
        .select(RECORD_ID, "Position", "Keyword")
    )

    frequencies = (
        tokens.group_by("Keyword")
        .agg(pl.len().alias("Count"))
        .sort(["Count", "Keyword"], descending=[True, False])
    )

    index = KeywordIndex(
        column=column,
        tokens=tokens,
        frequencies=frequencies,
        record_ids=df[id_column].alias(RECORD_ID),
    )
    logger.info(
        "Extracted %s keywords (%s distinct) from %s; %s records have none",
        f"{tokens.height:,}",
        f"{frequencies.height:,}",
        column,
        f"{index.records_without_tokens.len():,}",
    )
    return index
