"""Grouped comparisons of translated salary over the pipeline output."""

from dataclasses import dataclass, field

import numpy as np
import polars as pl
from scipy import stats
from sklearn.linear_model import LinearRegression

from salary_survey.errors import AnalysisError
from salary_survey.logger import get_logger

logger = get_logger(__name__)

SALARY: str = "TranslatedSalary"

# Ordinal answers, lowest first
age_order: list[str] = [
    "under 18",
    "18-24",
    "25-34",
    "35-44",
    "45-54",
    "55-64",
    "65 or over",
]

education_order: list[str] = [
    "High School",
    "Some college",
    "College degree",
    "Master's degree",
    "Professional degree (MD, JD, etc.)",
    "PhD",
]

experience_order: list[str] = [
    "1 year or less",
    "2 - 4 years",
    "5-7 years",
    "8 - 10 years",
    "11 - 20 years",
    "21 - 30 years",
    "31 - 40 years",
    "41 years or more",
]

ordinal_mappings: dict[str, list[str]] = {
    "Age_Range": age_order,
    "Highest_Level_of_Education": education_order,
    "Overall_Work_Experience": experience_order,
    "Work_Experience_in_Field": experience_order,
}


@dataclass(frozen=True)
class StatTestResult:
    statistic: float
    pvalue: float
    groups: list[str] = field(default_factory=list)

    def significant(self, alpha: float = 0.05) -> bool:
        return self.pvalue < alpha


@dataclass(frozen=True)
class RegressionResult:
    coefficients: dict[str, float]
    intercept: float
    r_squared: float
    n_samples: int


def group_summary(df: pl.DataFrame, by: str, value: str = SALARY) -> pl.DataFrame:
    """Count, mean and median of ``value`` per group, highest median first."""
    return (
        df.group_by(by)
        .agg(
            pl.len().alias("count"),
            pl.col(value).mean().alias("mean"),
            pl.col(value).median().alias("median"),
        )
        .sort(["median", by], descending=[True, False])
    )


def group_samples(df: pl.DataFrame, by: str, value: str = SALARY) -> dict[str, np.ndarray]:
    """Salary arrays per group, skipping groups too small to compare."""
    grouped = (
        df.drop_nulls([by, value])
        .group_by(by)
        .agg(pl.col(value))
        .sort(by)
    )

    samples = {}
    for row in grouped.iter_rows(named=True):
        if len(row[value]) < 2:
            logger.debug("Skipping group %r with a single observation", row[by])
            continue
        samples[str(row[by])] = np.asarray(row[value], dtype=float)

    if len(samples) < 2:
        raise AnalysisError(f"Need at least two groups of two observations in {by!r}, got {len(samples)}")
    return samples


def one_way_anova(df: pl.DataFrame, by: str, value: str = SALARY) -> StatTestResult:
    samples = group_samples(df, by, value)
    result = stats.f_oneway(*samples.values())
    return StatTestResult(float(result.statistic), float(result.pvalue), list(samples))


def kruskal_wallis(df: pl.DataFrame, by: str, value: str = SALARY) -> StatTestResult:
    """Rank-based alternative to ANOVA; salaries are far from normal."""
    samples = group_samples(df, by, value)
    result = stats.kruskal(*samples.values())
    return StatTestResult(float(result.statistic), float(result.pvalue), list(samples))


def tukey_hsd(df: pl.DataFrame, by: str, value: str = SALARY, alpha: float = 0.05) -> pl.DataFrame:
    """Pairwise Tukey HSD comparisons, one row per pair of groups."""
    samples = group_samples(df, by, value)
    names = list(samples)
    result = stats.tukey_hsd(*samples.values())
    interval = result.confidence_interval(confidence_level=1 - alpha)

    rows = []
    for i in range(len(names)):
        for j in range(i + 1, len(names)):
            rows.append(
                {
                    "group_a": names[i],
                    "group_b": names[j],
                    "mean_difference": float(result.statistic[i, j]),
                    "lower": float(interval.low[i, j]),
                    "upper": float(interval.high[i, j]),
                    "pvalue": float(result.pvalue[i, j]),
                    "reject": bool(result.pvalue[i, j] < alpha),
                }
            )
    return pl.DataFrame(rows)


def apply_ordinal_encoding(df: pl.DataFrame) -> pl.DataFrame:
    """Ranks for the ordinal answers; anything off the scale becomes null."""
    return df.with_columns(
        [
            pl.col(column)
            .replace_strict(order, list(range(len(order))), default=None, return_dtype=pl.Int32)
            .alias(f"{column}_ordinal")
            for column, order in ordinal_mappings.items()
        ]
    )


def fit_salary_regression(df: pl.DataFrame, value: str = SALARY, log_target: bool = True) -> RegressionResult:
    """Linear regression of salary on age, education and experience ranks.

    ``log1p`` is applied to the target by default to tame its right skew.
    """
    features = [f"{column}_ordinal" for column in ordinal_mappings]
    encoded = apply_ordinal_encoding(df).select(features + [value]).drop_nulls()

    if encoded.height <= len(features):
        raise AnalysisError(f"Need more than {len(features)} complete rows for regression, got {encoded.height}")

    X = encoded.select(features).to_numpy()
    y = encoded[value].to_numpy()
    if log_target:
        y = np.log1p(y)

    model = LinearRegression().fit(X, y)
    r_squared = float(model.score(X, y))
    logger.info("Fitted salary regression on %s rows: R^2=%.3f", f"{encoded.height:,}", r_squared)

    return RegressionResult(
        coefficients={name: float(coef) for name, coef in zip(features, model.coef_)},
        intercept=float(model.intercept_),
        r_squared=r_squared,
        n_samples=encoded.height,
    )
