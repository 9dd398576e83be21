# ---
# jupyter:
#   jupytext:
#     cell_metadata_filter: title,-all
#     formats: ipynb,py:percent
#     text_representation:
#       extension: .py
#       format_name: percent
#       format_version: '1.3'
#       jupytext_version: 1.17.3
#   kernelspec:
#     display_name: Python 3 (ipykernel)
#     language: python
#     name: python3
# ---

# %% [markdown]
# The Ask A Manager Salary Survey 2021 dataset is used for this analysis.
#
# The goal is to compare annual salary across industries, regions and demographics, keeping every currency with enough responses instead of only USD.

# %% Imports
# Imports
import polars as pl

from salary_survey import PipelineConfig, run_pipeline
from salary_survey.analysis import (
    fit_salary_regression,
    group_summary,
    kruskal_wallis,
    one_way_anova,
    tukey_hsd,
)
from salary_survey.categories import unmapped_keywords
from salary_survey.currency import collapse_variants, currency_frequencies, resolve_currency
from salary_survey.loader import load_survey, normalize_records
from salary_survey.plots import plot_salary_by

# %% Load dataset
# Read Raw Data
FILE_NAME: str = "../data/raw/salary-survey.csv"
FIGURES_DIR: str = "../figures"
CONFIG = PipelineConfig()

DATASET: pl.DataFrame = load_survey(FILE_NAME)
print(f"Total rows: {DATASET.shape[0]:,}")

# %% [markdown]
# # Currency Distribution
# Before running the whole pipeline, let's see how the free-text currencies collapse.

# %%
currencies = collapse_variants(resolve_currency(normalize_records(DATASET, CONFIG)), CONFIG)
display(currency_frequencies(currencies).head(15))

# %% [markdown]
# Only currencies with more than 25 responses are kept, and only those we picked for analysis.
#
# # Running the Pipeline

# %%
result = run_pipeline(DATASET, CONFIG)
df = result.output

for reason, count in result.drops.as_dict().items():
    print(f"{reason:<22} {count:>8,}")

display(df.head())

# %% [markdown]
# # Industry Keywords
# Industry is free text, so it's grouped by keyword. These are the most common keywords that still have no category:

# %%
display(result.keywords.frequencies.filter(pl.col("Keyword").is_in(unmapped_keywords(result.keywords, CONFIG))))

# %% [markdown]
# # Salary by Industry Group

# %%
display(group_summary(df, "group"))
plot_salary_by(df, "group", path=f"{FIGURES_DIR}/group_salary.png")

# %%
anova = one_way_anova(df, "group")
kruskal = kruskal_wallis(df, "group")
print(f"ANOVA: F={anova.statistic:.2f}, p={anova.pvalue:.3g}")
print(f"Kruskal-Wallis: H={kruskal.statistic:.2f}, p={kruskal.pvalue:.3g}")

# %% [markdown]
# Salary is heavily right-skewed, so the Kruskal-Wallis result is the one to trust. Let's see which pairs differ.

# %%
display(tukey_hsd(df, "group").filter(pl.col("reject")).sort("mean_difference"))

# %% [markdown]
# # Salary by Region

# %%
display(group_summary(df, "Region"))
plot_salary_by(df, "Region", path=f"{FIGURES_DIR}/region_salary.png")
print(kruskal_wallis(df, "Region"))

# %% [markdown]
# # Gender

# %%
data = df.filter(pl.col("Gender").is_in(["Man", "Woman"]))
display(group_summary(data, "Gender"))
plot_salary_by(data, "Gender", path=f"{FIGURES_DIR}/gender_salary.png")
print(kruskal_wallis(data, "Gender"))

# %% [markdown]
# # Ordinal Features
# Age, education and experience have a natural order, so a linear model on their ranks shows how much each contributes.

# %%
regression = fit_salary_regression(df)
print(f"R^2 = {regression.r_squared:.3f} on {regression.n_samples:,} rows")
for feature, coef in regression.coefficients.items():
    print(f"  {feature:<40} {coef:+.4f}")
