"""Static tables and the validated configuration model for the pipeline.

Every mapping the pipeline relies on lives here and is handed to each stage
through :class:`PipelineConfig`, so updated tables can be swapped in without
touching stage code.
"""

import json
from collections.abc import Mapping
from pathlib import Path
from types import MappingProxyType
from typing import Any, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from salary_survey.errors import ConfigurationError

# Raw survey columns, in file order
RAW_COLUMNS: list[str] = [
    "Timestamp",
    "Age_Range",
    "Industry",
    "Title",
    "Title_Context",
    "Annual_Salary",
    "Additional_Compensation",
    "Currency",
    "Other_Currency",
    "Income_Context",
    "Country_of_Work",
    "US_State",
    "City",
    "Overall_Work_Experience",
    "Work_Experience_in_Field",
    "Highest_Level_of_Education",
    "Gender",
    "Race",
]

RECORD_ID: str = "Record_ID"

SALARY_COLUMNS: list[str] = ["Annual_Salary", "Additional_Compensation"]

OUTPUT_COLUMNS: list[str] = [
    "Age_Range",
    "Title",
    "US_State",
    "City",
    "Overall_Work_Experience",
    "Work_Experience_in_Field",
    "Highest_Level_of_Education",
    "Gender",
    "Race",
    "TranslatedSalary",
    "group",
    "Region",
]

# A currency needs more responses than this to be compared against the others
MIN_CURRENCY_SAMPLE: int = 25

# A keyword needs at least this many occurrences before it gets a category
MIN_KEYWORD_FREQUENCY: int = 25

# Largest combined salary accepted as an integer; anything above is a typo
SALARY_INTEGER_LIMIT: int = 2**31 - 1

ANALYSIS_CURRENCIES: list[str] = ["USD", "AUD", "EUR", "GBP", "CAD", "SEK", "CHF"]

CURRENCY_VARIANTS: dict[str, str] = {
    "American Dollars": "USD",
    "US Dollar": "USD",
    "US Dollars": "USD",
    "USD": "USD",
    "Equity": "USD",
    "AUD": "AUD",
    "AUD Australian": "AUD",
    "AUD/NZD": "AUD",
    "Australian Dollars": "AUD",
    "NZD": "AUD",
    "EUR": "EUR",
    "Euro": "EUR",
    "Euros": "EUR",
    "GBP": "GBP",
    "British Pounds": "GBP",
    "Pounds sterling": "GBP",
    "CAD": "CAD",
    "Canadian Dollars": "CAD",
}

# USD per unit of currency, 2021 averages
CONVERSION_RATES: dict[str, float] = {
    "USD": 1.0,
    "AUD": 0.75,
    "EUR": 1.12,
    "GBP": 1.38,
    "CAD": 0.80,
    "SEK": 0.12,
    "CHF": 1.09,
}

REGIONS: list[str] = [
    "United States",
    "Canada",
    "Great Britain",
    "Europe",
    "Australia",
]

CURRENCY_REGIONS: dict[str, str] = {
    "USD": "United States",
    "CAD": "Canada",
    "GBP": "Great Britain",
    "EUR": "Europe",
    "SEK": "Europe",
    "CHF": "Europe",
    "AUD": "Australia",
}

UNITED_STATES: str = "United States"

# Normalized country spellings starting with "u" that are not the US
NON_US_U_COUNTRIES: list[str] = [
    "uk",
    "unitedkingdom",
    "uae",
    "uganda",
    "ukraine",
    "unitedarabemirates",
]

EXTRA_US_SPELLINGS: list[str] = ["america"]

MISCELLANEOUS: str = "Miscellaneous"

CATEGORY_LABELS: list[str] = [
    "Technology",
    "Higher Education",
    "Primary & Secondary Education",
    "Nonprofits",
    "Government & Public Administration",
    "Health Care",
    "Finance & Insurance",
    "Engineering & Manufacturing",
    "Law",
    "Marketing & Media",
    "Business & Consulting",
    "Retail & Sales",
    "Arts & Entertainment",
    "Science & Research",
    MISCELLANEOUS,
]

KEYWORD_CATEGORIES: dict[str, str] = {
    "computing": "Technology",
    "tech": "Technology",
    "technology": "Technology",
    "software": "Technology",
    "it": "Technology",
    "higher": "Higher Education",
    "university": "Higher Education",
    "primarysecondary": "Primary & Secondary Education",
    "nonprofits": "Nonprofits",
    "nonprofit": "Nonprofits",
    "social": "Nonprofits",
    "government": "Government & Public Administration",
    "public": "Government & Public Administration",
    "health": "Health Care",
    "healthcare": "Health Care",
    "hospital": "Health Care",
    "accounting": "Finance & Insurance",
    "banking": "Finance & Insurance",
    "finance": "Finance & Insurance",
    "insurance": "Finance & Insurance",
    "engineering": "Engineering & Manufacturing",
    "manufacturing": "Engineering & Manufacturing",
    "law": "Law",
    "legal": "Law",
    "marketing": "Marketing & Media",
    "media": "Marketing & Media",
    "publishing": "Marketing & Media",
    "business": "Business & Consulting",
    "consulting": "Business & Consulting",
    "recruitment": "Business & Consulting",
    "retail": "Retail & Sales",
    "sales": "Retail & Sales",
    "art": "Arts & Entertainment",
    "entertainment": "Arts & Entertainment",
    "biotech": "Science & Research",
    "pharmaceuticals": "Science & Research",
    "research": "Science & Research",
}

INDUSTRY_DEFAULT: str = "Other"

# Sentinels for unanswered optional questions
FILL_VALUES: dict[str, str] = {
    "US_State": "N/A",
    "Highest_Level_of_Education": "Non-Response",
    "Gender": "Non-Response",
    "Race": "Non-Response",
}


class PipelineConfig(BaseModel):
    """Static tables and thresholds for one pipeline run.

    Construction fails with :class:`ConfigurationError` when the tables
    disagree with each other, e.g. an allow-listed currency without a
    conversion rate. Tables are read-only once validated, so a config that
    passed the checks stays consistent.
    """

    model_config = ConfigDict(frozen=True, extra="forbid", validate_default=True)

    min_currency_sample: int = Field(MIN_CURRENCY_SAMPLE, description="responses a currency must exceed")
    min_keyword_frequency: int = Field(MIN_KEYWORD_FREQUENCY, description="occurrences a keyword must reach")
    salary_integer_limit: int = Field(SALARY_INTEGER_LIMIT)
    analysis_currencies: tuple[str, ...] = Field(default_factory=lambda: tuple(ANALYSIS_CURRENCIES))
    currency_variants: Mapping[str, str] = Field(default_factory=lambda: dict(CURRENCY_VARIANTS))
    conversion_rates: Mapping[str, float] = Field(default_factory=lambda: dict(CONVERSION_RATES))
    regions: tuple[str, ...] = Field(default_factory=lambda: tuple(REGIONS))
    currency_regions: Mapping[str, str] = Field(default_factory=lambda: dict(CURRENCY_REGIONS))
    non_us_u_countries: tuple[str, ...] = Field(default_factory=lambda: tuple(NON_US_U_COUNTRIES))
    extra_us_spellings: tuple[str, ...] = Field(default_factory=lambda: tuple(EXTRA_US_SPELLINGS))
    category_labels: tuple[str, ...] = Field(default_factory=lambda: tuple(CATEGORY_LABELS))
    keyword_categories: Mapping[str, str] = Field(default_factory=lambda: dict(KEYWORD_CATEGORIES))
    catch_all_category: str = Field(MISCELLANEOUS)
    industry_default: str = Field(INDUSTRY_DEFAULT)
    fill_values: Mapping[str, str] = Field(default_factory=lambda: dict(FILL_VALUES))

    @field_validator(
        "currency_variants",
        "conversion_rates",
        "currency_regions",
        "keyword_categories",
        "fill_values",
        mode="after",
    )
    @classmethod
    def _read_only(cls, value: Mapping[str, Any]) -> Mapping[str, Any]:
        return MappingProxyType(dict(value))

    @model_validator(mode="after")
    def _check_tables(self) -> "PipelineConfig":
        for name in ("min_currency_sample", "min_keyword_frequency"):
            if getattr(self, name) < 0:
                raise ConfigurationError(f"{name} must not be negative, got {getattr(self, name)}")
        if self.salary_integer_limit < 1:
            raise ConfigurationError(f"salary_integer_limit must be positive, got {self.salary_integer_limit}")

        missing_rates = [c for c in self.analysis_currencies if c not in self.conversion_rates]
        if missing_rates:
            raise ConfigurationError(f"No conversion rate for allow-listed currencies: {missing_rates}")

        missing_regions = [c for c in self.analysis_currencies if c not in self.currency_regions]
        if missing_regions:
            raise ConfigurationError(f"No region for allow-listed currencies: {missing_regions}")

        unknown_regions = sorted(set(self.currency_regions.values()) - set(self.regions))
        if unknown_regions:
            raise ConfigurationError(f"Currency regions reference undefined regions: {unknown_regions}")

        if self.catch_all_category not in self.category_labels:
            raise ConfigurationError(f"Catch-all category {self.catch_all_category!r} is not a declared label")

        unknown_labels = sorted(set(self.keyword_categories.values()) - set(self.category_labels))
        if unknown_labels:
            raise ConfigurationError(f"Keyword mapping references undefined labels: {unknown_labels}")

        # Collapsing must be idempotent: a canonical value maps to itself
        chained = {
            variant: target
            for variant, target in self.currency_variants.items()
            if self.currency_variants.get(target, target) != target
        }
        if chained:
            raise ConfigurationError(f"Currency variants map onto other variants: {chained}")

        unknown_fills = sorted(set(self.fill_values) - set(RAW_COLUMNS))
        if unknown_fills:
            raise ConfigurationError(f"Fill values reference unknown columns: {unknown_fills}")

        return self

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> "PipelineConfig":
        """Load overrides from a YAML or JSON file on top of the defaults."""
        path = Path(path)
        text = path.read_text(encoding="utf-8")
        if path.suffix.lower() == ".json":
            overrides: Any = json.loads(text)
        else:
            overrides = yaml.safe_load(text)

        if overrides is None:
            overrides = {}
        if not isinstance(overrides, dict):
            raise ConfigurationError(f"{path} must contain a mapping, got {type(overrides).__name__}")

        return cls(**overrides)
