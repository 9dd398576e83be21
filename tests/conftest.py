import matplotlib

matplotlib.use("Agg")

import polars as pl
import pytest

from salary_survey.config import RAW_COLUMNS, PipelineConfig

DEFAULT_ANSWERS = {
    "Timestamp": "4/27/2021 11:02:10",
    "Age_Range": "25-34",
    "Industry": "Computing or Tech",
    "Title": "Software Engineer",
    "Annual_Salary": "50,000",
    "Currency": "USD",
    "Country_of_Work": "United States",
    "US_State": "Ohio",
    "City": "Columbus",
    "Overall_Work_Experience": "5-7 years",
    "Work_Experience_in_Field": "2 - 4 years",
    "Highest_Level_of_Education": "College degree",
    "Gender": "Woman",
    "Race": "White",
}


def survey_row(**answers):
    """One raw survey response; unspecified questions get plausible answers."""
    row = {column: None for column in RAW_COLUMNS}
    row.update(DEFAULT_ANSWERS)
    row.update(answers)
    return row


def survey_frame(rows):
    return pl.DataFrame(rows, schema={column: pl.String for column in RAW_COLUMNS})


@pytest.fixture
def loose_config():
    """Thresholds low enough for a handful of rows."""
    return PipelineConfig(min_currency_sample=0, min_keyword_frequency=1)
