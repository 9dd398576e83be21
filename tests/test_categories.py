import polars as pl
import pytest

from salary_survey.categories import assign_categories, eligible_mapping, unmapped_keywords
from salary_survey.config import MISCELLANEOUS, RECORD_ID, PipelineConfig
from salary_survey.keywords import extract_keywords


def records(texts, ids=None):
    if ids is None:
        ids = list(range(len(texts)))
    return pl.DataFrame(
        {RECORD_ID: ids, "Industry": texts},
        schema={RECORD_ID: pl.UInt32, "Industry": pl.String},
    )


def categorize(texts, config, ids=None):
    df = records(texts, ids)
    return assign_categories(df, extract_keywords(df, "Industry"), config)


class TestEligibleMapping:
    def test_only_frequent_keywords(self):
        config = PipelineConfig(min_keyword_frequency=2)
        df = records(["Law", "Law", "Retail"])

        mapping = eligible_mapping(extract_keywords(df, "Industry"), config)

        assert mapping == {"law": "Law"}

    def test_unmapped_keywords(self):
        config = PipelineConfig(min_keyword_frequency=2)
        df = records(["Law", "Law", "Zoology", "Zoology", "Retail"])

        assert unmapped_keywords(extract_keywords(df, "Industry"), config) == ["zoology"]


class TestAssignCategories:
    @pytest.mark.parametrize(
        "industry, expected",
        [
            ("Computing or Tech", "Technology"),
            ("Accounting, Banking & Finance", "Finance & Insurance"),
            ("Education (Higher Education)", "Higher Education"),
            ("Education (Primary/Secondary)", "Primary & Secondary Education"),
            ("Government and Public Administration", "Government & Public Administration"),
            ("Health care", "Health Care"),
            ("Engineering or Manufacturing", "Engineering & Manufacturing"),
            ("Nonprofits", "Nonprofits"),
            ("Utilities & Telecommunications", MISCELLANEOUS),
        ],
    )
    def test_survey_industries(self, loose_config, industry, expected):
        assert categorize([industry], loose_config)["group"].to_list() == [expected]

    def test_first_keyword_wins(self, loose_config):
        out = categorize(["software engineering", "engineering software"], loose_config)

        assert out["group"].to_list() == ["Technology", "Engineering & Manufacturing"]

    def test_unmapped_keyword_skipped(self, loose_config):
        """An unmapped first keyword does not block a later mapped one."""
        assert categorize(["Hospitality and Sales"], loose_config)["group"].to_list() == ["Retail & Sales"]

    @pytest.mark.parametrize("industry", [None, "", "!!!", "Zoology"])
    def test_catch_all(self, loose_config, industry):
        assert categorize([industry], loose_config)["group"].to_list() == [MISCELLANEOUS]

    def test_below_threshold_is_catch_all(self):
        config = PipelineConfig(min_keyword_frequency=2)

        out = categorize(["Law", "Law", "Retail"], config)

        assert out["group"].to_list() == ["Law", "Law", MISCELLANEOUS]

    def test_rows_preserved(self, loose_config):
        texts = ["Health Care Law", "", "Retail Sales Marketing", None]

        out = categorize(texts, loose_config)

        assert out.height == len(texts)
        assert out["group"].null_count() == 0

    def test_joined_by_record_id(self, loose_config):
        out = categorize(["Retail", "Law", "Zoology"], loose_config, ids=[30, 10, 20])

        groups = dict(zip(out[RECORD_ID].to_list(), out["group"].to_list()))
        assert groups == {30: "Retail & Sales", 10: "Law", 20: MISCELLANEOUS}

    def test_custom_mapping(self):
        config = PipelineConfig(
            min_keyword_frequency=1,
            category_labels=["Outdoors", MISCELLANEOUS],
            keyword_categories={"forestry": "Outdoors", "agriculture": "Outdoors"},
        )

        out = categorize(["Agriculture or Forestry", "Computing or Tech"], config)

        assert out["group"].to_list() == ["Outdoors", MISCELLANEOUS]
