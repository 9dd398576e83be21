import polars as pl
import pytest

from salary_survey.config import RECORD_ID
from salary_survey.keywords import extract_keywords, keyword_expr, tokenize

SAMPLES = [
    "Computing or Tech",
    "Accounting, Banking & Finance",
    "Education (Higher Education)",
    "Education (Primary/Secondary)",
    "Health-Care!! ",
    "   ",
    "123 & 456",
    "Non-profit\tsector\nwork",
    "health\x1ccare",
    "Caf\u00e9\u00a0bar",
]


class TestTokenize:
    def test_hyphen_joins_words(self):
        assert tokenize("Health-Care!! ") == ["healthcare"]

    def test_whitespace_splits_words(self):
        assert tokenize("Health Care") == ["health", "care"]

    def test_punctuation_removed(self):
        assert tokenize("Accounting, Banking & Finance") == ["accounting", "banking", "finance"]

    def test_slash_joins_words(self):
        assert tokenize("Education (Primary/Secondary)") == ["education", "primarysecondary"]

    def test_order_and_duplicates_kept(self):
        assert tokenize("Education (Higher Education)") == ["education", "higher", "education"]

    @pytest.mark.parametrize("text", ["health\x1ccare", "health\u00a0care", "health\u2028care"])
    def test_unusual_separators_removed(self, text):
        assert tokenize(text) == ["healthcare"]

    @pytest.mark.parametrize("text", [None, "", "   ", "123 & 456", "!!!"])
    def test_no_tokens(self, text):
        assert tokenize(text) == []

    def test_deterministic(self):
        for text in SAMPLES:
            assert tokenize(text) == tokenize(text)


class TestKeywordExpr:
    def test_matches_tokenize(self):
        df = pl.DataFrame({"text": SAMPLES})

        tokens = df.select(keyword_expr("text"))["text"].to_list()

        assert tokens == [tokenize(text) for text in SAMPLES]


class TestExtractKeywords:
    def _records(self, texts, ids=None):
        if ids is None:
            ids = list(range(len(texts)))
        return pl.DataFrame(
            {RECORD_ID: ids, "Industry": texts},
            schema={RECORD_ID: pl.UInt32, "Industry": pl.String},
        )

    def test_token_rows(self):
        index = extract_keywords(self._records(["Health Care", "Law", None, "!!"]), "Industry")

        assert index.tokens.columns == [RECORD_ID, "Position", "Keyword"]
        assert index.tokens.rows() == [(0, 0, "health"), (0, 1, "care"), (1, 0, "law")]

    def test_cardinality_differs_from_records(self):
        records = self._records(["Health Care Services", "", "Retail"])

        index = extract_keywords(records, "Industry")

        assert records.height == 3
        assert index.tokens.height == 4
        assert index.records_without_tokens.to_list() == [1]

    def test_frequencies(self):
        index = extract_keywords(
            self._records(["Health Care", "Health Insurance", "Health", "Law"]),
            "Industry",
        )

        assert index.frequencies.rows()[0] == ("health", 3)
        assert dict(index.frequencies.rows()) == {"health": 3, "care": 1, "insurance": 1, "law": 1}

    def test_above_threshold_is_inclusive(self):
        index = extract_keywords(self._records(["Law", "Law", "Retail"]), "Industry")

        assert index.above(2) == ["law"]
        assert index.above(1) == ["law", "retail"]
        assert index.above(3) == []

    def test_keyed_by_record_id(self):
        index = extract_keywords(self._records(["Retail", "Law Firm"], ids=[42, 7]), "Industry")

        assert index.for_record(42) == ["retail"]
        assert index.for_record(7) == ["law", "firm"]
        assert index.for_record(0) == []

    def test_repeat_extraction_identical(self):
        records = self._records(SAMPLES)

        first = extract_keywords(records, "Industry")
        second = extract_keywords(records, "Industry")

        assert first.tokens.equals(second.tokens)
        assert first.frequencies.equals(second.frequencies)
