"""Exceptions raised by the survey pipeline.

Bad input rows are never raised: they are dropped and counted by the stage
that finds them. Exceptions are reserved for defects in the static
configuration, an input table with the wrong shape, or analysis calls that
cannot run on the data they were given.
"""


class SurveyError(Exception):
    """Base class for every error raised by ``salary_survey``."""


class ConfigurationError(SurveyError):
    """A static table is inconsistent (missing rate, region, or label)."""


class SchemaError(SurveyError):
    """The raw survey table does not have the expected columns."""


class AnalysisError(SurveyError):
    """A statistical routine cannot run on the given groups."""
