"""Normalization pipeline and analysis helpers for the Ask A Manager salary survey."""

from salary_survey.config import PipelineConfig
from salary_survey.errors import AnalysisError, ConfigurationError, SchemaError, SurveyError
from salary_survey.pipeline import DropReport, PipelineResult, run_pipeline

__version__ = "0.1.0"

__all__ = [
    "AnalysisError",
    "ConfigurationError",
    "DropReport",
    "PipelineConfig",
    "PipelineResult",
    "SchemaError",
    "SurveyError",
    "run_pipeline",
]
