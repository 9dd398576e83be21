import argparse
import sys

import polars as pl

from salary_survey.analysis import group_summary
from salary_survey.config import OUTPUT_COLUMNS, PipelineConfig
from salary_survey.errors import SurveyError
from salary_survey.logger import get_logger, set_level
from salary_survey.pipeline import run_pipeline


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="salary_survey",
        description="Clean the Ask A Manager salary survey into canonical currency, industry and region groups",
    )
    parser.add_argument("input", help="Path to the raw survey CSV")
    parser.add_argument("--config", help="YAML or JSON file overriding the default tables")
    parser.add_argument("--output", help="Write the cleaned table to this CSV path")
    parser.add_argument(
        "--summary-by",
        default="group",
        choices=OUTPUT_COLUMNS,
        help="Column to summarize translated salary by (default: group)",
    )
    parser.add_argument("--log-level", default="INFO", help="Logging level (default: INFO)")
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    set_level(args.log_level)
    log = get_logger("salary_survey.cli")

    try:
        config = PipelineConfig.from_file(args.config) if args.config else PipelineConfig()
        result = run_pipeline(args.input, config)
    except (SurveyError, FileNotFoundError) as e:
        log.error("%s", e)
        return 1

    for reason, count in result.drops.as_dict().items():
        log.info("%-22s %s", reason, f"{count:,}")

    if args.output:
        result.output.write_csv(args.output)
        log.info("Saved cleaned table to %s", args.output)

    with pl.Config(tbl_rows=-1, tbl_width_chars=120):
        print(group_summary(result.output, args.summary_by))
    return 0


if __name__ == "__main__":
    sys.exit(main())
