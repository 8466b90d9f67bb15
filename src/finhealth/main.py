"""
Command line entry point for the financial health engine.
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from finhealth.config.settings import Settings
from finhealth.data.loader import BusinessDataLoader
from finhealth.data.statement_builder import StatementBuilder
from finhealth.reports.report_assembler import FinancialReport, ReportAssembler
from finhealth.reports.excel_generator import ExcelReportGenerator
from finhealth.batch.batch_processor import BatchProcessor, BatchConfig
from finhealth.utils.logging_config import log_source, setup_logging


def analyze_file(settings: Settings, input_file: str, output_file: Optional[str] = None,
                 horizon_months: Optional[int] = None) -> FinancialReport:
    """
    Analyze one business's records and write the Excel report.

    Args:
        settings: Application settings
        input_file: Path to business records, one row per period
        output_file: Path to the report workbook (default from settings)
        horizon_months: Forecast horizon

    Returns:
        The assembled report for the most recent period
    """
    logger = logging.getLogger(__name__)
    output_file = output_file or settings.default_output_file

    records = BusinessDataLoader(settings).load(input_file)
    if not records:
        raise ValueError(f"No business records found in {input_file}")

    history = StatementBuilder(settings).build_history(records)
    report = ReportAssembler(settings).build(history.latest, history, horizon_months)

    ExcelReportGenerator(settings).generate_report(report, output_file)

    score = report.health_score
    logger.info(f"{input_file}: score {score.overall_score:.1f} ({score.risk_level.value} risk), "
                f"report written to {output_file}")
    return report


def _process_batch_mode(settings: Settings, batch_directory: str, batch_pattern: str,
                        max_workers: int, output_directory: Optional[str],
                        horizon_months: Optional[int]) -> None:
    """Process every matching file in a directory."""
    logger = logging.getLogger(__name__)

    config = BatchConfig(
        input_pattern=batch_pattern,
        output_directory=output_directory,
        max_workers=max_workers,
        horizon_months=horizon_months,
        progress_callback=_progress_callback
    )

    results = BatchProcessor(settings).process_directory(batch_directory, config)

    logger.info("Batch processing completed:")
    logger.info(f"  Total files: {results['total_count']}")
    logger.info(f"  Successful: {results['successful_count']}")
    logger.info(f"  Failed: {results['failed_count']}")
    logger.info(f"  Success rate: {results['success_rate']:.1f}%")

    if results.get('summary_file'):
        logger.info(f"  Summary report: {results['summary_file']}")


def _progress_callback(completed: int, total: int, current_file: str) -> None:
    logger = logging.getLogger(__name__)
    percentage = (completed / total) * 100
    logger.info(f"Progress: {percentage:.1f}% ({completed}/{total}) - {current_file}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="finhealth",
        description="Financial health scoring, cash flow analysis and forecasting for small businesses",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Single business
  finhealth -i records.xlsx -o report.xlsx

  # Every workbook in a directory
  finhealth -b data/raw/ -p "*.xlsx" -w 8
        """
    )

    input_group = parser.add_mutually_exclusive_group(required=True)
    input_group.add_argument("-i", "--input", help="Business records file (.xlsx, .csv, .yaml)")
    input_group.add_argument("-b", "--batch", help="Input directory for batch processing")

    parser.add_argument("-o", "--output",
                        help="Output file path (single mode) or output directory (batch mode)")
    parser.add_argument("-p", "--pattern", default="*.xlsx",
                        help="File pattern for batch processing (default: *.xlsx)")
    parser.add_argument("-w", "--workers", type=int, default=4,
                        help="Number of parallel workers for batch processing (default: 4)")
    parser.add_argument("--horizon", type=int, default=None,
                        help="Forecast horizon in months (default: 12)")
    parser.add_argument("--log-level", default=None,
                        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'],
                        help="Logging level (default: LOG_LEVEL env or INFO)")
    parser.add_argument("--log-file", default=None, help="Also write logs to this file")

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Run the command line interface."""
    args = build_parser().parse_args(argv)
    logger = logging.getLogger(__name__)

    try:
        settings = Settings()
        setup_logging(args.log_level or settings.log_level, args.log_file)
        logger.info("Starting financial health analysis")

        if args.batch:
            _process_batch_mode(settings, args.batch, args.pattern, args.workers,
                                args.output, args.horizon)
        else:
            with log_source(Path(args.input).name):
                analyze_file(settings, args.input, args.output, args.horizon)

        logger.info("Processing completed successfully")
        return 0

    except KeyboardInterrupt:
        logger.info("Processing interrupted by user")
        return 130
    except Exception as e:
        logger.error(f"Error during processing: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
