"""
Batch processing of business record files.
Each file is analyzed with its own statement history; a failure in one
file is recorded and does not stop the batch.
"""

import glob
import json
import logging
import time
from concurrent.futures import ThreadPoolExecutor, as_completed
from pathlib import Path
from typing import Dict, List, Optional, Any, Callable
from dataclasses import dataclass
from datetime import datetime

from finhealth.config.settings import Settings
from finhealth.data.loader import BusinessDataLoader
from finhealth.data.statement_builder import StatementBuilder
from finhealth.reports.report_assembler import ReportAssembler
from finhealth.reports.excel_generator import ExcelReportGenerator
from finhealth.utils.logging_config import log_source


@dataclass
class ProcessingResult:
    """Result of processing a single file."""
    file_path: str
    success: bool
    processing_time: float
    output_file: Optional[str] = None
    error_message: Optional[str] = None
    periods: Optional[int] = None
    overall_score: Optional[float] = None
    risk_level: Optional[str] = None
    warning_count: Optional[int] = None


@dataclass
class BatchConfig:
    """Configuration for batch processing."""
    input_pattern: str = "*.xlsx"
    output_directory: Optional[str] = None
    max_workers: int = 4
    generate_summary: bool = True
    horizon_months: Optional[int] = None
    progress_callback: Optional[Callable[[int, int, str], None]] = None


class BatchProcessor:
    """Analyzes many business record files in parallel."""

    def __init__(self, settings: Settings):
        self.settings = settings
        self.logger = logging.getLogger(__name__)
        self.loader = BusinessDataLoader(settings)
        self.statement_builder = StatementBuilder(settings)
        self.report_assembler = ReportAssembler(settings)
        self.excel_generator = ExcelReportGenerator(settings)

    def process_directory(self, input_directory: str, config: BatchConfig) -> Dict[str, Any]:
        """
        Process all matching files in a directory.

        Args:
            input_directory: Directory containing business record files
            config: Batch processing configuration

        Returns:
            Dictionary containing processing results and summary
        """
        start_time = time.time()
        input_path = Path(input_directory)

        self.logger.info(f"Starting batch processing in {input_directory}")
        self.logger.info(f"Pattern: {config.input_pattern}, Max workers: {config.max_workers}")

        if not input_path.is_dir():
            raise ValueError(f"Input directory does not exist: {input_directory}")

        files_to_process = sorted(glob.glob(str(input_path / config.input_pattern)))

        if not files_to_process:
            self.logger.warning(f"No files found matching pattern '{config.input_pattern}' in {input_directory}")
            return self._create_empty_result()

        self.logger.info(f"Found {len(files_to_process)} files to process")

        output_dir = self._setup_output_directory(input_path, config.output_directory)
        results = self._process_files_parallel(files_to_process, output_dir, config)

        processing_time = time.time() - start_time
        summary = self._generate_processing_summary(results, processing_time, input_directory, output_dir)

        if config.generate_summary:
            summary['summary_file'] = self._save_batch_summary(summary, output_dir)

        self.logger.info(f"Batch processing completed in {processing_time:.2f}s")
        self.logger.info(f"Success rate: {summary['success_rate']:.1f}% "
                         f"({summary['successful_count']}/{summary['total_count']})")

        return summary

    def _setup_output_directory(self, base_path: Path, output_directory: Optional[str]) -> Path:
        if output_directory:
            output_dir = Path(output_directory)
        else:
            output_dir = base_path / "batch_output" / datetime.now().strftime("%Y%m%d_%H%M%S")

        output_dir.mkdir(parents=True, exist_ok=True)
        self.logger.info(f"Output directory: {output_dir}")
        return output_dir

    def _process_files_parallel(self, files: List[str], output_dir: Path,
                                config: BatchConfig) -> List[ProcessingResult]:
        """Process files in parallel using ThreadPoolExecutor."""
        results = []
        completed_count = 0
        total_count = len(files)

        with ThreadPoolExecutor(max_workers=max(1, config.max_workers)) as executor:
            future_to_file = {
                executor.submit(self._process_single_file, file_path,
                                self._generate_output_filename(file_path, output_dir), config): file_path
                for file_path in files
            }

            for future in as_completed(future_to_file):
                file_path = future_to_file[future]
                completed_count += 1
                result = future.result()
                results.append(result)

                if result.success:
                    self.logger.info(f"[{completed_count}/{total_count}] Successfully processed {Path(file_path).name}")
                else:
                    self.logger.error(f"[{completed_count}/{total_count}] Failed to process "
                                      f"{Path(file_path).name}: {result.error_message}")

                if config.progress_callback:
                    config.progress_callback(completed_count, total_count, Path(file_path).name)

        return results

    def _process_single_file(self, file_path: str, output_file: str, config: BatchConfig) -> ProcessingResult:
        """Process a single file with its own statement history."""
        start_time = time.time()

        try:
            with log_source(Path(file_path).name):
                records = self.loader.load(file_path)
                if not records:
                    raise ValueError("No business records found")

                history = self.statement_builder.build_history(records)
                report = self.report_assembler.build(history.latest, history, config.horizon_months)
                self.excel_generator.generate_report(report, output_file)

            return ProcessingResult(
                file_path=file_path,
                success=True,
                processing_time=time.time() - start_time,
                output_file=output_file,
                periods=len(history),
                overall_score=report.health_score.overall_score,
                risk_level=report.health_score.risk_level.value,
                warning_count=len(report.warnings)
            )

        except Exception as e:
            return ProcessingResult(
                file_path=file_path,
                success=False,
                processing_time=time.time() - start_time,
                error_message=str(e)
            )

    def _generate_output_filename(self, input_file: str, output_dir: Path) -> str:
        return str(output_dir / f"{Path(input_file).stem}_health_report.xlsx")

    def _generate_processing_summary(self, results: List[ProcessingResult], processing_time: float,
                                     input_source: str, output_dir: Path) -> Dict[str, Any]:
        total_count = len(results)
        successful_results = [r for r in results if r.success]
        failed_results = [r for r in results if not r.success]

        risk_distribution = {}
        for result in successful_results:
            risk_distribution[result.risk_level] = risk_distribution.get(result.risk_level, 0) + 1

        scores = [r.overall_score for r in successful_results]

        return {
            'timestamp': datetime.now().isoformat(),
            'input_source': input_source,
            'output_directory': str(output_dir),
            'total_count': total_count,
            'successful_count': len(successful_results),
            'failed_count': len(failed_results),
            'success_rate': (len(successful_results) / total_count * 100) if total_count > 0 else 0,
            'total_processing_time': processing_time,
            'results': results,
            'statistics': {
                'risk_distribution': risk_distribution,
                'scores': {
                    'min': min(scores) if scores else 0,
                    'max': max(scores) if scores else 0,
                    'average': sum(scores) / len(scores) if scores else 0
                }
            }
        }

    def _save_batch_summary(self, summary: Dict[str, Any], output_dir: Path) -> str:
        """Save batch processing summary to a JSON file."""
        summary_file = output_dir / "batch_processing_summary.json"

        serializable_summary = {key: value for key, value in summary.items() if key != 'results'}
        serializable_summary['successful_files'] = [
            {
                'file': Path(r.file_path).name,
                'output': Path(r.output_file).name if r.output_file else None,
                'periods': r.periods,
                'overall_score': r.overall_score,
                'risk_level': r.risk_level,
                'warning_count': r.warning_count,
                'processing_time': r.processing_time
            }
            for r in summary['results'] if r.success
        ]
        serializable_summary['failed_files'] = [
            {'file': Path(r.file_path).name, 'error': r.error_message}
            for r in summary['results'] if not r.success
        ]

        with open(summary_file, 'w', encoding='utf-8') as f:
            json.dump(serializable_summary, f, indent=2, ensure_ascii=False)

        self.logger.info(f"Batch summary saved to {summary_file}")
        return str(summary_file)

    def _create_empty_result(self) -> Dict[str, Any]:
        return {
            'timestamp': datetime.now().isoformat(),
            'total_count': 0,
            'successful_count': 0,
            'failed_count': 0,
            'success_rate': 0.0,
            'total_processing_time': 0.0,
            'results': [],
            'message': 'No files processed'
        }
