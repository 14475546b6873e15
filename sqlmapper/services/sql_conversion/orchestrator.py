"""ConversionOrchestrator – batch driver for converting directories of DDL scripts.

Responsibilities
----------------
1. Locate input *.sql files (a single file or a directory tree).
2. Prepare the output directory (`converted/<timestamp>` unless overridden).
3. For each file, in order:
     • read it and resolve the source dialect (given, or sniffed per file)
     • run it through the conversion driver
     • write `<basename>_<target>.sql` and collect stats and review items.
4. Produce `conversion_summary.json` and the manual-review log.

All conversion logic lives in the driver and the parser/generator layer; the
orchestrator only handles I/O, logging and aggregation. A file that fails is
recorded in the summary and the run continues with the next one.
"""
import json
import os
from pathlib import Path
from typing import Dict, List, Optional

from sqlmapper.config import config
from sqlmapper.utils.file_utils import (
    create_processing_stats,
    find_sql_files,
    make_relative_path,
    output_file_name,
    read_file_content,
    timestamped_output_dir,
    write_file_content,
)
from sqlmapper.utils.logger import setup_logger
from .dialects import normalize_dialect
from .driver import convert_with_report
from .errors import EmptyInputError, SQLMapperError
from .utils.dialect_utils import detect_source_dialect
from .utils.manual_review_logger import ManualReviewLogger


def create_result_dictionary(status: str, message: str, stats: dict, errors: list, output_dir: Optional[str]) -> dict:
    """Helper to create a consistent result dictionary."""
    return {"status": status, "message": message, "stats": stats, "errors": errors, "output_dir": output_dir}


class ConversionOrchestrator:

    def __init__(self, source_dialect: Optional[str], target_dialect: str, *,
                 output_dir: Optional[str] = None, validate: Optional[bool] = None, **generator_options):
        self.logger = setup_logger("ConversionOrchestrator")
        self.source_dialect = normalize_dialect(source_dialect) if source_dialect else None
        self.target_dialect = normalize_dialect(target_dialect)
        self.output_dir = output_dir
        self.validate = validate
        self.generator_options = generator_options
        self.manual_review_logger: Optional[ManualReviewLogger] = None
        self.logger.info(f"Starting SQL conversion: {self.source_dialect or 'auto'} -> {self.target_dialect}")

    def convert(self, input_path: str, output_dir_override: Optional[str] = None) -> Dict:
        """
        Convert every SQL file under *input_path*.

        Returns:
            Result dictionary (``status``, ``message``, ``stats``, ``errors``,
            ``output_dir``) extended with ``files`` and ``summary_file``.
        """
        source_files = find_sql_files(input_path)
        if not source_files:
            self.logger.warning(f"No SQL files found in: {input_path}")
            return create_result_dictionary("error", f"No SQL files found in {input_path}",
                                            create_processing_stats(), [], None)

        output_dir = self._setup_output_dir(output_dir_override)
        self.manual_review_logger = ManualReviewLogger(output_dir=output_dir, logger=self.logger)
        base_dir = input_path if os.path.isdir(input_path) else os.path.dirname(input_path)

        self.logger.info(f"Processing {len(source_files)} SQL files from: {input_path}")
        self.logger.info(f"Output directory: {output_dir}")

        stats = create_processing_stats()
        stats['total_files'] = len(source_files)
        file_results: List[Dict] = []
        errors: List[Dict] = []

        for i, file_path in enumerate(source_files, 1):
            self.logger.info(f"[{i}/{len(source_files)}] Processing: {os.path.basename(file_path)}")
            file_result = self._process_file(file_path, base_dir, output_dir, stats)
            file_results.append(file_result)
            if file_result["status"] == "error":
                errors.append({"file": file_result["file"], **file_result.get("error", {})})
            self._log_file_result(file_result)

        return self._create_conversion_summary(file_results, stats, errors, output_dir)

    # ========================================
    # FILE PROCESSING
    # ========================================

    def _process_file(self, file_path: str, base_dir: str, output_dir: str, stats: Dict) -> Dict:
        relative = make_relative_path(file_path, base_dir)
        result = {"file": relative, "status": "error", "source_dialect": self.source_dialect, "output_file": None}
        try:
            content = read_file_content(file_path)
            source = self.source_dialect or detect_source_dialect(content)
            if source is None:
                stats['files_failed'] += 1
                result["message"] = "Could not detect the source dialect; pass it explicitly"
                result["error"] = {"kind": "UnknownDialect", "message": result["message"]}
                return result
            result["source_dialect"] = source

            report = convert_with_report(content, source, self.target_dialect, validate=self.validate,
                                         label=relative, **self.generator_options)
        except EmptyInputError as e:
            stats['files_skipped'] += 1
            result.update(status="skipped", message=e.message)
            return result
        except SQLMapperError as e:
            stats['files_failed'] += 1
            result.update(message=str(e), error=e.to_dict())
            return result
        except (OSError, UnicodeDecodeError) as e:
            stats['files_failed'] += 1
            result.update(message=f"Could not read file: {e}", error={"kind": "IOError", "message": str(e)})
            return result

        target_dir = os.path.join(output_dir, os.path.dirname(relative))
        output_path = write_file_content(os.path.join(target_dir, output_file_name(file_path, self.target_dialect)),
                                         report.sql)
        self.manual_review_logger.extend(report.review_items, file_path=relative)

        stats['files_successful'] += 1
        stats['review_items'] += len(report.review_items)
        stats['validation_warnings'] += len(report.warnings)
        result.update(
            status="success_with_warnings" if report.review_items or report.warnings else "success",
            message=f"Converted {relative}",
            output_file=output_path,
            review_items=len(report.review_items),
            warnings=report.warnings,
        )
        return result

    # ========================================
    # HELPER METHODS
    # ========================================

    def _setup_output_dir(self, output_dir_override: Optional[str] = None) -> str:
        """Creates the output directory for converted files."""
        final_output_dir = output_dir_override or self.output_dir
        if final_output_dir:
            os.makedirs(final_output_dir, exist_ok=True)
            return str(final_output_dir)
        base_dir = config.get('base_dirs', {}).get('output', 'converted')
        try:
            return timestamped_output_dir(base_dir)
        except OSError as e:
            self.logger.error("Failed to create output directory under '%s': %s", base_dir, e, exc_info=True)
            raise

    def _log_file_result(self, file_result: Dict):
        """Logs the outcome of a single file's conversion."""
        status = file_result.get('status', 'unknown')
        filename = file_result.get('file', 'Unknown file')

        if status == 'success':
            self.logger.info(f"Successfully processed: {filename}")
        elif status == 'success_with_warnings':
            self.logger.warning(f"Processed with {file_result.get('review_items', 0)} review item(s): {filename}")
        elif status == 'skipped':
            self.logger.info(f"Skipped: {filename} - {file_result.get('message', 'Skipped')}")
        else:
            self.logger.error(f"Failed to process: {filename} - {file_result.get('message', 'Unknown error')}")

    def _create_conversion_summary(self, file_results: List[Dict], stats: Dict, errors: List[Dict],
                                   output_dir: str) -> Dict:
        """
        Create the final summary dictionary for the entire conversion run.
        """
        self.logger.info("=" * 50)
        self.logger.info("SQL CONVERSION SUMMARY")
        self.logger.info("=" * 50)
        self.logger.info(f"Total files processed: {stats['total_files']}")
        self.logger.info(f"  - Successful: {stats['files_successful']}")
        self.logger.info(f"  - Failed: {stats['files_failed']}")
        self.logger.info(f"  - Skipped: {stats['files_skipped']}")
        self.logger.info(f"Items requiring manual review: {stats['review_items']}")

        summary_payload = {
            "source_dialect": self.source_dialect,
            "target_dialect": self.target_dialect,
            "overall_statistics": stats,
            "files": file_results,
            "output_directory": output_dir,
        }
        summary_file = self._write_conversion_summary_to_file(summary_payload, output_dir)
        review_file = self.manual_review_logger.write_manual_review_log()

        if stats['files_failed'] == 0:
            status = "success"
        elif stats['files_successful'] == 0:
            status = "error"
        else:
            status = "partial"
        message = (f"Conversion finished for {stats['total_files']} files: {stats['files_successful']} converted, "
                   f"{stats['files_failed']} failed, {stats['files_skipped']} skipped.")

        result = create_result_dictionary(status, message, stats, errors, output_dir)
        result["files"] = file_results
        result["summary_file"] = summary_file
        result["manual_review_file"] = review_file
        return result

    def _write_conversion_summary_to_file(self, summary_data_dict: Dict, output_dir: str) -> str:
        """
        Writes the conversion summary to a JSON file in the output directory.
        """
        summary_file_path = os.path.join(output_dir, 'conversion_summary.json')

        def json_default(o):
            if isinstance(o, Path):
                return str(o)
            return f"<<non-serializable: {type(o).__name__}>>"

        with open(summary_file_path, 'w', encoding='utf-8') as f:
            json.dump(summary_data_dict, f, indent=4, default=json_default)
        self.logger.info(f"Conversion summary written to: {summary_file_path}")
        return summary_file_path
