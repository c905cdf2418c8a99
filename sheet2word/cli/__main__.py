from __future__ import annotations

import argparse
import sys
from pathlib import Path

from dotenv import load_dotenv

from sheet2word.config.loader import ConfigError, ConverterConfig, load_config
from sheet2word.logging.error_log import ErrorLogBuffer
from sheet2word.logging.init import log_summary, set_debug, setup_logging
from sheet2word.models.export import ExportMode, ExportOptions, ExportResult
from sheet2word.render.document import document_title
from sheet2word.services.delivery import DirectorySink
from sheet2word.services.exporter import (
    BatchExporter,
    ExportError,
    ExportFailedError,
    plan_documents,
)
from sheet2word.services.summary import render_summary_line
from sheet2word.services.workspace import Workspace

"""CLI entrypoint.

Flow:
- Load .env and config (YAML, optional)
- Load the given spreadsheets / folders into a workspace (unreadable files
  are skipped and logged)
- Export the current file, all files, or all files as one zip
- Print a SUMMARY line and exit with 0 (all good), 2 (some input files were
  skipped) or 1 (nothing exported)
"""

EXIT_SUCCESS_ALL = 0
EXIT_PARTIAL_FAILURE = 2
EXIT_FATAL = 1

PREVIEW_ROWS = 10


def _parse_args(argv: list[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(prog="sheet2word", description="Excel -> Word document converter")
    p.add_argument("paths", nargs="*", type=Path, help="Excel files (.xlsx/.xls) or folders")
    p.add_argument(
        "--mode",
        choices=[m.value for m in ExportMode],
        default=ExportMode.ALL.value,
        help="current: selected file only / all: every file / zip: every file in one archive",
    )
    p.add_argument("--select", type=int, default=None, help="Index of the current file (0-based)")
    p.add_argument(
        "--transpose",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Swap rows and columns (default from config)",
    )
    p.add_argument(
        "--split-columns",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="One document per column (first column + that column)",
    )
    p.add_argument("--output", type=Path, default=None, help="Output directory")
    p.add_argument("--config", type=Path, default=None, help="YAML config file")
    p.add_argument("--preview", action="store_true", help="Print the converted tables then exit")
    p.add_argument("--debug", action="store_true", help="Enable debug logging")
    return p.parse_args(argv)


def _options(args: argparse.Namespace, cfg: ConverterConfig) -> ExportOptions:
    return ExportOptions(
        transpose=cfg.transpose if args.transpose is None else args.transpose,
        split_columns=cfg.split_columns if args.split_columns is None else args.split_columns,
    )


def _preview(workspace: Workspace, options: ExportOptions, cfg: ConverterConfig) -> int:
    import pandas as pd

    table = workspace.selected
    if table is None:
        print("preview: no file loaded")
        return EXIT_FATAL
    for plan in plan_documents(table, options, fallback_name=cfg.default_name, title=cfg.title):
        print(f"DOCUMENT: {plan.file_name}")
        print(f"  title: {document_title(plan.title, plan.title_suffix)}")
        rows = plan.grid.to_lists()
        if not rows:
            print("  (empty)")
            continue
        df = pd.DataFrame(rows[:PREVIEW_ROWS])
        print(df.to_string(index=False, header=False))
        if len(rows) > PREVIEW_ROWS:
            print(f"  ... {len(rows) - PREVIEW_ROWS} more rows")
    return EXIT_SUCCESS_ALL


def main(argv: list[str] | None = None) -> int:
    logger = setup_logging()

    # None のときのみ sys.argv を読む (テストから [] を渡せるように)
    if argv is None:
        argv = sys.argv[1:]
    args = _parse_args(argv)
    load_dotenv(dotenv_path=Path(".env"), override=False)

    if args.debug:
        set_debug(logger)
        logger.debug("debug mode enabled")

    try:
        cfg = load_config(args.config, required=args.config is not None)
    except ConfigError as e:
        logger.error(f"config: {e}")
        return EXIT_FATAL

    error_log = ErrorLogBuffer()
    workspace = Workspace(error_log=error_log)
    upload = workspace.add_files(args.paths)
    failed = len(upload.failed)
    logger.info(f"Loaded {len(workspace)} file(s), skipped {failed}")

    if args.select is not None:
        try:
            workspace.select(args.select)
        except IndexError as e:
            logger.error(f"select: {e}")
            error_log.flush()
            return EXIT_FATAL

    options = _options(args, cfg)
    if args.preview:
        error_log.flush()
        return _preview(workspace, options, cfg)

    output_dir = args.output if args.output is not None else Path(cfg.output_directory)
    exporter = BatchExporter(
        workspace,
        DirectorySink(output_dir),
        title=cfg.title,
        archive_name=cfg.archive_name,
        archive_folder=cfg.archive_folder,
        default_name=cfg.default_name,
        delay_seconds=cfg.delivery_delay_seconds,
        error_log=error_log,
    )

    mode = ExportMode(args.mode)
    result: ExportResult | None = None
    code = EXIT_SUCCESS_ALL
    try:
        result = exporter.export(mode, options)
    except ExportFailedError:
        # already logged by the exporter
        code = EXIT_FATAL
    except ExportError as e:
        logger.error(str(e))
        code = EXIT_FATAL
    else:
        plural = "s" if result.artifact_count != 1 else ""
        where = output_dir / result.archive_name if result.archive_name else output_dir
        logger.info(f"Successfully created {result.artifact_count} Word document{plural} in {where}")
        if failed:
            code = EXIT_PARTIAL_FAILURE

    log_path = error_log.flush()
    if log_path is not None:
        logger.info(f"error log: {log_path}")

    # SUMMARY プレフィックスは log_summary 側で付与される
    log_summary(render_summary_line(len(workspace), failed, result)[len("SUMMARY "):])
    return code


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
