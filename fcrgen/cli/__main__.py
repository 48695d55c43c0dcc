from __future__ import annotations

import argparse
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import date
from pathlib import Path
from typing import Any

import psycopg2

from fcrgen.config.loader import DEFAULT_CONFIG_PATH, ConfigError, default_config, load_config
from fcrgen.csvio.reader import ParseError, delimiter_label, parse_csv
from fcrgen.csvio.writer import write_po_csv, write_tracking_csv
from fcrgen.db.connection import db_cursor, load_env_file
from fcrgen.db.project_store import ProjectStore, ProjectStoreError
from fcrgen.logging.event_log import LOGS_DIR
from fcrgen.logging.init import log_summary, setup_logging
from fcrgen.models.config_models import AppConfig, FcrSettings, TemplateVariant
from fcrgen.models.copy_state import CopyTracker
from fcrgen.models.processing_result import ProcessingResult
from fcrgen.services.export import write_report
from fcrgen.services.orchestrator import ProcessingContext, run_fcr_file, run_po_files
from fcrgen.services.summary import render_summary_line

"""CLI entrypoint.

    fcrgen [--config PATH] [--debug] fcr INPUT [--variant V] [--csv OUT] [--report OUT]
                                          [--project NAME] [--year YEAR] [--save]
    fcrgen po PO_CSV RECYCLED_CSV [--out OUT]
    fcrgen inspect INPUT [--rows N]
    fcrgen projects list [--all] | show ID | archive ID [--restore] | delete ID
                    | export ID [--out OUT] | copy ID BOX... [--undo]

Exit codes: 0 success, 1 fatal (config, parse, header, export or store error).
Processing runs end with a SUMMARY line and write their diagnostics to logs/.
"""

EXIT_SUCCESS_ALL = 0
EXIT_FATAL = 1


def _parse_args(argv: list[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(prog="fcrgen", description="FCR / PO document generator")
    p.add_argument("--config", type=Path, default=None, help="Config YAML (default: config/fcr.yml)")
    p.add_argument("--debug", action="store_true", help="Enable debug logging")
    sub = p.add_subparsers(dest="command", required=True)

    fcr = sub.add_parser("fcr", help="Format an FCR CSV into boxes")
    fcr.add_argument("input", type=Path)
    fcr.add_argument("--variant", choices=[v.value for v in TemplateVariant], default=None)
    fcr.add_argument("--csv", type=Path, default=None, help="Write the tracking CSV here")
    fcr.add_argument("--report", type=Path, default=None, help="Write the HTML/DOC report here")
    fcr.add_argument("--project", default=None, help="Project name (default: input file stem)")
    fcr.add_argument("--year", type=int, default=None, help="Project year (default: current year)")
    fcr.add_argument("--save", action="store_true", help="Save the boxes as a project")

    po = sub.add_parser("po", help="Aggregate PO rows per invoice")
    po.add_argument("po_csv", type=Path)
    po.add_argument("recycled_csv", type=Path)
    po.add_argument("--out", type=Path, default=None, help="Output CSV (default: output dir)")

    ins = sub.add_parser("inspect", help="Print delimiter, header and first rows")
    ins.add_argument("input", type=Path)
    ins.add_argument("--rows", type=int, default=3)

    projects = sub.add_parser("projects", help="Manage saved projects")
    psub = projects.add_subparsers(dest="action", required=True)
    plist = psub.add_parser("list")
    plist.add_argument("--all", action="store_true", help="Include archived projects")
    for name in ("show", "delete"):
        psub.add_parser(name).add_argument("id", type=int)
    parch = psub.add_parser("archive")
    parch.add_argument("id", type=int)
    parch.add_argument("--restore", action="store_true")
    pexp = psub.add_parser("export")
    pexp.add_argument("id", type=int)
    pexp.add_argument("--out", type=Path, default=None)
    pcopy = psub.add_parser("copy")
    pcopy.add_argument("id", type=int)
    pcopy.add_argument("boxes", nargs="+")
    pcopy.add_argument("--undo", action="store_true")
    return p.parse_args(argv)


def _load_app_config(path: Path | None, logger: Any) -> AppConfig:
    if path is None:
        if not DEFAULT_CONFIG_PATH.exists():
            logger.debug("no config file, using defaults")
            return default_config()
        path = DEFAULT_CONFIG_PATH
    return load_config(path)


@contextmanager
def _project_store(cfg: AppConfig) -> Iterator[ProjectStore]:
    with db_cursor(cfg.database) as cur:
        store = ProjectStore(cur)
        store.ensure_schema()
        yield store


def _finish_run(ctx: ProcessingContext, result: ProcessingResult, logger: Any) -> None:
    try:
        path = ctx.log.flush(LOGS_DIR)
        logger.debug(f"diagnostics written to {path}")
    except OSError as e:
        logger.warning(f"failed to write diagnostics log: {e}")
    summary_line = render_summary_line(result)
    log_summary(summary_line[len("SUMMARY "):])


def _cmd_fcr(args: argparse.Namespace, cfg: AppConfig, logger: Any) -> int:
    settings = FcrSettings(TemplateVariant(args.variant)) if args.variant else cfg.fcr
    ctx = ProcessingContext()
    result = run_fcr_file(ctx, args.input, settings, delimiters=cfg.delimiters)
    code = EXIT_SUCCESS_ALL if result.success else EXIT_FATAL

    if result.success:
        name = args.project or args.input.stem
        year = args.year or date.today().year
        copied = ctx.copy_tracker.to_dict()
        try:
            if args.csv is not None:
                out = write_tracking_csv(ctx.records, copied, args.csv)
                ctx.log.success(f"FCR data exported to CSV: {out}")
            if args.report is not None:
                out = write_report(args.report, ctx.records, copied, name, year)
                ctx.log.success(f"FCR data exported to DOC file: {out}")
            if args.save:
                with _project_store(cfg) as store:
                    project = store.create(name, year, ctx.records, copied)
                ctx.log.success(f"Project saved: {project.name} {project.year} (id={project.id})")
        except OSError as e:
            ctx.log.error(f"Export failed: {e}")
            code = EXIT_FATAL
        except (ProjectStoreError, psycopg2.Error) as e:
            ctx.log.error(f"Failed to save project: {e}")
            code = EXIT_FATAL

    _finish_run(ctx, result, logger)
    return code


def _cmd_po(args: argparse.Namespace, cfg: AppConfig, logger: Any) -> int:
    ctx = ProcessingContext()
    result = run_po_files(ctx, args.po_csv, args.recycled_csv, cfg.po, delimiters=cfg.delimiters)
    code = EXIT_SUCCESS_ALL if result.success else EXIT_FATAL

    if result.success:
        target = args.out
        if target is None:
            target = Path(cfg.output_directory)
            target.mkdir(parents=True, exist_ok=True)
        try:
            out = write_po_csv(ctx.records, target)
            ctx.log.success(f"PO output written: {out}")
        except OSError as e:
            ctx.log.error(f"Export failed: {e}")
            code = EXIT_FATAL

    _finish_run(ctx, result, logger)
    return code


def _cmd_inspect(args: argparse.Namespace, cfg: AppConfig) -> int:
    try:
        dataset = parse_csv(args.input, cfg.delimiters)
    except ParseError as e:
        print(f"inspect: {e}")
        return EXIT_FATAL
    print(f"FILE: {dataset.source_name}")
    print(f"  delimiter='{delimiter_label(dataset.detected_delimiter)}' rows={len(dataset)}")
    print(f"  header={dataset.header_fields}")
    for row in dataset.rows[: max(args.rows, 0)]:
        print(f"  row={row}")
    for warning in dataset.warnings:
        print(f"  warning={warning}")
    return EXIT_SUCCESS_ALL


def _cmd_projects(args: argparse.Namespace, cfg: AppConfig, logger: Any) -> int:
    with _project_store(cfg) as store:
        if args.action == "list":
            for s in store.list_projects(include_archived=args.all):
                flag = " [archived]" if s.is_archived else ""
                print(f"{s.id}\t{s.name}\t{s.year}{flag}")
        elif args.action == "show":
            project = store.get(args.id)
            print(f"{project.id}\t{project.name}\t{project.year}")
            print(
                f"  boxes={project.total_boxes} copied={project.copied_count} "
                f"completion={project.completion_percentage}% exports={project.export_count}"
            )
        elif args.action == "archive":
            project = store.archive(args.id, archived=not args.restore)
            logger.info(f"project {project.id} {'archived' if project.is_archived else 'restored'}")
        elif args.action == "delete":
            store.delete(args.id)
            logger.info(f"project {args.id} deleted")
        elif args.action == "export":
            project = store.get(args.id)
            target = args.out if args.out is not None else Path(cfg.output_directory)
            if target.suffix == "":
                target.mkdir(parents=True, exist_ok=True)
            out = write_report(
                target, project.processed_data, project.copied_boxes, project.name, project.year
            )
            store.record_export(project.id)
            logger.info(f"project {project.id} exported to {out}")
        elif args.action == "copy":
            project = store.get(args.id)
            tracker = CopyTracker(project.copied_boxes)
            known = {str(r.get("id")) for r in project.processed_data}
            for box in args.boxes:
                if box not in known:
                    logger.error(f"unknown box: {box}")
                    return EXIT_FATAL
                if args.undo:
                    tracker.undo(box)
                else:
                    tracker.mark_copied(box)
            project = store.update_copy_status(project.id, tracker.to_dict())
            logger.info(
                f"project {project.id} copied={project.copied_count}/{project.total_boxes} "
                f"({project.completion_percentage}%)"
            )
    return EXIT_SUCCESS_ALL


def main(argv: list[str] | None = None) -> int:
    logger = setup_logging()

    # argv=[] means "no arguments", not "read sys.argv"
    if argv is None:
        argv = sys.argv[1:]
    args = _parse_args(argv)
    load_env_file(Path(".env"), override=True)

    if args.debug:
        setup_logging(debug=True)
        logger.debug("debug mode enabled")

    try:
        cfg = _load_app_config(args.config, logger)
    except ConfigError as e:
        logger.error(f"config: {e}")
        return EXIT_FATAL

    if args.command == "fcr":
        return _cmd_fcr(args, cfg, logger)
    if args.command == "po":
        return _cmd_po(args, cfg, logger)
    if args.command == "inspect":
        return _cmd_inspect(args, cfg)
    try:
        return _cmd_projects(args, cfg, logger)
    except (ProjectStoreError, psycopg2.Error) as e:
        logger.error(f"projects: {e}")
        return EXIT_FATAL
    except OSError as e:
        logger.error(f"projects: {e}")
        return EXIT_FATAL


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
