from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from ..csvio.headers import (
    FCR_REQUIRED_COLUMNS,
    PO_HEADERS,
    RECYCLED_HEADERS,
    HeaderMismatchError,
    ValidationMode,
    validate_headers,
)
from ..csvio.reader import ParseError, Source, parse_csv
from ..logging.event_log import DiagnosticsLog
from ..models.config_models import DEFAULT_DELIMITERS, FcrSettings, PoSettings
from ..models.copy_state import CopyProgress, CopyTracker
from ..models.dataset import ParsedDataset
from ..models.processing_result import ProcessingMode, ProcessingResult, TypeCounts
from .aggregator import aggregate_invoices, build_recycled_set, count_types
from .formatter import format_fcr_row, format_invoice_record
from .progress import RowProgress

"""Processing orchestration.

All run state lives in an explicit ProcessingContext:

- load_fcr / load_po / load_recycled parse and validate one input file and
  keep the dataset on the context (fatal errors are logged and re-raised)
- process_fcr / process_po run one transformation over the loaded datasets;
  any fatal error ends the run with success=False and no records, and the
  records of the previous run are discarded
- run_fcr_file / run_po_files do both in one call
- mark_copied / undo_copy / undo_last_copy / reset_copies drive the copy
  tracker of the current FCR records
"""

__all__ = [
    "ProcessingError",
    "ProcessingContext",
    "load_fcr",
    "load_po",
    "load_recycled",
    "process_fcr",
    "process_po",
    "run_fcr_file",
    "run_po_files",
    "mark_copied",
    "undo_copy",
    "undo_last_copy",
    "reset_copies",
    "copy_progress",
]

logger = logging.getLogger(__name__)


class ProcessingError(Exception):
    """Raised when a run is started without its required inputs."""
    pass


@dataclass
class ProcessingContext:
    """State shared by the loads and runs of one session."""
    log: DiagnosticsLog = field(default_factory=DiagnosticsLog)
    fcr_dataset: ParsedDataset | None = None
    po_dataset: ParsedDataset | None = None
    recycled_dataset: ParsedDataset | None = None
    records: list[dict[str, Any]] = field(default_factory=list)
    copy_tracker: CopyTracker = field(default_factory=CopyTracker)

    @property
    def record_ids(self) -> list[str]:
        return [r["id"] for r in self.records if "id" in r]


def _source_name(source: Source, name: str | None) -> str:
    if name:
        return name
    return source.name if isinstance(source, Path) else "input.csv"


def _load(
    ctx: ProcessingContext,
    source: Source,
    name: str | None,
    expected: Sequence[str],
    mode: ValidationMode,
    delimiters: Sequence[str],
) -> ParsedDataset:
    name = _source_name(source, name)
    ctx.log.info(f"Reading file: {name}")
    try:
        dataset = parse_csv(source, delimiters, source_name=name, log=ctx.log)
        validate_headers(dataset.header_fields, expected, mode, name)
    except (ParseError, HeaderMismatchError) as e:
        ctx.log.error(f"Error: {e}")
        raise
    ctx.log.info(f"Successfully read {len(dataset)} rows from {name}")
    return dataset


def load_fcr(
    ctx: ProcessingContext,
    source: Source,
    name: str | None = None,
    *,
    delimiters: Sequence[str] = DEFAULT_DELIMITERS,
) -> ParsedDataset:
    ctx.fcr_dataset = None
    dataset = _load(ctx, source, name, FCR_REQUIRED_COLUMNS, ValidationMode.SUPERSET, delimiters)
    ctx.fcr_dataset = dataset
    ctx.log.info(f"Successfully loaded {len(dataset)} records")
    return dataset


def load_po(
    ctx: ProcessingContext,
    source: Source,
    name: str | None = None,
    *,
    delimiters: Sequence[str] = DEFAULT_DELIMITERS,
) -> ParsedDataset:
    ctx.po_dataset = None
    dataset = _load(ctx, source, name, PO_HEADERS, ValidationMode.EXACT, delimiters)
    ctx.po_dataset = dataset
    ctx.log.info(f"PO data loaded: {len(dataset)} records")
    return dataset


def load_recycled(
    ctx: ProcessingContext,
    source: Source,
    name: str | None = None,
    *,
    delimiters: Sequence[str] = DEFAULT_DELIMITERS,
) -> ParsedDataset:
    ctx.recycled_dataset = None
    dataset = _load(ctx, source, name, RECYCLED_HEADERS, ValidationMode.EXACT, delimiters)
    ctx.recycled_dataset = dataset
    ctx.log.info(f"Recycled POs data loaded: {len(dataset)} records")
    return dataset


def _result(
    mode: ProcessingMode,
    start: datetime,
    *,
    records: list[dict[str, Any]],
    input_rows: int,
    error: str | None = None,
    type_counts: TypeCounts | None = None,
    warnings: list[str] | None = None,
) -> ProcessingResult:
    end = datetime.now(UTC)
    return ProcessingResult(
        mode=mode,
        success=error is None,
        records=records,
        input_rows=input_rows,
        start_time=start,
        end_time=end,
        elapsed_seconds=(end - start).total_seconds(),
        error=error,
        type_counts=type_counts,
        warnings=warnings or [],
    )


def _discard(
    ctx: ProcessingContext, mode: ProcessingMode, start: datetime, error: str
) -> ProcessingResult:
    ctx.records = []
    if mode is ProcessingMode.FCR:
        ctx.copy_tracker.reset()
    logger.debug("run discarded mode=%s error=%s", mode.value, error)
    return _result(mode, start, records=[], input_rows=0, error=error)


def process_fcr(ctx: ProcessingContext, settings: FcrSettings | None = None) -> ProcessingResult:
    """Format every loaded FCR row into a box.

    Boxes keep the input row order; copy tracking starts over.
    """
    settings = settings or FcrSettings()
    start = datetime.now(UTC)
    ctx.records = []
    ctx.copy_tracker.reset()

    try:
        dataset = ctx.fcr_dataset
        if dataset is None:
            raise ProcessingError("Please upload a data file first")
        ctx.log.info("Starting FCR data processing")
        ctx.log.info(f"Template variant: {settings.template_variant.value}")

        boxes: list[dict[str, Any]] = []
        with RowProgress(len(dataset.rows), description="Formatting FCR boxes") as progress:
            for position, row in enumerate(dataset.rows):
                boxes.append(format_fcr_row(row, position, settings.template_variant).to_dict())
                progress.advance()
    except ProcessingError as e:
        ctx.log.error(str(e))
        return _discard(ctx, ProcessingMode.FCR, start, str(e))

    ctx.records = boxes
    ctx.log.success(f"Successfully processed {len(boxes)} records")
    ctx.log.success("Processing completed successfully")
    return _result(
        ProcessingMode.FCR,
        start,
        records=list(boxes),
        input_rows=len(dataset.rows),
        warnings=list(dataset.warnings),
    )


def process_po(ctx: ProcessingContext, settings: PoSettings | None = None) -> ProcessingResult:
    """Aggregate the loaded PO rows per invoice and classify each invoice."""
    settings = settings or PoSettings()
    start = datetime.now(UTC)
    ctx.records = []

    try:
        po_dataset = ctx.po_dataset
        recycled_dataset = ctx.recycled_dataset
        if po_dataset is None or recycled_dataset is None:
            raise ProcessingError("Please upload both PO data and recycled POs files")
        ctx.log.info("Starting PO data processing")

        recycled = build_recycled_set(recycled_dataset.rows)
        ctx.log.info(f"Found {len(recycled)} recycled PO numbers")

        ctx.log.info("Processing PO data")
        invoices = aggregate_invoices(po_dataset.rows, recycled)
        ctx.log.info(f"Processed data for {len(invoices)} invoices")

        ctx.log.info("Determining invoice types")
        counts = count_types(invoices.values())
        ctx.log.info(
            f"Invoice type counts: Mixed: {counts.mixed}, "
            f"Recycled: {counts.recycled}, Normal: {counts.normal}"
        )

        output: list[dict[str, Any]] = []
        with RowProgress(len(invoices), description="Building PO records", unit="invoice") as progress:
            for record in invoices.values():
                output.append(format_invoice_record(record, settings))
                progress.advance()
    except ProcessingError as e:
        ctx.log.error(str(e))
        return _discard(ctx, ProcessingMode.PO, start, str(e))

    ctx.records = output
    ctx.log.info(f"Successfully processed {len(output)} invoices")
    ctx.log.success("Processing completed successfully")
    return _result(
        ProcessingMode.PO,
        start,
        records=list(output),
        input_rows=len(po_dataset.rows),
        type_counts=counts,
        warnings=list(po_dataset.warnings) + list(recycled_dataset.warnings),
    )


def run_fcr_file(
    ctx: ProcessingContext,
    source: Source,
    settings: FcrSettings | None = None,
    *,
    source_name: str | None = None,
    delimiters: Sequence[str] = DEFAULT_DELIMITERS,
) -> ProcessingResult:
    """Load one FCR file and process it. Load failures end the run."""
    start = datetime.now(UTC)
    try:
        load_fcr(ctx, source, source_name, delimiters=delimiters)
    except (ParseError, HeaderMismatchError) as e:
        return _discard(ctx, ProcessingMode.FCR, start, str(e))
    return process_fcr(ctx, settings)


def run_po_files(
    ctx: ProcessingContext,
    po_source: Source,
    recycled_source: Source,
    settings: PoSettings | None = None,
    *,
    po_name: str | None = None,
    recycled_name: str | None = None,
    delimiters: Sequence[str] = DEFAULT_DELIMITERS,
) -> ProcessingResult:
    """Load the PO and recycled reference files and process them."""
    start = datetime.now(UTC)
    try:
        load_po(ctx, po_source, po_name, delimiters=delimiters)
        load_recycled(ctx, recycled_source, recycled_name, delimiters=delimiters)
    except (ParseError, HeaderMismatchError) as e:
        return _discard(ctx, ProcessingMode.PO, start, str(e))
    return process_po(ctx, settings)


def mark_copied(ctx: ProcessingContext, box_id: str) -> bool:
    if box_id not in ctx.record_ids:
        ctx.log.error(f"Unknown box: {box_id}")
        return False
    ctx.copy_tracker.mark_copied(box_id)
    ctx.log.success(f"Box marked as copied: {box_id}")
    return True


def undo_copy(ctx: ProcessingContext, box_id: str) -> bool:
    if not ctx.copy_tracker.undo(box_id):
        ctx.log.warning(f"Box was not marked as copied: {box_id}")
        return False
    ctx.log.success("Copied status removed!")
    return True


def undo_last_copy(ctx: ProcessingContext) -> bool:
    if not ctx.copy_tracker.undo_last():
        ctx.log.error("No recent copy action to undo!")
        return False
    ctx.log.success("Last copy action undone!")
    return True


def reset_copies(ctx: ProcessingContext) -> None:
    ctx.copy_tracker.reset()
    ctx.log.success("All copied status has been reset!")


def copy_progress(ctx: ProcessingContext) -> CopyProgress:
    return ctx.copy_tracker.progress(ctx.record_ids)
