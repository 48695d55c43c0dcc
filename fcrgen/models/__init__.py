"""Domain models for the FCR / PO document generator.

Input side: ParsedDataset / Row. Output side: InvoiceRecord (PO mode) and
FCRBoxRecord (FCR mode). Run bookkeeping: ProcessingResult, LogEvent,
CopyTracker. Persistence: Project.
"""

from .config_models import (
    AppConfig,
    DatabaseConfig,
    FcrSettings,
    MaterialType,
    PoSettings,
    TemplateVariant,
)
from .copy_state import CopyProgress, CopyTracker
from .dataset import ParsedDataset, Row
from .log_event import LogEvent, Severity
from .processing_result import ProcessingMode, ProcessingResult, TypeCounts
from .project import Project, ProjectSummary
from .records import FCRBoxRecord, InvoiceRecord

__all__ = [
    # Configuration models
    "AppConfig",
    "DatabaseConfig",
    "FcrSettings",
    "PoSettings",
    "MaterialType",
    "TemplateVariant",
    # Input
    "ParsedDataset",
    "Row",
    # Output records
    "FCRBoxRecord",
    "InvoiceRecord",
    # Run bookkeeping
    "CopyProgress",
    "CopyTracker",
    "LogEvent",
    "Severity",
    "ProcessingMode",
    "ProcessingResult",
    "TypeCounts",
    # Persistence
    "Project",
    "ProjectSummary",
]
