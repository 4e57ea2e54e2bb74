"""Application export – chunked bulk export of paginated remote tables."""
from dt_export.application.export.assembler import ArtifactAssembler, assembler_for
from dt_export.application.export.callbacks import ExportCallbacks
from dt_export.application.export.coordinator import ChunkCoordinator
from dt_export.application.export.customization import CustomText, Orientation, PageLayout, Position
from dt_export.application.export.errors import (
    ExportCancelledError,
    ExportInProgressError,
    InvalidStateTransitionError,
    RequestFailedError,
)
from dt_export.application.export.export_service import NO_RECORDS_MESSAGE, ExportService
from dt_export.application.export.fallback import FALLBACK_WARNING, CurrentPageFallback
from dt_export.application.export.progress import ProgressSnapshot, ProgressTracker
from dt_export.application.export.request import (
    ColumnDef,
    ExportFormat,
    ExportQuery,
    ExportRequest,
)
from dt_export.application.export.result import Artifact, ExportResult, ExportState, RunSummary
from dt_export.application.export.session import Chunk, ExportSession
from dt_export.application.export.source import RecordSource
from dt_export.application.export.transform import RowTransformer, transformer_for

__all__ = [
    "FALLBACK_WARNING",
    "NO_RECORDS_MESSAGE",
    "Artifact",
    "ArtifactAssembler",
    "Chunk",
    "ChunkCoordinator",
    "ColumnDef",
    "CurrentPageFallback",
    "CustomText",
    "ExportCallbacks",
    "ExportCancelledError",
    "ExportFormat",
    "ExportInProgressError",
    "ExportQuery",
    "ExportRequest",
    "ExportResult",
    "ExportService",
    "ExportSession",
    "ExportState",
    "InvalidStateTransitionError",
    "Orientation",
    "PageLayout",
    "Position",
    "ProgressSnapshot",
    "ProgressTracker",
    "RecordSource",
    "RequestFailedError",
    "RowTransformer",
    "RunSummary",
    "assembler_for",
    "transformer_for",
]
