"""
Export job: copy every stored image and its metadata to local disk.

The job runs in three sequential phases:

1. ``dump_metadata`` fetches every record (newest first) and writes them as
   one JSON document. A fetch failure aborts the job.
2. ``download_images`` fetches each object in list order and writes it under
   the images directory, mirroring its storage path. A failing item is
   logged and counted and never stops the batch.
3. ``report_summary`` prints and logs the counts.

Usage Examples:
    layout = ExportLayout.at("exports")
    summary = run_export(metadata_service, storage_service, layout)
"""

import json
from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path, PurePosixPath

from ..error_handling import ValidationError
from ..logging_config import get_logger
from ..models.image_record import ImageRecord
from .metadata import MetadataService
from .storage import STORAGE_ROOT, StorageService

logger = get_logger(__name__)

METADATA_FILENAME = "metadata.json"
IMAGES_DIRNAME = "images"
PROGRESS_EVERY = 10
BANNER = "=" * 50

Echo = Callable[[str], None]


@dataclass(frozen=True)
class ExportLayout:
    """Directory structure of one export."""

    root: Path

    @classmethod
    def at(cls, root: str | Path) -> "ExportLayout":
        return cls(root=Path(root))

    @property
    def images_dir(self) -> Path:
        return self.root / IMAGES_DIRNAME

    @property
    def metadata_path(self) -> Path:
        return self.root / METADATA_FILENAME

    def prepare(self) -> None:
        """Create the export root and its images directory."""
        self.images_dir.mkdir(parents=True, exist_ok=True)


@dataclass
class DownloadFailure:
    """One record that could not be exported."""

    filename: str
    storage_path: str
    error: str


@dataclass
class DownloadResult:
    """Outcome of the download phase. ``downloaded + failed == total`` once finished."""

    total: int
    downloaded: int = 0
    failed: int = 0
    failures: list[DownloadFailure] = field(default_factory=list)
    written: list[Path] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return self.failed == 0


@dataclass
class ExportSummary:
    layout: ExportLayout
    metadata_count: int
    downloads: DownloadResult


def relative_image_path(storage_path: str) -> PurePosixPath:
    """
    Path of an object relative to the export's images directory.

    The leading ``images/`` segment is stripped and the rest kept, so
    ``images/2025/03/x.jpg`` becomes ``2025/03/x.jpg``.

    Raises:
        ValidationError: If the path is empty, absolute or contains ``..``
    """
    path = PurePosixPath(storage_path)
    if path.is_absolute() or ".." in path.parts:
        raise ValidationError(f"Unsafe storage path: '{storage_path}'", details={"storage_path": storage_path})

    parts = path.parts
    if parts and parts[0] == STORAGE_ROOT:
        parts = parts[1:]

    if not parts:
        raise ValidationError(f"Empty storage path: '{storage_path}'", details={"storage_path": storage_path})

    return PurePosixPath(*parts)


def local_image_path(storage_path: str, images_dir: Path) -> Path:
    """Local file an object is exported to."""
    return images_dir.joinpath(*relative_image_path(storage_path).parts)


def dump_metadata(metadata_service: MetadataService, layout: ExportLayout, echo: Echo = print) -> list[ImageRecord]:
    """
    Phase 1: write every record to ``metadata.json`` in the order received.

    Raises:
        MetadataError: If the fetch fails. No file is written in that case.
    """
    echo("📊 Exporting metadata...")
    records = metadata_service.list_all()

    document = [record.to_dict() for record in records]
    layout.metadata_path.write_text(json.dumps(document, indent=2, ensure_ascii=False), encoding="utf-8")

    logger.info("metadata_exported", count=len(records), path=str(layout.metadata_path))
    echo(f"✅ Exported {len(records)} metadata records\n")
    return records


def download_images(
    records: list[ImageRecord],
    storage_service: StorageService,
    layout: ExportLayout,
    echo: Echo = print,
    progress_every: int = PROGRESS_EVERY,
) -> DownloadResult:
    """
    Phase 2: download each record's object, strictly one at a time.

    Every record is accounted for exactly once, either as a written file or
    as a failure.
    """
    echo("📥 Downloading images...")
    result = DownloadResult(total=len(records))

    for record in records:
        filename = record.get_display_name()
        try:
            target = local_image_path(record.storage_path, layout.images_dir)
            file_data = storage_service.download(record.storage_path)
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_bytes(file_data)
        except Exception as e:
            result.failed += 1
            result.failures.append(DownloadFailure(filename=filename, storage_path=record.storage_path, error=str(e)))
            logger.error("image_download_failed", filename=filename, storage_path=record.storage_path, error=str(e))
            echo(f"❌ Failed to download {filename}: {e}")
            continue

        result.downloaded += 1
        result.written.append(target)

        if result.downloaded % progress_every == 0:
            logger.info("image_download_progress", downloaded=result.downloaded, total=result.total)
            echo(f"   Downloaded {result.downloaded}/{result.total} images...")

    return result


def report_summary(summary: ExportSummary, echo: Echo = print) -> None:
    """Phase 3: print and log the final counts."""
    downloads = summary.downloads

    logger.info(
        "export_completed",
        location=str(summary.layout.root),
        total=downloads.total,
        downloaded=downloads.downloaded,
        failed=downloads.failed,
        metadata_records=summary.metadata_count,
    )

    echo("\n" + BANNER)
    echo("✨ Export Complete!")
    echo(BANNER)
    echo(f"📁 Location: {summary.layout.root.resolve()}")
    echo(f"📷 Images downloaded: {downloads.downloaded}/{downloads.total}")
    if downloads.failed > 0:
        echo(f"⚠️  Failed: {downloads.failed}")
    echo(f"📋 Metadata saved: {METADATA_FILENAME}")
    echo(BANNER)


def run_export(
    metadata_service: MetadataService,
    storage_service: StorageService,
    layout: ExportLayout,
    echo: Echo = print,
) -> ExportSummary:
    """
    Run all three phases.

    Raises:
        MetadataError: If the metadata fetch fails
    """
    echo("🚀 Starting export...\n")
    logger.info("export_started", location=str(layout.root))

    layout.prepare()
    records = dump_metadata(metadata_service, layout, echo)
    downloads = download_images(records, storage_service, layout, echo)

    summary = ExportSummary(layout=layout, metadata_count=len(records), downloads=downloads)
    report_summary(summary, echo)
    return summary
