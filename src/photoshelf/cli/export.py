"""
Export every stored image and its metadata to local disk.

Run with no arguments from the directory that should receive ``exports/``:

    photoshelf-export
    python -m photoshelf.cli.export
    invoke -r src/photoshelf/cli -c export export
"""

import sys

from invoke import Context, task
from invoke.exceptions import Exit

from photoshelf.config import get_export_dir, get_metadata_table, get_storage_bucket, load_env_file
from photoshelf.error_handling import ConfigurationError, MetadataError
from photoshelf.logging_config import configure_structured_logging, get_logger
from photoshelf.services.backend import get_backend_client
from photoshelf.services.export import ExportLayout, ExportSummary, run_export
from photoshelf.services.metadata import MetadataService
from photoshelf.services.storage import StorageService

logger = get_logger(__name__)


def export_all(env_file: str = ".env") -> ExportSummary:
    """
    Load configuration, connect and run the export job.

    Raises:
        ConfigurationError: If backend credentials are missing
        MetadataError: If the metadata fetch fails
    """
    load_env_file(env_file)

    client = get_backend_client()
    metadata_service = MetadataService(client, get_metadata_table())
    storage_service = StorageService(client, get_storage_bucket())
    layout = ExportLayout.at(get_export_dir())

    return run_export(metadata_service, storage_service, layout)


def main() -> int:
    """Console entry point. Per-image failures do not affect the exit status."""
    configure_structured_logging()

    try:
        export_all()
    except (ConfigurationError, MetadataError) as e:
        logger.error("export_failed", error=str(e))
        print(f"❌ Export failed: {e}", file=sys.stderr)
        return 1

    return 0


@task
def export(c: Context):
    """
    Export all images and metadata into ./exports.

    Args:
        c (Context): Invoke context.
    """
    exit_code = main()
    if exit_code != 0:
        raise Exit(code=exit_code)


if __name__ == "__main__":
    sys.exit(main())
