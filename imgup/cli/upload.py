"""Upload command for imgup."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import click

from imgup.cli.common import Context, ExitCode, global_options, handle_errors
from imgup.core.logging import log_context
from imgup.core.output import (
    OutputFormat,
    create_progress,
    format_bytes,
    format_status,
    print_output,
    print_success,
    print_warning,
)
from imgup.core.validation import (
    validate_dimension,
    validate_quality,
    validate_server_url,
    validate_timeout,
    validate_workers,
)
from imgup.models.upload import UploadRecord, UploadStatus
from imgup.services.uploads import UploadService
from imgup.uploaders.common import expand_sources

logger = logging.getLogger(__name__)

# Seconds between progress refreshes
POLL_INTERVAL = 0.1

RESULT_COLUMNS = ["name", "status", "original", "compressed", "savings", "result"]
RESULT_LABELS = {
    "name": "File",
    "status": "Status",
    "original": "Original",
    "compressed": "Compressed",
    "savings": "Saved",
    "result": "Location / Error",
}


def _result_row(record: UploadRecord) -> dict[str, str]:
    savings = record.compression_savings_percent
    if record.status is UploadStatus.SUCCEEDED:
        result = record.remote_location or ""
    else:
        result = record.error or ""
    return {
        "upload_id": record.upload_id,
        "remote_location": record.remote_location or "",
        "name": record.display_name,
        "status": format_status(record.status.value),
        "original": format_bytes(record.original_size_bytes),
        "compressed": format_bytes(record.compressed_size_bytes),
        "savings": f"-{savings}%" if savings is not None else "-",
        "result": result,
    }


def _item_description(record: UploadRecord) -> str:
    return f"{record.display_name} [{format_status(record.status.value)}]"


def _wait_with_progress(service: UploadService, show_progress: bool) -> None:
    """Block until every attempt settles, rendering batch and per-item bars."""
    if not show_progress:
        service.wait()
        return

    with create_progress() as progress:
        overall = progress.add_task("Uploading", total=100)
        items: dict[str, int] = {}

        while True:
            settled = service.wait(timeout=POLL_INTERVAL)

            aggregate = service.aggregate()
            records = service.records()
            progress.update(
                overall,
                completed=aggregate.aggregate_percentage,
                description=f"Uploading {len(records)} files",
            )

            for record in records:
                task_id = items.get(record.upload_id)
                if task_id is None:
                    task_id = progress.add_task(_item_description(record), total=100)
                    items[record.upload_id] = task_id
                completed = (
                    record.progress_percent
                    if record.status is UploadStatus.IN_PROGRESS
                    else 100
                )
                progress.update(
                    task_id,
                    completed=completed,
                    description=_item_description(record),
                )

            if settled:
                break


@click.command("upload")
@click.argument(
    "sources",
    nargs=-1,
    required=True,
    type=click.Path(exists=True, path_type=Path),
)
@click.option("--url", help="Storage server URL (overrides the profile)")
@click.option("--workers", type=int, help="Parallel upload workers")
@click.option("--max-width", type=int, help="Maximum width of compressed images")
@click.option("--max-height", type=int, help="Maximum height of compressed images")
@click.option("--quality", type=float, help="Compression quality between 0 and 1")
@click.option(
    "--format",
    "image_format",
    type=click.Choice(["webp", "jpeg", "png"], case_sensitive=False),
    help="Output format of compressed images",
)
@click.option("--timeout", type=int, help="HTTP timeout in seconds")
@click.option(
    "--retries",
    type=int,
    default=0,
    show_default=True,
    help="Retry failed uploads up to N rounds",
)
@click.option(
    "--recursive/--no-recursive",
    default=True,
    help="Descend into subdirectories of directory sources",
)
@global_options
@handle_errors
def upload(
    ctx: Context,
    sources: tuple[Path, ...],
    url: Optional[str],
    workers: Optional[int],
    max_width: Optional[int],
    max_height: Optional[int],
    quality: Optional[float],
    image_format: Optional[str],
    timeout: Optional[int],
    retries: int,
    recursive: bool,
) -> None:
    """Compress and upload images.

    SOURCES are JPEG/PNG files or directories containing them. Each image
    is compressed and uploaded on its own task; press Ctrl-C to cancel the
    uploads still running.

    Example:
        imgup upload photo.jpg screenshots/
        imgup upload *.png --quality 0.6 --retries 2
    """
    profile = ctx.get_profile(
        url=validate_server_url(url) if url else None,
        workers=validate_workers(workers) if workers is not None else None,
        max_width=validate_dimension(max_width, "max_width") if max_width is not None else None,
        max_height=(
            validate_dimension(max_height, "max_height") if max_height is not None else None
        ),
        quality=validate_quality(quality) if quality is not None else None,
        image_format=image_format.upper() if image_format else None,
        timeout=validate_timeout(timeout) if timeout is not None else None,
    )

    paths = expand_sources(sources, recursive=recursive)
    if not paths:
        print_warning("No PNG or JPG files found")
        raise SystemExit(ExitCode.GENERAL_ERROR)

    show_progress = ctx.output_format == OutputFormat.TABLE and not ctx.quiet
    interrupted = False

    with log_context("upload batch", logger, files=len(paths), url=profile.url):
        with ctx.create_service(profile) as service:
            service.submit_paths(paths)

            try:
                _wait_with_progress(service, show_progress)

                for round_number in range(1, retries + 1):
                    summary = service.summary()
                    if summary.failed + summary.canceled == 0:
                        break
                    retried = service.retry_failed()
                    logger.info("Retry round %d: %d uploads", round_number, len(retried))
                    _wait_with_progress(service, show_progress)
            except KeyboardInterrupt:
                interrupted = True
                print_warning("Interrupted, canceling uploads in progress...")
                service.cancel_all()
                service.wait()

            records = service.records()
            summary = service.summary()

    if ctx.output_format == OutputFormat.JSON and not ctx.quiet:
        print_output(
            {
                "summary": summary.to_dict(),
                "uploads": [record.to_view().to_dict() for record in records],
            },
            format=OutputFormat.JSON,
        )
    else:
        print_output(
            [_result_row(record) for record in records],
            format=ctx.output_format,
            columns=RESULT_COLUMNS,
            column_labels=RESULT_LABELS,
            quiet=ctx.quiet,
            id_field="remote_location",
        )
        if not ctx.quiet and summary.success:
            print_success(f"Uploaded {summary.succeeded} files")

    if interrupted:
        raise SystemExit(ExitCode.USER_CANCELLED)
    if not summary.success:
        raise SystemExit(ExitCode.GENERAL_ERROR)
