"""CLI interface for mp3drop."""

import logging
from pathlib import Path

import typer

from .config import load_settings
from .infrastructure.disk_staging import sweep_upload_dir
from .infrastructure.mutagen_sanitizer import SanitizationError, sanitize
from .upload_validation import check_signature

app = typer.Typer(help="mp3drop command line interface")

_NOISY_LOGGERS = ("urllib3", "urllib3.connectionpool", "multipart", "python_multipart")


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


@app.command("serve")
def serve_command(
    host: str = typer.Option("127.0.0.1", "--host", help="Interface to bind."),
    port: int = typer.Option(3000, "--port", "-p", envvar="PORT", help="Port to listen on."),
) -> None:
    """Run the upload API with uvicorn."""

    import uvicorn

    settings = load_settings()
    configure_logging(settings.log_level)
    uvicorn.run(
        "mp3drop.api:app",
        host=host,
        port=port,
        log_level=settings.log_level.lower(),
        server_header=False,
    )


@app.command("sanitize")
def sanitize_command(
    path: Path = typer.Argument(..., exists=True, dir_okay=False, help="MP3 file to verify and strip in place."),
) -> None:
    """Verify an MP3 signature, parse it and strip its embedded tags."""

    if not check_signature(path):
        typer.echo(f"[REJECTED] {path}: file does not start with an ID3 tag header", err=True)
        raise typer.Exit(code=1)

    try:
        info = sanitize(path)
    except SanitizationError as error:
        typer.echo(f"[REJECTED] {path}: {error}", err=True)
        raise typer.Exit(code=1) from error

    removed = ", ".join(info.removed_frame_ids) or "none"
    typer.echo(f"[OK] {path} duration={info.duration_seconds:.2f}s removed_frames={removed}")


@app.command("sweep")
def sweep_command(
    upload_dir: Path | None = typer.Option(None, "--upload-dir", help="Directory to sweep (defaults to configured upload_dir)."),
) -> None:
    """Delete orphaned files left in the upload directory."""

    target = upload_dir or load_settings().upload_dir
    removed = sweep_upload_dir(target)
    typer.echo(f"Removed {len(removed)} file(s) from {target}")


def main() -> None:
    app()


if __name__ == "__main__":
    main()
