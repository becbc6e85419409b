"""Config commands for imgup."""

from __future__ import annotations

import click

from imgup.core.config import CONFIG_FILE, Config
from imgup.core.exceptions import ImgUpError
from imgup.core.output import OutputFormat, print_error, print_key_value, print_output, print_success
from imgup.core.validation import (
    validate_dimension,
    validate_quality,
    validate_server_url,
    validate_timeout,
    validate_upload_path,
    validate_workers,
)
from imgup.uploaders.constants import (
    DEFAULT_IMAGE_FORMAT,
    DEFAULT_MAX_HEIGHT,
    DEFAULT_MAX_WIDTH,
    DEFAULT_QUALITY,
    DEFAULT_SERVER_URL,
    DEFAULT_TIMEOUT,
    DEFAULT_UPLOAD_PATH,
    DEFAULT_UPLOAD_WORKERS,
)


def _load_config() -> Config:
    try:
        return Config.load(CONFIG_FILE)
    except ImgUpError as e:
        print_error(str(e))
        raise SystemExit(1) from e


@click.group()
def config() -> None:
    """Manage imgup configuration."""
    pass


@config.command("init")
@click.option("--url", prompt="Storage server URL", default=DEFAULT_SERVER_URL, help="Storage server URL")
@click.option("--profile", default="default", help="Profile name")
@click.option("--upload-path", default=DEFAULT_UPLOAD_PATH, show_default=True, help="Upload endpoint path")
@click.option("--timeout", type=int, default=DEFAULT_TIMEOUT, show_default=True, help="HTTP timeout in seconds")
@click.option("--max-width", type=int, default=DEFAULT_MAX_WIDTH, show_default=True)
@click.option("--max-height", type=int, default=DEFAULT_MAX_HEIGHT, show_default=True)
@click.option("--quality", type=float, default=DEFAULT_QUALITY, show_default=True)
@click.option(
    "--format",
    "image_format",
    type=click.Choice(["webp", "jpeg", "png"], case_sensitive=False),
    default=DEFAULT_IMAGE_FORMAT.lower(),
    show_default=True,
)
@click.option("--workers", type=int, default=DEFAULT_UPLOAD_WORKERS, show_default=True)
@click.option("--no-verify-ssl", is_flag=True, help="Disable SSL verification")
@click.option("--force", is_flag=True, help="Overwrite an existing profile")
def config_init(
    url: str,
    profile: str,
    upload_path: str,
    timeout: int,
    max_width: int,
    max_height: int,
    quality: float,
    image_format: str,
    workers: int,
    no_verify_ssl: bool,
    force: bool,
) -> None:
    """Create configuration file with a new profile.

    Example:
        imgup config init --url https://img.example.org
    """
    try:
        settings = {
            "url": validate_server_url(url),
            "upload_path": validate_upload_path(upload_path),
            "timeout": validate_timeout(timeout),
            "max_width": validate_dimension(max_width, "max_width"),
            "max_height": validate_dimension(max_height, "max_height"),
            "quality": validate_quality(quality),
            "image_format": image_format.upper(),
            "workers": validate_workers(workers),
            "verify_ssl": not no_verify_ssl,
        }
    except ImgUpError as e:
        print_error(str(e))
        raise SystemExit(1) from e

    cfg = _load_config() if CONFIG_FILE.exists() else Config()
    if cfg.has_profile(profile) and not force:
        print_error(f"Profile '{profile}' already exists. Use --force to overwrite.")
        raise SystemExit(1)

    cfg.add_profile(profile, **settings)

    # First profile becomes the default
    if len(cfg.profiles) == 1:
        cfg.default_profile = profile

    cfg.save(CONFIG_FILE)

    print_success(f"Configuration saved to {CONFIG_FILE}")
    print_key_value({"profile": profile, "url": settings["url"]})


@config.command("show")
@click.option("--output", "-o", type=click.Choice(["json", "table"]), default="table")
def config_show(output: str) -> None:
    """Show current configuration."""
    cfg = _load_config()

    if not cfg.profiles:
        print_error("No configuration found. Run 'imgup config init' first.")
        raise SystemExit(1)

    data = {
        "config_file": str(CONFIG_FILE),
        "default_profile": cfg.default_profile,
        "output_format": cfg.output_format,
        "profiles": list(cfg.profiles.keys()),
    }

    if output == "json":
        data["profile_details"] = {name: p.to_dict() for name, p in cfg.profiles.items()}
        print_output(data, format=OutputFormat.JSON)
        return

    print_key_value(data, title="Configuration")
    click.echo()
    for name, profile in cfg.profiles.items():
        marker = " (default)" if name == cfg.default_profile else ""
        click.echo(f"Profile: {name}{marker}")
        print_key_value(
            {
                "url": f"{profile.url}{profile.upload_path}",
                "verify_ssl": profile.verify_ssl,
                "timeout": f"{profile.timeout}s",
                "max_size": f"{profile.max_width}x{profile.max_height}",
                "quality": profile.quality,
                "image_format": profile.image_format,
                "workers": profile.workers,
            },
        )
        click.echo()


@config.command("use-profile")
@click.argument("profile")
def config_use_profile(profile: str) -> None:
    """Switch the default profile.

    Example:
        imgup config use-profile production
    """
    cfg = _load_config()

    if not cfg.has_profile(profile):
        print_error(f"Profile '{profile}' not found.")
        click.echo(f"Available profiles: {', '.join(cfg.profiles.keys())}")
        raise SystemExit(1)

    cfg.set_default_profile(profile)
    cfg.save(CONFIG_FILE)

    print_success(f"Switched to profile '{profile}'")


@config.command("remove-profile")
@click.argument("profile")
def config_remove_profile(profile: str) -> None:
    """Remove a profile."""
    cfg = _load_config()

    if not cfg.remove_profile(profile):
        print_error(f"Profile '{profile}' not found.")
        raise SystemExit(1)

    if cfg.default_profile == profile and cfg.profiles:
        cfg.default_profile = next(iter(cfg.profiles))
    cfg.save(CONFIG_FILE)

    print_success(f"Profile '{profile}' removed")
