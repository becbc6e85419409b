"""Common CLI utilities, decorators, and helpers."""

from __future__ import annotations

import sys
from dataclasses import replace
from functools import wraps
from typing import Any, Callable, Optional, TypeVar

import click

from imgup.core.config import Config, Profile
from imgup.core.exceptions import ConfigurationError, ImgUpError, ProfileNotFoundError
from imgup.core.logging import setup_logging
from imgup.core.output import OutputFormat, print_error
from imgup.services.uploads import UploadService
from imgup.uploaders.transport import HttpTransport

F = TypeVar("F", bound=Callable[..., Any])


# =============================================================================
# Context Object
# =============================================================================


class Context:
    """CLI context object passed to commands."""

    def __init__(self) -> None:
        self.config: Optional[Config] = None
        self.profile_name: Optional[str] = None
        self.output_format: OutputFormat = OutputFormat.TABLE
        self.quiet: bool = False
        self.verbose: bool = False

    def get_profile(self, **overrides: Any) -> Profile:
        """Resolve the active profile, applying command-line overrides.

        Without a config file the built-in defaults are used, unless a
        profile was requested by name.

        Args:
            **overrides: Profile fields to replace; None values are ignored.

        Raises:
            ConfigurationError: If the requested profile does not exist.
        """
        if self.config is None:
            self.config = Config.load()

        try:
            profile = self.config.get_profile(self.profile_name)
        except ProfileNotFoundError:
            if self.profile_name or self.config.profiles:
                raise ConfigurationError(
                    f"Profile '{self.profile_name or self.config.default_profile}' not found. "
                    "Run 'imgup config init' to create one."
                )
            profile = Profile()

        changes = {k: v for k, v in overrides.items() if v is not None}
        return replace(profile, **changes) if changes else profile

    def create_service(self, profile: Profile) -> UploadService:
        """Build an upload service for a profile."""
        transport = HttpTransport(
            profile.url,
            upload_path=profile.upload_path,
            timeout=profile.timeout,
            verify_ssl=profile.verify_ssl,
        )
        return UploadService(
            transport,
            settings=profile.compression_settings(),
            workers=profile.workers,
        )


pass_context = click.make_pass_decorator(Context, ensure=True)


# =============================================================================
# Global Options
# =============================================================================


def global_options(f: F) -> F:
    """Add global options to a command."""

    @click.option(
        "--profile",
        "-p",
        envvar="IMGUP_PROFILE",
        help="Config profile to use",
    )
    @click.option(
        "--output",
        "-o",
        "output_format",
        type=click.Choice(["json", "table"]),
        default="table",
        help="Output format",
    )
    @click.option(
        "--quiet",
        "-q",
        is_flag=True,
        help="Minimal output (IDs only)",
    )
    @click.option(
        "--verbose",
        "-v",
        is_flag=True,
        help="Enable verbose output",
    )
    @pass_context
    @wraps(f)
    def wrapper(
        ctx: Context,
        profile: Optional[str],
        output_format: str,
        quiet: bool,
        verbose: bool,
        *args: Any,
        **kwargs: Any,
    ) -> Any:
        """Populate context from global options and invoke the command."""
        ctx.profile_name = profile
        ctx.output_format = OutputFormat.from_string(output_format)
        ctx.quiet = quiet
        ctx.verbose = verbose

        setup_logging(quiet=quiet, verbose=verbose)

        return f(ctx, *args, **kwargs)

    return wrapper  # type: ignore


# =============================================================================
# Error Handling
# =============================================================================


def handle_errors(f: F) -> F:
    """Handle common errors and convert to CLI exceptions."""

    @wraps(f)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        """Capture errors and exit with consistent messaging."""
        try:
            return f(*args, **kwargs)
        except ImgUpError as e:
            print_error(str(e))
            sys.exit(ExitCode.GENERAL_ERROR)
        except click.ClickException:
            raise
        except Exception as e:
            print_error(f"Unexpected error: {e}")
            sys.exit(ExitCode.GENERAL_ERROR)

    return wrapper  # type: ignore


# =============================================================================
# Exit Codes
# =============================================================================


class ExitCode:
    """Standard exit codes."""

    SUCCESS = 0
    GENERAL_ERROR = 1
    USER_CANCELLED = 5
