"""Core modules for imgup."""

from imgup.core.exceptions import (
    CompressionFailure,
    ConfigurationError,
    DuplicateIdentifier,
    ImgUpError,
    InvalidURLError,
    PathValidationError,
    ProfileNotFoundError,
    TransportCanceled,
    TransportFailure,
    UploadError,
    ValidationError,
)
from imgup.core.cancellation import CancelToken
from imgup.core.logging import LogContext, get_logger, log_context, setup_logging
from imgup.core.validation import (
    validate_dimension,
    validate_image_path,
    validate_quality,
    validate_server_url,
    validate_timeout,
    validate_upload_path,
    validate_workers,
)
from imgup.core.output import (
    OutputFormat,
    console,
    format_bytes,
    print_error,
    print_json,
    print_output,
    print_success,
    print_table,
    print_warning,
)
from imgup.core.config import CONFIG_DIR, CONFIG_FILE, Config, Profile

__all__ = [
    # Exceptions
    "ImgUpError",
    "ConfigurationError",
    "ProfileNotFoundError",
    "ValidationError",
    "InvalidURLError",
    "PathValidationError",
    "DuplicateIdentifier",
    "UploadError",
    "CompressionFailure",
    "TransportFailure",
    "TransportCanceled",
    # Cancellation
    "CancelToken",
    # Validation
    "validate_server_url",
    "validate_upload_path",
    "validate_quality",
    "validate_dimension",
    "validate_workers",
    "validate_timeout",
    "validate_image_path",
    # Config
    "Config",
    "Profile",
    "CONFIG_DIR",
    "CONFIG_FILE",
    # Output
    "OutputFormat",
    "print_output",
    "print_table",
    "print_json",
    "print_error",
    "print_warning",
    "print_success",
    "format_bytes",
    "console",
    # Logging
    "get_logger",
    "setup_logging",
    "LogContext",
    "log_context",
]
