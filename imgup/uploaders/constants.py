"""Shared constants for the compression and transport collaborators.

Compression defaults bound every image to 1000x1000 at quality 0.8, which
keeps typical photos well under a megabyte.
"""

# =============================================================================
# Compression Defaults
# =============================================================================

DEFAULT_MAX_WIDTH = 1000
DEFAULT_MAX_HEIGHT = 1000

# Quality factor in (0, 1]; Pillow receives round(quality * 100)
DEFAULT_QUALITY = 0.8

# Output format for compressed images
DEFAULT_IMAGE_FORMAT = "WEBP"

# =============================================================================
# Transport Defaults
# =============================================================================

DEFAULT_SERVER_URL = "http://localhost:3333"
DEFAULT_UPLOAD_PATH = "/uploads"
DEFAULT_FIELD_NAME = "file"

# HTTP timeout for a single upload request, in seconds
DEFAULT_TIMEOUT = 60

# Bytes handed to the HTTP client per read; progress is reported per chunk
DEFAULT_CHUNK_SIZE = 64 * 1024

# =============================================================================
# Orchestration Defaults
# =============================================================================

# Parallel upload tasks
DEFAULT_UPLOAD_WORKERS = 4
