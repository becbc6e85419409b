"""Configuration management for imgup.

Supports YAML profiles and environment variable overrides.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

import yaml

from imgup.core.exceptions import ConfigurationError, ProfileNotFoundError
from imgup.uploaders.compression import CompressionSettings
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

# =============================================================================
# Constants
# =============================================================================

CONFIG_DIR = Path.home() / ".config" / "imgup"
CONFIG_FILE = CONFIG_DIR / "config.yaml"

# Environment variable names
ENV_URL = "IMGUP_URL"
ENV_PROFILE = "IMGUP_PROFILE"
ENV_VERIFY_SSL = "IMGUP_VERIFY_SSL"
ENV_TIMEOUT = "IMGUP_TIMEOUT"


# =============================================================================
# Profile
# =============================================================================


@dataclass
class Profile:
    """Configuration profile for an upload endpoint."""

    url: str = DEFAULT_SERVER_URL
    upload_path: str = DEFAULT_UPLOAD_PATH
    verify_ssl: bool = True
    timeout: int = DEFAULT_TIMEOUT
    max_width: int = DEFAULT_MAX_WIDTH
    max_height: int = DEFAULT_MAX_HEIGHT
    quality: float = DEFAULT_QUALITY
    image_format: str = DEFAULT_IMAGE_FORMAT
    workers: int = DEFAULT_UPLOAD_WORKERS

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "url": self.url,
            "upload_path": self.upload_path,
            "verify_ssl": self.verify_ssl,
            "timeout": self.timeout,
            "max_width": self.max_width,
            "max_height": self.max_height,
            "quality": self.quality,
            "image_format": self.image_format,
            "workers": self.workers,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Profile":
        """Create from dictionary."""
        return cls(
            url=data.get("url", DEFAULT_SERVER_URL),
            upload_path=data.get("upload_path", DEFAULT_UPLOAD_PATH),
            verify_ssl=data.get("verify_ssl", True),
            timeout=int(data.get("timeout", DEFAULT_TIMEOUT)),
            max_width=int(data.get("max_width", DEFAULT_MAX_WIDTH)),
            max_height=int(data.get("max_height", DEFAULT_MAX_HEIGHT)),
            quality=float(data.get("quality", DEFAULT_QUALITY)),
            image_format=str(data.get("image_format", DEFAULT_IMAGE_FORMAT)).upper(),
            workers=int(data.get("workers", DEFAULT_UPLOAD_WORKERS)),
        )

    def compression_settings(self) -> CompressionSettings:
        """Build the compression parameters for this profile."""
        return CompressionSettings(
            max_width=self.max_width,
            max_height=self.max_height,
            quality=self.quality,
            image_format=self.image_format,
        )


# =============================================================================
# Config
# =============================================================================


@dataclass
class Config:
    """Application configuration."""

    default_profile: str = "default"
    output_format: str = "table"
    profiles: dict[str, Profile] = field(default_factory=dict)

    @classmethod
    def load(cls, config_path: Optional[Path] = None) -> "Config":
        """Load config from file with environment variable overrides.

        Priority (highest to lowest):
        1. Environment variables
        2. Config file
        3. Defaults

        Args:
            config_path: Optional path to config file.

        Returns:
            Loaded configuration.

        Raises:
            ConfigurationError: If the file exists but cannot be parsed.
        """
        path = config_path or CONFIG_FILE
        config = cls()

        if path.exists():
            try:
                with open(path) as f:
                    data = yaml.safe_load(f) or {}

                config.default_profile = data.get("default_profile", "default")
                config.output_format = data.get("output_format", "table")

                for name, pdata in (data.get("profiles") or {}).items():
                    config.profiles[name] = Profile.from_dict(pdata or {})
            except (OSError, yaml.YAMLError, AttributeError, TypeError, ValueError) as e:
                raise ConfigurationError(f"Failed to load config: {e}")

        if url := os.getenv(ENV_URL):
            base = config.profiles.get("default", Profile())
            verify_ssl = os.getenv(ENV_VERIFY_SSL, "true").lower() in ("true", "1", "yes")
            timeout = int(os.getenv(ENV_TIMEOUT, str(base.timeout)))

            config.profiles["default"] = Profile.from_dict(
                {**base.to_dict(), "url": url, "verify_ssl": verify_ssl, "timeout": timeout}
            )

        if profile := os.getenv(ENV_PROFILE):
            config.default_profile = profile

        return config

    def save(self, config_path: Optional[Path] = None) -> None:
        """Save config to file.

        Args:
            config_path: Optional path to config file.
        """
        path = config_path or CONFIG_FILE
        path.parent.mkdir(parents=True, exist_ok=True)

        data = {
            "default_profile": self.default_profile,
            "output_format": self.output_format,
            "profiles": {name: p.to_dict() for name, p in self.profiles.items()},
        }

        with open(path, "w") as f:
            yaml.dump(data, f, default_flow_style=False, sort_keys=False)

    def get_profile(self, name: Optional[str] = None) -> Profile:
        """Get profile by name or default.

        Raises:
            ProfileNotFoundError: If profile doesn't exist.
        """
        name = name or self.default_profile
        if name not in self.profiles:
            raise ProfileNotFoundError(name)
        return self.profiles[name]

    def has_profile(self, name: str) -> bool:
        """Check if profile exists."""
        return name in self.profiles

    def add_profile(self, name: str, **settings: Any) -> Profile:
        """Add or replace a profile.

        Args:
            name: Profile name.
            **settings: Profile fields; missing ones take their defaults.

        Returns:
            Created profile.
        """
        profile = Profile.from_dict(settings)
        self.profiles[name] = profile
        return profile

    def remove_profile(self, name: str) -> bool:
        """Remove a profile. Returns False if it didn't exist."""
        if name in self.profiles:
            del self.profiles[name]
            return True
        return False

    def set_default_profile(self, name: str) -> None:
        """Set the default profile.

        Raises:
            ProfileNotFoundError: If profile doesn't exist.
        """
        if name not in self.profiles:
            raise ProfileNotFoundError(name)
        self.default_profile = name
