"""Configuration handling for sprout"""

import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

from sprout.constants import (
    DEFAULT_LIMIT,
    DEFAULT_MAIN_BRANCH,
    DEFAULT_REMOTE,
    DEFAULT_SHELL,
    DIR_FILE_ENV,
    LINEAR_API_URL,
    SLUG_MAX_LENGTH,
)
from sprout.logging_config import get_logger

logger = get_logger(__name__)

# Keys in the per-user JSON file
LINEAR_API_KEY_FIELD = "linearApiKey"
GITHUB_TOKEN_FIELD = "githubToken"


@dataclass
class Config:
    """Runtime configuration for sprout with validation."""

    main_branch: str = DEFAULT_MAIN_BRANCH
    remote_name: str = DEFAULT_REMOTE
    limit: int = DEFAULT_LIMIT
    slug_max_length: int = SLUG_MAX_LENGTH
    install_dependencies: bool = True

    verbose: bool = False
    debug: bool = False

    # Session switching
    shell: str = field(default_factory=lambda: os.environ.get("SHELL") or DEFAULT_SHELL)
    dir_file: Optional[str] = field(default_factory=lambda: os.environ.get(DIR_FILE_ENV) or None)

    # Providers
    github_token: Optional[str] = None
    linear_api_url: str = LINEAR_API_URL

    def __post_init__(self):
        """Validate configuration after initialization."""
        self._validate_main_branch()
        self._validate_limit()
        self._validate_slug_max_length()

    def _validate_main_branch(self):
        """Validate main_branch is not empty."""
        if not self.main_branch or not self.main_branch.strip():
            raise ValueError("main_branch cannot be empty")
        self.main_branch = self.main_branch.strip()

    def _validate_limit(self):
        """Validate limit is positive."""
        if self.limit <= 0:
            raise ValueError(f"limit must be positive, got {self.limit}")

    def _validate_slug_max_length(self):
        if self.slug_max_length <= 0:
            raise ValueError(f"slug_max_length must be positive, got {self.slug_max_length}")

    @classmethod
    def from_args(cls, args) -> "Config":
        """Create Config from parsed command-line arguments."""
        return cls(
            main_branch=args.main_branch,
            limit=args.limit,
            install_dependencies=not args.no_install,
            verbose=args.verbose,
            debug=args.debug,
        )

    def to_dict(self) -> dict:
        """Convert config to dictionary for debug output."""
        return {
            "main_branch": self.main_branch,
            "remote_name": self.remote_name,
            "limit": self.limit,
            "slug_max_length": self.slug_max_length,
            "install_dependencies": self.install_dependencies,
            "verbose": self.verbose,
            "debug": self.debug,
            "shell": self.shell,
            "dir_file": self.dir_file,
            "github_token": "***" if self.github_token else None,
            "linear_api_url": self.linear_api_url,
        }


@dataclass
class UserConfig:
    """Per-user settings persisted between runs."""

    linear_api_key: Optional[str] = None
    github_token: Optional[str] = None
    # Keys written by other versions, kept so a save does not drop them
    extra: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "UserConfig":
        extra = {k: v for k, v in data.items() if k not in (LINEAR_API_KEY_FIELD, GITHUB_TOKEN_FIELD)}
        return cls(
            linear_api_key=data.get(LINEAR_API_KEY_FIELD) or None,
            github_token=data.get(GITHUB_TOKEN_FIELD) or None,
            extra=extra,
        )

    def to_dict(self) -> Dict[str, Any]:
        data = dict(self.extra)
        if self.linear_api_key:
            data[LINEAR_API_KEY_FIELD] = self.linear_api_key
        if self.github_token:
            data[GITHUB_TOKEN_FIELD] = self.github_token
        return data


def get_default_config_path() -> Path:
    """Location of the per-user config file."""
    return Path.home() / ".sprout" / "config"


class ConfigStore:
    """Loads and saves the per-user JSON config file."""

    def __init__(self, path: Optional[Path] = None):
        self.path = Path(path) if path else get_default_config_path()

    def load(self) -> UserConfig:
        """Read the config file. A missing or unreadable file yields empty settings."""
        if not self.path.exists():
            logger.debug(f"No config file at {self.path}")
            return UserConfig()

        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            logger.warning(f"Ignoring unreadable config file {self.path}: {e}")
            return UserConfig()

        if not isinstance(data, dict):
            logger.warning(f"Ignoring config file {self.path}: expected a JSON object")
            return UserConfig()

        return UserConfig.from_dict(data)

    def save(self, user_config: UserConfig) -> None:
        """Write the config file, creating its directory on first use."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(user_config.to_dict(), indent=2) + "\n", encoding="utf-8")
        try:
            os.chmod(self.path, 0o600)
        except OSError as e:
            logger.debug(f"Could not restrict permissions on {self.path}: {e}")
        logger.info(f"Saved config to {self.path}")
