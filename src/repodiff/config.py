"""Configuration management for Repodiff."""

import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .exceptions import ConfigurationError

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "https://api.github.com"
DEFAULT_MAX_PARALLEL = 5
TOKEN_ENV_VAR = "GITHUB_TOKEN"
API_URL_ENV_VAR = "GITHUB_API_URL"


class RepositoryDescriptor(BaseModel):
    """Remote repository and the paths of interest inside it.

    Loaded once per run and read-only afterwards.
    """

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Repository identifier in owner/repo form")
    # Accepted but not used to pin a ref yet
    branch: str = Field(default="main", description="Branch name")
    files: List[str] = Field(
        default_factory=list,
        description="Root paths compared when no explicit path is given",
    )
    ignore: List[str] = Field(
        default_factory=list,
        description="Substrings; any discovered path containing one is skipped",
    )

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        """Require an owner/repo identifier."""
        v = v.strip()
        parts = v.split("/")
        if len(parts) != 2 or not all(parts):
            raise ValueError(f"Expected 'owner/repo', got '{v}'")
        return v

    @field_validator("files", "ignore")
    @classmethod
    def drop_blank_entries(cls, v: List[str]) -> List[str]:
        """Strip entries and drop the empty ones."""
        return [item.strip() for item in v if item.strip()]

    def is_ignored(self, path: str) -> bool:
        """Return True when any ignore entry is a substring of ``path``."""
        return any(pattern in path for pattern in self.ignore)


@dataclass(frozen=True)
class RunOptions:
    """Per-run switches coming from the command line."""

    token: str
    compare: bool = False
    verbose: bool = False
    path: Optional[str] = None
    local_root: Path = Path(".")
    max_parallel: int = DEFAULT_MAX_PARALLEL
    api_url: str = DEFAULT_API_URL
    diff_algorithm: Literal["positional", "aligned"] = "positional"

    @property
    def path_override(self) -> Optional[str]:
        """Explicit path override, or None when blank."""
        if self.path is None or not self.path.strip():
            return None
        return self.path.strip()


class ConfigManager:
    """Loads the repository descriptor and credentials."""

    DEFAULT_CONFIG_PATH = Path("diffs.json")

    def __init__(self, config_path: Optional[Path] = None):
        self.config_path = config_path or self.DEFAULT_CONFIG_PATH
        self._descriptor: Optional[RepositoryDescriptor] = None

    def load(self) -> RepositoryDescriptor:
        """Read and validate the configuration file.

        Raises:
            ConfigurationError: If the file is missing, unreadable or invalid
        """
        try:
            with open(self.config_path, "r") as f:
                data = json.load(f)
        except FileNotFoundError:
            raise ConfigurationError(
                f"Configuration file not found: {self.config_path}"
            )
        except OSError as e:
            raise ConfigurationError(
                f"Failed to read {self.config_path}", details=str(e)
            ) from e
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise ConfigurationError(
                f"Invalid JSON in {self.config_path}", details=str(e)
            ) from e

        if not isinstance(data, dict):
            raise ConfigurationError(
                f"Invalid configuration in {self.config_path}",
                details="top-level value must be an object",
            )

        try:
            self._descriptor = RepositoryDescriptor(**data)
        except ValidationError as e:
            raise ConfigurationError(
                f"Invalid configuration in {self.config_path}", details=str(e)
            ) from e

        logger.debug(
            f"Loaded {self._descriptor.name}: {len(self._descriptor.files)} roots, "
            f"{len(self._descriptor.ignore)} ignore entries"
        )
        return self._descriptor

    @staticmethod
    def get_token() -> str:
        """Return the bearer token from the environment.

        Raises:
            ConfigurationError: If the token is missing or blank
        """
        token = os.environ.get(TOKEN_ENV_VAR, "").strip()
        if not token:
            raise ConfigurationError(f"Missing github token -> {TOKEN_ENV_VAR}")
        return token

    @staticmethod
    def get_api_url() -> str:
        """Return the API base URL, honouring the environment override."""
        return os.environ.get(API_URL_ENV_VAR, "").strip() or DEFAULT_API_URL
