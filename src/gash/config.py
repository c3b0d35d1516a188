"""Configuration management for gash.

Settings come from command line flags first and fall back to the
``gash.*`` keys of ``git config``.
"""

import logging
from typing import Callable, Optional

from pydantic import BaseModel, Field, ValidationError

from .exceptions import ConfigurationError
from .signature import Orientation

logger = logging.getLogger(__name__)

DEFAULT_MAX_VARIANCE = 3600
CONFIG_SECTION = "gash"

ConfigGetter = Callable[[str], Optional[str]]


class GashConfig(BaseModel):
    """Resolved settings for one gash run."""

    signature: str = Field(description="Hex signature the hash must carry")
    max_variance: int = Field(
        default=DEFAULT_MAX_VARIANCE,
        ge=0,
        description="Maximum shift in seconds applied to either timestamp",
    )
    parallel: bool = Field(default=False, description="Search on a thread pool")
    progress: bool = Field(default=False, description="Show hashes tried so far")
    color: bool = Field(default=False, description="Color terminal output")
    stealth: bool = Field(
        default=False, description="Place the signature at the end of the hash"
    )
    force: bool = Field(
        default=False, description="Search even if HEAD already has the signature"
    )
    dry_run: bool = Field(default=False, description="Do not rewrite the commit")
    verbosity: int = Field(default=0, ge=0, description="Output detail level")

    @property
    def orientation(self) -> Orientation:
        return Orientation.SUFFIX if self.stealth else Orientation.PREFIX

    @property
    def is_hook_request(self) -> bool:
        return self.signature == "hook"


class ConfigResolver:
    """Merges command line values with ``git config`` values."""

    def __init__(self, get_config: ConfigGetter):
        """
        Initialize resolver.

        Args:
            get_config: Returns the value of a git config key or None if unset
        """
        self.get_config = get_config

    def _key(self, name: str) -> str:
        return f"{CONFIG_SECTION}.{name}"

    def _flag(self, cli_value: bool, name: str) -> bool:
        # A flag on the command line can only turn a setting on.
        if cli_value:
            return True
        return self.get_config(self._key(name)) == "true"

    def _signature(self, cli_value: Optional[str]) -> str:
        if cli_value is not None:
            return cli_value
        default = self.get_config(self._key("default"))
        if default is None:
            raise ConfigurationError(
                "No signature given and no value set for gash.default in git config"
            )
        return default

    def _max_variance(self, cli_value: Optional[int]) -> int:
        if cli_value is not None:
            return cli_value
        raw = self.get_config(self._key("max-variance"))
        if raw is None:
            return DEFAULT_MAX_VARIANCE
        try:
            return int(raw)
        except ValueError as e:
            raise ConfigurationError(
                "Failed to parse gash.max-variance as an integer! Error", str(e)
            )

    def resolve(
        self,
        signature: Optional[str] = None,
        max_variance: Optional[int] = None,
        parallel: bool = False,
        progress: bool = False,
        color: bool = False,
        stealth: bool = False,
        force: bool = False,
        dry_run: bool = False,
        verbosity: int = 0,
    ) -> GashConfig:
        """Build the effective configuration.

        Raises:
            ConfigurationError: If no signature is available or a value is invalid
        """
        try:
            config = GashConfig(
                signature=self._signature(signature),
                max_variance=self._max_variance(max_variance),
                parallel=self._flag(parallel, "parallel"),
                progress=self._flag(progress, "progress"),
                color=self._flag(color, "color"),
                stealth=self._flag(stealth, "stealth"),
                force=force,
                dry_run=dry_run,
                verbosity=verbosity,
            )
        except ValidationError as e:
            errors = "; ".join(
                f"{'.'.join(str(loc) for loc in error['loc'])}: {error['msg']}"
                for error in e.errors()
            )
            raise ConfigurationError("Invalid configuration", errors)

        logger.debug("Resolved configuration: %s", config.model_dump())
        return config
