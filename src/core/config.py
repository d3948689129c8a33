"""Runtime configuration model for delta ingest.

This module owns all environment variable parsing and validation.
Other modules consume a typed config object instead of raw env reads.
"""

from __future__ import annotations

from dataclasses import dataclass
import os

from core.constants import (
    DEFAULT_DELETION_MARKER,
    DEFAULT_LOG_LEVEL,
    DEFAULT_WRITE_BATCH_SIZE,
    FALSY_VALUES,
    SUPPORTED_LOG_LEVELS,
    TRUTHY_VALUES,
)
from core.errors import IngestConfigError


@dataclass(frozen=True)
class IngestConfig:
    """Validated runtime configuration.

    Attributes:
        deletion_marker: Name marker preceding the data suffix of deletion files.
        streaming: Stream delta entries into the store instead of materializing.
        write_batch_size: Number of delta entries per columnar write batch.
        log_level: Minimum structured log level.
    """

    deletion_marker: str = DEFAULT_DELETION_MARKER
    streaming: bool = True
    write_batch_size: int = DEFAULT_WRITE_BATCH_SIZE
    log_level: str = DEFAULT_LOG_LEVEL

    @classmethod
    def from_env(cls) -> "IngestConfig":
        """Build config from process environment variables.

        Returns:
            A validated config object.

        Raises:
            IngestConfigError: If environment values are invalid.
        """
        deletion_marker = os.getenv("DELTA_INGEST_DELETION_MARKER", DEFAULT_DELETION_MARKER)
        if not deletion_marker.strip():
            raise IngestConfigError(
                "Invalid DELTA_INGEST_DELETION_MARKER value: expected a non-empty marker. "
                f"Unset it to use the default '{DEFAULT_DELETION_MARKER}'."
            )
        return cls(
            deletion_marker=deletion_marker.strip(),
            streaming=_parse_bool(
                "DELTA_INGEST_STREAMING", os.getenv("DELTA_INGEST_STREAMING", "1")
            ),
            write_batch_size=_parse_batch_size(
                os.getenv("DELTA_INGEST_WRITE_BATCH_SIZE", str(DEFAULT_WRITE_BATCH_SIZE))
            ),
            log_level=_parse_log_level(os.getenv("DELTA_INGEST_LOG_LEVEL", DEFAULT_LOG_LEVEL)),
        )


def _parse_bool(name: str, raw_value: str) -> bool:
    """Parse a boolean flag environment value.

    Args:
        name: Environment variable name for error context.
        raw_value: Raw string from environment.

    Returns:
        Parsed flag.

    Raises:
        IngestConfigError: If value is not a recognized flag.
    """
    normalized = raw_value.strip().lower()
    if normalized in TRUTHY_VALUES:
        return True
    if normalized in FALSY_VALUES:
        return False
    raise IngestConfigError(
        f"Invalid {name} value: expected one of {TRUTHY_VALUES + FALSY_VALUES}, "
        f"got '{raw_value}'. Set {name} to 1 or 0."
    )


def _parse_batch_size(raw_value: str) -> int:
    """Parse the write batch size environment value.

    Args:
        raw_value: Raw string from environment.

    Returns:
        Positive batch size.

    Raises:
        IngestConfigError: If value is not a positive integer.
    """
    try:
        batch_size = int(raw_value)
    except ValueError as error:
        raise IngestConfigError(
            "Invalid DELTA_INGEST_WRITE_BATCH_SIZE value: "
            f"expected integer, got '{raw_value}'. "
            "Set DELTA_INGEST_WRITE_BATCH_SIZE to a positive number."
        ) from error
    if batch_size <= 0:
        raise IngestConfigError(
            "Invalid DELTA_INGEST_WRITE_BATCH_SIZE value: "
            f"expected a positive integer, got {batch_size}."
        )
    return batch_size


def _parse_log_level(raw_value: str) -> str:
    """Parse and validate the log level environment value."""
    level = raw_value.strip().lower()
    if level not in SUPPORTED_LOG_LEVELS:
        raise IngestConfigError(
            f"Invalid DELTA_INGEST_LOG_LEVEL value: expected one of {SUPPORTED_LOG_LEVELS}, "
            f"got '{raw_value}'."
        )
    return level
