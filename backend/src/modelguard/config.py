"""Model configuration."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Any

VALIDATE_ON_CHANGE_MODES = ("async", "sync", "off")

_TRUE = ("1", "true", "yes", "on")
_FALSE = ("0", "false", "no", "off")


@dataclass
class ModelSettings:
    """Behaviour of a ValidatableModel when a tracked field changes.

    Attributes:
        raise_for_all: Re-validate and notify for every field on any change
            (True), or only for the field that changed (False)
        validate_on_change: "async" schedules the pass on the executor,
            "sync" runs it inline, "off" leaves validation to the caller
        max_workers: Size of the shared validation pool (None = executor default)
    """

    raise_for_all: bool = True
    validate_on_change: str = "async"
    max_workers: int | None = None

    def __post_init__(self) -> None:
        if self.validate_on_change not in VALIDATE_ON_CHANGE_MODES:
            raise ValueError(
                f"validate_on_change must be one of {', '.join(VALIDATE_ON_CHANGE_MODES)}, "
                f"got '{self.validate_on_change}'"
            )
        if self.max_workers is not None and self.max_workers < 1:
            raise ValueError(f"max_workers must be positive, got {self.max_workers}")

    @classmethod
    def from_env(cls) -> ModelSettings:
        """Create settings from environment variables.

        Reads:
        - MODELGUARD_RAISE_FOR_ALL (1/true/yes/on or 0/false/no/off)
        - MODELGUARD_VALIDATE_ON_CHANGE (async, sync or off)
        - MODELGUARD_MAX_WORKERS (positive integer)

        Unset variables keep the defaults.
        """
        kwargs: dict[str, Any] = {}

        raise_for_all = os.environ.get("MODELGUARD_RAISE_FOR_ALL")
        if raise_for_all:
            kwargs["raise_for_all"] = _parse_bool("MODELGUARD_RAISE_FOR_ALL", raise_for_all)

        mode = os.environ.get("MODELGUARD_VALIDATE_ON_CHANGE")
        if mode:
            kwargs["validate_on_change"] = mode.strip().lower()

        max_workers = os.environ.get("MODELGUARD_MAX_WORKERS")
        if max_workers:
            try:
                kwargs["max_workers"] = int(max_workers)
            except ValueError:
                raise ValueError(
                    f"MODELGUARD_MAX_WORKERS must be an integer, got '{max_workers}'"
                ) from None

        return cls(**kwargs)


def _parse_bool(name: str, value: str) -> bool:
    normalized = value.strip().lower()
    if normalized in _TRUE:
        return True
    if normalized in _FALSE:
        return False
    raise ValueError(f"{name} must be a boolean, got '{value}'")
