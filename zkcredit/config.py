"""
Verifier configuration.

Loads config from:
  1. Defaults
  2. An optional JSON file
  3. Environment variables (``ZKCREDIT_*``)

Later sources override earlier ones.
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union

from .curve import Curve, get_curve
from .errors import ValidationError

logger = logging.getLogger(__name__)

ENV_PREFIX = "ZKCREDIT_"


@dataclass(frozen=True)
class VerifierConfig:
    curve: str = "bn254"
    min_score: int = 300
    max_score: int = 850
    domain: str = "zkcredit/v1"      # signing domain for submissions
    event_history: int = 1024

    def __post_init__(self) -> None:
        get_curve(self.curve)
        if self.min_score < 0 or self.min_score > self.max_score:
            raise ValidationError(
                f"invalid score range [{self.min_score}, {self.max_score}]"
            )
        if not self.domain:
            raise ValidationError("domain must be non-empty")
        if self.event_history < 1:
            raise ValidationError("event_history must be ≥ 1")

    @property
    def curve_params(self) -> Curve:
        return get_curve(self.curve)


_INT_FIELDS = {"min_score", "max_score", "event_history"}


def _coerce(name: str, value: Any) -> Any:
    if name in _INT_FIELDS:
        if isinstance(value, bool):
            raise ValidationError(f"{name} must be an integer")
        try:
            return int(value)
        except (TypeError, ValueError):
            raise ValidationError(f"{name} must be an integer, got {value!r}") from None
    if not isinstance(value, str):
        raise ValidationError(f"{name} must be a string, got {value!r}")
    return value


def load_config(
    path: Optional[Union[str, Path]] = None,
    env: Optional[Mapping[str, str]] = None,
) -> VerifierConfig:
    """
    Build a ``VerifierConfig`` from defaults, *path* (JSON object) and
    *env* (defaults to ``os.environ``).

    Unknown keys in the JSON file are rejected.
    """
    known = {f.name for f in fields(VerifierConfig)}
    values: Dict[str, Any] = {}

    if path is not None:
        p = Path(path)
        try:
            raw = json.loads(p.read_text(encoding="utf-8"))
        except json.JSONDecodeError as exc:
            raise ValidationError(f"{p}: invalid JSON: {exc}") from exc
        if not isinstance(raw, dict):
            raise ValidationError(f"{p}: expected a JSON object")
        unknown = set(raw) - known
        if unknown:
            raise ValidationError(f"{p}: unknown config keys {sorted(unknown)}")
        for name, value in raw.items():
            values[name] = _coerce(name, value)
        logger.debug("loaded verifier config from %s", p)

    if env is None:
        env = os.environ
    for name in known:
        key = ENV_PREFIX + name.upper()
        if key in env:
            values[name] = _coerce(name, env[key])
            logger.debug("config %s overridden by %s", name, key)

    return VerifierConfig(**values)
