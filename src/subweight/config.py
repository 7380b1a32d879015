"""Configuration loading and management for subweight.

Configuration sources are merged in priority order:
    1. Defaults (defined in Settings)
    2. Global config (~/.subweight.toml)
    3. Project config (./subweight.toml)
    4. Explicit config file (--config)
    5. Environment variables (SUBWEIGHT_* prefix)
    6. CLI overrides (passed as kwargs)

Example:
    >>> settings = load_settings(method="guess-worst", threshold=10)
    >>> settings.compare_params().method
    <CompareMethod.GUESS_WORST: 'guess-worst'>
"""

from __future__ import annotations

import os
import re
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, FrozenSet, Optional

from .exceptions import InvalidConfigError, SubweightError
from .models import CompareMethod, Dimension, Percent, RelativeChange

DEFAULT_THRESHOLD: Percent = 5.0
DEFAULT_PATH_PATTERN = "runtime/*/src/weights/*.rs"
DEFAULT_MAX_FILES = 1000


@dataclass(frozen=True)
class CompareParams:
    """Parameters that change how two formulas are compared.

    Attributes:
        method: Which component values are tried (see CompareMethod)
        unit: Dimension the formulas are projected onto
        ignore_errors: Skip unparsable files instead of aborting
        git_pull: Fetch the refname before checking it out
        offline: Never access the network; overrides git_pull
    """

    method: CompareMethod
    unit: Dimension = Dimension.TIME
    ignore_errors: bool = False
    git_pull: bool = False
    offline: bool = False

    def __post_init__(self) -> None:
        if not isinstance(self.method, CompareMethod):
            raise InvalidConfigError("method", self.method, "not a compare method")
        if not isinstance(self.unit, Dimension):
            raise InvalidConfigError("unit", self.unit, "not a unit")

    def should_pull(self) -> bool:
        return self.git_pull and not self.offline


@dataclass(frozen=True)
class FilterParams:
    """Which entries of a diff are relevant.

    Attributes:
        threshold: Minimal magnitude of a relative change in percent
        change: Only include these change types (None = all)
        extrinsic: Regex an extrinsic name must match
        pallet: Regex a pallet (file) name must match
    """

    threshold: Percent = DEFAULT_THRESHOLD
    change: Optional[FrozenSet[RelativeChange]] = None
    extrinsic: Optional[str] = None
    pallet: Optional[str] = None

    def __post_init__(self) -> None:
        if self.threshold < 0:
            raise InvalidConfigError("threshold", self.threshold, "must not be negative")
        for key in ("extrinsic", "pallet"):
            pattern = getattr(self, key)
            if pattern is None:
                continue
            try:
                re.compile(pattern)
            except re.error as e:
                raise InvalidConfigError(key, pattern, f"invalid regex: {e}")

    def included(self, change: RelativeChange) -> bool:
        return self.change is None or change in self.change


@dataclass(frozen=True)
class Settings:
    """Everything a compare run can be configured with.

    Attributes:
        method: Compare method name, required before comparing
        unit: time or proof
        ignore_errors, git_pull, offline: see CompareParams
        threshold, change, extrinsic, pallet: see FilterParams
        path_pattern: Comma separated globs below the repository root
        max_files: Abort when a pattern expands to more files
        verbosity: quiet, normal or verbose
        log_file: Also append log records to this file
    """

    method: Optional[str] = None
    unit: str = "time"
    ignore_errors: bool = False
    git_pull: bool = False
    offline: bool = False

    threshold: float = DEFAULT_THRESHOLD
    change: Optional[tuple] = None
    extrinsic: Optional[str] = None
    pallet: Optional[str] = None

    path_pattern: str = DEFAULT_PATH_PATTERN
    max_files: int = DEFAULT_MAX_FILES
    verbosity: str = "normal"
    log_file: Optional[str] = None

    def __post_init__(self) -> None:
        if self.max_files < 1:
            raise InvalidConfigError("max_files", self.max_files, "must be at least 1")
        if self.verbosity not in ("quiet", "normal", "verbose"):
            raise InvalidConfigError(
                "verbosity", self.verbosity, "expected quiet, normal or verbose"
            )

    def compare_params(self) -> CompareParams:
        if self.method is None:
            raise InvalidConfigError("method", None, "a compare method is required")
        try:
            method = CompareMethod.parse(self.method)
            unit = Dimension.parse(self.unit)
        except ValueError as e:
            raise InvalidConfigError("method/unit", f"{self.method}/{self.unit}", str(e))
        return CompareParams(
            method=method,
            unit=unit,
            ignore_errors=self.ignore_errors,
            git_pull=self.git_pull,
            offline=self.offline,
        )

    def filter_params(self) -> FilterParams:
        change = None
        if self.change:
            try:
                change = frozenset(RelativeChange.parse(str(c)) for c in self.change)
            except ValueError as e:
                raise InvalidConfigError("change", self.change, str(e))
        return FilterParams(
            threshold=float(self.threshold),
            change=change,
            extrinsic=self.extrinsic,
            pallet=self.pallet,
        )


_ENV_PREFIX = "SUBWEIGHT_"
_BOOL_FIELDS = {"ignore_errors", "git_pull", "offline"}
_INT_FIELDS = {"max_files"}
_FLOAT_FIELDS = {"threshold"}


def load_settings(config_file: Optional[Path] = None, **overrides: Any) -> Settings:
    """Load settings from TOML files, environment and explicit overrides.

    Overrides set to ``None`` are ignored so that CLI options left at their
    default do not mask values from config files.

    Raises:
        SubweightError: If a config file is missing or malformed.
    """
    merged: dict[str, Any] = {}

    global_config = Path.home() / ".subweight.toml"
    if global_config.exists():
        merged.update(_load_toml_section(global_config))

    project_config = Path.cwd() / "subweight.toml"
    if project_config.exists():
        merged.update(_load_toml_section(project_config))

    if config_file is not None:
        if not config_file.exists():
            raise SubweightError(f"Config file not found: {config_file}")
        merged.update(_load_toml_section(config_file))

    merged.update(_load_env_vars())

    if "verbose" in overrides:
        if overrides.pop("verbose"):
            overrides["verbosity"] = "verbose"
    if "quiet" in overrides:
        if overrides.pop("quiet"):
            overrides["verbosity"] = "quiet"

    merged.update({k: v for k, v in overrides.items() if v is not None})

    if isinstance(merged.get("change"), (list, set, frozenset)):
        merged["change"] = tuple(merged["change"])

    try:
        return Settings(**merged)
    except TypeError as e:
        raise SubweightError(f"Invalid configuration: {e}")


def _load_env_vars() -> dict[str, Any]:
    """Load SUBWEIGHT_* environment variables, e.g. SUBWEIGHT_THRESHOLD=10."""
    result: dict[str, Any] = {}
    for f in fields(Settings):
        env_key = f"{_ENV_PREFIX}{f.name.upper()}"
        raw = os.environ.get(env_key)
        if raw is None:
            continue
        try:
            result[f.name] = _parse_env_value(f.name, raw)
        except ValueError as e:
            raise SubweightError(f"Invalid {env_key}: {e}")
    return result


def _parse_env_value(name: str, value: str) -> Any:
    if name in _BOOL_FIELDS:
        lower = value.lower()
        if lower in ("true", "1", "yes", "on"):
            return True
        if lower in ("false", "0", "no", "off"):
            return False
        raise ValueError(f"expected true/false, got '{value}'")
    if name in _INT_FIELDS:
        return int(value)
    if name in _FLOAT_FIELDS:
        return float(value)
    if name == "change":
        return tuple(part.strip() for part in value.split(",") if part.strip())
    return value


def _load_toml_section(path: Path) -> dict:
    """Load the ``[subweight]`` table of a TOML file, or its top level."""
    try:
        import tomllib
    except ModuleNotFoundError:
        try:
            import tomli as tomllib  # type: ignore
        except ImportError:
            raise SubweightError(
                "TOML support requires Python 3.11+ or 'tomli' package. "
                "Install with: pip install tomli"
            )

    try:
        with open(path, "rb") as f:
            data = tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as e:
        raise SubweightError(f"Invalid config file '{path}': {e}")

    section = data.get("subweight", data)
    return dict(section)
