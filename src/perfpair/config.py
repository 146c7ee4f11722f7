"""Run configuration and YAML profile loading.

Handles:
- Default run settings (warmup, trials, seed, display names).
- Loading reusable run profiles from YAML files.
- Merging CLI options over profile values.
- Validating the final configuration before anything is executed.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

log = logging.getLogger("perfpair")


# ---------------------------------------------------------------------------
# RunConfig
# ---------------------------------------------------------------------------


@dataclass
class RunConfig:
    """Resolved settings for one comparison run."""

    name: str = "Benchmark"
    original_name: str = "Original"
    optimized_name: str = "Optimized"

    warmup: int = 100  # Unmeasured iterations, one random input each
    trials: int = 100  # Measured trials, one full pass per candidate each
    seed: int = 42  # Seed for warmup input selection
    skip_verify: bool = False


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------


@dataclass
class ValidationError:
    """A single configuration validation error."""

    field: str
    message: str
    severity: str = "error"  # "error" or "warning"


def validate_config(config: RunConfig) -> list[ValidationError]:
    """Validate a run configuration.

    Returns a list of validation errors. Empty list means valid.
    """
    errors: list[ValidationError] = []

    if config.trials < 1:
        errors.append(
            ValidationError(
                field="trials",
                message=f"Need at least 1 benchmark trial (got {config.trials}).",
            )
        )
    elif config.trials < 3:
        errors.append(
            ValidationError(
                field="trials",
                message=(
                    f"Only {config.trials} trial(s): standard deviation and "
                    f"distribution will not be meaningful."
                ),
                severity="warning",
            )
        )

    if config.warmup < 0:
        errors.append(
            ValidationError(
                field="warmup",
                message=f"Warmup iterations cannot be negative (got {config.warmup}).",
            )
        )

    for field_name in ("original_name", "optimized_name"):
        if not getattr(config, field_name).strip():
            errors.append(
                ValidationError(
                    field=field_name,
                    message="Implementation display names must be non-empty.",
                )
            )

    if config.original_name == config.optimized_name:
        errors.append(
            ValidationError(
                field="optimized_name",
                message=(
                    f"Both implementations are named '{config.original_name}'; "
                    f"the report columns will be indistinguishable."
                ),
                severity="warning",
            )
        )

    return errors


def check_config(config: RunConfig) -> None:
    """Log validation warnings and raise ValueError on any error."""
    problems = validate_config(config)
    for w in problems:
        if w.severity == "warning":
            log.warning("Config warning: %s: %s", w.field, w.message)
    fatal = [e for e in problems if e.severity == "error"]
    if fatal:
        messages = [f"  {e.field}: {e.message}" for e in fatal]
        raise ValueError("Invalid run configuration:\n" + "\n".join(messages))


# ---------------------------------------------------------------------------
# YAML loading
# ---------------------------------------------------------------------------


def _load_yaml(path: Path) -> Any:
    try:
        import yaml
    except ImportError as exc:
        raise ImportError(
            "PyYAML is required for loading profiles and input files. "
            "Install it with: pip install pyyaml"
        ) from exc

    if not path.exists():
        raise FileNotFoundError(f"File not found: {path}")

    return yaml.safe_load(path.read_text())


def load_profile(profile_path: Path) -> dict[str, Any]:
    """Load a run profile from a YAML file.

    Profile format::

        name: "dict merge"
        original_name: "loop"
        optimized_name: "comprehension"
        warmup: 200
        trials: 50
        seed: 7
        skip_verify: false

    Returns:
        The parsed YAML as a dict.
    """
    data = _load_yaml(profile_path)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"Profile must be a YAML mapping, got {type(data).__name__}")
    return data


def load_inputs(inputs_path: Path) -> list[Any]:
    """Load the benchmark input values from a YAML or JSON file.

    The document must be a non-empty list; each element is passed as-is to
    both candidates.
    """
    data = _load_yaml(inputs_path)
    if not isinstance(data, list):
        raise ValueError(f"Inputs file must contain a list, got {type(data).__name__}")
    if not data:
        raise ValueError(f"Inputs file is empty: {inputs_path}")
    return data


def config_from_profile(
    profile_data: dict[str, Any],
    *,
    cli_overrides: dict[str, Any] | None = None,
) -> RunConfig:
    """Build a RunConfig from a parsed profile.

    CLI overrides that are not None take precedence over profile values,
    which take precedence over RunConfig defaults.

    Args:
        profile_data: Parsed YAML profile dict.
        cli_overrides: CLI option values keyed by RunConfig field name.

    Returns:
        RunConfig with settings populated.
    """
    cli = cli_overrides or {}
    defaults = RunConfig()

    def pick(key: str) -> Any:
        if cli.get(key) is not None:
            return cli[key]
        if profile_data.get(key) is not None:
            return profile_data[key]
        return getattr(defaults, key)

    unknown = set(profile_data) - set(RunConfig.__dataclass_fields__)
    for key in sorted(unknown):
        log.warning("Ignoring unknown profile key: %s", key)

    return RunConfig(
        name=str(pick("name")),
        original_name=str(pick("original_name")),
        optimized_name=str(pick("optimized_name")),
        warmup=int(pick("warmup")),
        trials=int(pick("trials")),
        seed=int(pick("seed")),
        skip_verify=bool(pick("skip_verify")),
    )
