"""Configuration classes for sngraph components."""

from __future__ import annotations

from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, Tuple, Union

import yaml

from sngraph.errors import ConfigurationError


@dataclass(frozen=True)
class RadioConfig:
    """Parameters of the first-order radio energy model.

    Energies are per bit; the cost model multiplies them by the packet size
    and reports integer micro-joules.
    """

    # 512-byte packets
    bits_per_packet: int = 512 * 8

    # Transmitter/receiver electronics, J/bit
    elec_energy: float = 100e-9

    # Transmit amplifier, J/bit/m^2
    amp_energy: float = 100e-12

    # Holding a packet in storage, J/bit
    storage_energy: float = 100e-9

    def __post_init__(self) -> None:
        if self.bits_per_packet <= 0:
            raise ValueError("bits_per_packet must be positive")
        for name in ("elec_energy", "amp_energy", "storage_energy"):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} must be non-negative")


@dataclass(frozen=True)
class GenerationConfig:
    """Configuration for rejection-sampled random network generation."""

    # Candidate networks tried per node before giving up
    attempts_per_node: int = 1000

    def attempt_budget(self, node_count: int) -> int:
        """Return the total number of candidates allowed for ``node_count`` nodes."""
        return max(1, node_count * self.attempts_per_node)


DEFAULT_RADIO = RadioConfig()
DEFAULT_GENERATION = GenerationConfig()


def _section(
    data: Dict[str, Any], name: str, cls: type, default: Any, path: Path
) -> Any:
    raw = data.get(name)
    if raw is None:
        return default
    if not isinstance(raw, dict):
        raise ConfigurationError(f"'{name}' must be a mapping", path=path)
    allowed = {f.name for f in fields(cls)}
    unknown = sorted(str(k) for k in raw if k not in allowed)
    if unknown:
        raise ConfigurationError(
            f"Unrecognized key(s) in '{name}': {', '.join(unknown)}", path=path
        )
    try:
        # PyYAML reads exponent floats without a dot (100e-9) as strings
        values = {k: type(getattr(default, k))(v) for k, v in raw.items()}
        return replace(default, **values)
    except (TypeError, ValueError) as exc:
        raise ConfigurationError(f"Invalid '{name}' section: {exc}", path=path) from exc


def load_config(path: Union[str, Path]) -> Tuple[RadioConfig, GenerationConfig]:
    """Load radio and generation settings from a YAML file.

    The document is a mapping with optional ``radio`` and ``generation``
    sections whose keys mirror the dataclass fields. Missing sections fall
    back to the defaults.

    Raises:
        ConfigurationError: If the file is missing, is not a mapping, or has
            unknown or invalid keys.
    """
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except UnicodeDecodeError as exc:
        raise ConfigurationError(
            f"config is not valid UTF-8 text: {exc.reason}", path=path
        ) from exc
    except OSError as exc:
        raise ConfigurationError(f"cannot read config: {exc.strerror}", path=path) from exc

    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigurationError(f"invalid YAML: {exc}", path=path) from exc

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigurationError("top-level YAML must be a mapping", path=path)

    unknown = sorted(str(k) for k in data if k not in ("radio", "generation"))
    if unknown:
        raise ConfigurationError(
            f"Unrecognized section(s): {', '.join(unknown)}", path=path
        )

    radio = _section(data, "radio", RadioConfig, DEFAULT_RADIO, path)
    generation = _section(data, "generation", GenerationConfig, DEFAULT_GENERATION, path)
    return radio, generation
