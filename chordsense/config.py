"""Pipeline configuration - groups the per-stage configs.

Configs can be built in code, from a plain dict, or from a JSON file:

    {
        "strategy": "spectral",
        "sensitivity": "high",
        "extractor": {"window_size": 8192},
        "harmonics": {"tolerance_cents": 25},
        "matcher": {"min_confidence": 0.6}
    }

"sensitivity" picks a preset that the other sections then override.
"""

import json
from dataclasses import asdict, dataclass, field, fields, replace
from pathlib import Path
from typing import Any, Dict, Union

from .core import ConfigurationError
from .extraction import EXTRACTORS, ExtractorConfig
from .inference import MatcherConfig
from .processing import HarmonicFilterConfig

# Overrides applied on top of the defaults for each sensitivity level
SENSITIVITY_PRESETS: Dict[str, Dict[str, Dict[str, Any]]] = {
    "low": {
        "extractor": {"threshold_ratio": 0.4, "min_amplitude": 0.01},
        "matcher": {"min_confidence": 0.65},
    },
    "medium": {},
    "high": {
        "extractor": {"threshold_ratio": 0.2, "min_amplitude": 0.002, "min_rms": 5e-5},
        "matcher": {"min_confidence": 0.4},
    },
}

_SECTIONS = {
    "extractor": ExtractorConfig,
    "harmonics": HarmonicFilterConfig,
    "matcher": MatcherConfig,
}

# Sequence fields that JSON delivers as lists
_TUPLE_FIELDS = {"harmonic_weights", "subset_sizes"}


def _apply(section: str, base, overrides: Dict[str, Any]):
    if not isinstance(overrides, dict):
        raise ConfigurationError(f"'{section}' must be a mapping, got {type(overrides).__name__}")

    known = {f.name for f in fields(base)}
    unknown = sorted(set(overrides) - known)
    if unknown:
        raise ConfigurationError(f"Unknown {section} option(s): {', '.join(unknown)}")

    values = {
        key: tuple(value) if key in _TUPLE_FIELDS and isinstance(value, list) else value
        for key, value in overrides.items()
    }
    return replace(base, **values)


@dataclass
class PipelineConfig:
    """Configuration for the whole recognition pipeline.

    Attributes:
        strategy: Extraction strategy, "grid" or "spectral" (default: "grid")
        extractor: Frequency extractor settings
        harmonics: Harmonic filter settings
        matcher: Chord matcher settings
    """

    strategy: str = "grid"
    extractor: ExtractorConfig = field(default_factory=ExtractorConfig)
    harmonics: HarmonicFilterConfig = field(default_factory=HarmonicFilterConfig)
    matcher: MatcherConfig = field(default_factory=MatcherConfig)

    def validate(self) -> "PipelineConfig":
        """Raise ConfigurationError if any section is unusable; returns self."""
        if self.strategy not in EXTRACTORS:
            raise ConfigurationError(
                f"Unknown extraction strategy: {self.strategy!r}. "
                f"Supported: {sorted(EXTRACTORS)}"
            )
        self.extractor.validate()
        self.harmonics.validate()
        self.matcher.validate()
        return self

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def for_sensitivity(cls, level: str = "medium", strategy: str = "grid") -> "PipelineConfig":
        """
        Build a config from a named sensitivity preset.

        Args:
            level: "low" (fewer, stronger peaks), "medium" or "high"
            strategy: Extraction strategy

        Returns:
            Validated PipelineConfig
        """
        try:
            preset = SENSITIVITY_PRESETS[level]
        except KeyError:
            raise ConfigurationError(
                f"Unknown sensitivity: {level!r}. Supported: {list(SENSITIVITY_PRESETS)}"
            ) from None

        config = cls(strategy=strategy)
        for section, overrides in preset.items():
            setattr(config, section, _apply(section, getattr(config, section), overrides))
        return config.validate()

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PipelineConfig":
        """Build a validated config from a plain dict; unknown keys are rejected."""
        if not isinstance(data, dict):
            raise ConfigurationError(f"Config must be a mapping, got {type(data).__name__}")

        allowed = {"strategy", "sensitivity", *_SECTIONS}
        unknown = sorted(set(data) - allowed)
        if unknown:
            raise ConfigurationError(f"Unknown config key(s): {', '.join(unknown)}")

        config = cls.for_sensitivity(
            data.get("sensitivity", "medium"),
            strategy=data.get("strategy", "grid"),
        )
        for section in _SECTIONS:
            if section in data:
                setattr(config, section, _apply(section, getattr(config, section), data[section]))
        return config.validate()

    @classmethod
    def from_json(cls, path: Union[str, Path]) -> "PipelineConfig":
        """Load a config from a JSON file."""
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")
        try:
            data = json.loads(path.read_text())
        except json.JSONDecodeError as e:
            raise ConfigurationError(f"Invalid JSON in {path}: {e}") from e
        return cls.from_dict(data)
