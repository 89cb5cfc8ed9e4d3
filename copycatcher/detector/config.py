"""Detector configuration, loadable from YAML."""
from __future__ import annotations

from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, Optional, Tuple, Union

import yaml  # type: ignore

from .errors import InvalidParameterError
from .shingle import DEFAULT_SHINGLE_WIDTH
from .signature import DEFAULT_PERMUTATIONS
from .stats import DEFAULT_STD_FACTOR

# YAML hands back whatever the user typed, so every field is checked on construction
_FIELD_TYPES: Dict[str, Tuple[type, ...]] = {
    "permutation_count": (int,),
    "shingle_width": (int,),
    "std_factor": (int, float),
    "seed": (int,),
    "workers": (int,),
    "file_glob": (str,),
    "out_dir": (str,),
    "json_report": (bool,),
    "show_progress": (bool,),
}


def _describe(types: Tuple[type, ...]) -> str:
    return " or ".join(t.__name__ for t in types)


@dataclass(frozen=True)
class DetectorConfig:
    """Knobs for one detection run.

    Attributes
    ----------
    permutation_count : int
        Signature length; the accuracy knob.
    shingle_width : int
        Words per shingle.
    std_factor : float
        Standard deviations above the mean max similarity that count as
        suspicious. Higher means fewer false positives.
    seed : int | None
        Seed for the hash family; ``None`` draws a fresh family per run.
    workers : int
        Threads used for the two quadratic passes.
    file_glob : str
        Glob restricting which files are enumerated.
    out_dir : str
        Directory receiving the reports.
    json_report : bool
        Also write a JSON report.
    show_progress : bool
        Display tqdm progress bars.
    """

    permutation_count: int = DEFAULT_PERMUTATIONS
    shingle_width: int = DEFAULT_SHINGLE_WIDTH
    std_factor: float = DEFAULT_STD_FACTOR
    seed: Optional[int] = None
    workers: int = 1
    file_glob: str = "*.java"
    out_dir: str = "."
    json_report: bool = False
    show_progress: bool = True

    def __post_init__(self) -> None:
        for name, expected in _FIELD_TYPES.items():
            value = getattr(self, name)
            if name == "seed" and value is None:
                continue
            # bool is an int subclass; only accept it for the flag fields
            wrong_bool = isinstance(value, bool) and bool not in expected
            if wrong_bool or not isinstance(value, expected):
                raise InvalidParameterError(f"{name} must be {_describe(expected)}, got {value!r}")

        if self.permutation_count <= 0:
            raise InvalidParameterError(f"permutation_count must be positive, got {self.permutation_count}")
        if self.shingle_width <= 0:
            raise InvalidParameterError(f"shingle_width must be positive, got {self.shingle_width}")
        if self.std_factor < 0:
            raise InvalidParameterError(f"std_factor must be non-negative, got {self.std_factor}")
        if self.workers < 1:
            raise InvalidParameterError(f"workers must be >= 1, got {self.workers}")

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "DetectorConfig":
        """Build a config from a mapping; ``None`` (an empty YAML section) means defaults."""
        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise InvalidParameterError(f"detector config must be a mapping, got {type(data).__name__}")
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise InvalidParameterError(f"Unknown config keys: {', '.join(sorted(unknown))}")
        return cls(**data)

    @classmethod
    def from_yaml(cls, path: Union[str, Path]) -> "DetectorConfig":
        """Load the ``detector`` section of a YAML config file."""
        with Path(path).open() as f:
            data = yaml.safe_load(f) or {}
        if not isinstance(data, dict):
            raise InvalidParameterError(f"{path}: expected a mapping at top level")
        return cls.from_dict(data.get("detector") or {})

    def with_overrides(self, **overrides: Any) -> "DetectorConfig":
        """Copy with every non-``None`` override applied."""
        return replace(self, **{k: v for k, v in overrides.items() if v is not None})
