from dataclasses import dataclass, field
from enum import Enum, IntEnum
from typing import List, Dict, Any, Optional, NamedTuple, Tuple

# ------------------------ Enumerations ------------------------ #

class Script(str, Enum):
    DEVANAGARI = "devanagari"
    ROMANIZED = "romanized"
    MIXED = "mixed"
    UNKNOWN = "unknown"


class Weight(IntEnum):
    LIGHT = 1
    HEAVY = 2


class ErrorKind(str, Enum):
    NONE = "none"
    TOO_SHORT = "short"
    TOO_LONG = "long"
    PATTERN_MISMATCH = "pattern"


# Cell shown in place of a weight for a syllable that breaks the meter
ERROR_CELL = "x"

# ------------------------ Value types ------------------------ #

@dataclass(frozen=True)
class Syllable:
    text: str
    weight: Weight
    is_error: bool = False

    @property
    def cell(self) -> str:
        return ERROR_CELL if self.is_error else str(int(self.weight))

    def to_dict(self) -> Dict[str, Any]:
        return {"text": self.text, "weight": int(self.weight), "is_error": self.is_error}


@dataclass(frozen=True)
class Foot:
    """
    A named group of consecutive syllables.

    key:  library key of the pattern that produced the foot (e.g. "mufailun")
    name: display name in the script of the composition, or the error tag
    tag:  presentation hint only; never read by validation
    """
    key: str
    name: str
    syllables: Tuple[Syllable, ...]
    tag: str = ""

    @property
    def weights(self) -> List[int]:
        return [int(s.weight) for s in self.syllables]

    @property
    def signature(self) -> str:
        return "".join(str(w) for w in self.weights)

    @property
    def is_error(self) -> bool:
        return any(s.is_error for s in self.syllables)

    @property
    def cells(self) -> List[str]:
        return [s.cell for s in self.syllables]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "key": self.key,
            "name": self.name,
            "tag": self.tag,
            "syllables": [s.to_dict() for s in self.syllables],
            "weights": self.weights,
            "cells": self.cells,
            "is_error": self.is_error,
        }


@dataclass(frozen=True)
class LineAnalysis:
    raw_line: str
    is_invalid: bool = False
    feet: Tuple[Foot, ...] = ()
    syllables: Tuple[Syllable, ...] = ()
    has_meter_error: bool = False
    error_kind: ErrorKind = ErrorKind.NONE

    @property
    def syllable_count(self) -> int:
        return len(self.syllables)

    @property
    def weight_signature(self) -> str:
        # Read from the feet, like the grid the reader sees
        return "".join(f.signature for f in self.feet)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "line": self.raw_line,
            "is_invalid": self.is_invalid,
            "feet": [f.to_dict() for f in self.feet],
            "syllables": [s.to_dict() for s in self.syllables],
            "has_meter_error": self.has_meter_error,
            "error_kind": self.error_kind.value,
        }


class DominantPattern(NamedTuple):
    syllable_count: int
    weight_signature: str

    def __str__(self) -> str:
        return f"{self.syllable_count}-{self.weight_signature}"


@dataclass(frozen=True)
class MeterDescription:
    title: str
    foot_names: List[str]
    weight_patterns: List[str]
    bahr_name: Optional[str] = None
    fixed_feet: Tuple[Foot, ...] = ()

    @property
    def pattern_string(self) -> str:
        return " ".join(self.foot_names)

    @property
    def weight_string(self) -> str:
        return " ".join(self.weight_patterns)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "title": self.title,
            "pattern_string": self.pattern_string,
            "weight_string": self.weight_string,
            "foot_names": list(self.foot_names),
            "weight_patterns": list(self.weight_patterns),
            "bahr_name": self.bahr_name,
            "fixed_feet": [f.to_dict() for f in self.fixed_feet],
        }


@dataclass(frozen=True)
class CompositionResult:
    language: Script
    lines: List[LineAnalysis] = field(default_factory=list)
    has_errors: bool = False
    message: str = ""
    dominant: Optional[DominantPattern] = None
    meter: Optional[MeterDescription] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "language": self.language.value,
            "lines": [ln.to_dict() for ln in self.lines],
            "has_errors": self.has_errors,
            "message": self.message,
            "dominant": str(self.dominant) if self.dominant else None,
            "meter": self.meter.to_dict() if self.meter else None,
        }
