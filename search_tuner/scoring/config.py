"""
Scoring configuration: field weights, match multipliers and BM25 parameters.

Each group is keyed by a closed enum, so the key sets never grow or shrink.
String keys are accepted at the boundary (HTTP, config blobs); unknown keys
are ignored rather than rejected.
"""

import json
import logging
import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Type, TypeVar, Union

import yaml

logger = logging.getLogger(__name__)


class FieldName(str, Enum):
    NAME = "name"
    CATEGORY = "category"
    TAGS = "tags"
    DESCRIPTION = "description"
    REVIEWS = "reviews"


class MatchType(str, Enum):
    EXACT = "exact"
    PREFIX = "prefix"
    CONTAINS = "contains"
    FUZZY = "fuzzy"


class BM25Param(str, Enum):
    K1 = "k1"  # Term frequency saturation
    B = "b"    # Length normalization


DEFAULT_FIELD_WEIGHTS: Dict[FieldName, float] = {
    FieldName.NAME: 100.0,
    FieldName.CATEGORY: 80.0,
    FieldName.TAGS: 60.0,
    FieldName.DESCRIPTION: 40.0,
    FieldName.REVIEWS: 20.0,
}

DEFAULT_MATCH_MULTIPLIERS: Dict[MatchType, float] = {
    MatchType.EXACT: 1.5,
    MatchType.PREFIX: 1.2,
    MatchType.CONTAINS: 1.0,
    MatchType.FUZZY: 0.7,
}

DEFAULT_BM25_PARAMS: Dict[BM25Param, float] = {
    BM25Param.K1: 1.2,
    BM25Param.B: 0.75,
}

EXPORT_FORMATS = ("json", "yaml")

# Group names accepted on import; the browser tuner exports camelCase
_GROUP_ALIASES = {
    "field_weights": "field_weights",
    "fieldWeights": "field_weights",
    "match_multipliers": "match_multipliers",
    "matchMultipliers": "match_multipliers",
    "bm25_params": "bm25_params",
    "bm25Params": "bm25_params",
}

E = TypeVar("E", bound=Enum)


def parse_key(enum_cls: Type[E], key: Union[str, E]) -> Optional[E]:
    """Resolve a string or enum key; None when the key is not recognized"""
    try:
        return enum_cls(key)
    except ValueError:
        return None


@dataclass
class ScoringConfig:
    """Values for one scoring pass. Copied per search, never shared."""
    field_weights: Dict[FieldName, float] = field(default_factory=lambda: dict(DEFAULT_FIELD_WEIGHTS))
    match_multipliers: Dict[MatchType, float] = field(default_factory=lambda: dict(DEFAULT_MATCH_MULTIPLIERS))
    bm25_params: Dict[BM25Param, float] = field(default_factory=lambda: dict(DEFAULT_BM25_PARAMS))

    @property
    def k1(self) -> float:
        return self.bm25_params[BM25Param.K1]

    @property
    def b(self) -> float:
        return self.bm25_params[BM25Param.B]

    def copy(self) -> "ScoringConfig":
        return ScoringConfig(
            field_weights=dict(self.field_weights),
            match_multipliers=dict(self.match_multipliers),
            bm25_params=dict(self.bm25_params),
        )

    def to_dict(self) -> Dict[str, Dict[str, float]]:
        """Plain nested dict with string keys, safe to serialize or mutate"""
        return {
            "field_weights": {k.value: v for k, v in self.field_weights.items()},
            "match_multipliers": {k.value: v for k, v in self.match_multipliers.items()},
            "bm25_params": {k.value: v for k, v in self.bm25_params.items()},
        }


class ConfigStore:
    """
    Mutable scoring configuration with get/set/reset.

    Not thread-safe on its own; the engine serializes access.
    """

    _GROUPS = {
        "field_weights": FieldName,
        "match_multipliers": MatchType,
        "bm25_params": BM25Param,
    }

    def __init__(self):
        self._config = ScoringConfig()

    def snapshot(self) -> ScoringConfig:
        return self._config.copy()

    def get_config(self) -> Dict[str, Dict[str, float]]:
        return self._config.to_dict()

    def reset(self) -> None:
        self._config = ScoringConfig()

    def set_field_weight(self, field_name: Union[str, FieldName], value: float) -> None:
        self._set("field_weights", field_name, value)

    def set_match_multiplier(self, match_type: Union[str, MatchType], value: float) -> None:
        self._set("match_multipliers", match_type, value)

    def set_bm25_param(self, param: Union[str, BM25Param], value: float) -> None:
        self._set("bm25_params", param, value)

    def load(self, blob: Mapping[str, Any], minimum: Optional[float] = None) -> None:
        """
        Apply a configuration blob.

        Accepts snake_case or camelCase group names. Unknown groups and keys
        are ignored; keys left out keep their current value.

        Args:
            blob: Exported configuration, possibly partial
            minimum: Optional lower bound every value must meet

        Raises:
            ValueError: a value is not a finite number, or is below minimum

        Example:
            >>> store.load({"fieldWeights": {"name": 150}, "bm25Params": {"k1": 2.0}})
        """
        # Applied to a copy so a bad value leaves the store untouched
        updated = self._config.copy()

        for group_name, values in blob.items():
            group = _GROUP_ALIASES.get(group_name)
            if group is None:
                logger.debug(f"Ignoring unknown config group: {group_name}")
                continue
            if not isinstance(values, Mapping):
                raise ValueError(f"Config group '{group_name}' must be a mapping")
            for key, value in values.items():
                self._apply(updated, group, key, value, minimum)

        self._config = updated

    def _set(self, group: str, key: Union[str, Enum], value: float) -> None:
        self._apply(self._config, group, key, value)

    def _apply(
        self,
        config: ScoringConfig,
        group: str,
        key: Union[str, Enum],
        value: float,
        minimum: Optional[float] = None,
    ) -> None:
        parsed = parse_key(self._GROUPS[group], key)
        if parsed is None:
            logger.debug(f"Ignoring unknown {group} key: {key}")
            return
        try:
            number = float(value)
        except (TypeError, ValueError) as e:
            raise ValueError(f"Invalid value for {group}.{parsed.value}: {value!r}") from e
        if not math.isfinite(number):
            raise ValueError(f"Invalid value for {group}.{parsed.value}: {value!r} is not finite")
        if minimum is not None and number < minimum:
            raise ValueError(f"Invalid value for {group}.{parsed.value}: {value!r} is below {minimum}")
        getattr(config, group)[parsed] = number


def render_config(config: Mapping[str, Any], fmt: str = "json") -> str:
    """
    Render a config snapshot for export.

    Args:
        config: Output of `get_config()`
        fmt: "json" (2-space indent) or "yaml"
    """
    fmt = fmt.lower()
    if fmt == "json":
        return json.dumps(config, indent=2)
    if fmt == "yaml":
        return yaml.safe_dump(dict(config), default_flow_style=False, sort_keys=False)
    raise ValueError(f"Unsupported export format: {fmt}. Valid options: {', '.join(EXPORT_FORMATS)}")
