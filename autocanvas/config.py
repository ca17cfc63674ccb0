"""Default layout options and loading of plugin-style settings files."""

from __future__ import annotations

import copy
import json
import logging
from dataclasses import fields
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Tuple, Union

from .layout import LayoutOptions

logger = logging.getLogger(__name__)

_DEFAULT_LAYOUT_OPTIONS = LayoutOptions()

# nested camelCase settings -> LayoutOptions field
_NESTED_KEYS: Dict[Tuple[str, str], str] = {
    ("canvas", "maxNodes"): "max_nodes",
    ("canvas", "edgeThreshold"): "edge_threshold",
    ("canvas", "nodeWidth"): "node_width",
    ("canvas", "nodeHeight"): "node_height",
    ("canvas", "width"): "canvas_width",
    ("canvas", "height"): "canvas_height",
    ("canvas", "padding"): "padding",
    ("canvas", "groupPadding"): "group_padding",
    ("canvas", "showEdges"): "show_edges",
    ("clustering", "eps"): "cluster_eps",
    ("clustering", "minPts"): "cluster_min_pts",
    ("clustering", "enabled"): "include_clusters",
}


def get_default_layout_options() -> LayoutOptions:
    return copy.deepcopy(_DEFAULT_LAYOUT_OPTIONS)


def _field_types() -> Dict[str, Any]:
    return {f.name: f.default for f in fields(LayoutOptions)}


def _coerce(name: str, value: Any) -> Any:
    default = _field_types()[name]
    if name in ("max_nodes", "random_seed"):
        if value is None:
            return None
        expected: type = int
    elif isinstance(default, bool):
        expected = bool
    elif isinstance(default, int):
        expected = int
    else:
        expected = float

    if expected is bool:
        if not isinstance(value, bool):
            raise ValueError(f"setting {name!r} must be a boolean, got {value!r}")
        return value
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"setting {name!r} must be a number, got {value!r}")
    if expected is int:
        if float(value) != int(value):
            raise ValueError(f"setting {name!r} must be an integer, got {value!r}")
        return int(value)
    return float(value)


def layout_options_from_settings(
    settings: Mapping[str, Any],
    base: Optional[LayoutOptions] = None,
) -> LayoutOptions:
    """Overlay ``settings`` on ``base`` (module defaults when omitted).

    Accepts the nested ``canvas``/``clustering`` sections as well as flat
    ``LayoutOptions`` field names.  Unrecognised keys are ignored.
    """

    options = copy.deepcopy(base) if base is not None else get_default_layout_options()
    known = _field_types()

    for key, value in settings.items():
        if isinstance(value, Mapping):
            for sub_key, sub_value in value.items():
                target = _NESTED_KEYS.get((key, sub_key))
                if target is None:
                    logger.debug("Ignoring unknown setting %s.%s", key, sub_key)
                    continue
                setattr(options, target, _coerce(target, sub_value))
        elif key in known:
            setattr(options, key, _coerce(key, value))
        else:
            logger.debug("Ignoring unknown setting %s", key)
    return options


def load_settings(path: Union[str, Path]) -> Dict[str, Any]:
    with open(path, "r", encoding="utf-8") as fh:
        data = json.load(fh)
    if not isinstance(data, dict):
        raise ValueError(f"settings file {path} must contain a JSON object")
    return data


__all__ = [
    "get_default_layout_options",
    "layout_options_from_settings",
    "load_settings",
]
