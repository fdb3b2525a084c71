"""
Untyped, ordered JSON document with dotted-path edits.
"""

import copy
import json
from typing import Any, Dict, List, Optional


_MISSING = object()


class DashboardDocument:
    """
    A dashboard configuration as returned by the config API.

    Only a handful of fields are ever inspected; everything else is carried
    through untouched and in its original key order. Paths are dotted keys
    into nested objects, e.g. ``"dashboardMetadata.owner"``.
    """

    METADATA_KEY = "dashboardMetadata"

    def __init__(self, data: Optional[Dict[str, Any]] = None):
        if data is not None and not isinstance(data, dict):
            raise TypeError(f"Dashboard document must be a JSON object, got {type(data).__name__}")
        self._data: Dict[str, Any] = copy.deepcopy(data) if data else {}

    @staticmethod
    def _split(path: str) -> List[str]:
        keys = [key for key in path.split(".") if key]
        if not keys:
            raise ValueError("Path must name at least one key")
        return keys

    def _parent(self, keys: List[str], create: bool = False) -> Optional[Dict[str, Any]]:
        node = self._data
        for key in keys[:-1]:
            child = node.get(key, _MISSING)
            if child is _MISSING and create:
                child = node[key] = {}
            if not isinstance(child, dict):
                return None
            node = child
        return node

    def get(self, path: str, default: Any = None) -> Any:
        keys = self._split(path)
        parent = self._parent(keys)
        if parent is None:
            return default
        return parent.get(keys[-1], default)

    def set(self, path: str, value: Any) -> None:
        """Set a value, creating intermediate objects as needed."""
        keys = self._split(path)
        parent = self._parent(keys, create=True)
        if parent is None:
            raise ValueError(f"Cannot set '{path}': an intermediate value is not an object")
        parent[keys[-1]] = value

    def remove(self, path: str) -> Any:
        """Remove a key and return its value; missing keys are ignored."""
        keys = self._split(path)
        parent = self._parent(keys)
        if parent is None:
            return None
        return parent.pop(keys[-1], None)

    def __contains__(self, path: str) -> bool:
        keys = self._split(path)
        parent = self._parent(keys)
        return parent is not None and keys[-1] in parent

    def copy(self) -> "DashboardDocument":
        return DashboardDocument(self._data)

    @property
    def id(self) -> Optional[str]:
        return self._data.get("id")

    @property
    def name(self) -> Optional[str]:
        return self.get(f"{self.METADATA_KEY}.name")

    def to_dict(self) -> Dict[str, Any]:
        return copy.deepcopy(self._data)

    def to_json(self, indent: Optional[int] = None) -> str:
        return json.dumps(self._data, indent=indent)

    def __eq__(self, other) -> bool:
        if isinstance(other, DashboardDocument):
            return self._data == other._data
        return NotImplemented

    def __repr__(self) -> str:
        return f"DashboardDocument(id={self.id!r}, name={self.name!r})"
