"""
In‑memory LRU cache for meshed layers.

Meshing every feature of a large layer is the most expensive request the
backend serves, and stored layers never change after upload.  This cache
keeps the ``LayerMeshes`` result per layer and simplification tolerance
so repeated requests reuse it.  Entries are evicted least‑recently‑used
once ``MAX_CACHE_ENTRIES`` is exceeded and dropped explicitly when a
layer is deleted.
"""

from __future__ import annotations

from collections import OrderedDict
from dataclasses import dataclass
from threading import RLock
from typing import Optional

from .area_layers import LayerMeshes


@dataclass(frozen=True)
class LayerMeshCacheKey:
    """Unique identifier for a cached layer meshing result."""

    layer_id: str
    simplify_tolerance: float


_cache: "OrderedDict[LayerMeshCacheKey, LayerMeshes]" = OrderedDict()
_lock = RLock()
MAX_CACHE_ENTRIES: int = 16


def get_layer_meshes_from_cache(key: LayerMeshCacheKey) -> Optional[LayerMeshes]:
    """Return the cached result for ``key`` or ``None``."""
    with _lock:
        entry = _cache.get(key)
        if entry is not None:
            _cache.move_to_end(key)
        return entry


def put_layer_meshes_in_cache(key: LayerMeshCacheKey, meshes: LayerMeshes) -> None:
    """Store a result, evicting the least recently used entry if needed."""
    with _lock:
        _cache[key] = meshes
        _cache.move_to_end(key)
        if len(_cache) > MAX_CACHE_ENTRIES:
            _cache.popitem(last=False)


def invalidate_layer(layer_id: str) -> None:
    """Drop every cached entry belonging to ``layer_id``."""
    with _lock:
        for key in [k for k in _cache if k.layer_id == layer_id]:
            del _cache[key]


def clear_cache() -> None:
    with _lock:
        _cache.clear()
