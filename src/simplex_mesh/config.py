"""Global configuration for simplex-mesh.

This module provides a package-wide configuration surface for the numeric
settings shared by all mesh operations (the default coordinate dtype and the
weld tolerance derived from it) together with the package logging level.
Settings can be changed globally with `configure` or temporarily with the
`use` context manager.
"""

from __future__ import annotations

import contextlib
import logging
import os
from typing import Any, Iterator, Optional

import numpy as np


# -----------------------------------------------------------------------------
# Logging
# -----------------------------------------------------------------------------
_LOGGER = logging.getLogger("simplex_mesh")


def _parse_log_level(val: str | int | None, default: int = logging.WARNING) -> int:
    """Parse a logging level string or int into a `logging` level constant.

    Args:
        val: The desired level (e.g., "DEBUG", 10). May be None.
        default: Fallback level if `val` cannot be parsed.

    Returns:
        An integer logging level (e.g., logging.DEBUG).
    """
    if val is None:
        return default
    if isinstance(val, int):
        return val
    lvl = getattr(logging, str(val).upper(), None)
    if isinstance(lvl, int):
        return lvl
    return default


def set_log_level(level: str | int = "WARNING") -> None:
    """Set the package logger level programmatically.

    Args:
        level: A standard logging level name or integer.
    """
    _LOGGER.setLevel(_parse_log_level(level))


# Default level can be overridden by env.
set_log_level(os.getenv("SIMPLEX_MESH_LOGLEVEL", "WARNING"))


# -----------------------------------------------------------------------------
# Coordinate dtype
# -----------------------------------------------------------------------------
_DTYPES = {
    "float64": np.float64,
    "double": np.float64,
    "float32": np.float32,
    "single": np.float32,
}


def _parse_dtype(val: Any) -> np.dtype:
    """Map a dtype name or numpy dtype onto a supported floating dtype.

    Raises:
        ValueError: If `val` does not name float32 or float64.
    """
    if isinstance(val, str):
        key = val.strip().lower()
        if key not in _DTYPES:
            raise ValueError(f"unsupported coordinate dtype {val!r}")
        return np.dtype(_DTYPES[key])
    dt = np.dtype(val)
    if dt not in (np.dtype(np.float32), np.dtype(np.float64)):
        raise ValueError(f"unsupported coordinate dtype {dt}")
    return dt


def _dtype_env() -> np.dtype:
    """Parse SIMPLEX_MESH_DTYPE into a coordinate dtype (float64 if unset)."""
    raw = os.getenv("SIMPLEX_MESH_DTYPE", "").strip().lower()
    if not raw:
        return np.dtype(np.float64)
    try:
        dt = _parse_dtype(raw)
    except ValueError:
        _LOGGER.warning("Ignoring invalid SIMPLEX_MESH_DTYPE=%r; using float64.", raw)
        return np.dtype(np.float64)
    _LOGGER.debug("Env SIMPLEX_MESH_DTYPE=%r -> dtype=%s", raw, dt)
    return dt


# -----------------------------------------------------------------------------
# Config singleton
# -----------------------------------------------------------------------------
class Config:
    """Global numeric configuration for simplex-mesh.

    Holds the default coordinate dtype used when a mesh is built from
    non-floating input (lists, integer arrays). The weld tolerance is derived
    from the dtype of the mesh being welded, see `weld_tolerance`.
    """

    def __init__(self) -> None:
        """Initialize config using environment defaults."""
        self._dtype: np.dtype = _dtype_env()
        _LOGGER.debug("Config initialized: dtype=%s", self._dtype)

    @property
    def dtype(self) -> np.dtype:
        """Return the default coordinate dtype."""
        return self._dtype

    def configure(self, *, dtype: Optional[Any] = None) -> Config:
        """Update the configuration.

        Args:
            dtype: New default coordinate dtype (name or numpy dtype).

        Returns:
            The `Config` instance (for chaining).
        """
        if dtype is not None:
            self._dtype = _parse_dtype(dtype)
        _LOGGER.info("Reconfigured: dtype=%s", self._dtype)
        return self

    @contextlib.contextmanager
    def use(self, *, dtype: Optional[Any] = None) -> Iterator[Config]:
        """Temporarily change the configuration within a context manager.

        Args:
            dtype: Default coordinate dtype inside the block.

        Yields:
            The `Config` instance. Restores the previous settings on exit.
        """
        prev = self._dtype
        try:
            self.configure(dtype=dtype)
            yield self
        finally:
            self._dtype = prev
            _LOGGER.debug("Restored previous dtype: %s", self._dtype)


config = Config()


def configure(*, dtype: Optional[Any] = None) -> Config:
    """Update the global configuration (module-level)."""
    return config.configure(dtype=dtype)


def use(*, dtype: Optional[Any] = None) -> contextlib.AbstractContextManager:
    """Temporarily change the global configuration (module-level)."""
    return config.use(dtype=dtype)


def default_dtype() -> np.dtype:
    """Return the default coordinate dtype (module-level)."""
    return config.dtype


def weld_tolerance(dtype: Optional[Any] = None) -> float:
    """Return the coincidence tolerance used when welding meshes.

    Args:
        dtype: Coordinate dtype; the configured default if None.

    Returns:
        ``sqrt(eps)`` of the dtype.
    """
    dt = config.dtype if dtype is None else np.dtype(dtype)
    return float(np.sqrt(np.finfo(dt).eps))
