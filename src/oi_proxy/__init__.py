"""Python launcher for the oi-proxy native binary."""

__version__ = "0.1.0"

from .resolver import (
  PLATFORM_PACKAGES,
  BinaryNotFoundError,
  DependencyLookupError,
  InvalidExportError,
  ResolutionError,
  UnsupportedArchitectureError,
  UnsupportedPlatformError,
  resolve_binary_path,
)

__all__ = [
  "PLATFORM_PACKAGES",
  "BinaryNotFoundError",
  "DependencyLookupError",
  "InvalidExportError",
  "ResolutionError",
  "UnsupportedArchitectureError",
  "UnsupportedPlatformError",
  "resolve_binary_path",
]
