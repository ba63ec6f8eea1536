"""Check manifest utilities."""

from .check_manifest import PREDICATES, Check, CheckManifestError, CheckManifestLoader

__all__ = [
    "PREDICATES",
    "Check",
    "CheckManifestError",
    "CheckManifestLoader",
]
