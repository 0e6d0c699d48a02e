"""Domain models for service definitions."""
from .definition import ArgumentKey, Definition, ServiceId, SourceKind, classify_source
from .reference import Reference

__all__ = [
    "ArgumentKey",
    "Definition",
    "Reference",
    "ServiceId",
    "SourceKind",
    "classify_source",
]
