"""
Source reader: logical source identifiers to defensively-read text.
"""

from constellation.core.sources.reader import (
    ALLOWED_PROJECT_EXTENSIONS,
    InvalidSourcePathError,
    SourceReader,
    is_identifier,
    resolve_within,
)

__all__ = [
    "ALLOWED_PROJECT_EXTENSIONS",
    "InvalidSourcePathError",
    "SourceReader",
    "is_identifier",
    "resolve_within",
]
