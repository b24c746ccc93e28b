"""Helpers for sequences, strings, encodings, URLs, query parameters, time values, versions and release updates."""

__version__ = "0.1.0"

__all__ = [
    "encoding",
    "ghrelease",
    "normalize",
    "orderedparams",
    "rawparams",
    "sliceutil",
    "stringsutil",
    "structs",
    "timeutil",
    "updater",
    "urlutil",
    "versionbump",
    "versions",
]