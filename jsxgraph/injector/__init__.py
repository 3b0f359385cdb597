"""
Attribute injector: marks JSX opening tags with positional fingerprints.
"""

from .marker_injector import (
    MarkerInjector,
    add_markers,
    remove_markers,
    inject_markers,
    strip_markers,
    write_fingerprint_index,
    lookup_fingerprint,
)

__all__ = [
    'MarkerInjector',
    'add_markers',
    'remove_markers',
    'inject_markers',
    'strip_markers',
    'write_fingerprint_index',
    'lookup_fingerprint',
]
