"""
Fingerprint engine: stable hash identifiers for source positions.
"""

from .fingerprint import fingerprint, positional_fingerprint, structural_fingerprint, normalize

__all__ = [
    'fingerprint',
    'positional_fingerprint',
    'structural_fingerprint',
    'normalize',
]
