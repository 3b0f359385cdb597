"""
Deterministic short identifiers for source positions and rendered elements.

Ids are the first 12 hex characters of a SHA-256 digest over a canonical JSON
rendering of the input, with mapping keys sorted at every depth. The rendering
matches JavaScript's ``JSON.stringify`` on a key-sorted object, so for the same
input the ids agree with ids computed by JavaScript code. Positional inputs use
UTF-16 columns (see ``ParsedSource.start``), the unit Babel reports.

12 hex characters carry 48 bits; collisions are possible in principle and are
not detected.
"""
import hashlib
import json
from typing import Any, Dict, Optional

FINGERPRINT_LENGTH = 12


def normalize(data: Any) -> Any:
    """Recursively sort mapping keys; sequences keep their order."""
    if isinstance(data, dict):
        return {key: normalize(data[key]) for key in sorted(data)}
    if isinstance(data, (list, tuple)):
        return [normalize(item) for item in data]
    return data


def canonical_json(data: Any) -> str:
    return json.dumps(normalize(data), separators=(",", ":"), ensure_ascii=False)


def fingerprint(data: Any) -> str:
    """Return the 12-hex-character digest of ``data``."""
    digest = hashlib.sha256(canonical_json(data).encode("utf-8")).hexdigest()
    return digest[:FINGERPRINT_LENGTH]


def positional_fingerprint(file_path: str, line: int, column: int) -> str:
    """Fingerprint of a syntax node identified by its static source position."""
    return fingerprint({"filePath": file_path, "line": line, "column": column})


def structural_fingerprint(tag_name: str, attributes: Optional[Dict[str, str]],
                           parent_path: Optional[str], sibling_index: Optional[int]) -> str:
    """Fingerprint of a rendered element when no static position is known.

    Missing values are kept as explicit nulls rather than dropped.
    """
    return fingerprint({
        "tagName": tag_name,
        "attributes": attributes,
        "parentPath": parent_path,
        "siblingIndex": sibling_index,
    })
