"""
Static asset references.

The engine never reads asset contents; it only carries references into the
render tree. An AssetResolver can optionally check that a referenced file
exists under the public root.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Optional, Union

from animatics.core import get_logger

from .errors import MissingAssetReferenceError

log = get_logger("assets")


@dataclass(frozen=True)
class AssetRef:
    path: str

    def to_dict(self) -> Dict[str, str]:
        return {"asset": self.path}


def static_file(path: str) -> AssetRef:
    """Reference a file relative to the public asset root."""
    if not path or not path.strip():
        raise ValueError("static_file() needs a non-empty path")
    normalized = path.replace("\\", "/").lstrip("/")
    if ".." in normalized.split("/"):
        raise ValueError(f"Asset path must stay inside the asset root: {path!r}")
    return AssetRef(normalized)


class AssetResolver:
    """
    Resolve AssetRefs against a root directory.

    Existence checks are cached per path; a missing file raises
    MissingAssetReferenceError every time it is resolved.
    """

    def __init__(self, root: Union[str, Path], check_exists: bool = True):
        self.root = Path(root)
        self.check_exists = check_exists
        self._seen: Dict[str, bool] = {}

    def resolve(self, ref: Union[AssetRef, str]) -> Path:
        if isinstance(ref, str):
            ref = static_file(ref)
        full = self.root / ref.path
        if not self.check_exists:
            return full
        exists = self._seen.get(ref.path)
        if exists is None:
            exists = os.path.isfile(full)
            self._seen[ref.path] = exists
            if not exists:
                log.warning(f"Missing asset: {ref.path} (root={self.root})")
        if not exists:
            raise MissingAssetReferenceError(
                f"Asset not found: {ref.path}", {"path": ref.path, "root": str(self.root)}
            )
        return full

    def exists(self, ref: Union[AssetRef, str]) -> bool:
        try:
            self.resolve(ref)
        except MissingAssetReferenceError:
            return False
        return True


def resolve_optional(resolver: Optional[AssetResolver], ref: AssetRef) -> Optional[str]:
    """Resolved path string, or None when no resolver is configured."""
    if resolver is None:
        return None
    return str(resolver.resolve(ref))
