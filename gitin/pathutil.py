"""Helpers for repository paths given by clients when browsing trees."""

from __future__ import annotations

from typing import List


def normalize_path(path: str) -> str:
    """Turn backslashes into slashes and strip slashes from both ends."""
    return path.replace("\\", "/").strip("/")


def path_segments(path: str) -> List[str]:
    """Split a normalised path into its non-empty components."""
    return [segment for segment in normalize_path(path).split("/") if segment]