"""Connected-component and box-list helpers."""
from __future__ import annotations

from typing import Iterable, List, Tuple

import numpy as np

from ..models import Box
from .utils import as_bitmap

__all__ = [
    "connected_components",
    "merge_overlapping",
    "select_by_size",
    "sort_left_to_right",
]

Run = Tuple[int, int]


def _rle_runs(bitmap) -> List[List[Run]]:
    """Return ``[start, end)`` foreground runs for each row of ``bitmap``."""

    bm = as_bitmap(bitmap)
    H, W = bm.shape
    padded = np.zeros((H, W + 2), dtype=np.int8)
    padded[:, 1:-1] = bm
    edges = np.diff(padded, axis=1)
    runs_by_row = []
    for y in range(H):
        starts = np.flatnonzero(edges[y] == 1).tolist()
        ends = np.flatnonzero(edges[y] == -1).tolist()
        runs_by_row.append(list(zip(starts, ends)))
    return runs_by_row


def _find(idx: int, parent: list) -> int:
    while parent[idx] != idx:
        parent[idx] = parent[parent[idx]]
        idx = parent[idx]
    return idx


def connected_components(bitmap, connectivity: int = 8) -> List[Box]:
    """Bounding boxes of the connected components, linked run by run.

    Boxes are returned in raster order of each component's first run.
    """

    if connectivity not in (4, 8):
        raise ValueError(f"connectivity must be 4 or 8, got {connectivity}")
    # Runs on adjacent rows touch diagonally under 8-connectivity.
    reach = 1 if connectivity == 8 else 0
    runs_by_row = _rle_runs(bitmap)
    parent: List[int] = []
    row_offsets = [0]
    for y, runs in enumerate(runs_by_row):
        row_offsets.append(row_offsets[-1] + len(runs))
        parent.extend(range(len(parent), len(parent) + len(runs)))
        if y == 0:
            continue
        prev_runs = runs_by_row[y - 1]
        if not runs or not prev_runs:
            continue
        i = 0
        j = 0
        while i < len(prev_runs) and j < len(runs):
            p0, p1 = prev_runs[i]
            c0, c1 = runs[j]
            if p1 + reach <= c0:
                i += 1
            elif c1 + reach <= p0:
                j += 1
            else:
                rp = _find(row_offsets[y - 1] + i, parent)
                rc = _find(row_offsets[y] + j, parent)
                if rp != rc:
                    parent[rc] = rp
                if p1 < c1:
                    i += 1
                else:
                    j += 1

    extents = {}
    idx = 0
    for y, runs in enumerate(runs_by_row):
        for (x0, x1) in runs:
            r = _find(idx, parent)
            idx += 1
            b = extents.get(r)
            if b is None:
                extents[r] = [x0, y, x1, y + 1]
            else:
                b[0] = min(b[0], x0)
                b[2] = max(b[2], x1)
                b[3] = y + 1
    return [Box(x0, y0, x1 - x0, y1 - y0) for (x0, y0, x1, y1) in extents.values()]


def merge_overlapping(boxes: Iterable[Box]) -> List[Box]:
    """Replace every group of overlapping boxes by its bounding box.

    Merging repeats until no two boxes overlap, since a union can reach
    boxes that neither of its parts touched.
    """

    current = list(boxes)
    changed = True
    while changed:
        changed = False
        merged: List[Box] = []
        for box in current:
            for i, other in enumerate(merged):
                if other.overlaps(box):
                    merged[i] = other.union(box)
                    changed = True
                    break
            else:
                merged.append(box)
        current = merged
    return current


def select_by_size(boxes: Iterable[Box], width: int, height: int) -> List[Box]:
    """Keep boxes strictly wider than ``width`` and strictly taller than ``height``."""

    return [b for b in boxes if b.w > width and b.h > height]


def sort_left_to_right(boxes: Iterable[Box]) -> List[Box]:
    return sorted(boxes, key=lambda b: b.x)
