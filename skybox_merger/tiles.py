"""
Discovery and grouping of skybox tiles.

A tile is a png whose file name ends with one of the six face suffixes,
e.g. ``skybox_01aleft.png``. Everything before the suffix is the group
prefix; six tiles sharing a prefix make one skybox.
"""
from __future__ import annotations

import os
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Callable, Dict, Iterable, List, Optional, Tuple

from .errors import DuplicateFaceError, GroupArityError

SKYBOX_TILES_AMOUNT = 6
TILE_EXTENSION = ".png"
GRID_COLUMNS = 4
GRID_ROWS = 3


class Face(Enum):
    # (file name suffix, column, row) in the 4x3 cross; member order is match precedence
    LEFT = ("left.png", 0, 1)
    RIGHT = ("right.png", 2, 1)
    UP = ("up.png", 1, 0)
    DOWN = ("down.png", 1, 2)
    FRONT = ("front.png", 1, 1)
    BACK = ("back.png", 3, 1)

    @property
    def suffix(self) -> str:
        return self.value[0]

    @property
    def cell(self) -> Tuple[int, int]:
        return self.value[1], self.value[2]

    def pixel_offset(self, width: int, height: int) -> Tuple[int, int]:
        col, row = self.cell
        return col * width, row * height


@dataclass(frozen=True)
class Tile:
    path: str
    group_prefix: str
    face: Face

    @property
    def file_name(self) -> str:
        return os.path.basename(self.path)


@dataclass
class Group:
    prefix: str
    tiles: List[Tile] = field(default_factory=list)

    @property
    def output_name(self) -> str:
        return result_file_name(self.prefix)

    def faces(self) -> List[Face]:
        return [t.face for t in self.tiles]


def result_file_name(prefix: str) -> str:
    return f"{prefix}skybox.png"


def classify_tile(path: str) -> Optional[Tile]:
    """Map a file path to a Tile, or None when the name has no face suffix.

    Only the file name is inspected. Matching is case-sensitive and the
    suffix includes the extension, so ``LEFT.PNG`` or ``left.jpg`` are not
    tiles.
    """
    name = os.path.basename(path)
    for face in Face:
        if name.endswith(face.suffix):
            return Tile(path=path, group_prefix=name[: -len(face.suffix)], face=face)
    return None


def classify_tiles(paths: Iterable[str]) -> List[Tile]:
    tiles = []
    for p in paths:
        tile = classify_tile(p)
        if tile is not None:
            tiles.append(tile)
    return tiles


def find_tile_files(directory: str) -> List[str]:
    """Regular ``*.png`` files directly inside ``directory`` (no recursion)."""
    folder = Path(directory)
    if not folder.is_dir():
        return []
    return sorted(
        str(p) for p in folder.iterdir() if p.is_file() and p.suffix == TILE_EXTENSION
    )


def group_tiles(
    tiles: Iterable[Tile],
    on_group: Optional[Callable[[Group], None]] = None,
) -> Dict[str, Group]:
    """Bucket tiles by prefix in discovery order.

    No validation happens here: duplicates and missing faces are kept so the
    validator can reject them. ``on_group`` is called once per new prefix.
    """
    groups: Dict[str, Group] = {}
    for tile in tiles:
        group = groups.get(tile.group_prefix)
        if group is None:
            group = Group(prefix=tile.group_prefix)
            groups[tile.group_prefix] = group
            if on_group:
                on_group(group)
        group.tiles.append(tile)
    return groups


def validate_group(group: Group) -> None:
    if len(group.tiles) != SKYBOX_TILES_AMOUNT:
        raise GroupArityError(
            group.prefix,
            f"expected {SKYBOX_TILES_AMOUNT} tiles, found {len(group.tiles)}",
        )
    seen = set()
    for tile in group.tiles:
        if tile.face in seen:
            raise DuplicateFaceError(
                group.prefix, f"face {tile.face.name.lower()} is present more than once"
            )
        seen.add(tile.face)
