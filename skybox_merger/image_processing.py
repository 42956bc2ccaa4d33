from __future__ import annotations

import threading
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Dict, Tuple

from PIL import Image

from .errors import DimensionMismatchError, ReferenceDecodeError, TileDecodeError
from .image_io import copy_region, decode_image, new_canvas
from .log import debug
from .tiles import GRID_COLUMNS, GRID_ROWS, Face, Group, Tile

Box = Tuple[int, int, int, int]


def face_boxes(width: int, height: int) -> Dict[Face, Box]:
    """(left, upper, right, lower) of every face cell for ``width`` x ``height`` tiles."""
    boxes = {}
    for face in Face:
        x, y = face.pixel_offset(width, height)
        boxes[face] = (x, y, x + width, y + height)
    return boxes


def check_layout(width: int = 1, height: int = 1) -> None:
    """Raise ValueError if any two face cells overlap or leave the canvas.

    Concurrent placement relies on every face owning a disjoint region.
    """
    canvas_w, canvas_h = width * GRID_COLUMNS, height * GRID_ROWS
    boxes = list(face_boxes(width, height).items())
    for face, (l, u, r, b) in boxes:
        if l < 0 or u < 0 or r > canvas_w or b > canvas_h:
            raise ValueError(f"{face.name} cell {(l, u, r, b)} is outside the canvas")
    for i, (face_a, a) in enumerate(boxes):
        for face_b, b in boxes[i + 1:]:
            if a[0] < b[2] and b[0] < a[2] and a[1] < b[3] and b[1] < a[3]:
                raise ValueError(f"{face_a.name} and {face_b.name} cells overlap")


class Canvas:
    """Output image for one group, shared by that group's placements only."""

    def __init__(self, tile_width: int, tile_height: int):
        self.tile_width = tile_width
        self.tile_height = tile_height
        self.image = new_canvas(tile_width * GRID_COLUMNS, tile_height * GRID_ROWS)
        self._lock = threading.Lock()

    @property
    def size(self) -> Tuple[int, int]:
        return self.image.size

    def place(self, face: Face, tile_image: Image.Image, prefix: str = "") -> None:
        x, y = face.pixel_offset(self.tile_width, self.tile_height)
        # cells are disjoint; the lock only serializes access to the shared Image object
        with self._lock:
            copy_region(self.image, tile_image, x, y, prefix)

    def close(self) -> None:
        self.image.close()


def decode_reference(group: Group) -> Image.Image:
    # first tile in discovery order sizes the canvas
    ref = group.tiles[0]
    try:
        return decode_image(ref.path, group.prefix)
    except TileDecodeError as e:
        raise ReferenceDecodeError(group.prefix, str(e), path=ref.path) from e


def place_tile(canvas: Canvas, tile: Tile, prefix: str, debug_enabled: bool = False) -> None:
    expected = (canvas.tile_width, canvas.tile_height)
    with decode_image(tile.path, prefix) as img:
        if img.size != expected:
            raise DimensionMismatchError(
                prefix,
                f"{tile.file_name} is {img.size[0]}x{img.size[1]}, expected {expected[0]}x{expected[1]}",
            )
        canvas.place(tile.face, img, prefix)
    debug(f"placed {tile.file_name} as {tile.face.name.lower()}", debug_enabled)


def compose_group(group: Group, tile_workers: int = 6, debug_enabled: bool = False) -> Canvas:
    """Decode the group's tiles and lay them out as an unfolded cross.

    The caller validates the group first. The reference tile is decoded
    once, sizes the canvas and is placed straight away. The other five are
    decoded and placed concurrently; the first failing tile aborts the group
    and the partial canvas is closed before the error propagates.
    """
    ref, rest = group.tiles[0], group.tiles[1:]
    with decode_reference(group) as ref_img:
        canvas = Canvas(*ref_img.size)
        canvas.place(ref.face, ref_img, group.prefix)
    debug(f"{group.prefix}: canvas {canvas.size[0]}x{canvas.size[1]}", debug_enabled)
    try:
        with ThreadPoolExecutor(max_workers=max(1, tile_workers)) as ex:
            futs = [ex.submit(place_tile, canvas, t, group.prefix, debug_enabled) for t in rest]
            for fut in as_completed(futs):
                fut.result()
    except BaseException:
        canvas.close()
        raise
    return canvas
