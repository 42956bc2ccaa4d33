from __future__ import annotations

from PIL import Image, UnidentifiedImageError

from .errors import EncodeError, PlacementError, TileDecodeError

CANVAS_MODE = "RGBA"


def decode_image(path: str, prefix: str = "") -> Image.Image:
    """Fully decode ``path`` into a detached RGBA image.

    The file handle is closed before returning. Any Pillow failure becomes
    TileDecodeError for ``prefix``.
    """
    try:
        with Image.open(path) as img:
            img.load()
            return img.convert(CANVAS_MODE)
    except (OSError, UnidentifiedImageError, ValueError, Image.DecompressionBombError) as e:
        raise TileDecodeError(prefix, f"failed to decode {path!r}: {e}", path=path) from e


def new_canvas(width: int, height: int) -> Image.Image:
    # transparent so unused cells of the cross stay empty
    return Image.new(CANVAS_MODE, (width, height), (0, 0, 0, 0))


def copy_region(dest: Image.Image, src: Image.Image, x: int, y: int, prefix: str = "") -> None:
    """Blit all of ``src`` into ``dest`` at ``(x, y)``.

    Image.paste clips silently, so the bounds are checked first.
    """
    w, h = src.size
    if x < 0 or y < 0 or x + w > dest.width or y + h > dest.height:
        raise PlacementError(
            prefix,
            f"{w}x{h} tile at ({x}, {y}) does not fit a {dest.width}x{dest.height} canvas",
        )
    dest.paste(src, (x, y))


def encode_png(image: Image.Image, path: str, prefix: str = "") -> None:
    try:
        image.save(path, format="PNG")
    except (OSError, ValueError) as e:
        raise EncodeError(prefix, f"could not save {path!r}: {e}") from e
