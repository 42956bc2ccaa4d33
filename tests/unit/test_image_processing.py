import threading

import pytest
from PIL import Image

from skybox_merger.errors import DimensionMismatchError, PlacementError, ReferenceDecodeError, TileDecodeError
from skybox_merger.image_io import copy_region, decode_image, encode_png, new_canvas
from skybox_merger.image_processing import Canvas, check_layout, compose_group, face_boxes
from skybox_merger.tiles import Face, classify_tiles, find_tile_files, group_tiles


def load_group(folder, prefix):
    return group_tiles(classify_tiles(find_tile_files(str(folder))))[prefix]


@pytest.mark.parametrize("size", [(1, 1), (8, 6), (512, 256)])
def test_layout_is_disjoint_and_fits(size):
    check_layout(*size)
    boxes = face_boxes(*size)
    assert len(boxes) == 6
    covered = set()
    for l, u, r, b in boxes.values():
        cell = (l // size[0], u // size[1])
        assert cell not in covered
        covered.add(cell)


def test_copy_region_rejects_out_of_bounds():
    dest = new_canvas(4, 3)
    src = Image.new("RGBA", (2, 2))
    with pytest.raises(PlacementError):
        copy_region(dest, src, 3, 0, "sky")
    with pytest.raises(PlacementError):
        copy_region(dest, src, 0, 2, "sky")
    copy_region(dest, src, 2, 1, "sky")


def test_decode_image_wraps_errors(tmp_path):
    bad = tmp_path / "skyleft.png"
    bad.write_bytes(b"not a png")
    with pytest.raises(TileDecodeError) as exc:
        decode_image(str(bad), "sky")
    assert exc.value.prefix == "sky"
    assert exc.value.path == str(bad)


def test_decode_image_missing_file(tmp_path):
    with pytest.raises(TileDecodeError):
        decode_image(str(tmp_path / "missing.png"))


def test_compose_group_places_every_face(tmp_path, make_skybox, make_pattern):
    make_skybox(tmp_path, "sky", size=(8, 6), seed=1)
    group = load_group(tmp_path, "sky")

    canvas = compose_group(group, tile_workers=6)
    try:
        assert canvas.size == (32, 18)
        for tile in group.tiles:
            x, y = tile.face.pixel_offset(8, 6)
            region = canvas.image.crop((x, y, x + 8, y + 6))
            with Image.open(tile.path) as src:
                assert region.tobytes() == src.convert("RGBA").tobytes()
    finally:
        canvas.close()


def test_compose_group_leaves_unused_cells_transparent(tmp_path, make_skybox):
    make_skybox(tmp_path, "sky", size=(4, 4))
    canvas = compose_group(load_group(tmp_path, "sky"))
    try:
        # top-left cell of the cross is never painted
        assert canvas.image.getpixel((0, 0)) == (0, 0, 0, 0)
        assert canvas.image.getpixel((15, 11)) == (0, 0, 0, 0)
    finally:
        canvas.close()


def test_compose_group_round_trips_through_png(tmp_path, make_skybox):
    make_skybox(tmp_path, "sky", size=(5, 7), seed=3)
    group = load_group(tmp_path, "sky")
    canvas = compose_group(group, tile_workers=2)
    out = tmp_path / "out.png"
    encode_png(canvas.image, str(out), "sky")
    canvas.close()

    with Image.open(out) as merged:
        assert merged.size == (20, 21)
        for tile in group.tiles:
            x, y = tile.face.pixel_offset(5, 7)
            with Image.open(tile.path) as src:
                assert merged.crop((x, y, x + 5, y + 7)).convert("RGBA").tobytes() == src.convert("RGBA").tobytes()


def test_compose_group_dimension_mismatch(tmp_path, make_skybox, make_tile):
    make_skybox(tmp_path, "sky", size=(8, 6), faces=["left", "right", "down", "front", "back"])
    make_tile(tmp_path, "skyup.png", size=(8, 8))
    group = load_group(tmp_path, "sky")
    assert group.tiles[0].face is Face.BACK

    with pytest.raises(DimensionMismatchError) as exc:
        compose_group(group)
    assert exc.value.prefix == "sky"
    assert "skyup.png" in str(exc.value)


def test_compose_group_reference_decode_failure(tmp_path, make_skybox):
    make_skybox(tmp_path, "sky", faces=["left", "right", "up", "down", "front"])
    (tmp_path / "skyback.png").write_bytes(b"garbage")
    group = load_group(tmp_path, "sky")

    with pytest.raises(ReferenceDecodeError) as exc:
        compose_group(group)
    assert exc.value.kind == "reference-decode"


def test_compose_group_other_tile_decode_failure(tmp_path, make_skybox):
    make_skybox(tmp_path, "sky", faces=["left", "right", "down", "front", "back"])
    (tmp_path / "skyup.png").write_bytes(b"garbage")

    with pytest.raises(TileDecodeError) as exc:
        compose_group(load_group(tmp_path, "sky"))
    assert not isinstance(exc.value, ReferenceDecodeError)


def test_canvas_place_serializes_access(monkeypatch):
    canvas = Canvas(2, 2)
    active = []
    overlaps = []
    lock_guard = threading.Lock()

    import skybox_merger.image_processing as ip

    real_copy = ip.copy_region

    def tracking_copy(*args, **kwargs):
        with lock_guard:
            active.append(1)
            if len(active) > 1:
                overlaps.append(True)
        try:
            real_copy(*args, **kwargs)
        finally:
            with lock_guard:
                active.pop()

    monkeypatch.setattr(ip, "copy_region", tracking_copy)
    tile = Image.new("RGBA", (2, 2), (255, 0, 0, 255))
    threads = [threading.Thread(target=canvas.place, args=(face, tile)) for face in Face]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert not overlaps
    for face in Face:
        x, y = face.pixel_offset(2, 2)
        assert canvas.image.getpixel((x, y)) == (255, 0, 0, 255)


def test_decode_image_wraps_decompression_bomb(tmp_path, make_tile, monkeypatch):
    path = make_tile(tmp_path, "skyup.png", size=(6, 6))
    monkeypatch.setattr(Image, "MAX_IMAGE_PIXELS", 10)
    with pytest.raises(TileDecodeError) as exc:
        decode_image(path, "sky")
    assert exc.value.prefix == "sky"


def test_compose_group_decodes_each_tile_once(tmp_path, make_skybox, monkeypatch):
    make_skybox(tmp_path, "sky", size=(4, 4))
    group = load_group(tmp_path, "sky")

    import skybox_merger.image_processing as ip

    calls = []
    real_decode = ip.decode_image

    def counting_decode(path, prefix=""):
        calls.append(path)
        return real_decode(path, prefix)

    monkeypatch.setattr(ip, "decode_image", counting_decode)
    canvas = compose_group(group)
    try:
        assert sorted(calls) == sorted(t.path for t in group.tiles)
        ref = group.tiles[0]
        x, y = ref.face.pixel_offset(4, 4)
        with Image.open(ref.path) as src:
            assert canvas.image.crop((x, y, x + 4, y + 4)).tobytes() == src.convert("RGBA").tobytes()
    finally:
        canvas.close()
