import os
import sys

import pytest
from PIL import Image

# Ensure project root is importable during tests
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

FACE_NAMES = ["left", "right", "up", "down", "front", "back"]


def pattern_image(size=(8, 6), seed=0, mode="RGB"):
    """Image with content unique to ``seed`` so misplaced tiles show up."""
    w, h = size
    channels = len(mode)
    data = bytes((i * 31 + seed * 17 + (i // channels) * 7) % 256 for i in range(w * h * channels))
    return Image.frombytes(mode, size, data)


def write_tile(folder, name, size=(8, 6), seed=0):
    path = os.path.join(str(folder), name)
    pattern_image(size, seed).save(path, format="PNG")
    return path


def write_skybox(folder, prefix, size=(8, 6), seed=0, faces=None):
    """Write one tile per face for ``prefix``; returns {face_name: path}."""
    paths = {}
    for idx, face in enumerate(faces or FACE_NAMES):
        paths[face] = write_tile(folder, f"{prefix}{face}.png", size, seed * 10 + idx)
    return paths


@pytest.fixture(autouse=True)
def clean_debug_env(monkeypatch):
    # keep diagnostics deterministic regardless of the developer's shell
    monkeypatch.delenv("DEBUG", raising=False)
    monkeypatch.delenv("SKYBOX_DEBUG", raising=False)
    yield


@pytest.fixture
def make_skybox():
    return write_skybox


@pytest.fixture
def make_tile():
    return write_tile


@pytest.fixture
def make_pattern():
    return pattern_image
