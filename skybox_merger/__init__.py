"""Public API for skybox_merger.

Expose the pieces used by the CLI and tests.
"""
from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("skybox_merger")
except PackageNotFoundError:
    __version__ = "0.0.0"

from .config import Settings, load_config, load_config_from_env
from .errors import (
    SkyboxError,
    PreconditionError,
    GroupError,
    GroupArityError,
    DuplicateFaceError,
    DimensionMismatchError,
    TileDecodeError,
    ReferenceDecodeError,
    PlacementError,
    EncodeError,
    DeleteError,
)
from .tiles import Face, Tile, Group, classify_tile, find_tile_files, group_tiles, validate_group
from .image_processing import Canvas, compose_group, check_layout
from .services.merger import MergeService, GroupResult, RunReport

__all__ = [
    "Settings",
    "load_config",
    "load_config_from_env",
    "SkyboxError",
    "PreconditionError",
    "GroupError",
    "GroupArityError",
    "DuplicateFaceError",
    "DimensionMismatchError",
    "TileDecodeError",
    "ReferenceDecodeError",
    "PlacementError",
    "EncodeError",
    "DeleteError",
    "Face",
    "Tile",
    "Group",
    "classify_tile",
    "find_tile_files",
    "group_tiles",
    "validate_group",
    "Canvas",
    "compose_group",
    "check_layout",
    "MergeService",
    "GroupResult",
    "RunReport",
    "__version__",
]
