"""Exception types raised while merging skybox tiles.

Run-level errors abort everything; ``GroupError`` subclasses only cost the
group they name.
"""
from typing import Optional


class SkyboxError(Exception):
    kind = "error"


class PreconditionError(SkyboxError):
    kind = "precondition"


class GroupError(SkyboxError):
    kind = "group"

    def __init__(self, prefix: str, message: str):
        super().__init__(message)
        self.prefix = prefix


class GroupArityError(GroupError):
    kind = "incomplete"


class DuplicateFaceError(GroupArityError):
    kind = "duplicate-face"


class DimensionMismatchError(GroupError):
    kind = "dimension-mismatch"


class TileDecodeError(GroupError):
    kind = "decode"

    def __init__(self, prefix: str, message: str, path: Optional[str] = None):
        super().__init__(prefix, message)
        self.path = path


class ReferenceDecodeError(TileDecodeError):
    kind = "reference-decode"


class PlacementError(GroupError):
    kind = "placement"


class EncodeError(GroupError):
    kind = "encode"


class DeleteError(SkyboxError):
    kind = "delete"

    def __init__(self, path: str, message: str):
        super().__init__(message)
        self.path = path
