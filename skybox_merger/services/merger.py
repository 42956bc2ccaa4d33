"""MergeService: turns a directory of face tiles into skybox sprite sheets.

Each group is validated, composed, written and (optionally) cleaned up on
its own. Group errors are reported and recorded; only the run-level
precondition (and a reference decode failure in strict mode) escapes ``run``.
"""
from __future__ import annotations

import os
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from ..config import Settings
from ..errors import DeleteError, GroupError, PreconditionError, ReferenceDecodeError
from ..image_io import encode_png
from ..image_processing import compose_group
from ..log import debug, error, log, warn
from ..tiles import (
    SKYBOX_TILES_AMOUNT,
    Group,
    classify_tiles,
    find_tile_files,
    group_tiles,
    validate_group,
)

MERGED = "merged"
SKIPPED = "skipped"
FAILED = "failed"


@dataclass
class GroupResult:
    prefix: str
    status: str
    reason: Optional[str] = None
    message: Optional[str] = None
    output: Optional[str] = None
    delete_failures: List[str] = field(default_factory=list)


@dataclass
class RunReport:
    directory: str
    files_found: int
    tiles_found: int
    results: List[GroupResult] = field(default_factory=list)

    def _with_status(self, status: str) -> List[GroupResult]:
        return [r for r in self.results if r.status == status]

    @property
    def merged(self) -> List[GroupResult]:
        return self._with_status(MERGED)

    @property
    def skipped(self) -> List[GroupResult]:
        return self._with_status(SKIPPED)

    @property
    def failed(self) -> List[GroupResult]:
        return self._with_status(FAILED)

    def summary(self) -> str:
        return (
            f"{len(self.merged)} merged, {len(self.skipped)} skipped, "
            f"{len(self.failed)} failed "
            f"({self.tiles_found} tiles in {self.files_found} png files)"
        )


def delete_file(path: str) -> None:
    try:
        os.remove(path)
    except OSError as e:
        raise DeleteError(path, f"Error removing file {os.path.basename(path)}: {e}") from e


class MergeService:
    def __init__(self, settings: Settings):
        self.settings = settings

    def _log(self, msg: str) -> None:
        log(msg, self.settings.quiet)

    def discover(self) -> Dict[str, Group]:
        """List, classify and group tiles; raise PreconditionError when fewer than six exist."""
        groups, _, _ = self._discover()
        return groups

    def _discover(self) -> Tuple[Dict[str, Group], int, int]:
        directory = self.settings.directory
        self._log(f"Processing dir {directory}")
        paths = find_tile_files(directory)
        self._log(f"Found {len(paths)} png files")
        tiles = classify_tiles(paths)
        if len(tiles) < SKYBOX_TILES_AMOUNT:
            raise PreconditionError(
                f"Ensure all skybox tiles present: found {len(tiles)} tile files in {directory}"
            )
        names: List[str] = []
        groups = group_tiles(tiles, on_group=lambda g: names.append(g.output_name))
        self._log("Files could generate skyboxes: " + ",".join(names))
        return groups, len(paths), len(tiles)

    def merge_group(self, group: Group) -> GroupResult:
        """Validate, compose, write and clean up one group.

        Never raises for group-level problems; ReferenceDecodeError is
        re-raised only when ``strict_reference`` is set.
        """
        cfg = self.settings
        try:
            validate_group(group)
            canvas = compose_group(group, cfg.tile_workers, cfg.debug)
            out_path = os.path.join(cfg.directory, group.output_name)
            try:
                encode_png(canvas.image, out_path, group.prefix)
            finally:
                canvas.close()
        except ReferenceDecodeError as e:
            if cfg.strict_reference:
                raise
            error(f"Could not read reference tile for skybox {group.prefix}: {e}. Skipping skybox")
            return GroupResult(group.prefix, FAILED, e.kind, str(e))
        except GroupError as e:
            status = SKIPPED if e.kind in ("incomplete", "duplicate-face") else FAILED
            error(f"Skybox {group.prefix} {status} ({e.kind}): {e}")
            return GroupResult(group.prefix, status, e.kind, str(e))

        result = GroupResult(group.prefix, MERGED, output=out_path)
        self._log(f"Saved {group.output_name}")
        if cfg.delete_input_files:
            result.delete_failures = self.delete_inputs(group)
        return result

    def delete_inputs(self, group: Group) -> List[str]:
        failures = []
        for tile in group.tiles:
            try:
                delete_file(tile.path)
            except DeleteError as e:
                warn(str(e))
                failures.append(e.path)
            else:
                debug(f"deleted {tile.file_name}", self.settings.debug)
        return failures

    def run(self) -> RunReport:
        groups, files_found, tiles_found = self._discover()
        report = RunReport(self.settings.directory, files_found, tiles_found)
        self._log("Generating skyboxes")
        with ThreadPoolExecutor(max_workers=max(1, self.settings.workers)) as ex:
            report.results = list(ex.map(self.merge_group, groups.values()))
        self._log(report.summary())
        return report
