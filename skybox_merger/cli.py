import argparse
import sys
from typing import Optional, Sequence

from .config import load_config
from .errors import PreconditionError, ReferenceDecodeError
from .log import error, log
from .services.merger import MergeService


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="skybox-merger",
        description=(
            "Merge *left/right/up/down/front/back.png tiles in a directory into "
            "<prefix>skybox.png unfolded-cross sprite sheets."
        ),
    )
    parser.add_argument(
        "-d",
        "--delete",
        dest="delete_input_files",
        action="store_true",
        help="Delete source tiles after a skybox was merged successfully (overrides SKYBOX_DELETE_INPUT).",
    )
    parser.add_argument(
        "-C",
        "--dir",
        dest="directory",
        help="Directory with tiles; output is written there too (default: SKYBOX_DIR or current directory).",
    )
    parser.add_argument(
        "-w",
        "--workers",
        dest="workers",
        type=int,
        help="Number of skyboxes merged in parallel (overrides SKYBOX_WORKERS).",
    )
    parser.add_argument(
        "--strict-reference",
        dest="strict_reference",
        action="store_true",
        help="Abort the whole run if a skybox's reference tile cannot be decoded.",
    )
    parser.add_argument(
        "--debug",
        dest="debug",
        action="store_true",
        help="Print per-tile diagnostics to stderr (overrides DEBUG).",
    )
    parser.add_argument(
        "-q",
        "--quiet",
        action="store_true",
        help="Quiet mode: suppress informational logs.",
    )
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = parse_args(argv)
    cfg = load_config()

    if args.directory:
        cfg.directory = args.directory
    if args.delete_input_files:
        cfg.delete_input_files = True
    if args.workers is not None:
        cfg.workers = max(1, args.workers)
    if args.strict_reference:
        cfg.strict_reference = True
    if args.debug:
        cfg.debug = True
    cfg.quiet = args.quiet

    log(f"workers={cfg.workers}, tile_workers={cfg.tile_workers}, delete={cfg.delete_input_files}", cfg.quiet)

    try:
        report = MergeService(cfg).run()
    except PreconditionError as e:
        error(str(e))
        return 1
    except ReferenceDecodeError as e:
        error(f"failed to open reference tile of skybox {e.prefix}: {e}")
        return 1

    print(f"Skyboxes: {report.summary()}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
