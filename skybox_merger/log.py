import os
import sys

from .config import TRUTHY

PREFIX = "[skybox_merger]"


def debug_enabled() -> bool:
    # DEBUG wins over SKYBOX_DEBUG, same as the other env flags
    env_dbg = os.environ.get("DEBUG", None)
    if env_dbg is None:
        env_dbg = os.environ.get("SKYBOX_DEBUG", "")
    return str(env_dbg).lower() in TRUTHY


def log(msg: str, quiet: bool = False) -> None:
    """Prefixed informational line on stderr."""
    if not quiet:
        print(f"{PREFIX} {msg}", file=sys.stderr)


def warn(msg: str) -> None:
    print(f"WARNING: {msg}", file=sys.stderr)


def error(msg: str) -> None:
    print(f"ERROR: {msg}", file=sys.stderr)


def debug(msg: str, enabled: bool = False) -> None:
    if enabled or debug_enabled():
        print(f"[SKYBOX_DEBUG] {msg}", file=sys.stderr)
