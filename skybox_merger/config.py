from dataclasses import dataclass
from typing import Optional
import os
import sys

from dotenv import load_dotenv, find_dotenv

TRUTHY = ("1", "true", "yes", "on")


def default_workers() -> int:
    return min(32, (os.cpu_count() or 1) + 4)


@dataclass
class Settings:
    directory: str
    delete_input_files: bool = False
    workers: int = 4
    tile_workers: int = 6
    strict_reference: bool = False
    debug: bool = False
    quiet: bool = False


def _find_env_file() -> Optional[str]:
    # find_dotenv() looks next to the calling module; fall back to walking up from cwd
    found = find_dotenv()
    if found:
        return found
    p = os.path.abspath(os.getcwd())
    while True:
        cand = os.path.join(p, ".env")
        if os.path.exists(cand):
            return cand
        parent = os.path.dirname(p)
        if parent == p:
            return None
        p = parent


def _int_env(env: dict, name: str, default: int) -> int:
    v = env.get(name)
    if not v:
        return default
    try:
        value = int(v)
    except ValueError:
        print(f"WARNING: invalid {name}={v!r}, using default {default}", file=sys.stderr)
        return default
    if value < 1:
        print(f"WARNING: {name} must be positive, using default {default}", file=sys.stderr)
        return default
    return value


def _bool_env(env: dict, name: str, default: bool = False) -> bool:
    v = env.get(name)
    if v is None or v == "":
        return default
    return str(v).strip().lower() in TRUTHY


def load_config_from_env(env: dict) -> Settings:
    """Build Settings from a plain mapping (used directly by tests)."""
    debug_env = env.get("DEBUG", None)
    if debug_env is None:
        debug_env = env.get("SKYBOX_DEBUG", "")
    return Settings(
        directory=env.get("SKYBOX_DIR") or os.getcwd(),
        delete_input_files=_bool_env(env, "SKYBOX_DELETE_INPUT"),
        workers=_int_env(env, "SKYBOX_WORKERS", default_workers()),
        tile_workers=_int_env(env, "SKYBOX_TILE_WORKERS", 6),
        strict_reference=_bool_env(env, "SKYBOX_STRICT_REFERENCE"),
        debug=str(debug_env).lower() in TRUTHY,
    )


def load_config() -> Settings:
    env_file = _find_env_file()
    if env_file:
        load_dotenv(env_file)
    return load_config_from_env(dict(os.environ))
