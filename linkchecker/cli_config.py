"""Discovery and seeding of the ``.env`` file that holds ``LINKCHECK_*`` settings."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, List, Optional

from dotenv import dotenv_values

from .config import (
    DEFAULT_REPORT_PATH,
    DEFAULT_SCREENSHOT_DIR,
    DEFAULT_TARGET_URL,
    EXCLUDED_SELECTORS,
    CheckerConfig,
)

LOGGER = logging.getLogger(__name__)

CONFIG_DIR = Path.home() / ".config" / "linkchecker"
CONFIG_ENV_FILE = CONFIG_DIR / ".env"
EXAMPLE_ENV_FILE = Path(__file__).parent.parent / ".env.example"

SETTINGS_PREFIX = "LINKCHECK_"
KNOWN_SETTINGS = (
    "LINKCHECK_URL",
    "LINKCHECK_PROBE_TIMEOUT_MS",
    "LINKCHECK_REPORT_PATH",
    "LINKCHECK_SCREENSHOT_DIR",
    "LINKCHECK_CONTENT_SELECTOR",
    "LINKCHECK_EXCLUDE",
    "LINKCHECK_HEADLESS",
    "LINKCHECK_DISMISS_POPUPS",
)


def render_env_template() -> str:
    """Default ``.env`` contents, used when no ``.env.example`` ships."""
    defaults = CheckerConfig()
    values = {
        "LINKCHECK_URL": DEFAULT_TARGET_URL,
        "LINKCHECK_PROBE_TIMEOUT_MS": str(defaults.probe_timeout_ms),
        "LINKCHECK_REPORT_PATH": DEFAULT_REPORT_PATH,
        "LINKCHECK_SCREENSHOT_DIR": DEFAULT_SCREENSHOT_DIR,
        "LINKCHECK_CONTENT_SELECTOR": defaults.content_selector,
        "LINKCHECK_EXCLUDE": ",".join(EXCLUDED_SELECTORS),
        "LINKCHECK_HEADLESS": "true" if defaults.headless else "false",
        "LINKCHECK_DISMISS_POPUPS": "true" if defaults.dismiss_popups else "false",
    }
    return "".join(f"{key}={values[key]}\n" for key in KNOWN_SETTINGS)


def unknown_settings(env_file: Path) -> List[str]:
    """``LINKCHECK_*`` keys in *env_file* that no component reads."""
    return sorted(
        key
        for key in dotenv_values(env_file)
        if key.startswith(SETTINGS_PREFIX) and key not in KNOWN_SETTINGS
    )


def _apply(env_file: Path, load_env: Callable[[Path], bool]) -> Path:
    load_env(env_file)
    for key in unknown_settings(env_file):
        LOGGER.warning("Ignoring unknown setting %s in %s", key, env_file)
    LOGGER.debug("Loaded settings from %s", env_file)
    return env_file


def load_config(
    *,
    config_dir: Path,
    config_env_file: Path,
    cwd: Path,
    load_env: Callable[[Path], bool],
    copy_file: Callable[[Path, Path], str],
    example_file: Optional[Path] = None,
) -> Optional[Path]:
    """Load link checker settings and return the file they came from.

    Search order:
    1. .env in the current working directory
    2. ~/.config/linkchecker/.env

    If neither exists, the user config file is created from the packaged
    .env.example, or from the built-in defaults when that is missing.
    Returns None when no file could be loaded or created.
    """
    local_env = cwd / ".env"
    if local_env.is_file():
        return _apply(local_env, load_env)

    if config_env_file.is_file():
        return _apply(config_env_file, load_env)

    example = example_file if example_file is not None else EXAMPLE_ENV_FILE
    try:
        config_dir.mkdir(parents=True, exist_ok=True)
        if example.is_file():
            copy_file(example, config_env_file)
        else:
            config_env_file.write_text(render_env_template(), encoding="utf-8")
    except OSError as exc:
        LOGGER.warning("Could not create %s: %s", config_env_file, exc)
        return None

    LOGGER.info(
        "Created config file at %s. "
        "Edit LINKCHECK_URL and the output paths there to change the defaults.",
        config_env_file,
    )
    return _apply(config_env_file, load_env)
