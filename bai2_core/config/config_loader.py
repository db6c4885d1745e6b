"""
Loads the optional JSON parser options file.

    {"ignored_summary_codes": ["900", "901"]}
"""
import json
import logging
from pathlib import Path
from typing import Dict, Optional

from common.settings import CONFIG_PATH

logger = logging.getLogger(__name__)


def load_config(config_path: Optional[str] = None) -> Dict:
    """
    Loads parser options from ``config_path`` (defaults to BAI2_CONFIG_PATH).

    Returns an empty configuration when no path is configured.

    Raises:
        FileNotFoundError: If a path is configured but does not exist.
    """
    config_path = config_path or CONFIG_PATH
    if not config_path:
        return {}

    path = Path(config_path)
    if not path.exists():
        raise FileNotFoundError(f"Config file not found at: {path}")

    logger.info(f"Loading parser configuration from: {path}")
    with open(path, "r") as f:
        return json.load(f)


CONFIG = load_config()
IGNORED_SUMMARY_CODES = frozenset(CONFIG.get("ignored_summary_codes", []))
