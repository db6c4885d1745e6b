import os


def _as_bool(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "on")


# Logging Configuration
LOG_LEVEL = os.environ.get("BAI2_LOG_LEVEL", "INFO")

# Reader Configuration
READ_CHUNK_SIZE = int(os.environ.get("BAI2_READ_CHUNK_SIZE", "4096"))
ENCODING = os.environ.get("BAI2_ENCODING", "utf-8")

# Parser Configuration
CHECK_INTEGRITY = _as_bool(os.environ.get("BAI2_CHECK_INTEGRITY", "true"))
STRICT = _as_bool(os.environ.get("BAI2_STRICT", "false"))
CONFIG_PATH = os.environ.get("BAI2_CONFIG_PATH")

# GCP Configuration
PROJECT_ID = os.environ.get("GCP_PROJECT_ID")
