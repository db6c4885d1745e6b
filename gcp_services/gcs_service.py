"""
GCS utility functions for reading BAI2 files from a bucket
"""
import logging
from typing import Tuple

from google.cloud import storage as gcs
from google.api_core.exceptions import NotFound
from common.settings import PROJECT_ID

logger = logging.getLogger(__name__)

GCS_SCHEME = "gs://"


def is_gcs_path(path: str) -> bool:
    return path.startswith(GCS_SCHEME)


def split_gcs_path(gcs_path: str) -> Tuple[str, str]:
    """
    Splits 'gs://bucket_name/blob_name' (or 'bucket_name/blob_name') into its parts.

    Raises:
        ValueError: If the path has no blob name.
    """
    path = gcs_path[len(GCS_SCHEME):] if is_gcs_path(gcs_path) else gcs_path
    if "/" not in path:
        raise ValueError("Invalid GCS path format. Expected 'gs://bucket_name/blob_name'.")

    bucket_name, blob_name = path.split("/", 1)
    if not bucket_name or not blob_name:
        raise ValueError("Invalid GCS path format. Expected 'gs://bucket_name/blob_name'.")
    return bucket_name, blob_name


def read_file_from_gcs(gcs_path: str) -> bytes:
    """
    Downloads a file from GCS and returns its raw content.

    Args:
        gcs_path: The GCS path in the format 'gs://bucket_name/blob_name'.

    Returns:
        The bytes of the file; decoding is left to the parser.
    """
    bucket_name, blob_name = split_gcs_path(gcs_path)
    logger.info(f"Reading file from GCS: gs://{bucket_name}/{blob_name}")

    try:
        client = gcs.Client(project=PROJECT_ID)
        bucket = client.bucket(bucket_name)
        blob = bucket.blob(blob_name)
        return blob.download_as_bytes()
    except NotFound:
        logger.error(f"File not found at GCS path: gs://{bucket_name}/{blob_name}")
        raise FileNotFoundError(f"File not found at GCS path: gs://{bucket_name}/{blob_name}")
    except Exception as e:
        logger.error(f"Failed to read from GCS path gs://{bucket_name}/{blob_name}: {e}", exc_info=True)
        raise
