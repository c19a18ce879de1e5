#!/usr/bin/env python3
"""
Filename utilities for generating output filenames.
"""

import os
import logging
from typing import Optional

logger = logging.getLogger(__name__)

# Input extensions dropped when naming the output map
INPUT_EXTENSIONS = (".csv", ".txt", ".gpx")

MAX_ATTEMPTS = 100


def _base_name(source: str, suffix: Optional[str]) -> str:
    # URLs are named after their last path component, query string removed
    base = os.path.basename(source.split("?", 1)[0].rstrip("/")) or "spanmap"
    if base.lower().endswith(INPUT_EXTENSIONS):
        base = os.path.splitext(base)[0]
    if suffix:
        base = f"{base} {suffix}"
    return base + " map"


def generate_output_filename(
    source: str, suffix: Optional[str] = None, directory: Optional[str] = None
) -> str:
    """
    Generates an output HTML filename and reserves it by creating an empty file.

    Strategy:
    1. Drop a known input extension (.csv, .txt, .gpx) from the source name
    2. Append the filter value if given, then " map.html"
    3. If file exists, try " (1).html", " (2).html", etc. (by attempting to create exclusively)
    4. Stop after MAX_ATTEMPTS numbered variants

    Args:
        source: Path or URL of the input data
        suffix: Optional extra name part, e.g. the selected region
        directory: Output directory (default: alongside a local input file,
            or the current directory for URLs)

    Returns:
        Safe output filename that has been created as an empty file to reserve its name

    Raises:
        RuntimeError: If no available filename found after MAX_ATTEMPTS attempts
        ValueError: If a filename cannot be created (e.g., due to permissions or an invalid name detected by the OS)
    """
    if directory is None:
        is_url = source.lower().startswith(("http://", "https://"))
        directory = "" if is_url else os.path.dirname(source)

    base_output = _base_name(source, suffix)

    candidates = [base_output + ".html"] + [
        f"{base_output} ({i}).html" for i in range(1, MAX_ATTEMPTS + 1)
    ]
    for name in candidates:
        candidate = os.path.join(directory, name)
        try:
            with open(candidate, "x"):
                pass
            return candidate
        except FileExistsError:
            continue
        except OSError as e:
            logger.error(f"Cannot create file {candidate}: {e}")
            raise ValueError(f"Cannot create file: {e}")

    logger.error(
        f"Could not find an available filename after {MAX_ATTEMPTS} attempts. "
        f"Please clean up your output directory or specify --output explicitly."
    )
    raise RuntimeError(f"No available filename found after {MAX_ATTEMPTS} attempts")
