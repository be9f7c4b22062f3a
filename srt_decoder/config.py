"""Configuration constants and .env loading.

WHY: The decoder has a few behaviours that differ between users: whether
timing lines are read leniently, whether undecodable bytes are replaced
or reported, and how chatty the CLI is. Keeping the defaults in one place
lets them be overridden per environment without code changes.

HOW: python-dotenv loads the .env file on import. Constants are plain
module-level values read from environment variables with defaults.

RULES:
- SRT_DECODER_STRICT: "true" rejects signed timing fields and requires "-->"
- SRT_DECODER_DECODE_ERRORS: "replace" (default) or "strict"
- SRT_DECODER_LOG_LEVEL: logging level name for the CLI (default WARNING)
- SUBRIP_EXTENSIONS lists the file extensions picked up from directories
"""

from __future__ import annotations

import os

from dotenv import load_dotenv

from srt_decoder.core.encoding import DECODE_ERROR_POLICIES, DEFAULT_DECODE_ERRORS

# Load .env from the working directory
load_dotenv()

SUBRIP_EXTENSIONS: set[str] = {".srt"}
"""File extensions treated as SubRip when walking directories (lowercase, with dot)."""

DEFAULT_STRICT = os.getenv("SRT_DECODER_STRICT", "false").lower() == "true"
DEFAULT_LOG_LEVEL = "WARNING"
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def decode_errors_policy() -> str:
    """Return the configured decode error policy.

    RULES:
    - Reads SRT_DECODER_DECODE_ERRORS, defaulting to "replace"
    - Raises ValueError for anything other than "replace" or "strict"
    """
    policy = os.getenv("SRT_DECODER_DECODE_ERRORS", DEFAULT_DECODE_ERRORS).strip().lower()
    if policy not in DECODE_ERROR_POLICIES:
        raise ValueError(
            "Invalid SRT_DECODER_DECODE_ERRORS '{}'. Available: {}".format(
                policy, ", ".join(DECODE_ERROR_POLICIES)
            )
        )
    return policy


def log_level() -> str:
    """Return the configured CLI logging level name.

    RULES:
    - Reads SRT_DECODER_LOG_LEVEL, defaulting to "WARNING"
    - Raises ValueError for anything that is not a standard level name
    """
    level = os.getenv("SRT_DECODER_LOG_LEVEL", DEFAULT_LOG_LEVEL).strip().upper()
    if level not in LOG_LEVELS:
        raise ValueError(
            "Invalid SRT_DECODER_LOG_LEVEL '{}'. Available: {}".format(
                level, ", ".join(LOG_LEVELS)
            )
        )
    return level
