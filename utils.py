# Shared utility functions.

import os
from typing import Any

import chardet

import constants

logger = __import__("logging").getLogger(__name__)


def safe_str_clean(value: Any) -> str:
    """Convert to string and clean whitespace safely."""
    if value is None:
        return ""
    return str(value).strip()


def base_name_no_ext(path: str) -> str:
    """Return the file name of ``path`` without its extension."""
    return os.path.splitext(os.path.basename(path))[0]


def detect_file_encoding(bytes_data: bytes) -> str:
    """Detect file encoding: UTF-8 if it decodes, else chardet, else a priority list."""
    try:
        bytes_data.decode('utf-8')
        return 'utf-8'
    except UnicodeDecodeError:
        pass
    detected = chardet.detect(bytes_data)
    encoding = detected.get('encoding')
    if encoding and (detected.get('confidence') or 0) > constants.ENCODING_MIN_CONFIDENCE:
        return encoding
    logger.debug("chardet unsure (%s), trying priority encodings", detected)
    for encoding in constants.ENCODING_PRIORITY:
        try:
            bytes_data.decode(encoding)
            return encoding
        except UnicodeDecodeError:
            continue
    return 'latin-1'
