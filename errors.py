# Error types, centralized error handling and progress callback protocol.

import logging
from typing import Protocol

logger = logging.getLogger(__name__)


class ConversionError(Exception):
    """Base class for failures in the package / record I/O layer."""


class DataFileNotFoundError(ConversionError):
    """No usable data file inside an exported package."""


class RecordFormatError(ConversionError):
    """A delimited record could not be decoded."""

    def __init__(self, message: str, line: int = 0):
        super().__init__(f"line {line}: {message}" if line else message)
        self.line = line


class MediaCopyError(ConversionError):
    """A media file could not be written to the destination folder."""


class ProgressCallback(Protocol):
    """Protocol for progress reporting callbacks."""

    def __call__(self, ratio: float, message: str) -> None:
        ...


class ErrorHandler:
    """Centralized error handling for consistent user feedback."""

    @staticmethod
    def handle(error: Exception, context: str, show_user: bool = True) -> None:
        """Handle errors consistently with logging and user feedback."""
        logger.error("%s: %s", context, error, exc_info=True)
        if show_user:
            import streamlit as st
            st.error(f"❌ {context}: {str(error)}")
