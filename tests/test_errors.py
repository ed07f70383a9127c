# Tests for errors: exception hierarchy and ErrorHandler logging.

import logging

from errors import (
    ConversionError,
    DataFileNotFoundError,
    ErrorHandler,
    MediaCopyError,
    RecordFormatError,
)


def test_error_hierarchy():
    for cls in (DataFileNotFoundError, RecordFormatError, MediaCopyError):
        assert issubclass(cls, ConversionError)


def test_record_format_error_message():
    assert str(RecordFormatError("bad quote", 3)) == "line 3: bad quote"
    assert str(RecordFormatError("bad quote")) == "bad quote"


def test_handle_without_user_feedback_only_logs(caplog):
    with caplog.at_level(logging.ERROR, logger="errors"):
        ErrorHandler.handle(RuntimeError("x"), "转换失败", show_user=False)
    assert "转换失败: x" in caplog.text
