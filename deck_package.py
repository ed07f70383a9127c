# Exported deck package (.zip) reading, media copying and output writing.

import io
import os
import posixpath
import shutil
import tempfile
import zipfile
from dataclasses import dataclass, field
from typing import Iterable, Iterator, List, Optional, Tuple

import constants
from errors import DataFileNotFoundError, MediaCopyError, ProgressCallback
from records import convert_text, decode_bytes, write_records

logger = __import__("logging").getLogger(__name__)


@dataclass
class MediaCopyResult:
    copied: List[str] = field(default_factory=list)
    skipped: List[str] = field(default_factory=list)


@dataclass
class ConversionResult:
    input_path: str
    output_path: str
    kind: str
    rows: int = 0
    media: Optional[MediaCopyResult] = None


def _is_media_entry(info: zipfile.ZipInfo) -> bool:
    parts = [p for p in info.filename.split("/") if p]
    return len(parts) > 1 and parts[0].lower() == constants.MEDIA_DIR_NAME


def find_data_file(zf: zipfile.ZipFile) -> zipfile.ZipInfo:
    """Pick the data file inside a package.

    An exact name from ``DATA_FILE_NAMES`` wins; otherwise exactly one file
    with a data extension must exist.
    """
    fallbacks: List[zipfile.ZipInfo] = []
    for info in zf.infolist():
        if info.is_dir() or _is_media_entry(info):
            continue
        base = posixpath.basename(info.filename).lower()
        if base in constants.DATA_FILE_NAMES:
            return info
        if base.endswith(constants.DATA_FILE_EXTENSIONS):
            fallbacks.append(info)

    if len(fallbacks) == 1:
        logger.info("No %s in package, using %s", "/".join(constants.DATA_FILE_NAMES), fallbacks[0].filename)
        return fallbacks[0]
    if not fallbacks:
        raise DataFileNotFoundError(f"{'/'.join(constants.DATA_FILE_NAMES)} not found in {zf.filename or 'package'}")
    names = ", ".join(i.filename for i in fallbacks)
    raise DataFileNotFoundError(f"ambiguous data file in {zf.filename or 'package'}: {names}")


def iter_media_entries(zf: zipfile.ZipFile) -> Iterator[Tuple[zipfile.ZipInfo, str]]:
    """Yield (entry, destination file name) for files under the media directory."""
    for info in zf.infolist():
        if info.is_dir() or not _is_media_entry(info):
            continue
        name = posixpath.basename(info.filename)
        if name in ("", ".", ".."):
            continue
        yield info, name


def _atomic_copy(src, dest_path: str) -> None:
    """Stream ``src`` into a temp file beside ``dest_path`` and rename it into place."""
    fd, tmp_path = tempfile.mkstemp(prefix=".", suffix=".tmp", dir=os.path.dirname(dest_path) or ".")
    try:
        with os.fdopen(fd, "wb") as tmp:
            shutil.copyfileobj(src, tmp)
        os.replace(tmp_path, dest_path)
    except BaseException:
        try:
            os.remove(tmp_path)
        except OSError as e:
            logger.warning("Could not remove temp file %s: %s", tmp_path, e)
        raise


def copy_media(
    zf: zipfile.ZipFile,
    dest_dir: str,
    overwrite: bool = False,
    progress_callback: Optional[ProgressCallback] = None,
) -> MediaCopyResult:
    """Copy media entries into ``dest_dir``; existing files are skipped unless ``overwrite``."""
    os.makedirs(dest_dir, exist_ok=True)
    result = MediaCopyResult()
    entries = list(iter_media_entries(zf))
    for i, (info, name) in enumerate(entries, 1):
        dest_path = os.path.join(dest_dir, name)
        if os.path.exists(dest_path) and not overwrite:
            result.skipped.append(name)
        else:
            try:
                with zf.open(info) as src:
                    _atomic_copy(src, dest_path)
            except (OSError, zipfile.BadZipFile) as e:
                raise MediaCopyError(f"{info.filename} -> {dest_path}: {e}") from e
            result.copied.append(name)
        if progress_callback:
            progress_callback(i / len(entries), name)
    logger.info("Media: %d copied, %d skipped -> %s", len(result.copied), len(result.skipped), dest_dir)
    return result


def write_output(rows: Iterable[Tuple[str, str]], out_path: str) -> int:
    """Write converted rows to ``out_path`` via a temp file and rename."""
    out_dir = os.path.dirname(out_path) or "."
    os.makedirs(out_dir, exist_ok=True)
    fd, tmp_path = tempfile.mkstemp(prefix=".", suffix=".tmp", dir=out_dir)
    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="") as f:
            count = write_records(rows, f)
        os.replace(tmp_path, out_path)
    except BaseException:
        try:
            os.remove(tmp_path)
        except OSError as e:
            logger.warning("Could not remove temp file %s: %s", tmp_path, e)
        raise
    return count


def read_package_rows(zf: zipfile.ZipFile, color: str) -> List[Tuple[str, str]]:
    """Locate, decode and convert the data file of an open package."""
    info = find_data_file(zf)
    logger.debug("Reading %s from %s", info.filename, zf.filename)
    return convert_text(decode_bytes(zf.read(info)), color)


def convert_package(
    zip_path: str,
    out_path: str,
    color: str = constants.DEFAULT_CLOZE_COLOR,
    media_dir: Optional[str] = None,
    overwrite_media: bool = False,
) -> ConversionResult:
    """Convert one exported package and optionally copy its media.

    Media is copied before the output is written, so a failed copy leaves no
    output behind and a rerun is not skipped.
    """
    with zipfile.ZipFile(zip_path) as zf:
        rows = read_package_rows(zf, color)
        media = None
        if media_dir:
            media = copy_media(zf, media_dir, overwrite=overwrite_media)
        count = write_output(rows, out_path)
    logger.info("Converted %s (%d records) -> %s", zip_path, count, out_path)
    return ConversionResult(zip_path, out_path, "zip", count, media)


def convert_tsv_file(
    in_path: str,
    out_path: str,
    color: str = constants.DEFAULT_CLOZE_COLOR,
) -> ConversionResult:
    """Convert a plain tab-separated data file."""
    with open(in_path, "rb") as f:
        data = f.read()
    count = write_output(convert_text(decode_bytes(data), color), out_path)
    logger.info("Converted %s (%d records) -> %s", in_path, count, out_path)
    return ConversionResult(in_path, out_path, "tsv", count)


def convert_bytes(file_name: str, data: bytes, color: str = constants.DEFAULT_CLOZE_COLOR) -> List[Tuple[str, str]]:
    """Convert an in-memory upload (package or plain data file) to rows."""
    if file_name.lower().endswith(constants.PACKAGE_EXTENSION):
        with zipfile.ZipFile(io.BytesIO(data)) as zf:
            return read_package_rows(zf, color)
    return convert_text(decode_bytes(data), color)
