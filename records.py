# Tab-separated record reading/writing around the markup rewriter.

import csv
import io
import logging
import sys
from typing import IO, Iterable, Iterator, List, NamedTuple, Tuple

import constants
from errors import RecordFormatError
from markup import transform
from utils import detect_file_encoding, safe_str_clean

logger = logging.getLogger(__name__)

# Card fields carry whole HTML fragments; the csv default of 128 KiB is too small.
csv.field_size_limit(min(sys.maxsize, 2**31 - 1))

BOM = "\ufeff"


class Record(NamedTuple):
    markup: str
    sound: str = ""
    tags: str = ""


def strip_bom(text: str) -> str:
    if text and text.startswith(BOM):
        return text[len(BOM):]
    return text


def decode_bytes(data: bytes) -> str:
    """Decode raw file bytes and drop a leading byte-order mark."""
    encoding = detect_file_encoding(data)
    logger.debug("Decoding %d bytes as %s", len(data), encoding)
    return strip_bom(data.decode(encoding, errors='replace'))


def read_records(text: str) -> Iterator[Record]:
    """Yield records from tab-separated text.

    Empty rows are skipped anywhere. ``#`` lines are skipped only in the
    leading header block; after the first record they are ordinary data.
    Quotes are handled leniently: a stray quote inside an unquoted field is
    kept as-is.
    """
    reader = csv.reader(io.StringIO(strip_bom(text), newline=""), delimiter='\t')
    in_header = True
    try:
        for row in reader:
            if not row:
                continue
            if in_header and row[0].startswith(constants.COMMENT_PREFIX):
                continue
            in_header = False
            yield Record(
                markup=row[0],
                sound=safe_str_clean(row[1]) if len(row) > 1 else "",
                tags=row[2] if len(row) > 2 else "",
            )
    except csv.Error as e:
        raise RecordFormatError(str(e), reader.line_num) from e


def convert_records(records: Iterable[Record], color: str) -> List[Tuple[str, str]]:
    """Run every record through the markup rewriter."""
    rows = []
    for record in records:
        rows.append(transform(record.markup, record.sound, color))
    logger.debug("Converted %d records", len(rows))
    return rows


def convert_text(text: str, color: str = constants.DEFAULT_CLOZE_COLOR) -> List[Tuple[str, str]]:
    return convert_records(read_records(text), color)


def write_records(rows: Iterable[Tuple[str, str]], stream: IO[str]) -> int:
    """Write two-column rows as TSV; returns the number of rows written."""
    writer = csv.writer(stream, delimiter='\t', lineterminator='\n')
    count = 0
    for row in rows:
        writer.writerow(row)
        count += 1
    return count


def rows_to_tsv(rows: Iterable[Tuple[str, str]]) -> str:
    buf = io.StringIO()
    write_records(rows, buf)
    return buf.getvalue()
