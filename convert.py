"""
Deck Convert – command line entry point.

Usage:
  python convert.py                     # every .zip under --rawdir
  python convert.py --in export.zip     # one package
  python convert.py --in items.csv      # one plain tab-separated file
"""
import logging
import os
import sys
import zipfile
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Tuple

import click

import constants
from config import get_config
from deck_package import ConversionResult, convert_package, convert_tsv_file
from errors import ConversionError
from utils import base_name_no_ext

logger = logging.getLogger(__name__)

BATCH_ERRORS = (ConversionError, OSError, zipfile.BadZipFile)


@dataclass
class BatchReport:
    converted: List[ConversionResult] = field(default_factory=list)
    skipped: List[str] = field(default_factory=list)
    failed: List[Tuple[str, str]] = field(default_factory=list)


def output_path_for(input_path: str, out_dir: str) -> str:
    return os.path.join(out_dir, base_name_no_ext(input_path) + constants.OUTPUT_SUFFIX)


def is_package(path: str) -> bool:
    return path.lower().endswith(constants.PACKAGE_EXTENSION)


def discover_inputs(input_path: Optional[str], raw_dir: str) -> List[str]:
    """Return the single input path, or every package directly under ``raw_dir``."""
    if input_path:
        return [input_path]
    names = sorted(os.listdir(raw_dir))
    return [
        os.path.join(raw_dir, name)
        for name in names
        if is_package(name) and os.path.isfile(os.path.join(raw_dir, name))
    ]


def convert_one(input_path: str, out_path: str, settings: Dict[str, Any]) -> ConversionResult:
    if is_package(input_path):
        return convert_package(
            input_path,
            out_path,
            settings["cloze_color"],
            media_dir=settings.get("media_dir") or None,
            overwrite_media=settings.get("overwrite_media", False),
        )
    return convert_tsv_file(input_path, out_path, settings["cloze_color"])


def run_batch(
    inputs: List[str],
    settings: Dict[str, Any],
    force: bool = False,
    keep_going: bool = False,
    echo: Callable[[str], None] = click.echo,
) -> BatchReport:
    """Convert each input, reporting one line per item.

    Fail-fast by default: the first error is reported and re-raised.
    With ``keep_going`` failures are recorded and the queue continues.
    """
    report = BatchReport()
    for input_path in inputs:
        out_path = output_path_for(input_path, settings["processed_dir"])
        if os.path.exists(out_path) and not force:
            echo(f"SKIP: {input_path} ({out_path} exists)")
            report.skipped.append(input_path)
            continue
        try:
            result = convert_one(input_path, out_path, settings)
        except BATCH_ERRORS as e:
            echo(f"FAIL: {input_path}: {e}")
            report.failed.append((input_path, str(e)))
            if not keep_going:
                raise
            logger.warning("Continuing after failure on %s", input_path, exc_info=True)
            continue
        line = f"OK({result.kind}): {input_path} -> {out_path}"
        if result.media is not None:
            line += f" (media: {len(result.media.copied)} copied, {len(result.media.skipped)} skipped)"
        echo(line)
        report.converted.append(result)
    return report


@click.command()
@click.option("--in", "input_path", type=click.Path(exists=True, dir_okay=False),
              help="Input ZIP or TSV file. When omitted, process all ZIPs under --rawdir.")
@click.option("--rawdir", default=None, help="Directory containing zip files.")
@click.option("--procdir", default=None, help="Directory to write outputs.")
@click.option("--color", default=None, help="Color for cloze terms (e.g. #e91e63 or red).")
@click.option("--media-dir", default=None, help="Copy package media into this folder.")
@click.option("--overwrite-media/--skip-existing-media", default=None,
              help="Replace media files already present in --media-dir.")
@click.option("--force", is_flag=True, help="Convert even when the output file already exists.")
@click.option("--keep-going", is_flag=True, help="Continue with remaining inputs after a failure.")
@click.option("-v", "--verbose", is_flag=True, help="Log progress details.")
def main(input_path, rawdir, procdir, color, media_dir, overwrite_media, force, keep_going, verbose):
    """Convert exported flashcard packages into two-column TSV."""
    logging.basicConfig(
        level=logging.INFO if verbose else logging.WARNING,
        format="%(levelname)s:%(name)s:%(message)s",
    )
    settings = get_config()
    overrides = {
        "raw_dir": rawdir,
        "processed_dir": procdir,
        "cloze_color": color,
        "media_dir": media_dir,
        "overwrite_media": overwrite_media,
    }
    settings.update({k: v for k, v in overrides.items() if v is not None})

    try:
        os.makedirs(settings["processed_dir"], exist_ok=True)
        inputs = discover_inputs(input_path, settings["raw_dir"])
        if not inputs:
            click.echo(f"no zip files found in {settings['raw_dir']}")
            return
        report = run_batch(inputs, settings, force=force, keep_going=keep_going)
    except BATCH_ERRORS as e:
        logger.debug("Aborting batch", exc_info=True)
        click.echo(f"error: {e}", err=True)
        sys.exit(1)

    if report.failed:
        click.echo(f"{len(report.failed)} of {len(inputs)} inputs failed", err=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
