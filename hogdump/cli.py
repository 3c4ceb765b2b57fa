from __future__ import annotations

import argparse
import logging
import sys
from typing import List

from hogdump import __version__
from hogdump.create import create_archive
from hogdump.errors import HogError
from hogdump.events import OUTCOME_SKIPPED, EntryEvent
from hogdump.extract import extract_archives
from hogdump.info import archive_info


def _reason(exc: HogError) -> str:
    """Error text without the container path, which callers print themselves."""
    if exc.name is not None:
        return f"{exc.name}: {exc.message}"
    return exc.message


def _print_extract_event(ev: EntryEvent) -> None:
    if ev.outcome == OUTCOME_SKIPPED:
        print(f"  {ev.container}: {ev.name}: skipping (already exists)", flush=True)
    else:
        print(f"  {ev.container}: {ev.name}: wrote {ev.size} bytes", flush=True)


def _print_container_failure(path: str, exc: HogError) -> None:
    print(f'error while processing HOG file "{path}": {_reason(exc)}', file=sys.stderr, flush=True)


def cmd_extract(archives: List[str], *, outdir: str = ".", overwrite: bool = False, signature: bool = True) -> bool:
    """Extract HOG files into a directory.

    Args:
        archives: HOG files to extract, processed in order.
        outdir: Existing directory that receives the files.
        overwrite: Replace files that already exist instead of skipping them.
        signature: Expect the "DHF" signature at the start of each file.

    Returns:
        True when every HOG file was read to the end. Skipped files do not
        count as failures.
    """
    summary = extract_archives(
        archives,
        outdir=outdir,
        overwrite=overwrite,
        signature=signature,
        on_event=_print_extract_event,
        on_failure=_print_container_failure,
    )
    print(
        f"Processed {summary.files_processed} files, extracted {summary.files_extracted} files "
        f"({summary.bytes_extracted} bytes), skipped {summary.files_skipped} files."
    )
    return summary.ok


def cmd_create(output: str, inputs: List[str], *, signature: bool = True, verbose: bool = False) -> bool:
    """Create a HOG file; nothing is written to output unless every input is stored."""

    def _on_added(ev: EntryEvent) -> None:
        src = ev.source_path if verbose else ev.name
        print(f'{ev.container}: added file "{src}" ({ev.size} bytes).', flush=True)

    try:
        summary = create_archive(output, inputs, signature=signature, on_event=_on_added)
    except HogError as exc:
        culprit = f' while adding "{exc.path}"' if exc.path and exc.path != output else ""
        print(f'error creating HOG file "{output}"{culprit}: {_reason(exc)}', file=sys.stderr)
        return False
    print(f"Created {output}: {summary.files_added} files ({summary.bytes_added} bytes).")
    return True


def cmd_info(archives: List[str], *, signature: bool = True, verbose: bool = False) -> bool:
    """Summarize HOG files; with verbose, list every record."""

    def _on_listed(ev: EntryEvent) -> None:
        print(f"  {ev.container}: {ev.name}: {ev.size} bytes")

    ok = True
    for path in archives:
        try:
            info = archive_info(path, signature=signature, on_event=_on_listed if verbose else None)
        except HogError as exc:
            print(f'error while processing HOG file "{path}": {_reason(exc)}', file=sys.stderr)
            ok = False
            continue
        print(f"{path}: contains {info.num_files} files ({info.num_bytes} bytes).")
    return ok


def main(argv: List[str] | None = None):
    ap = argparse.ArgumentParser(
        prog="hogdump",
        description="Extract, create and list Descent HOG files",
        epilog="Without --extract or --create, each HOG file is summarized.",
    )
    mode = ap.add_mutually_exclusive_group()
    mode.add_argument("-x", "--extract", action="store_true", help="Extract the contents of the provided hog file(s)")
    mode.add_argument("-c", "--create", metavar="OUTPUT", help="Create hog file out of the provided file(s)")
    ap.add_argument("-o", "--overwrite", action="store_true", help="Overwrite files")
    ap.add_argument("-v", "--verbose", action="store_true", help="Display more information during processing")
    ap.add_argument("-d", "--outdir", default=".", help="Directory to extract into (must exist; default: .)")
    ap.add_argument("--raw", action="store_true", help="Files have no DHF signature (bare record stream)")
    ap.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    ap.add_argument("files", nargs="+", help="The files to operate on (1 or more)")

    args = ap.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    signature = not args.raw
    try:
        if args.extract:
            ok = cmd_extract(args.files, outdir=args.outdir, overwrite=args.overwrite, signature=signature)
        elif args.create is not None:
            ok = cmd_create(args.create, args.files, signature=signature, verbose=args.verbose)
        else:
            ok = cmd_info(args.files, signature=signature, verbose=args.verbose)
    except (HogError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    sys.exit(0 if ok else 1)


if __name__ == "__main__":
    main()
