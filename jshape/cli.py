import argparse
import gzip
import logging
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO

from jshape.builder import parse
from jshape.errors import JDecodeError, JShapeError, JTrailingDataError
from jshape.printer import print_shape

logger = logging.getLogger(__name__)


@dataclass
class UserOptions:
    input_file: Path
    # -d, --decompress
    #   the input is gzip compressed
    decompress: bool
    # --jdump
    #   the input is a dump of concatenated documents, merge all of them
    multiple_documents: bool
    # -o, --output
    #   OPTIONAL: stdout by default
    output: Path | None
    # -v, --verbose
    verbose: bool


class MissingInputFile(Exception):
    pass


def _parse_args(args) -> UserOptions:
    parser = argparse.ArgumentParser(prog="jshape", description="jshape: print the structure of a json document")
    parser.add_argument("input_file", type=str, nargs="?", default=None)
    parser.add_argument("-d", "--decompress", default=False, action="store_true", required=False)
    parser.add_argument("--jdump", default=False, action="store_true", required=False)
    parser.add_argument("-o", "--output", type=str, default=None, required=False)
    parser.add_argument("-v", "--verbose", default=False, action="store_true", required=False)
    options = parser.parse_args(args)
    if options.input_file is None:
        raise MissingInputFile()
    return UserOptions(
        input_file=Path(options.input_file).expanduser(),
        decompress=options.decompress,
        multiple_documents=options.jdump,
        output=Path(options.output).expanduser() if options.output else None,
        verbose=options.verbose
    )


def _open_input(options: UserOptions) -> BinaryIO:
    if options.decompress:
        return gzip.open(options.input_file, "rb")
    return open(options.input_file, "rb")


def main(options: UserOptions) -> int:
    """
    Read the whole input, then print; nothing is written unless the shape was built completely.
    :return: the exit status
    """
    try:
        with _open_input(options) as fj:
            logger.debug("reading %s (gzip: %s)", options.input_file, options.decompress)
            shape = parse(fj, multiple_documents=options.multiple_documents)
    except OSError as e:
        print(f"Error: can't read {options.input_file}: {e}", file=sys.stderr)
        return 1
    except JTrailingDataError as e:
        print(f"Error: more than one document ({e}), use --jdump to merge them", file=sys.stderr)
        return 1
    except JDecodeError as e:
        print(f"Error: failed decode: {e}", file=sys.stderr)
        return 1
    except JShapeError as e:
        print(f"Error: malformed structure: {e}", file=sys.stderr)
        return 1

    if options.output is None:
        lines = print_shape(shape, sys.stdout)
    else:
        try:
            with open(options.output, "w", encoding="utf-8") as out:
                lines = print_shape(shape, out)
        except OSError as e:
            print(f"Error: can't write {options.output}: {e}", file=sys.stderr)
            return 1

    logger.debug("wrote %s lines", lines)
    return 0


def run(args: list[str] | None = None) -> int:
    try:
        options = _parse_args(sys.argv[1:] if args is None else args)
    except MissingInputFile:
        print("Error: no input file", file=sys.stderr)
        return 1

    logging.basicConfig(
        level=logging.DEBUG if options.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr
    )
    return main(options)


if __name__ == "__main__":
    sys.exit(run())
