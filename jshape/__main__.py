import sys

from jshape.cli import run

sys.exit(run())
