"""Run the mp3drop CLI with ``python -m mp3drop``."""

import sys

from mp3drop import cli


def run() -> int:
    cli.main()
    return 0


if __name__ == "__main__":
    sys.exit(run())
