"""Entry point for `python -m nowplaying`."""

import sys


def main():
    from nowplaying.app import run_app
    sys.exit(run_app())


if __name__ == "__main__":
    main()
