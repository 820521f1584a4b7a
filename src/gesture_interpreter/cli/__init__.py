#!/usr/bin/env python3

"""Command line tools to run the gesture interpreter on a camera."""


from .common import app
from .run import run_gestures_cmd  # noqa: F401
from .serve import serve_cmd  # noqa: F401


def main() -> None:
    """Entry point for the application."""
    app()


if __name__ == "__main__":
    main()
