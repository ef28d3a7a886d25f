"""Command-line interface package for the drift auditor."""

from .app import (
    EXIT_CLEAN,
    EXIT_DRIFT,
    EXIT_SETUP_ERROR,
    build_parser,
    create_auditor,
    main,
    render_json,
    render_summary,
    render_text,
    run,
)

__all__ = [
    "EXIT_CLEAN",
    "EXIT_DRIFT",
    "EXIT_SETUP_ERROR",
    "build_parser",
    "create_auditor",
    "main",
    "render_json",
    "render_summary",
    "render_text",
    "run",
]
