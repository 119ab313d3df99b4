"""Command-line interface registration for the Flask application."""

from __future__ import annotations

from flask import Flask

from .waitlist import seed_code_pools, waitlist_cli


def init_app(app: Flask) -> None:
    """Register the ``flask waitlist ...`` command group.

    Parameters
    ----------
    app:
        Flask application instance whose CLI registry receives the group.
    """
    app.cli.add_command(waitlist_cli)


__all__ = ["init_app", "seed_code_pools", "waitlist_cli"]
