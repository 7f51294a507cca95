"""CLI commands."""

from pathlib import Path
from typing import Optional

import click
from sqlalchemy import Engine

from timebill.db.database import get_engine


def engine_from_context(ctx: click.Context) -> Engine:
    """Build the database engine for the path chosen on the command line."""
    db_path: Optional[str] = ctx.obj.get("db_path")
    return get_engine(Path(db_path) if db_path else None)
