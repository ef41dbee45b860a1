"""Database management CLI commands."""

import typer
from rich.console import Console

from src.storefront.runtime.init_db import init_db

console = Console()

db_app = typer.Typer(help="Manage the storefront database")


@db_app.command("init")
def init() -> None:
    """Create all database tables."""
    init_db()
    console.print("[green]✅ Database tables created[/green]")
