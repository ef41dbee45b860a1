"""Storefront user administration CLI commands."""

import asyncio

import typer
from rich.console import Console
from rich.prompt import Confirm
from rich.table import Table

from src.storefront.core.errors import AppError
from src.storefront.core.services import (
    CloudinaryImageHost,
    DbSessionService,
    JwtGeneratorService,
    JwtVerificationService,
    UserAccountService,
    get_mailer,
)
from src.storefront.entities.core.user import UserRepository, UserRole

console = Console()

# Create the users subcommand app
users_app = typer.Typer(help="Manage storefront user accounts")


def get_db_service() -> DbSessionService:
    """Get a database service bound to the configured database."""
    return DbSessionService()


@users_app.command("list")
def list_users() -> None:
    """List all users, newest first."""
    with get_db_service().session_scope() as session:
        users = UserRepository(session).list_all()

    if not users:
        console.print("[yellow]No users found[/yellow]")
        return

    table = Table(title="Storefront users")
    table.add_column("ID", style="cyan")
    table.add_column("Name", style="green")
    table.add_column("Email", style="blue")
    table.add_column("Role", style="magenta")
    table.add_column("Addresses", style="yellow", justify="right")
    table.add_column("Created", style="white")

    for user in users:
        table.add_row(
            user.id,
            user.name,
            user.email,
            user.role.value,
            str(len(user.addresses)),
            user.created_at.strftime("%Y-%m-%d %H:%M"),
        )

    console.print(table)
    console.print(f"\n[green]Found {len(users)} users[/green]")


@users_app.command("promote")
def promote_user(
    email: str = typer.Argument(..., help="E-mail of the user to promote"),
    role: UserRole = typer.Option(UserRole.ADMIN, "--role", "-r", help="Role to assign"),
) -> None:
    """Change a user's role (admin by default)."""
    with get_db_service().session_scope() as session:
        repo = UserRepository(session)
        user = repo.get_by_email(email)
        if user is None:
            console.print(f"[red]❌ User '{email}' not found[/red]")
            raise typer.Exit(code=1)
        user.role = role
        repo.update(user)

    console.print(f"[green]✅ User '{email}' now has role '{role.value}'[/green]")


@users_app.command("delete")
def delete_user(
    email: str = typer.Argument(..., help="E-mail of the user to delete"),
    force: bool = typer.Option(False, "--force", "-f", help="Skip confirmation prompt"),
) -> None:
    """Delete a user, their addresses and their avatar."""
    with get_db_service().session_scope() as session:
        user = UserRepository(session).get_by_email(email)
        if user is None:
            console.print(f"[red]❌ User '{email}' not found[/red]")
            raise typer.Exit(code=1)

        if not force and not Confirm.ask(
            f"Are you sure you want to delete user '{email}' ({user.name})?"
        ):
            console.print("[yellow]Deletion cancelled[/yellow]")
            return

        accounts = UserAccountService(
            session,
            JwtGeneratorService(),
            JwtVerificationService(),
            CloudinaryImageHost(),
            get_mailer(),
        )
        try:
            asyncio.run(accounts.delete_user(user.id))
        except AppError as e:
            console.print(f"[red]❌ Failed to delete user: {e.message}[/red]")
            raise typer.Exit(code=1) from e

    console.print(f"[green]✅ Successfully deleted user '{email}'[/green]")
