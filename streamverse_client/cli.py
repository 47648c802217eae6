"""
Command-line client for the StreamVerse API.

Usage:
    streamverse register --first-name Anna --last-name Karenina --email anna@example.com --username annak
    streamverse login annak
    streamverse favourites add --id movie-550 --type movie --title "Fight Club" ...
    streamverse favourites list
    streamverse theme dark
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from contextlib import asynccontextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import AsyncIterator, NoReturn, TypeVar

import click
from rich.console import Console
from rich.table import Table

from . import auth, favourites
from .api import StreamVerseApi
from .favourites import SIGN_IN_MESSAGE
from .models import CatalogueItem
from .preferences import THEME_CHOICES, ThemePreferenceStore
from .session_cache import SessionCache
from .state import Store
from .storage import DEFAULT_STORAGE_PATH, JsonFileStorage
from .validation import FormErrors, validate_login_form, validate_register_form

console = Console()
T = TypeVar("T")


@dataclass
class ClientContext:
    store: Store
    api: StreamVerseApi
    cache: SessionCache
    preferences: ThemePreferenceStore


@dataclass(frozen=True)
class CliOptions:
    storage_path: Path
    api_url: str | None


@asynccontextmanager
async def open_client(options: CliOptions) -> AsyncIterator[ClientContext]:
    """Build the store, restore the cached session and close the API on exit."""

    storage = JsonFileStorage(options.storage_path)
    cache = SessionCache(storage)
    store = Store()
    async with StreamVerseApi(options.api_url) as api:
        await auth.bootstrap_session(store, cache)
        yield ClientContext(
            store=store,
            api=api,
            cache=cache,
            preferences=ThemePreferenceStore(storage),
        )


def _run(options: CliOptions, action: Callable[[ClientContext], Awaitable[T]]) -> T:
    async def runner() -> T:
        async with open_client(options) as ctx:
            return await action(ctx)

    return asyncio.run(runner())


def _print_errors(errors: FormErrors) -> None:
    for field, message in errors.items():
        console.print(f"  [red]✗[/red] {field}: {message}")


def _fail(message: str) -> NoReturn:
    console.print(f"[red]✗[/red] {message}")
    raise SystemExit(1)


def _print_favourites(ctx: ClientContext) -> None:
    items = ctx.store.state.favourites.items
    if not items:
        console.print("[dim]No favourites yet.[/dim]")
        return

    table = Table(title="Favourites")
    table.add_column("ID", style="cyan")
    table.add_column("Type")
    table.add_column("Title", style="bold")
    table.add_column("Status")
    table.add_column("Added", style="dim")
    for item in items:
        added = item.added_at.strftime("%Y-%m-%d %H:%M") if item.added_at else ""
        table.add_row(item.id, item.type, item.title, item.status, added)
    console.print(table)


@click.group()
@click.option(
    "--storage",
    "storage_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=DEFAULT_STORAGE_PATH,
    show_default=True,
    help="JSON file holding the cached session and preferences.",
)
@click.option(
    "--api-url",
    envvar="STREAMVERSE_API_URL",
    default=None,
    help="Base URL of the StreamVerse API.",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging.")
@click.pass_context
def cli(ctx: click.Context, storage_path: Path, api_url: str | None, verbose: bool) -> None:
    """StreamVerse account and favourites client."""

    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    ctx.obj = CliOptions(storage_path=storage_path, api_url=api_url)


@cli.command()
@click.option("--first-name", prompt=True)
@click.option("--last-name", prompt=True)
@click.option("--email", prompt=True)
@click.option("--username", prompt=True)
@click.password_option()
@click.pass_obj
def register(
    options: CliOptions,
    first_name: str,
    last_name: str,
    email: str,
    username: str,
    password: str,
) -> None:
    """Create an account and sign in."""

    fields = dict(
        first_name=first_name,
        last_name=last_name,
        email=email,
        username=username,
        password=password,
    )
    errors = validate_register_form(**fields)
    if errors:
        console.print("[red]Registration form has errors:[/red]")
        _print_errors(errors)
        raise SystemExit(1)

    async def action(ctx: ClientContext):
        return await auth.register(ctx.store, ctx.api, ctx.cache, **fields), ctx

    session, ctx = _run(options, action)
    if session is None:
        _fail(ctx.store.state.auth.error or "Registration failed.")
    console.print(f"[green]✓[/green] Welcome, {session.user.display_name}!")


@cli.command()
@click.argument("identifier")
@click.option("--password", prompt=True, hide_input=True)
@click.pass_obj
def login(options: CliOptions, identifier: str, password: str) -> None:
    """Sign in with a username or email."""

    errors = validate_login_form(identifier, password)
    if errors:
        _print_errors(errors)
        raise SystemExit(1)

    async def action(ctx: ClientContext):
        return await auth.login(ctx.store, ctx.api, ctx.cache, identifier, password), ctx

    session, ctx = _run(options, action)
    if session is None:
        _fail(ctx.store.state.auth.error or "Login failed.")
    console.print(f"[green]✓[/green] Signed in as [bold]{session.user.username}[/bold]")


@cli.command()
@click.pass_obj
def logout(options: CliOptions) -> None:
    """Forget the cached session."""

    async def action(ctx: ClientContext) -> None:
        await auth.logout(ctx.store, ctx.cache)

    _run(options, action)
    console.print("[green]✓[/green] Signed out")


@cli.command()
@click.pass_obj
def whoami(options: CliOptions) -> None:
    """Show the signed-in profile, refreshed from the server."""

    async def action(ctx: ClientContext):
        if ctx.store.state.auth.session is None:
            return None, ctx
        return await auth.refresh_profile(ctx.store, ctx.api, ctx.cache), ctx

    session, ctx = _run(options, action)
    if session is None:
        _fail(ctx.store.state.auth.error or "Not signed in.")

    user = session.user
    table = Table(show_header=False)
    table.add_column(style="dim")
    table.add_column()
    table.add_row("Name", user.display_name)
    table.add_row("Username", user.username)
    table.add_row("Email", user.email)
    table.add_row("Avatar", user.avatar_url or "-")
    console.print(table)


@cli.command("update-profile")
@click.option("--first-name")
@click.option("--last-name")
@click.option("--username")
@click.option("--email")
@click.option(
    "--avatar",
    "avatar_base64",
    help="Image as a data URI (data:image/png;base64,...).",
)
@click.pass_obj
def update_profile(options: CliOptions, **changes: str | None) -> None:
    """Change any of name, username, email or avatar."""

    if not any(changes.values()):
        _fail("Nothing to update.")

    async def action(ctx: ClientContext):
        return await auth.update_profile(ctx.store, ctx.api, ctx.cache, **changes), ctx

    session, ctx = _run(options, action)
    if session is None:
        _fail(ctx.store.state.auth.error or "Not signed in.")
    console.print("[green]✓[/green] Profile updated")


@cli.command("delete-account")
@click.confirmation_option(prompt="Delete your account and all favourites?")
@click.pass_obj
def delete_account(options: CliOptions) -> None:
    """Permanently delete the signed-in account."""

    async def action(ctx: ClientContext):
        return await auth.delete_account(ctx.store, ctx.api, ctx.cache), ctx

    deleted, ctx = _run(options, action)
    if not deleted:
        _fail(ctx.store.state.auth.error or "Not signed in.")
    console.print("[green]✓[/green] Account deleted")


@cli.group("favourites")
def favourites_group() -> None:
    """List and edit saved favourites."""


def _favourites_command(
    options: CliOptions,
    operation: Callable[[ClientContext], Awaitable[bool]],
) -> None:
    async def action(ctx: ClientContext):
        if ctx.store.state.auth.session is None:
            return False, ctx
        return await operation(ctx), ctx

    ok, ctx = _run(options, action)
    if not ok:
        _fail(ctx.store.state.favourites.error or SIGN_IN_MESSAGE)
    _print_favourites(ctx)


@favourites_group.command("list")
@click.pass_obj
def list_favourites(options: CliOptions) -> None:
    _favourites_command(
        options, lambda ctx: favourites.fetch_favourites(ctx.store, ctx.api)
    )


@favourites_group.command("add")
@click.option("--id", "item_id", required=True)
@click.option(
    "--type",
    "item_type",
    type=click.Choice(["movie", "music", "podcast"], case_sensitive=False),
    required=True,
)
@click.option("--title", required=True)
@click.option("--description", required=True)
@click.option("--image", required=True)
@click.option("--status", required=True)
@click.pass_obj
def add_favourite(
    options: CliOptions,
    item_id: str,
    item_type: str,
    title: str,
    description: str,
    image: str,
    status: str,
) -> None:
    """Save a catalogue item."""

    item = CatalogueItem(
        id=item_id,
        type=item_type.lower(),
        title=title,
        description=description,
        image=image,
        status=status,
    )
    _favourites_command(
        options, lambda ctx: favourites.add_favourite(ctx.store, ctx.api, item)
    )


@favourites_group.command("remove")
@click.argument("item_id")
@click.pass_obj
def remove_favourite(options: CliOptions, item_id: str) -> None:
    _favourites_command(
        options, lambda ctx: favourites.remove_favourite(ctx.store, ctx.api, item_id)
    )


@cli.command()
@click.argument("choice", required=False, type=click.Choice(THEME_CHOICES))
@click.pass_obj
def theme(options: CliOptions, choice: str | None) -> None:
    """Show or set the theme preference."""

    async def action(ctx: ClientContext) -> str:
        if choice is None:
            return await ctx.preferences.load()
        return await ctx.preferences.save(choice)

    console.print(f"Theme: [bold]{_run(options, action)}[/bold]")


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
