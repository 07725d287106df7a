"""Main CLI entry point for Launcher Auth."""

import asyncio
import logging
from datetime import datetime
from typing import Annotated

import typer
from rich.console import Console
from rich.table import Table

from launcher_auth.api import FederatedAuthAPI, LegacyAuthAPI
from launcher_auth.auth import (
    AccountManager,
    AccountNotFoundError,
    AuthError,
    FederatedAccount,
    FederatedAuthFlow,
    KeyringAccountStore,
    LegacyAuthFlow,
)
from launcher_auth.cli.errors import format_auth_error
from launcher_auth.cli.progress import api_spinner, print_error, print_success, print_warning
from launcher_auth.config import get_settings

console = Console()

app = typer.Typer(
    name="launcher-auth",
    help="Manage game launcher accounts",
    no_args_is_help=True,
)

# Options shared by every command
state = {"verbose": False}


@app.callback()
def main(
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Show debug logging and error details"),
    ] = False,
):
    """Configure logging for every command."""
    state["verbose"] = verbose
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def build_manager() -> AccountManager:
    """Wire the keyring store and the HTTP provider clients together."""
    settings = get_settings()
    store = KeyringAccountStore(settings.keyring_service).load()
    federated = FederatedAuthFlow(FederatedAuthAPI()) if settings.azure_client_id else None
    return AccountManager(
        store,
        LegacyAuthFlow(LegacyAuthAPI()),
        federated,
    )


def _fail_auth(error: AuthError) -> None:
    format_auth_error(error, console, verbose=state["verbose"])
    raise typer.Exit(1)


@app.command("accounts")
def list_accounts():
    """List stored accounts."""
    manager = build_manager()
    accounts = manager.store.list_accounts()
    if not accounts:
        console.print("[yellow]No accounts stored.[/yellow]")
        return

    selected = manager.store.get_selected_account()
    table = Table()
    table.add_column("", width=1)
    table.add_column("Name", style="bold")
    table.add_column("Type")
    table.add_column("UUID", style="dim")
    table.add_column("Token valid until")

    for account in accounts:
        expires = ""
        if isinstance(account, FederatedAccount):
            expires = datetime.fromtimestamp(account.expires_at / 1000).strftime("%Y-%m-%d %H:%M")
        marker = "*" if selected is not None and selected.uuid == account.uuid else ""
        table.add_row(marker, account.display_name, account.type.value, account.uuid, expires)

    console.print(table)


@app.command("login-legacy")
def login_legacy(
    username: Annotated[str, typer.Argument(help="Account username or e-mail")],
    password: Annotated[
        str,
        typer.Option("--password", "-p", prompt=True, hide_input=True, help="Account password"),
    ],
):
    """Log in with a legacy username/password account."""
    manager = build_manager()
    try:
        with api_spinner("Logging in..."):
            account = asyncio.run(manager.add_legacy_account(username, password))
    except AuthError as e:
        _fail_auth(e)

    print_success(f"Logged in as [bold]{account.display_name}[/bold]")


@app.command("login-offline")
def login_offline(
    username: Annotated[str, typer.Argument(help="Offline player name")],
):
    """Add an offline account. No credentials are checked."""
    manager = build_manager()
    try:
        account = manager.add_cracked_account(username)
    except ValueError as e:
        print_error(str(e))
        console.print("[dim]Use 3-16 letters, digits or underscores.[/dim]")
        raise typer.Exit(1)

    print_success(f"Offline account added: [bold]{account.display_name}[/bold]")


@app.command("auth-url")
def auth_url():
    """Print the Microsoft sign-in URL that yields an authorization code."""
    try:
        url = FederatedAuthAPI().get_authorization_url()
    except ValueError as e:
        print_error(str(e))
        raise typer.Exit(1)

    console.print("Open this URL, sign in and copy the [cyan]code[/cyan] from the redirect:")
    console.print(url, soft_wrap=True)


@app.command("login-federated")
def login_federated(
    code: Annotated[str, typer.Argument(help="Authorization code from the redirect URL")],
):
    """Log in with a Microsoft account."""
    manager = build_manager()
    if not manager.federated_enabled:
        print_error("No Azure client id configured. Set LAUNCHER_AUTH_AZURE_CLIENT_ID.")
        raise typer.Exit(1)

    try:
        with api_spinner("Exchanging tokens..."):
            account = asyncio.run(manager.add_federated_account(code))
    except AuthError as e:
        _fail_auth(e)

    print_success(f"Logged in as [bold]{account.display_name}[/bold]")


@app.command("logout")
def logout(
    uuid: Annotated[str, typer.Argument(help="UUID of the account to remove")],
):
    """Remove a stored account."""
    manager = build_manager()
    try:
        with api_spinner("Logging out..."):
            asyncio.run(manager.remove_account(uuid))
    except AccountNotFoundError as e:
        print_error(str(e))
        raise typer.Exit(1)
    except AuthError as e:
        _fail_auth(e)

    print_success("Account removed.")


@app.command("select")
def select(
    uuid: Annotated[str, typer.Argument(help="UUID of the account to select")],
):
    """Select the account the launcher plays with."""
    manager = build_manager()
    try:
        account = manager.select_account(uuid)
    except AccountNotFoundError as e:
        print_error(str(e))
        raise typer.Exit(1)

    print_success(f"Selected [bold]{account.display_name}[/bold]")


@app.command("validate")
def validate():
    """Validate the selected account, refreshing its tokens if needed."""
    manager = build_manager()
    if manager.store.get_selected_account() is None:
        print_warning("No account selected.")
        raise typer.Exit(1)

    with api_spinner("Validating account..."):
        valid = asyncio.run(manager.validate_selected())

    if not valid:
        print_error("The selected account is no longer valid. Log in again.")
        raise typer.Exit(1)
    print_success("The selected account is valid.")


if __name__ == "__main__":
    app()
