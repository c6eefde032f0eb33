"""
Typer application for the Columbo connector.

Command groups:

* ``auth``: manage the stored username/token pair.
* ``fields``, ``config``, ``schema``: describe what the connector can emit.
* ``fetch``: run a data request and print the ``{schema, rows}`` envelope.
* ``verify``: check that the stored credentials reach an account's audits.
"""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Any, List, Optional

import typer

from ..adapters import AdapterError, CredentialError, JsonFileCredentialStore, RequestError, ServiceCommunicationError
from ..adapters.api import ColumboAdapter, ColumboClient
from ..config import load_settings
from ..core import ExecutionContext, ExecutionOptions, UnresolvedFieldError, configure_logging, list_fields
from ..services import AuthGate, ColumboConnector, UserCredentials

app = typer.Typer(
    no_args_is_help=True,
    add_completion=False,
    help=(
        "Columbo audit report connector.\n\n"
        "Command groups:\n"
        "- auth: manage the stored API credentials.\n"
        "- fields / config / schema: describe the report catalogue.\n"
        "- fetch: project audits of an account into report rows.\n"
        "- verify: check connectivity for an account."
    ),
)
auth_app = typer.Typer(help="Manage the stored Columbo username and API token.")
app.add_typer(auth_app, name="auth")


def _emit_json(payload: Any) -> None:
    typer.echo(json.dumps(payload, ensure_ascii=False, indent=2))


@app.callback(invoke_without_command=False)
def main(
    ctx: typer.Context,
    credentials_file: Optional[Path] = typer.Option(
        None,
        "--credentials-file",
        help="Override the JSON file holding the stored username and token.",
        dir_okay=False,
    ),
    cache_dir: Optional[Path] = typer.Option(
        None,
        "--cache-dir",
        help="Override the cache directory (default: .cache/columbo).",
        file_okay=False,
    ),
    debug: bool = typer.Option(False, "--debug", help="Show debug detail when a fetch fails."),
    log_level: Optional[str] = typer.Option(None, "--log-level", help="Logging level (default: COLUMBO_LOG_LEVEL or WARNING)."),
) -> None:
    """
    Configure the execution context shared by all commands.
    """

    if log_level:
        configure_logging(log_level, force=True)
    try:
        settings = load_settings(strict=False)
    except ValueError as exc:
        typer.echo(f"Invalid settings: {exc}", err=True)
        raise typer.Exit(code=2)
    if credentials_file:
        settings.credentials_path = credentials_file
    context = ExecutionContext.build_default(
        cache_dir=cache_dir,
        settings=settings,
        options=ExecutionOptions(debug=debug),
    )
    state = ctx.ensure_object(dict)
    state["context"] = context
    state["auth"] = AuthGate(store=JsonFileCredentialStore(context.credentials_path))


def _require_context(ctx: typer.Context) -> ExecutionContext:
    state = ctx.ensure_object(dict)
    context = state.get("context")
    if not isinstance(context, ExecutionContext):
        raise typer.Exit(code=2)
    return context


def _require_auth(ctx: typer.Context) -> AuthGate:
    state = ctx.ensure_object(dict)
    auth = state.get("auth")
    if not isinstance(auth, AuthGate):
        raise typer.Exit(code=2)
    return auth


def _build_connector(ctx: typer.Context) -> ColumboConnector:
    return ColumboConnector.from_context(_require_context(ctx), _require_auth(ctx))


@auth_app.command("set")
def auth_set(
    ctx: typer.Context,
    username: str = typer.Option(..., "--username", "-u", help="Columbo username."),
    token: str = typer.Option(..., "--token", "-t", help="Columbo API token.", prompt=True, hide_input=True),
) -> None:
    """Store credentials after a presence check."""

    result = _require_auth(ctx).set_credentials(UserCredentials(username=username, token=token))
    typer.echo(result.error_code.value)
    if not result.accepted:
        raise typer.Exit(code=1)


@auth_app.command("status")
def auth_status(ctx: typer.Context) -> None:
    """Report whether a complete username/token pair is stored."""

    auth = _require_auth(ctx)
    stored = auth.stored_credentials()
    if auth.is_auth_valid():
        typer.echo(f"Authorized as {stored.username}.")
        return
    typer.echo("Not authorized: username and token must both be stored.")
    raise typer.Exit(code=1)


@auth_app.command("reset")
def auth_reset(ctx: typer.Context) -> None:
    """Delete the stored username and token."""

    _require_auth(ctx).reset_auth()
    typer.echo("Credentials cleared.")


@auth_app.command("type")
def auth_type(ctx: typer.Context) -> None:
    """Print the authentication type declared to hosts."""

    _emit_json(_require_auth(ctx).get_auth_type())


@app.command("fields")
def fields_list(
    output_json: bool = typer.Option(False, "--json", help="Emit the catalogue as host schema JSON."),
) -> None:
    """List the fields the connector can produce."""

    catalog = list_fields()
    if output_json:
        _emit_json(catalog.to_schema())
        return

    header = f"{'ID':<16} {'Type':<8} {'Role':<10} Name"
    typer.echo(header)
    typer.echo("-" * len(header))
    for definition in catalog:
        typer.echo(f"{definition.field_id:<16} {definition.semantic_type.value:<8} {definition.role.value:<10} {definition.display_name}")


@app.command("config")
def config_show(ctx: typer.Context) -> None:
    """Print the configuration form description."""

    _emit_json(_build_connector(ctx).get_config())


@app.command("schema")
def schema_show(ctx: typer.Context) -> None:
    """Print the full schema as returned to hosts."""

    _emit_json(_build_connector(ctx).get_schema())


def _load_request(path: Path) -> Any:
    try:
        text = sys.stdin.read() if str(path) == "-" else path.read_text(encoding="utf-8")
    except OSError as exc:
        raise typer.BadParameter(f"Failed to read request '{path}': {exc}") from exc
    try:
        return json.loads(text)
    except ValueError as exc:
        raise typer.BadParameter(f"Request '{path}' is not valid JSON: {exc}") from exc


@app.command("fetch")
def fetch(
    ctx: typer.Context,
    account: Optional[str] = typer.Option(None, "--account", "-a", help="Columbo account id."),
    field: Optional[List[str]] = typer.Option(None, "--field", "-f", help="Field id to include. Repeat to add columns in order."),
    report_type: str = typer.Option("audit", "--report-type", "-r", help="Report type: audit, test or scenario."),
    request_file: Optional[Path] = typer.Option(None, "--request", help="Host request JSON file ('-' for stdin). Overrides --account/--field."),
) -> None:
    """Fetch audits and print the schema/rows envelope as JSON."""

    context = _require_context(ctx)
    connector = _build_connector(ctx)
    if request_file is not None:
        request = _load_request(request_file)
    else:
        if not account:
            raise typer.BadParameter("--account is required unless --request is given.")
        field_ids = field or list(list_fields().ids())
        request = {"fields": [{"name": name} for name in field_ids], "configParams": {"account": account, "reportType": report_type}}

    try:
        payload = connector.get_data(request)
    except (RequestError, UnresolvedFieldError) as exc:
        typer.echo(f"Invalid request: {exc}", err=True)
        raise typer.Exit(code=2)
    except CredentialError as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(code=1)
    except ServiceCommunicationError as exc:
        typer.echo(exc.user_message, err=True)
        if context.options.debug or connector.is_admin_user():
            typer.echo(f"Debug: {exc.debug_message}", err=True)
        raise typer.Exit(code=1)
    except AdapterError as exc:
        typer.echo(f"Fetch failed: {exc}", err=True)
        raise typer.Exit(code=1)

    _emit_json(payload)


@app.command("verify")
def verify(
    ctx: typer.Context,
    account: str = typer.Option(..., "--account", "-a", help="Columbo account id."),
) -> None:
    """Check that the stored credentials can list the account's audits."""

    context = _require_context(ctx)
    auth = _require_auth(ctx)
    if not auth.is_auth_valid():
        typer.echo("Columbo credentials are missing. Run 'columbo auth set' first.", err=True)
        raise typer.Exit(code=1)

    stored = auth.stored_credentials()
    settings = context.settings
    client = ColumboClient(base_url=settings.base_url, timeout=settings.timeout, max_attempts=settings.max_attempts)
    adapter = ColumboAdapter(account_id=account, username=stored.username or "", token=stored.token or "", client=client)
    result = adapter.verify()

    typer.echo(result.message)
    if result.details:
        typer.echo(f"Details: {json.dumps(result.details, ensure_ascii=False)}")
    if not result.success:
        raise typer.Exit(code=1)
