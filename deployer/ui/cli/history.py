"""
CLI command for the deploy audit ledger.

Usage::

    deployer history
    deployer history -n 5 --json
"""

from __future__ import annotations

import json

import click


@click.command()
@click.option("-n", "count", default=20, show_default=True, help="Number of entries to show.")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def history(ctx: click.Context, count: int, as_json: bool) -> None:
    """Show recent deploys, newest last."""
    from deployer.core.persistence.audit import AuditWriter
    from deployer.main import _load_config

    _, state_dir = _load_config(ctx, required=False)
    entries = AuditWriter(state_dir).read_recent(count)

    if as_json:
        click.echo(json.dumps([e.model_dump(mode="json") for e in entries], indent=2))
        return

    if not entries:
        click.echo("No deploys recorded yet.")
        return

    click.secho(f"\n📜 Last {len(entries)} deploy(s):", fg="cyan", bold=True)
    for entry in entries:
        color = "green" if entry.status == "ok" else "red"
        tag = " [dry-run]" if entry.dry_run else ""
        click.echo(f"   {entry.timestamp[:19]}  ", nl=False)
        click.secho(f"{entry.status:<6}", fg=color, nl=False)
        target = f"{entry.kind} {entry.name}".strip() or "?"
        where = f" in {entry.namespace}" if entry.namespace else ""
        click.echo(f" {target}{where} ({entry.account}){tag}")
        for error in entry.errors:
            click.echo(f"      ↳ {error}")
    click.echo()
