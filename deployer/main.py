"""
Manifest deployer — CLI entrypoint.

Usage:
    deployer --help
    deployer deploy manifests/web.yml --artifact docker/image=web=registry/web:1.4.2
    deployer kinds
    deployer history -n 5
    deployer config check
"""

from __future__ import annotations

import json
import sys
from pathlib import Path

import click

from deployer import __version__
from deployer.core.observability.logging_config import resolve_level, setup_logging


@click.group()
@click.version_option(version=__version__, prog_name="deployer")
@click.option("--verbose", "-v", is_flag=True, help="Show deploy progress.")
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output.")
@click.option("--debug", is_flag=True, help="Enable debug logging (very verbose).")
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=False),
    default=None,
    help="Path to deployer.yml (default: auto-detect).",
)
@click.pass_context
def cli(
    ctx: click.Context,
    verbose: bool,
    quiet: bool,
    debug: bool,
    config_path: str | None,
) -> None:
    """Manifest deployer — prepare and apply Kubernetes manifests."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet
    ctx.obj["debug"] = debug
    ctx.obj["config_path"] = Path(config_path) if config_path else None

    setup_logging(
        level=resolve_level(debug=debug, verbose=verbose, quiet=quiet),
        quiet_third_party=not debug,
    )


def _load_config(ctx: click.Context, required: bool = True):
    """Config and state directory for a command.

    Exits with status 1 on a config error. When ``required`` is false
    and no deployer.yml exists, falls back to the default account.
    """
    from deployer.core.config.loader import config_root, default_config, find_config_file, load_config
    from deployer.core.errors import ConfigError

    config_path: Path | None = ctx.obj.get("config_path") or find_config_file()
    if config_path is None and not required:
        config = default_config()
    else:
        try:
            config = load_config(config_path)
        except ConfigError as e:
            click.secho(f"❌ {e.message}", fg="red", err=True)
            sys.exit(1)

    state_dir = config_root(config_path) / config.state_dir
    return config, state_dir


# ── deploy ──────────────────────────────────────────────────────


@cli.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--account", "-a", default=None, help="Account to deploy with.")
@click.option("--namespace", "-n", default=None, help="Override the target namespace.")
@click.option(
    "--versioned/--unversioned",
    default=None,
    help="Force versioned naming on or off (default: per kind).",
)
@click.option(
    "--artifact",
    "artifact_opts",
    multiple=True,
    metavar="TYPE=NAME=REFERENCE",
    help="Candidate artifact to bind, e.g. docker/image=web=registry/web:1.4.2.",
)
@click.option("--app", default=None, help="Application the manifest belongs to.")
@click.option("--dry-run", is_flag=True, help="Validate with kubectl --dry-run=client.")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def deploy(
    ctx: click.Context,
    file: Path,
    account: str | None,
    namespace: str | None,
    versioned: bool | None,
    artifact_opts: tuple[str, ...],
    app: str | None,
    dry_run: bool,
    as_json: bool,
) -> None:
    """Deploy the manifest (or deploy request) in FILE."""
    from deployer.adapters.downloader import ManifestDownloader
    from deployer.core.errors import DeployError
    from deployer.core.use_cases.deploy import (
        apply_overrides,
        deploy_manifest,
        load_description,
        parse_artifact_option,
    )

    try:
        artifacts = [parse_artifact_option(opt) for opt in artifact_opts]
    except ValueError as e:
        raise click.BadParameter(str(e), param_hint="--artifact") from None

    config, state_dir = _load_config(ctx, required=not dry_run)

    try:
        description = load_description(file)
    except DeployError as e:
        if as_json:
            click.echo(json.dumps({"status": "failed", "error": str(e), "error_code": e.code}, indent=2))
        else:
            click.secho(f"❌ {e}", fg="red", err=True)
        sys.exit(1)

    description = apply_overrides(
        description,
        account=account,
        namespace=namespace,
        versioned=versioned,
        artifacts=artifacts,
        app=app,
    )

    result = deploy_manifest(
        description,
        config,
        downloader=ManifestDownloader(base_dir=file.parent.resolve()),
        dry_run=dry_run,
        state_dir=state_dir,
    )

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        sys.exit(0 if result.ok else 1)

    if not result.ok or result.result is None:
        click.secho(f"❌ {result.error}", fg="red", err=True)
        sys.exit(1)

    quiet = ctx.obj.get("quiet", False)
    label = "Validated" if dry_run else "Deployed"
    for namespace_name, names in result.result.manifest_names_by_namespace.items():
        for name in names:
            click.secho(f"✅ {label} {name}", fg="green", bold=True, nl=False)
            click.echo(f"  → {namespace_name}")

    if not quiet:
        for created in result.result.created_artifacts:
            version = f" ({created.version})" if created.version else ""
            click.echo(f"   Created: {created.type} {created.reference}{version}")
        for bound in result.result.bound_artifacts:
            click.echo(f"   Bound:   {bound.type} {bound.reference}")
        click.echo(f"   Operation: {result.operation_id}")

    for warning in result.warnings:
        click.secho(f"⚠️  {warning}", fg="yellow", err=True)


# ── kinds ───────────────────────────────────────────────────────


@cli.command()
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def kinds(ctx: click.Context, as_json: bool) -> None:
    """List deployable kinds and whether they are versioned by default."""
    from deployer.adapters.registry import default_registry

    config, _ = _load_config(ctx, required=False)
    status = default_registry(kinds=config.kinds).kind_status()

    if as_json:
        click.echo(json.dumps(list(status.values()), indent=2))
        return

    click.secho(f"\n📦 Kinds: {len(status)}", fg="cyan", bold=True)
    for kind, info in status.items():
        marker = click.style("versioned", fg="yellow") if info["versioned"] else "in-place"
        click.echo(f"   • {kind:<26} {marker}")
    click.echo()


# ── config ──────────────────────────────────────────────────────


@cli.group()
def config() -> None:
    """Deployer configuration commands."""


@config.command("check")
@click.option("--kubectl", "check_kubectl", is_flag=True, help="Also check that each account's kubectl runs.")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def config_check(ctx: click.Context, check_kubectl: bool, as_json: bool) -> None:
    """Validate deployer.yml."""
    from deployer.adapters.kubectl import KubectlJobExecutor
    from deployer.core.use_cases.config_check import check_config

    result = check_config(
        config_path=ctx.obj.get("config_path"),
        executor=KubectlJobExecutor() if check_kubectl else None,
    )

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        sys.exit(0 if result.valid else 1)

    if result.valid and result.config is not None:
        click.secho("✅ Configuration is valid", fg="green", bold=True)
        click.echo(f"   Accounts: {', '.join(a.name for a in result.config.accounts)}")
        if result.config.default_account:
            click.echo(f"   Default account: {result.config.default_account}")
        click.echo(f"   Kind overrides: {len(result.config.kinds)}")
        for name, status in result.kubectl.items():
            if status["available"]:
                click.echo(f"   kubectl ({name}): {status['version'] or 'available'}")
    else:
        click.secho("❌ Configuration errors:", fg="red", bold=True)
        for err in result.errors:
            click.echo(f"   • {err}")

    if result.warnings:
        click.echo()
        click.secho("⚠️  Warnings:", fg="yellow")
        for warn in result.warnings:
            click.echo(f"   • {warn}")

    if not result.valid:
        sys.exit(1)


# ── Sub-command groups from deployer/ui/cli/ ────────────────────

from deployer.ui.cli.history import history  # noqa: E402

cli.add_command(history)


if __name__ == "__main__":
    cli()
