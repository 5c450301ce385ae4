"""CLI command implementations"""

import json
from typing import Optional

import click
from tabulate import tabulate

from rclone_wrapper.config import WrapperConfig
from rclone_wrapper.models import Outcome, ReconcileResult, ReconcileSummary
from rclone_wrapper.services.reconciliation import Reconciler
from rclone_wrapper.services.systemd import SystemdService
from rclone_wrapper.utils.logger import get_logger

LOG = get_logger(__name__)

OUTCOME_ICONS = {
    Outcome.SUCCESS: '✅',
    Outcome.ALREADY_IN_STATE: 'ℹ️ ',
    Outcome.CONFLICT: '⚠️ ',
    Outcome.FAILURE: '❌',
}

MOUNT_USAGE = "Usage: rclone-wrapper mount <remote|all> [mount_point]"
UNMOUNT_USAGE = "Usage: rclone-wrapper unmount <remote|all>"


def _echo_result(result: ReconcileResult):
    click.echo(f"{OUTCOME_ICONS[result.outcome]} {result.remote}: {result.detail}")


def _echo_summary(summary: ReconcileSummary):
    for result in summary.results:
        _echo_result(result)


def _echo_sweep_summary(summary: ReconcileSummary, verb: str):
    """Print every result followed by a full or partial success verdict"""
    _echo_summary(summary)
    if not summary.results:
        click.echo(f"\n📭 Nothing to {verb}")
    elif summary.ok:
        click.echo(f"\n✅ All remotes {verb}ed successfully")
    else:
        failed = ', '.join(result.remote for result in summary.failed)
        click.echo(f"\n⚠️  Some remotes failed to {verb}: {failed}")


def _echo_json_summary(summary: ReconcileSummary):
    click.echo(json.dumps(summary.to_dict(), indent=2))


def _status_line(state: dict) -> str:
    if state['mounted']:
        return f"  ✓ {state['remote']} (mounted at {state['mount_point']})"
    return f"  ✗ {state['remote']} (not mounted)"


def mount_remote(config: WrapperConfig, remote: Optional[str],
                 mount_point: Optional[str] = None, format: str = 'text',
                 reconciler: Optional[Reconciler] = None) -> int:
    """
    Mount one remote, an explicit path, or every remote ('all').

    Returns:
        Process exit code
    """
    reconciler = reconciler or Reconciler(config)

    if not remote:
        click.echo(MOUNT_USAGE)
        click.echo("\nAvailable remotes:")
        for state in reconciler.describe_remotes():
            click.echo(_status_line(state))
        return 1

    if remote == 'all' and mount_point:
        click.echo("A mount point cannot be given with 'all'")
        click.echo(MOUNT_USAGE)
        return 1

    if remote == 'all':
        summary = reconciler.mount_all()
    elif mount_point:
        summary = reconciler.mount_at(remote, mount_point)
    else:
        summary = reconciler.mount(remote)

    if format == 'json':
        _echo_json_summary(summary)
    elif remote == 'all':
        _echo_sweep_summary(summary, 'mount')
    else:
        _echo_summary(summary)

    return summary.exit_code


def unmount_remote(config: WrapperConfig, remote: Optional[str], format: str = 'text',
                   reconciler: Optional[Reconciler] = None) -> int:
    """
    Unmount one remote or every mounted remote ('all').

    Returns:
        Process exit code
    """
    reconciler = reconciler or Reconciler(config)

    if not remote:
        click.echo(UNMOUNT_USAGE)
        mounted = reconciler.inspector.mounted_remotes()
        if mounted:
            click.echo("\nCurrently mounted remotes:")
            for name, path in mounted:
                click.echo(f"  ✓ {name} (mounted at {path})")
        else:
            click.echo("\n📭 No remotes are currently mounted")
        return 1

    summary = reconciler.unmount_all() if remote == 'all' else reconciler.unmount(remote)

    if format == 'json':
        _echo_json_summary(summary)
    elif remote == 'all':
        _echo_sweep_summary(summary, 'unmount')
    else:
        _echo_summary(summary)

    return summary.exit_code


def list_remotes(config: WrapperConfig, format: str = 'table',
                 reconciler: Optional[Reconciler] = None) -> int:
    """Show every configured remote with its mount state"""
    reconciler = reconciler or Reconciler(config)
    states = reconciler.describe_remotes()

    if format == 'json':
        click.echo(json.dumps(states, indent=2))
        return 0

    rows = []
    for state in states:
        rows.append([
            state['remote'],
            '✓ mounted' if state['mounted'] else '✗ not mounted',
            state['mount_point'],
            ' '.join(state['mount_params']) or '(default)',
        ])

    click.echo("\nConfigured rclone remotes")
    click.echo(tabulate(rows, headers=['Remote', 'Status', 'Mount Point', 'Mount Params']))
    click.echo(f"\nTotal: {len(states)} remotes")
    click.echo("💡 Tip: Use --format json for machine-readable output\n")
    return 0


def install_service(config: WrapperConfig, start: bool = True,
                    output: Optional[str] = None) -> int:
    """
    Install the boot-time auto-mount service.

    With an explicit output file only the unit file is written and
    systemd is left untouched.
    """
    service = SystemdService(config)

    missing = service.missing_binaries()
    if missing:
        click.echo(f"❌ Required programs not found: {', '.join(missing)}")
        click.echo("   Install rclone and fuse, then run install again")
        return 1

    unit_file = service.write_unit(output)
    click.echo(f"✅ Service file created: {unit_file}")

    if output:
        click.echo("\nNext steps:")
        click.echo(f"  1. copy {unit_file} to {config.service_file}")
        click.echo("  2. systemctl daemon-reload")
        click.echo(f"  3. systemctl enable {service.unit_name}")
        click.echo(f"  4. systemctl start {service.unit_name}")
        return 0

    service.enable(start=start)
    if start:
        click.echo(f"✅ {service.unit_name} enabled and started")
    else:
        click.echo(f"✅ {service.unit_name} enabled (will start on next boot)")
    return 0


def show_status(config: WrapperConfig) -> int:
    """Show auto-mount service status"""
    service = SystemdService(config)

    click.echo("\n" + "=" * 60)
    click.echo("Auto-Mount Service Status")
    click.echo("=" * 60)

    result = service.status()
    click.echo(result.stdout)
    if result.stderr:
        click.echo(result.stderr, err=True)
    return result.returncode


def configure_remotes(config: WrapperConfig, force: bool = False) -> int:
    """Run the interactive configuration wizard"""
    from rclone_wrapper.cli.wizard import ConfigWizard
    ConfigWizard(config).run(force=force)
    return 0


def show_config(config: WrapperConfig) -> int:
    """Show the effective configuration after file, env and CLI overrides"""
    click.echo("\n" + "=" * 60)
    click.echo("Current Configuration")
    click.echo("=" * 60)
    click.echo(tabulate(sorted(config.to_dict().items()), headers=['Setting', 'Value']))
    click.echo("=" * 60 + "\n")
    return 0
