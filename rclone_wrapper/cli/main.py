"""Main CLI entry point with configuration options"""

import sys

import click

from rclone_wrapper.cli import commands
from rclone_wrapper.config import WrapperConfig
from rclone_wrapper.exceptions import WrapperException
from rclone_wrapper.utils.logger import get_logger, setup_logging

LOG = get_logger(__name__)


def _run(func, *args, **kwargs):
    """Call a command implementation and exit with its code"""
    try:
        code = func(*args, **kwargs)
    except WrapperException as e:
        LOG.debug(f"Command failed: {e!r}")
        click.echo(f"❌ {e}", err=True)
        sys.exit(1)
    sys.exit(code or 0)


@click.group()
@click.option('--config', 'config_file', type=click.Path(dir_okay=False),
              help='Wrapper configuration file (INI)')
@click.option('--base-dir', help='Base directory for default mount points')
@click.option('--settings-file', help='Mount settings file (JSON)')
@click.option('--rclone-config', help='rclone configuration file')
@click.option('--log-level',
              type=click.Choice(['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'],
                                case_sensitive=False),
              help='Log level')
@click.option('--log-json', is_flag=True, help='Log in JSON format')
@click.pass_context
def cli(ctx, config_file, base_dir, settings_file, rclone_config, log_level, log_json):
    """Manage rclone remote mounts"""
    ctx.ensure_object(dict)

    try:
        config = WrapperConfig.from_file(config_file)
        config.apply_overrides(
            base_mount_dir=base_dir,
            settings_file=settings_file,
            rclone_config=rclone_config,
            log_level=log_level.upper() if log_level else None,
            log_json=log_json or None,
        )
    except WrapperException as e:
        click.echo(f"Error loading configuration: {e}", err=True)
        sys.exit(1)

    setup_logging(config.log_level, config.log_format, config.log_json)
    LOG.debug(f"Using {config!r}")
    ctx.obj['config'] = config


@cli.command()
@click.argument('remote', required=False)
@click.argument('mount_point', required=False)
@click.option('--format', '-f',
              type=click.Choice(['text', 'json'], case_sensitive=False),
              default='text',
              help='Output format')
@click.pass_context
def mount(ctx, remote, mount_point, format):
    """
    Mount a remote, or all remotes

    With MOUNT_POINT the remote is mounted there with the baseline options.

    Examples:
      rclone-wrapper mount gdrive
      rclone-wrapper mount gdrive /media/gdrive
      rclone-wrapper mount all
      rclone-wrapper mount all --format json
    """
    _run(commands.mount_remote, ctx.obj['config'], remote, mount_point, format=format.lower())


@cli.command()
@click.argument('remote', required=False)
@click.option('--format', '-f',
              type=click.Choice(['text', 'json'], case_sensitive=False),
              default='text',
              help='Output format')
@click.pass_context
def unmount(ctx, remote, format):
    """
    Unmount a remote, or all mounted remotes

    Examples:
      rclone-wrapper unmount gdrive
      rclone-wrapper unmount all
    """
    _run(commands.unmount_remote, ctx.obj['config'], remote, format=format.lower())


@cli.command('list')
@click.option('--format', '-f',
              type=click.Choice(['table', 'json'], case_sensitive=False),
              default='table',
              help='Output format')
@click.pass_context
def list_cmd(ctx, format):
    """
    List configured remotes with mount status

    Examples:
      rclone-wrapper list
      rclone-wrapper list --format json
    """
    _run(commands.list_remotes, ctx.obj['config'], format.lower())


@cli.command('config')
@click.option('--force', '-c', is_flag=True,
              help='Run rclone config even if rclone.conf exists')
@click.pass_context
def config_cmd(ctx, force):
    """
    Configure remotes and their mount points (interactive wizard)

    Examples:
      rclone-wrapper config
      rclone-wrapper config -c
    """
    _run(commands.configure_remotes, ctx.obj['config'], force)


@cli.command()
@click.option('--no-start', is_flag=True, help='Enable the service without starting it')
@click.option('--output', '-o', type=click.Path(dir_okay=False),
              help='Only write the unit file to this path')
@click.pass_context
def install(ctx, no_start, output):
    """
    Install the auto-mount systemd service

    Examples:
      sudo rclone-wrapper install
      rclone-wrapper install --output ./rclone-automount.service
    """
    _run(commands.install_service, ctx.obj['config'], start=not no_start, output=output)


@cli.command()
@click.pass_context
def status(ctx):
    """
    Show auto-mount service status

    Example:
      rclone-wrapper status
    """
    _run(commands.show_status, ctx.obj['config'])


@cli.command('check-config')
@click.pass_context
def check_config_cmd(ctx):
    """
    Show the effective configuration

    Example:
      rclone-wrapper --base-dir /media check-config
    """
    _run(commands.show_config, ctx.obj['config'])


@cli.command('help')
@click.pass_context
def help_cmd(ctx):
    """Show this help"""
    click.echo(ctx.parent.get_help())


def main():
    """Main entry point"""
    cli(obj={})


if __name__ == '__main__':
    main()
