"""Command line interface for dotlink."""

from pathlib import Path
from typing import Optional

import click
from rich.console import Console

from . import __version__
from .core import report
from .core.backup import BackupStore
from .core.config import Config, find_config_file
from .core.doctor import count_issues, run_diagnostics
from .core.editor import open_in_editor
from .core.environment import ensure_config_home
from .core.errors import DotlinkError
from .core.installer import Installer
from .core.logging import setup_logging
from .core.platform import Platform, get_platform
from .core.reconcile import Reconciler, RunReport

console = Console()


class App:
    """Objects shared by every command of one invocation."""

    def __init__(self, config: Config, platform: Optional[Platform] = None) -> None:
        self.config = config
        self.platform = platform or get_platform(config.excluded_units)
        self.backups = BackupStore(config.backup_dir)

    def target_dir(self) -> Path:
        """Resolve the target directory without side effects."""
        if self.config.target_dir is not None:
            return self.config.target_dir
        return self.platform.default_target_dir()

    def link_target_dir(self) -> Path:
        """Resolve the target directory for ``link``.

        On POSIX this also persists ``XDG_CONFIG_HOME`` in ``~/.profile``
        unless an explicit ``target_dir`` is configured.
        """
        if self.config.target_dir is None and self.platform.name == "posix":
            target, written = ensure_config_home()
            if written:
                report.line(console, report.Level.OK, "Configured XDG_CONFIG_HOME in ~/.profile")
            return target
        return self.target_dir()

    def reconciler(self, target_dir: Path) -> Reconciler:
        return Reconciler(self.config.source_dir, target_dir, self.backups, self.platform)


pass_app = click.make_pass_decorator(App)


def _finish(ctx: click.Context, run: RunReport) -> None:
    report.print_run_report(console, run)
    if not run.ok:
        ctx.exit(1)


@click.group()
@click.version_option(__version__, prog_name="dotlink")
@click.option(
    "--repo",
    type=click.Path(file_okay=False, dir_okay=True, path_type=Path),
    envvar="DOTLINK_REPO",
    help="Dotfiles repository root (defaults to the current directory)",
)
@click.option(
    "--config",
    "config_file",
    type=click.Path(exists=True, file_okay=True, dir_okay=False, path_type=Path),
    envvar="DOTLINK_CONFIG",
    help="YAML configuration file (defaults to <repo>/dotlink.yaml if present)",
)
@click.option("--debug", is_flag=True, help="Show debug logging")
@click.option("--log-file", help="Also write a debug log to this file")
@click.pass_context
def cli(
    ctx: click.Context,
    repo: Optional[Path],
    config_file: Optional[Path],
    debug: bool,
    log_file: Optional[str],
) -> None:
    """Dotfiles management tool.

    dotlink symlinks every folder under <repo>/config into your configuration
    directory ($XDG_CONFIG_HOME or ~/.config). Existing real folders are moved
    into a timestamped backup under <repo>/backups first, and are put back by
    'dotlink unlink'.

    Main commands:

      link      Create symbolic links for all configs
      unlink    Remove symbolic links and restore backups
      status    Show current link status for all configs
      doctor    Run diagnostics

    Run 'dotlink COMMAND --help' for more information on a specific command.
    """
    repo_root = repo or Path.cwd()
    try:
        config = Config(repo_root, config_file or find_config_file(repo_root))
    except DotlinkError as e:
        console.print(f"[red]Error: {e}")
        raise click.Abort()

    setup_logging(debug=debug, log_file=log_file or config.log_file)
    ctx.obj = App(config)


@cli.command()
@pass_app
@click.pass_context
def link(ctx: click.Context, app: App) -> None:
    """Create symbolic links for all configs.

    Folders already linked correctly are left alone, links pointing somewhere
    else are replaced, and real folders in the way are backed up first.

    Examples:

      # Link all configs
      dotlink link

      # Link from a checkout somewhere else
      dotlink --repo ~/.dotfiles link
    """
    report.header(console, "Creating symlinks for dotfiles")
    try:
        run = app.reconciler(app.link_target_dir()).link()
    except (DotlinkError, OSError) as e:
        console.print(f"[red]Error: {e}")
        raise click.Abort()
    _finish(ctx, run)


@cli.command()
@pass_app
@click.pass_context
def unlink(ctx: click.Context, app: App) -> None:
    """Remove symbolic links and restore backups.

    Only symlinks are removed. Each config found in the most recent backup is
    moved back into place; real folders are never touched.
    """
    report.header(console, "Removing symlinks")
    try:
        run = app.reconciler(app.target_dir()).unlink()
    except (DotlinkError, OSError) as e:
        console.print(f"[red]Error: {e}")
        raise click.Abort()
    _finish(ctx, run)


@cli.command()
@pass_app
def status(app: App) -> None:
    """Show current link status for all configs."""
    report.header(console, "Dotfiles Status")
    reconciler = app.reconciler(app.target_dir())
    try:
        rows = reconciler.status()
    except (DotlinkError, OSError) as e:
        console.print(f"[red]Error: {e}")
        raise click.Abort()
    report.print_status(console, reconciler.source_dir, reconciler.target_dir, rows)


@cli.command()
@pass_app
@click.pass_context
def doctor(ctx: click.Context, app: App) -> None:
    """Run diagnostics and check installation."""
    report.header(console, "Running diagnostics")
    checks = run_diagnostics(
        app.config.source_dir,
        app.target_dir(),
        app.backups,
        app.platform,
        tools=app.config.optional_tools,
    )
    report.print_checks(console, checks)
    if count_issues(checks):
        ctx.exit(1)


@cli.command()
@pass_app
def backups(app: App) -> None:
    """List backup snapshots, newest first."""
    try:
        snapshots = app.backups.list_snapshots()
    except (DotlinkError, OSError) as e:
        console.print(f"[red]Error: {e}")
        raise click.Abort()
    report.print_snapshots(console, snapshots)


@cli.command()
@pass_app
def edit(app: App) -> None:
    """Open the dotfiles repository in an editor.

    Uses $EDITOR when set, otherwise the first configured editor found on
    PATH (code, nvim, vim, nano by default).
    """
    report.header(console, "Opening dotfiles in editor")
    try:
        command = open_in_editor(app.config.repo_root, app.config.editors)
    except DotlinkError as e:
        console.print(f"[red]Error: {e}")
        raise click.Abort()
    report.line(console, report.Level.INFO, f"Opened with: {command[0]}")


def _install(app: App, dry_run: bool) -> bool:
    report.header(console, "Installing required tools")
    installer = Installer(app.config, app.platform, dry_run=dry_run)
    results = installer.install()
    report.print_install_results(console, results)
    return all(result.ok for result in results)


@cli.command()
@click.option("--dry-run", is_flag=True, help="Show the install commands without running them")
@pass_app
@click.pass_context
def install(ctx: click.Context, app: App, dry_run: bool) -> None:
    """Install required tools via the system package manager."""
    try:
        ok = _install(app, dry_run)
    except DotlinkError as e:
        console.print(f"[red]Error: {e}")
        raise click.Abort()
    report.header(console, "Installation complete!")
    if not ok:
        ctx.exit(1)


@cli.command()
@click.option("--dry-run", is_flag=True, help="Show the install commands without running them")
@pass_app
@click.pass_context
def setup(ctx: click.Context, app: App, dry_run: bool) -> None:
    """Install required tools and create symlinks."""
    try:
        installed = _install(app, dry_run)
        report.header(console, "Creating symlinks for dotfiles")
        run = app.reconciler(app.link_target_dir()).link()
    except (DotlinkError, OSError) as e:
        console.print(f"[red]Error: {e}")
        raise click.Abort()
    report.print_run_report(console, run)
    if not (installed and run.ok):
        ctx.exit(1)


def main() -> None:
    """Entry point for the dotlink CLI."""
    cli()


if __name__ == "__main__":
    main()
