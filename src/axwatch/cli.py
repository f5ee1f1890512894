"""CLI entry point for axwatch."""

import json
from pathlib import Path

import click

from axwatch import __version__
from axwatch.config import load_config
from axwatch.logging import setup_logging
from axwatch.snapshot.capture import parse_capture_output
from axwatch.snapshot.diff import compute_diff
from axwatch.snapshot.noise import filter_genuine


@click.group()
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=False, path_type=Path),
    default=None,
    help="Path to config file.",
)
@click.pass_context
def main(ctx: click.Context, config: Path | None) -> None:
    """axwatch - Screen change and notification context for desktop agents."""
    ctx.ensure_object(dict)
    ctx.obj["config"] = load_config(config)
    ctx.obj["logger"] = setup_logging(ctx.obj["config"])


@main.command()
@click.pass_context
def watch(ctx: click.Context) -> None:
    """Watch the screen and notifications until Ctrl+C."""
    import asyncio

    from axwatch.service import WatchService
    from axwatch.sink import ConsoleSink

    config = ctx.obj["config"]

    async def _watch():
        service = WatchService(config=config, sink=ConsoleSink())
        click.echo("Watching. Press Ctrl+C to stop")
        await service.run_forever()

    try:
        asyncio.run(_watch())
    except KeyboardInterrupt:
        click.echo("\nStopped.")


@main.command()
@click.pass_context
def snapshot(ctx: click.Context) -> None:
    """Capture one snapshot of the foreground application."""
    import asyncio

    from axwatch.registry import current_platform, default_registry

    config = ctx.obj["config"]
    registry = default_registry(config)
    platform = current_platform()

    try:
        source = registry.snapshot_source(platform)
    except Exception as e:
        click.echo(f"Error: {e}", err=True)
        raise SystemExit(1)

    snap = asyncio.run(source.capture())
    if snap is None:
        click.echo("Snapshot unavailable", err=True)
        raise SystemExit(1)

    click.echo(f"{snap.app_name} ({snap.bundle_id}), {len(snap.lines)} nodes")
    for line in snap.lines:
        click.echo(line)


def _read_snapshot_file(path: Path):
    snap = parse_capture_output(path.read_bytes())
    if snap is None:
        raise click.BadParameter(f"Not a valid snapshot: {path}")
    return snap


@main.command()
@click.argument("old", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument("new", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "--genuine-only", is_flag=True, help="Print only genuinely new lines."
)
def diff(old: Path, new: Path, genuine_only: bool) -> None:
    """Diff two saved snapshot JSON files."""
    before = _read_snapshot_file(old)
    after = _read_snapshot_file(new)

    result = compute_diff(before.lines, after.lines)
    genuine = filter_genuine(result)

    if not genuine_only:
        click.echo(
            f"Raw diff: +{len(result.added)} -{len(result.removed)} "
            f"(total: {len(before.lines)} -> {len(after.lines)})"
        )
        for line in result.added:
            click.echo(f"  + {line}")
        for line in result.removed:
            click.echo(f"  - {line}")
        click.echo(f"Genuine: {len(genuine)}")

    for line in genuine:
        click.echo(line)


@main.command("config")
@click.pass_context
def show_config(ctx: click.Context) -> None:
    """Show the effective configuration."""
    config = ctx.obj["config"]
    notifications = config.notifications
    click.echo(
        json.dumps(
            {
                "log_level": config.log_level,
                "log_file": config.log_file,
                "native_dir": config.native_dir,
                "notifications": {
                    "enabled": notifications.enabled,
                    "app_whitelist": list(notifications.app_whitelist),
                    "app_blacklist": list(notifications.app_blacklist),
                    "diff_apps": list(notifications.diff_apps),
                },
                "snapshot": {
                    "enabled": config.snapshot.enabled,
                    "poll_interval": config.snapshot.poll_interval,
                    "darwin_timeout": config.snapshot.darwin_timeout,
                    "win32_timeout": config.snapshot.win32_timeout,
                },
            },
            indent=2,
        )
    )


@main.command()
def version() -> None:
    """Show version."""
    click.echo(f"axwatch version {__version__}")


if __name__ == "__main__":
    main()
