"""Entry point for cower - command-line parsing and config layering."""

from __future__ import annotations

import logging
from pathlib import Path

import click

from cower import __app_name__, __version__
from cower.app import CowerApp
from cower.core.config import ConfigBuilder, Operation, get_config_path
from cower.core.errors import CowerError
from cower.core.logger import get_logger, setup_logging
from cower.core.srcinfo import load_targets_from_files

_log = get_logger("main")

SORT_KEYS = "name, version, maintainer, votes, popularity, outofdate, lastmodified, firstsubmitted"


def _apply_options(builder: ConfigBuilder, opts: dict) -> None:
    """Apply command-line options on top of whatever the config file set."""
    if opts["search"]:
        builder.add_operation(Operation.SEARCH)
    if opts["update"]:
        builder.add_operation(Operation.UPDATE)
    if opts["info"]:
        builder.add_operation(Operation.INFO)
    # Can be passed more than once
    if opts["download"]:
        builder.add_operation(Operation.DOWNLOAD)
        builder.getdeps = opts["download"] > 1
    if opts["msearch"]:
        builder.enable_msearch()

    if opts["color"] is not None:
        builder.set_color_mode(opts["color"])
    if opts["by"] is not None:
        builder.set_search_field(opts["by"])
    if opts["rsort"] is not None:
        builder.set_sort(opts["rsort"], reverse=True)
    elif opts["sort"] is not None:
        builder.set_sort(opts["sort"])
    if opts["target"] is not None:
        builder.set_target_dir(Path(opts["target"]).expanduser().resolve())
    if opts["threads"] is not None:
        builder.set_max_threads(opts["threads"])
    if opts["timeout"] is not None:
        builder.set_timeout(opts["timeout"])
    if opts["ignore"]:
        builder.ignore_pkgs = list(opts["ignore"])
    if opts["ignorerepo"]:
        builder.ignore_repos = list(opts["ignorerepo"])
    if opts["domain"] is not None:
        builder.aur_domain = opts["domain"]
    if opts["listdelim"] is not None:
        builder.delim = opts["listdelim"]
    if opts["fmt"] is not None:
        builder.format = opts["fmt"]

    builder.force = builder.force or opts["force"]
    builder.quiet = builder.quiet or opts["quiet"]
    builder.literal = builder.literal or opts["literal"]
    builder.ignore_ood = builder.ignore_ood or opts["ignore_ood"]
    builder.from_srcinfo = opts["from_srcinfo"]


def _resolve_targets(targets: tuple[str, ...], from_srcinfo: bool) -> list[str]:
    if targets == ("-",):
        targets = tuple(click.get_text_stream("stdin").read().split())
    if from_srcinfo:
        try:
            return load_targets_from_files(targets)
        except (OSError, UnicodeDecodeError) as e:
            raise click.ClickException(f"cannot read .SRCINFO: {e}") from e
    return list(targets)


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.option("-d", "--download", count=True, help="download target(s) -- pass twice to download AUR dependencies")
@click.option("-i", "--info", is_flag=True, help="show info for target(s)")
@click.option("-m", "--msearch", is_flag=True, help="show packages maintained by target(s)")
@click.option("-s", "--search", is_flag=True, help="search for target(s)")
@click.option("-u", "--update", is_flag=True, help="check for updates against AUR -- can be combined with the -d flag")
@click.option("--by", metavar="FIELD", help="search by field (name, name-desc, maintainer)")
@click.option("--domain", metavar="FQDN", help="point cower at a different AUR (default: aur.archlinux.org)")
@click.option("-f", "--force", is_flag=True, help="overwrite existing files when downloading")
@click.option("--format", "fmt", metavar="STRING", help="print package output according to format string")
@click.option("--ignore", multiple=True, metavar="PKG", help="ignore a package upgrade (repeatable)")
@click.option("--ignorerepo", multiple=True, metavar="REPO", help="ignore some or all binary repos (repeatable)")
@click.option("-o", "--ignore-ood", is_flag=True, help="skip packages flagged out of date")
@click.option("--literal", is_flag=True, help="disable regex search, interpret target as a literal string")
@click.option("--listdelim", metavar="DELIM", help="change list format delimiter")
@click.option("-q", "--quiet", is_flag=True, help="output less")
@click.option("--sort", metavar="KEY", help=f"sort results in ascending order by key ({SORT_KEYS})")
@click.option("--rsort", metavar="KEY", help="sort results in descending order by key")
@click.option("-t", "--target", metavar="DIR", help="specify an alternate download directory")
@click.option("--threads", metavar="NUM", help="limit number of threads created")
@click.option("--timeout", metavar="NUM", help="specify connection timeout in seconds")
@click.option("-c", "--color", metavar="WHEN", help="use colored output (never, always, auto)")
@click.option("--debug", is_flag=True, help="show debug output")
@click.option("-v", "--verbose", is_flag=True, help="output more")
@click.option("-p", "--from-srcinfo", is_flag=True, help="use .SRCINFO files to determine targets")
@click.version_option(version=__version__, prog_name=__app_name__)
@click.argument("targets", nargs=-1)
@click.pass_context
def cli(ctx: click.Context, targets: tuple[str, ...], **opts) -> None:
    """A simple AUR agent."""
    level = logging.DEBUG if opts["debug"] or opts["verbose"] else logging.WARNING
    setup_logging(level, verbose=opts["verbose"])

    builder = ConfigBuilder()
    builder.log_level = level
    try:
        path = get_config_path()
        if path is not None:
            _log.debug("loading config from %s", path)
            builder.load_from_file(path)
        _apply_options(builder, opts)
        builder.args = _resolve_targets(targets, opts["from_srcinfo"])
        config = builder.freeze()
    except CowerError as e:
        raise click.ClickException(str(e)) from e

    if not config.args and Operation.UPDATE not in config.operations:
        raise click.UsageError("no targets specified")

    try:
        status = CowerApp(config).run()
    except CowerError as e:
        raise click.ClickException(str(e)) from e
    ctx.exit(status)


def main() -> None:
    cli(prog_name=__app_name__)


if __name__ == "__main__":
    main()
