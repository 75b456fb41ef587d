import logging
import sys
from typing import Optional

import click
import yaml

from confoosion import __version__
from confoosion.config import Config, load_config
from confoosion.converter import Confoosion
from confoosion.errors import ParseError
from confoosion.utils import set_console_handlers

logger = logging.getLogger(__name__)


def config_logger(verbose: bool, debug: bool, srcfile: Optional[str] = None):
    app_logger = logging.getLogger("confoosion")
    app_logger.propagate = False
    for handler in list(app_logger.handlers):
        app_logger.removeHandler(handler)
    set_console_handlers(app_logger, verbose, debug, srcfile)


def print_version():
    click.echo(__version__)


def cmd_print_version(ctx: click.Context, param: click.Parameter, value: str):
    if not value or ctx.resilient_parsing:
        return
    print_version()
    ctx.exit()


@click.command()
@click.argument("src", type=click.Path(exists=True, dir_okay=False))
@click.argument("dst", type=click.Path(dir_okay=False), required=False)
@click.option("--config", "-c", "configfile", type=click.Path(exists=True), default=None)
@click.option(
    "--standalone",
    "-s",
    "standalone",
    help="Wrap the output in a complete HTML page.",
    is_flag=True,
    default=False,
)
@click.option("--verbose", "-v", "verbose", type=bool, default=False, is_flag=True)
@click.option("--debug", "-d", "debug", type=bool, default=False, is_flag=True)
@click.option(
    "--version",
    "-V",
    "version",
    help="Show version and exit.",
    is_flag=True,
    callback=cmd_print_version,
    is_eager=True,
    expose_value=False,
)
def convert_file(
    src: str,
    dst: Optional[str],
    configfile: Optional[str],
    standalone: bool,
    verbose: bool,
    debug: bool,
):
    """Convert a markup file to HTML.

    \b
    SRC is the markup file to convert
    DST is the output file (standard output if omitted)
    """
    if debug:
        verbose = True
    config_logger(verbose, debug, src)
    if configfile:
        with open(configfile, "r") as f:
            config_data = f.read()
        config_dict = yaml.safe_load(config_data) or {}
        config = load_config(config_dict)
    else:
        config = Config()
    if standalone:
        config.output_config.standalone = True

    converter = Confoosion(config=config)
    try:
        output = converter.convert(src, dst)
    except ParseError as e:
        logger.error("fail to convert: %s" % e)
        sys.exit(1)
    if dst is None:
        click.echo(output)
