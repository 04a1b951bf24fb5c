import sys

from pathlib import Path

import click

from pycin.__version__ import __version__
from pycin.config import TYPES
from pycin.errors import PycinError
from pycin.main import (
    set_verbosity,
    load_config,
    open_reader,
    iter_tokens,
    iter_lines,
    iter_chars
)
from pycin.utility import describe_char


def reader_options(fn):
    options = [
        click.argument("input", type=click.File("rb"), default="-"),
        click.option("-s", "--skip", type=int, metavar="N",
                     help="skip N header lines"),
        click.option("-b", "--bufsize", type=int, metavar="BYTES",
                     help="buffer size in bytes"),
        click.option("-c", "--config", "config_file",
                     type=click.Path(exists=True, dir_okay=False,
                                     path_type=Path),
                     help="python file with option values"),
        click.option("-d", "--define", multiple=True, metavar="NAME=VALUE"),
        click.option("-v", "--verbose", is_flag=True),
        click.option("--debug", is_flag=True),
    ]
    for option in reversed(options):
        fn = option(fn)
    return fn


def prepare(input, skip, bufsize, config_file, define, verbose, debug,
            **overrides):
    set_verbosity(verbose=verbose, debug=debug)
    cfg = load_config(config_file=config_file,
                      defines=define,
                      overrides=dict(skip=skip, bufsize=bufsize, **overrides))
    return cfg, open_reader(input, cfg)


@click.group()
@click.version_option(__version__, prog_name="pycin")
def main():
    pass


@main.command()
@reader_options
@click.option("-t", "--type", "type_name", type=click.Choice(list(TYPES)),
              help="token type")
def tokens(type_name, **kwargs):
    """Print whitespace-separated tokens, one per line."""
    cfg, reader = prepare(type=type_name, **kwargs)
    for value in iter_tokens(reader, cfg.type):
        click.echo(value)


@main.command()
@reader_options
def lines(**kwargs):
    """Print lines of the input."""
    _, reader = prepare(**kwargs)
    for line in iter_lines(reader):
        click.echo(line)


@main.command()
@reader_options
def chars(**kwargs):
    """Print code points of the input characters."""
    _, reader = prepare(**kwargs)
    for char in iter_chars(reader):
        click.echo(describe_char(char))


def cli():
    try:
        main()
    except PycinError as e:
        print(e, file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    cli()
