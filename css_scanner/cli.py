"""
Scans a stylesheet and prints its style runs or its per-line fold levels and
line states.
"""

from __future__ import annotations

import logging

import click

from .config import ConfigError, build_config, dialect_for_path
from .document import Document
from .exceptions import KeywordFileError
from .filesystem import get_max_file_size, normalize_filepath, read_stylesheet
from .lexer import iter_tokens, scan
from .linestate import unpack_fold_level
from .models import Dialect, Style

__all__ = ["cli"]


def _format_tokens(document: Document) -> list[str]:
    return [
        f"{token.start}\t{token.end}\t{token.style.name}\t{token.text!r}"
        for token in iter_tokens(document)
        if not (token.style is Style.DEFAULT and token.text.isspace())
    ]


def _format_lines(document: Document, fold: bool) -> list[str]:
    rows = []
    for line in range(document.line_count):
        level = document.fold_level(line)
        if fold and level is not None:
            current, next_level, header = unpack_fold_level(level)
            fold_text = f"{current:#x}->{next_level:#x}{' header' if header else ''}"
        else:
            fold_text = "-"
        rows.append(f"{line + 1}\t{fold_text}\t{document.line_state(line):#08x}")
    return rows


@click.command()
@click.version_option()
@click.option(
    "--dialect",
    type=click.Choice([dialect.name.lower() for dialect in Dialect]),
    help="Stylesheet dialect (defaults to the file extension)",
)
@click.option("--fold/--no-fold", default=None, help="Compute fold levels")
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["tokens", "lines"]),
    default="tokens",
    show_default=True,
    help="Print style runs or per-line fold levels and line states",
)
@click.option(
    "--keywords",
    "keywords_file",
    type=click.Path(exists=True, dir_okay=False),
    help="TOML file with keyword lists",
)
@click.option("-v", "--verbose", is_flag=True, help="Log scanner debug output")
@click.argument("filepath", type=click.Path(exists=True, dir_okay=False))
def cli(
    filepath: str,
    dialect: str | None = None,
    fold: bool | None = None,
    output_format: str = "tokens",
    keywords_file: str | None = None,
    verbose: bool = False,
):
    """
    Entry point for scanning a stylesheet.

    Args:
        filepath: Path to the stylesheet to scan.
        dialect: Override for the stylesheet dialect.
        fold: Override for fold level computation.
        output_format: `tokens` for style runs, `lines` for per-line data.
        keywords_file: TOML file replacing the built-in keyword lists.
        verbose: Enable debug logging.

    Returns:
        None.

    Raises:
        click.BadParameter: If the path or configuration values are invalid.
        click.ClickException: If the file or keyword file cannot be read.

    Examples:
        css-scanner site.scss --format lines
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        path = normalize_filepath(filepath)
    except ValueError as error:
        raise click.BadParameter(str(error)) from error

    try:
        config = build_config(
            path.parent,
            default_dialect=dialect_for_path(path),
            dialect=dialect,
            fold=fold,
            keywords_file=keywords_file,
        )
    except ConfigError as error:
        raise click.BadParameter(str(error)) from error

    try:
        max_file_size = get_max_file_size(default=config.max_file_size)
        text = read_stylesheet(path, max_file_size)
    except (ValueError, IOError) as error:
        raise click.ClickException(str(error)) from error

    document = Document(text)
    try:
        scan(document, 0, len(document), Style.DEFAULT, config)
    except KeywordFileError as error:
        raise click.ClickException(str(error)) from error

    if output_format == "lines":
        rows = _format_lines(document, config.fold)
    else:
        rows = _format_tokens(document)
    for row in rows:
        click.echo(row)


if __name__ == "__main__":
    cli()
