import sys
import json
import click
from typing import Optional

from parsers.kv_parser import KVParseError, multiline_kv, raise_parse_error


@click.command()
@click.option(
    "input_file",
    "--input",
    "-i",
    type=click.File("r"),
    default="-",
    help="File holding the key=value lines (default: stdin)",
)
@click.option(
    "--keys-only",
    is_flag=True,
    default=False,
    help="Print only the keys, one per line",
)
def parse_kv(input_file, keys_only: Optional[bool] = False) -> None:
    """Parse multiline key=value entries and print them as JSON pairs."""
    raw = input_file.read()
    try:
        pairs = multiline_kv(raw, raise_parse_error)
    except KVParseError as e:
        click.echo(click.style(f"❌ {e}", fg="red"))
        sys.exit(1)

    if keys_only:
        for key, _ in pairs:
            click.echo(key)
        return

    click.echo(json.dumps([[key, value] for key, value in pairs], indent=2))
