import click
from cli.commands.build import build
from cli.commands.parse_kv import parse_kv


@click.group()
def cli():
    """Kaniko image builder CLI"""
    pass


# Register commands
cli.add_command(build)
cli.add_command(parse_kv, name="parse-kv")

if __name__ == "__main__":
    cli()
