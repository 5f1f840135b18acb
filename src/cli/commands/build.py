import os
import sys
import json
import click
import yaml
from pathlib import Path
from typing import Optional, Tuple

from kaniko.build_inputs import DEFAULT_EXECUTOR
from cli.functions.build_helper import BuildError, run_build_from_environment
from parsers.kv_parser import KVParseError
from utils.cli_utils import set_environment_variables
from utils.file_utils import load_config_file


@click.command()
@click.option(
    "--config-file",
    "-c",
    type=click.Path(exists=True, file_okay=True, dir_okay=False),
    help="Path to a JSON or YAML config file (optional)",
)
@click.option("--executor", help=f"Executor image (default: {DEFAULT_EXECUTOR})")
@click.option("--cache/--no-cache", default=None, help="Enable the layer cache")
@click.option("--cache-repository", help="Repository used for cached layers")
@click.option("--cache-ttl", help="Cache timeout, e.g. 6h")
@click.option("--push-retry", help="Number of retries for pushing the image")
@click.option(
    "--registry-mirror",
    "registry_mirrors",
    multiple=True,
    help="Registry mirror, can be given several times",
)
@click.option("--verbosity", help="Executor log level")
@click.option("--kaniko-args", help="Extra executor arguments, shell quoted")
@click.option(
    "--build-arg", "build_args", multiple=True, help="Build argument NAME=VALUE"
)
@click.option(
    "--context",
    type=click.Path(exists=True, file_okay=False, dir_okay=True),
    help="Path to the build context (default: current directory)",
)
@click.option(
    "--file",
    "-f",
    type=click.Path(exists=True, file_okay=True, dir_okay=False),
    help="Path to the Dockerfile",
)
@click.option("--label", "labels", multiple=True, help="Image label NAME=VALUE")
@click.option("--push/--no-push", default=None, help="Push the image (default: push)")
@click.option("--tag", "-t", "tags", multiple=True, help="Destination tag")
@click.option("--target", help="Build stage to target")
@click.option(
    "--extra-context",
    "-e",
    help='Extra context files as key=value lines, "quoted=entries" may span lines',
)
@click.option(
    "--extra-context-file",
    type=click.Path(exists=True, file_okay=True, dir_okay=False),
    help="Read the extra context key=value lines from a file",
)
@click.option(
    "--dry-run",
    is_flag=True,
    default=False,
    help="Print the docker arguments without pulling or building",
)
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    default=False,
    help="Enable verbose logging for detailed output",
)
def build(
    config_file: Optional[str],
    executor: Optional[str],
    cache: Optional[bool],
    cache_repository: Optional[str],
    cache_ttl: Optional[str],
    push_retry: Optional[str],
    registry_mirrors: Tuple[str, ...],
    verbosity: Optional[str],
    kaniko_args: Optional[str],
    build_args: Tuple[str, ...],
    context: Optional[str],
    file: Optional[str],
    labels: Tuple[str, ...],
    push: Optional[bool],
    tags: Tuple[str, ...],
    target: Optional[str],
    extra_context: Optional[str],
    extra_context_file: Optional[str],
    dry_run: bool = False,
    verbose: bool = False,
):
    """Build a container image with the kaniko executor."""

    config = {}
    if config_file is not None:
        config_file = os.path.expanduser(config_file)
        if not Path(config_file).is_file():
            click.echo(
                click.style(
                    f"❌ Error: Config file '{config_file}' does not exist.", fg="red"
                )
            )
            sys.exit(1)

        try:
            config = load_config_file(config_file)
        except (json.JSONDecodeError, yaml.YAMLError, ValueError) as e:
            click.echo(click.style(f"❌ Error parsing config file: {e}", fg="red"))
            sys.exit(1)

    if extra_context_file:
        with open(os.path.expanduser(extra_context_file), "r") as f:
            extra_context = f.read()

    # Options given on the command line win over the config file
    overrides = {
        "executor": executor,
        "cache": cache,
        "cache_repository": cache_repository,
        "cache_ttl": cache_ttl,
        "push_retry": push_retry,
        "registry_mirrors": list(registry_mirrors) or None,
        "verbosity": verbosity,
        "kaniko_args": kaniko_args,
        "build_args": list(build_args) or None,
        "context": context,
        "file": file,
        "labels": list(labels) or None,
        "push": push,
        "tags": list(tags) or None,
        "target": target,
        "extra_context": extra_context,
        "verbose": verbose or None,
        "dry_run": dry_run or None,
    }
    config.update({key: value for key, value in overrides.items() if value is not None})

    set_environment_variables(config)

    try:
        outputs = run_build_from_environment(
            dry_run=os.getenv("DRY_RUN", "false").lower() == "true"
        )
    except KVParseError as e:
        click.echo(click.style(f"❌ Invalid extra context: {e}", fg="red"))
        sys.exit(1)
    except BuildError as e:
        click.echo(click.style(f"❌ Build failed: {e}", fg="red"))
        sys.exit(1)

    for name, value in outputs.items():
        click.echo(f"{name}: {value}")
