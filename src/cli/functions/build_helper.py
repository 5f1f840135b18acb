import logging
import os
import shlex
import subprocess
import time
from typing import Callable, Dict, List, TypeVar

import docker

from kaniko.build_inputs import BuildInputs
from utils.file_utils import make_temp_dir, read_content, write_extra_context
from utils.logging_utils import log_level_from_env, setup_logging

logger = logging.getLogger(__name__)

T = TypeVar("T")

CONTEXT_MOUNT = "/kaniko/action/context"
OUTPUTS_MOUNT = "/kaniko/action/outputs"
EXTRA_CONTEXT_MOUNT = "/kaniko/action/extra-context"


class BuildError(RuntimeError):
    """Raised when the executor container does not produce an image."""


def run_build(inputs: BuildInputs) -> Dict[str, str]:
    """Pull the executor, run the build and return its outputs."""
    logger.info(f"Pulling {inputs.executor}")
    with_time("Pulled", lambda: pull_executor(inputs.executor))

    extra_context_dir = make_temp_dir("kaniko-extra-context")
    outputs_dir = make_temp_dir("kaniko-action-")

    # From here on extra_context holds (file name, path) instead of (file name, content)
    inputs.extra_context = write_extra_context(inputs.extra_context, extra_context_dir)

    args = generate_args(inputs, outputs_dir)
    with_time("Built", lambda: run_executor(args))

    digest_path = os.path.join(outputs_dir, "digest")
    if not os.path.exists(digest_path):
        raise BuildError(f"Executor did not write a digest to {digest_path}")
    digest = read_content(digest_path)
    logger.info(digest)
    write_github_output("digest", digest)
    return {"digest": digest}


def pull_executor(executor: str) -> None:
    client = docker.from_env()
    client.images.pull(executor)


def run_executor(args: List[str]) -> None:
    result = subprocess.run(["docker"] + args)
    if result.returncode != 0:
        raise BuildError(f"docker exited with code {result.returncode}")


def with_time(message: str, f: Callable[[], T]) -> T:
    start = time.monotonic()
    value = f()
    seconds = time.monotonic() - start
    logger.info(f"{message} in {seconds:.3f}s")
    return value


def write_github_output(name: str, value: str) -> None:
    """Append an output for the surrounding workflow, if there is one."""
    output_path = os.getenv("GITHUB_OUTPUT")
    if not output_path:
        return
    with open(output_path, "a") as f:
        f.write(f"{name}={value}\n")


def generate_args(inputs: BuildInputs, outputs_dir: str) -> List[str]:
    """Build the `docker run` argument list for the executor container."""
    args = [
        # docker args
        "run",
        "--rm",
        "-v",
        f"{os.path.abspath(inputs.context)}:{CONTEXT_MOUNT}:ro",
        "-v",
        f"{outputs_dir}:{OUTPUTS_MOUNT}",
        "-v",
        f"{os.path.expanduser('~')}/.docker/:/kaniko/.docker/:ro",
        # workaround for kaniko v1.8.0+
        # https://github.com/GoogleContainerTools/kaniko/issues/1542#issuecomment-1066028047
        "-e",
        "container=docker",
    ]
    for filename, path in inputs.extra_context:
        args.extend(["-v", f"{path}:{EXTRA_CONTEXT_MOUNT}/{filename}"])

    args.extend(
        [
            inputs.executor,
            # kaniko args
            "--context",
            f"dir://{CONTEXT_MOUNT}/",
            "--digest-file",
            f"{OUTPUTS_MOUNT}/digest",
        ]
    )
    if inputs.file:
        # The Dockerfile is resolved from the context root, like `docker build -f`
        args.extend(["--dockerfile", os.path.relpath(inputs.file, inputs.context)])
    for build_arg in inputs.build_args:
        args.extend(["--build-arg", build_arg])
    for label in inputs.labels:
        args.extend(["--label", label])
    if not inputs.push:
        args.append("--no-push")
    for tag in inputs.tags:
        args.extend(["--destination", tag])
    if inputs.target:
        args.extend(["--target", inputs.target])

    if inputs.cache:
        args.append("--cache=true")
        if inputs.cache_repository:
            args.extend(["--cache-repo", inputs.cache_repository])
    if inputs.cache_ttl:
        args.extend(["--cache-ttl", inputs.cache_ttl])
    if inputs.push_retry:
        args.extend(["--push-retry", inputs.push_retry])
    for mirror in inputs.registry_mirrors:
        args.extend(["--registry-mirror", mirror])
    if inputs.verbosity:
        args.extend(["--verbosity", inputs.verbosity])

    args.extend(inputs.kaniko_args)
    return args


def run_build_from_environment(dry_run: bool = False) -> Dict[str, str]:
    """Main application logic"""
    setup_logging(
        log_dir=os.getenv("LOG_DIR", "logs"),
        log_file_name="kaniko_build.log",
        console_output=True,
        log_level=log_level_from_env(),
    )

    inputs = BuildInputs.from_environment()
    logger.debug(f"Build inputs: {inputs.to_dict()}")

    if dry_run:
        logger.info("Dry run enabled, skipping pull and build.")
        inputs.extra_context = [
            (name, os.path.join("<extra-context>", name))
            for name, _ in inputs.extra_context
        ]
        return {"args": shlex.join(generate_args(inputs, "<outputs>"))}

    return run_build(inputs)
