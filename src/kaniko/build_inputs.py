import os
from typing import Any, Dict, List, Optional, Tuple

from parsers.kv_parser import ErrorHandler, multiline_kv, report_and_abort
from utils.docker_utils import parse_bool, split_kaniko_args, split_multiline_input

DEFAULT_EXECUTOR = "gcr.io/kaniko-project/executor:latest"


class BuildInputs:
    def __init__(
        self,
        executor: str = DEFAULT_EXECUTOR,
        cache: bool = False,
        cache_repository: str = "",
        cache_ttl: str = "",
        push_retry: str = "",
        registry_mirrors: Optional[List[str]] = None,
        verbosity: str = "",
        kaniko_args: Optional[List[str]] = None,
        build_args: Optional[List[str]] = None,
        context: str = ".",
        file: str = "",
        labels: Optional[List[str]] = None,
        push: bool = True,
        tags: Optional[List[str]] = None,
        target: str = "",
        extra_context: Optional[List[Tuple[str, str]]] = None,
    ):
        """
        Initialize the inputs of one executor run.
        Args:
            executor (str): Image of the kaniko executor to run.
            extra_context (List[Tuple[str, str]]): (file name, content) pairs
                mounted next to the build context. Replaced by (file name, path)
                pairs once the files are written.
        """
        self.executor = executor
        self.cache = cache
        self.cache_repository = cache_repository
        self.cache_ttl = cache_ttl
        self.push_retry = push_retry
        self.registry_mirrors: List[str] = registry_mirrors or []
        self.verbosity = verbosity
        self.kaniko_args: List[str] = kaniko_args or []
        self.build_args: List[str] = build_args or []
        self.context = context
        self.file = file
        self.labels: List[str] = labels or []
        self.push = push
        self.tags: List[str] = tags or []
        self.target = target
        self.extra_context: List[Tuple[str, str]] = extra_context or []

    @classmethod
    def from_environment(
        cls, on_error: ErrorHandler = report_and_abort
    ) -> "BuildInputs":
        """Read the inputs exported by set_environment_variables."""
        return cls(
            executor=os.getenv("KANIKO_EXECUTOR") or DEFAULT_EXECUTOR,
            cache=parse_bool(os.getenv("KANIKO_CACHE")),
            cache_repository=os.getenv("KANIKO_CACHE_REPOSITORY", ""),
            cache_ttl=os.getenv("KANIKO_CACHE_TTL", ""),
            push_retry=os.getenv("KANIKO_PUSH_RETRY", ""),
            registry_mirrors=split_multiline_input(os.getenv("KANIKO_REGISTRY_MIRRORS")),
            verbosity=os.getenv("KANIKO_VERBOSITY", ""),
            kaniko_args=split_kaniko_args(os.getenv("KANIKO_ARGS")),
            build_args=split_multiline_input(os.getenv("KANIKO_BUILD_ARGS")),
            context=os.getenv("KANIKO_CONTEXT") or ".",
            file=os.getenv("KANIKO_FILE", ""),
            labels=split_multiline_input(os.getenv("KANIKO_LABELS")),
            push=parse_bool(os.getenv("KANIKO_PUSH"), default=True),
            tags=split_multiline_input(os.getenv("KANIKO_TAGS")),
            target=os.getenv("KANIKO_TARGET", ""),
            extra_context=multiline_kv(os.getenv("KANIKO_EXTRA_CONTEXT", ""), on_error),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert the inputs to a dictionary, without extra context contents."""
        return {
            "executor": self.executor,
            "cache": self.cache,
            "cache_repository": self.cache_repository,
            "cache_ttl": self.cache_ttl,
            "push_retry": self.push_retry,
            "registry_mirrors": self.registry_mirrors,
            "verbosity": self.verbosity,
            "kaniko_args": self.kaniko_args,
            "build_args": self.build_args,
            "context": self.context,
            "file": self.file,
            "labels": self.labels,
            "push": self.push,
            "tags": self.tags,
            "target": self.target,
            "extra_context": [name for name, _ in self.extra_context],
        }

    def __repr__(self):
        return f"BuildInputs(executor={self.executor}, context={self.context}, tags={self.tags})"
