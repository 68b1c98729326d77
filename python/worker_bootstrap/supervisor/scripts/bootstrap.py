#!/usr/bin/env python3
"""
Worker Bootstrap CLI Script

Launches the worker artifact under supervision. The worker's exit code
decides whether it is restarted, updated from the build server or shut down.

Usage:
    worker-bootstrap [options] [--] [arguments...]

Example:
    worker-bootstrap -x 2G --jvm-args="-XX:+UseG1GC;-Dlog4j2.formatMsgNoLookups=true" -- --token-file token.txt
"""

import argparse
import sys
from dataclasses import replace
from pathlib import Path
from typing import List, Optional, Sequence

from worker_bootstrap import __version__
from worker_bootstrap.logging_config import get_logger, set_package_level
from worker_bootstrap.supervisor.boot_loop import EXIT_FAILURE, BootSupervisor
from worker_bootstrap.supervisor.models import (
    ConfigurationError,
    LOG_LEVELS,
    LaunchConfig,
    SupervisorConfig,
    parse_environment_variables,
)
from worker_bootstrap.updater.jenkins import JenkinsUpdater

logger = get_logger(__name__)


def _split_jvm_args(values: Optional[Sequence[str]]) -> List[str]:
    """Flatten repeated -j values, each of which may hold ';'-delimited args."""
    args: List[str] = []
    for value in values or []:
        args.extend(part.strip() for part in value.split(";") if part.strip())
    return args


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="worker-bootstrap",
        description="Launch, restart and update a worker process",
    )

    parser.add_argument(
        "-v",
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
        help="Prints the current version of this application",
    )
    parser.add_argument(
        "-j",
        "--jvm-args",
        action="append",
        default=[],
        help=(
            "Sets the JVM arguments that are provided to the worker process. "
            "Use ; to delimit multiple JVM args, or specify multiple times. "
            "Pass values starting with - as --jvm-args=VALUE."
        ),
    )
    parser.add_argument(
        "-x",
        "--heap",
        help="Sets the JVM maximum heap size for the worker process (-Xmx).",
    )
    parser.add_argument(
        "-s",
        "--initial-heap",
        help="Sets the JVM initial heap size for the worker process (-Xms).",
    )
    parser.add_argument(
        "--jenkins-url",
        help="Base URL of the Jenkins server to download updates from.",
    )
    parser.add_argument(
        "--jenkins-project",
        help="Job path on the Jenkins server, e.g. job/team/job/app.",
    )
    parser.add_argument(
        "-f",
        "--jar",
        help="Location of the worker artifact (default: PolyBot.jar).",
    )
    parser.add_argument(
        "--java",
        default="java",
        help="Runtime executable used to launch the worker (default: java).",
    )
    parser.add_argument(
        "--log-level",
        choices=[level.upper() for level in LOG_LEVELS],
        type=str.upper,
        help="Log level of the bootstrap process (overrides BOOTSTRAP_LOG_LEVEL).",
    )
    parser.add_argument(
        "arguments",
        nargs=argparse.REMAINDER,
        help="The list of arguments to be passed to the worker.",
    )
    return parser


def resolve_config(args: argparse.Namespace) -> SupervisorConfig:
    """Merge environment configuration with command-line overrides."""
    config = parse_environment_variables()
    overrides = {}
    if args.jar:
        overrides["jar_path"] = args.jar
    if args.jenkins_url:
        overrides["jenkins_url"] = args.jenkins_url.rstrip("/")
    if args.jenkins_project:
        overrides["jenkins_project"] = args.jenkins_project.strip("/")
    if args.log_level:
        overrides["log_level"] = args.log_level.lower()
    return replace(config, **overrides)


def build_launch_config(
    args: argparse.Namespace, config: SupervisorConfig
) -> LaunchConfig:
    worker_args = list(args.arguments)
    if worker_args and worker_args[0] == "--":
        worker_args = worker_args[1:]

    return LaunchConfig(
        jar_path=Path(config.jar_path),
        executable=args.java,
        max_heap=args.heap,
        initial_heap=args.initial_heap,
        runtime_args=tuple(_split_jvm_args(args.jvm_args)),
        worker_args=tuple(worker_args),
    )


def main(argv: Optional[Sequence[str]] = None) -> int:
    """
    Main entry point for the worker-bootstrap CLI.

    Returns:
        Exit code (0 for success, non-zero for error)
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        config = resolve_config(args)
    except ConfigurationError as e:
        print(f"ERROR: Configuration error: {e}", file=sys.stderr)
        return EXIT_FAILURE

    set_package_level(config.log_level)

    launch = build_launch_config(args, config)
    updater = JenkinsUpdater(
        jenkins_url=config.jenkins_url,
        project_path=config.jenkins_project,
        artifact_suffix=config.artifact_suffix,
    )
    supervisor = BootSupervisor(launch, updater, config)

    try:
        return supervisor.run()
    except KeyboardInterrupt:
        logger.info("Interrupted, shutting down bootstrap process.")
        return 130


if __name__ == "__main__":
    sys.exit(main())
