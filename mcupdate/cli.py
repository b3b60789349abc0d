from __future__ import annotations

import argparse
import logging
from pathlib import Path
import sys

from . import __version__
from .confirm import POLICIES, POLICY_ASK, confirm_for_policy
from .exceptions import McUpdateError, OperatorDeclined
from .http import HttpClient
from .manager import ServerJarUpdater
from .models import UpdateRequest, UpdaterConfig
from .utils import parse_download_budget

LOGGER = logging.getLogger("mcupdate")

LOG_FORMAT = "%(levelname)-8s %(message)s"


def _configure_logging(verbosity: int) -> None:
    if verbosity > 0:
        level = logging.DEBUG
    elif verbosity < 0:
        level = logging.WARNING
    else:
        level = logging.INFO
    logging.basicConfig(level=level, format=LOG_FORMAT, stream=sys.stderr)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="mc-update",
        description="Updates minecraft server jars.",
    )
    parser.add_argument(
        "jar_version",
        metavar="JAR_VERSION",
        help="The jar version to update to, e.g. '1.12.2'.",
    )
    parser.add_argument(
        "install_dir",
        metavar="INSTALL_DIRECTORY",
        nargs="?",
        default=".",
        help="The directory to install the server.jar into (default: '.').",
    )
    parser.add_argument(
        "-r",
        "--repository",
        "--repo",
        dest="repositories",
        action="append",
        default=[],
        metavar="PATH",
        help="Adds a custom repository. Can be used multiple times.",
    )
    parser.add_argument(
        "-i",
        "--install-repository",
        "--install_repository",
        dest="install_repositories",
        action="append",
        default=[],
        metavar="PATH",
        help="Adds a repository to download to if needed, e.g. './repo/jars'.",
    )
    parser.add_argument(
        "-m",
        "--max-download-attempts",
        "--max_download_attempts",
        dest="max_download_attempts",
        default=None,
        metavar="N",
        help="Max amount of times to try to download a file (default: infinite).",
    )
    parser.add_argument(
        "--on-prompt",
        choices=POLICIES,
        default=POLICY_ASK,
        help="How to answer continue prompts: ask on the terminal, always continue, "
        "always abort, or fail the run (default: ask).",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=30.0,
        help="Network timeout in seconds for each request (default: 30).",
    )
    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument(
        "-v",
        "--verbose",
        dest="verbosity",
        action="store_const",
        const=1,
        default=0,
        help="Show debug output.",
    )
    verbosity.add_argument(
        "-q",
        "--quiet",
        dest="verbosity",
        action="store_const",
        const=-1,
        help="Only show warnings and errors.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    _configure_logging(args.verbosity)

    updater = ServerJarUpdater(
        http_client=HttpClient(timeout_seconds=args.timeout),
        confirm=confirm_for_policy(args.on_prompt),
        config=UpdaterConfig(),
    )
    try:
        request = UpdateRequest(
            version=args.jar_version,
            install_dir=Path(args.install_dir),
            repositories=[Path(path) for path in args.repositories],
            install_repositories=[Path(path) for path in args.install_repositories],
            budget=parse_download_budget(args.max_download_attempts),
        )
        updater.update(request)
    except OperatorDeclined:
        LOGGER.info("Stopped by operator.")
        return 0
    except McUpdateError as exc:
        LOGGER.error("%s", exc)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
