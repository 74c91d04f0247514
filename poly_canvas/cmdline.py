"""Command-line argument parser."""

from __future__ import annotations

import argparse
import logging
from dataclasses import dataclass, field
from typing import Optional, Sequence

from .settings import GraphSettings

LOG_LEVELS: tuple[str, ...] = ("DEBUG", "INFO", "WARNING", "ERROR")


@dataclass
class CmdArgs:
    settings: GraphSettings = field(default_factory=GraphSettings)
    log_level: int = logging.INFO


def get_package_name() -> str:
    from os.path import abspath, basename, dirname

    return basename(dirname(abspath(__file__)))


def parse_command_line(argv: Optional[Sequence[str]] = None) -> CmdArgs:
    defaults = GraphSettings()
    parser = argparse.ArgumentParser(
        prog=get_package_name(),
        description="Place points on a plane and watch the least-squares polynomial follow them.",
    )
    parser.add_argument(
        "-n",
        "--order",
        type=int,
        default=defaults.polynomial_order,
        help="polynomial order (default: %(default)s)",
    )
    parser.add_argument(
        "-w",
        "--lerp-weight",
        type=float,
        default=defaults.lerp_weight,
        help="fraction of the gap to the new fit closed per frame (default: %(default)s)",
    )
    parser.add_argument(
        "-s",
        "--point-spacing",
        type=float,
        default=defaults.point_spacing,
        help="world units per grid unit (default: %(default)s)",
    )
    parser.add_argument(
        "--log-level",
        choices=LOG_LEVELS,
        default="INFO",
        type=str.upper,
        help="logging level (default: %(default)s)",
    )
    ns = parser.parse_args(argv)

    try:
        settings = GraphSettings(
            point_spacing=ns.point_spacing,
            lerp_weight=ns.lerp_weight,
            polynomial_order=ns.order,
        )
    except ValueError as e:
        parser.error(str(e))

    return CmdArgs(settings=settings, log_level=getattr(logging, ns.log_level))
