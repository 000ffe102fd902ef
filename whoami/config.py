# -*- coding: utf-8 -*-

from __future__ import annotations
import os
import argparse
from dataclasses import dataclass

DEFAULT_PORT = 80
PORT_ENV = "WHOAMI_PORT_NUMBER"
NAME_ENV = "WHOAMI_NAME"


@dataclass(frozen=True)
class Config:
    """Read-only server settings, shared by every in-flight request."""

    port: int = DEFAULT_PORT
    name: str = ""
    verbose: bool = False


def get_env_as_int(key: str, default: int) -> int:
    value = os.getenv(key, "")
    if not value:
        return default
    try:
        return int(value)
    except ValueError:
        return default


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="whoami",
        description="Tiny HTTP service that reports server identity and request details.",
    )
    # Single-dash spellings kept for compatibility with existing deployments.
    parser.add_argument("--port", "-port", type=int, default=get_env_as_int(PORT_ENV, DEFAULT_PORT),
                        help=f"The port number (env {PORT_ENV}, default {DEFAULT_PORT})")
    parser.add_argument("--name", "-name", default=os.getenv(NAME_ENV, ""),
                        help=f"The name (env {NAME_ENV})")
    parser.add_argument("--verbose", "-verbose", action="store_true",
                        help="Enable verbose logging")
    parser.add_argument("--version", "-version", action="store_true",
                        help="Show version information")
    return parser


def load_config(args: argparse.Namespace) -> Config:
    return Config(port=args.port, name=args.name or "", verbose=bool(args.verbose))

