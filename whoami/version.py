# -*- coding: utf-8 -*-
"""Build metadata. Release tooling rewrites these constants at build time."""

VERSION = "dev"
COMMIT = "none"
BUILD_DATE = "unknown"
BUILT_BY = "unknown"


def version_banner() -> str:
    return (
        f"whoami {VERSION}\n"
        f"  commit: {COMMIT}\n"
        f"  built: {BUILD_DATE}\n"
        f"  built by: {BUILT_BY}\n"
    )
