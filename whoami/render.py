# -*- coding: utf-8 -*-

from __future__ import annotations
import json
from typing import List, Mapping

from whoami.report import RequestInfo


class RenderError(Exception):
    """Report could not be serialized."""


def _sorted_block(title: str, values: Mapping[str, str]) -> List[str]:
    lines = [f"{title}:"]
    for key in sorted(values):
        lines.append(f"  {key}: {values[key]}")
    return lines

def render_text(info: RequestInfo) -> str:
    """Plain-text report. Headers and environment are sorted by key."""
    lines = [f"Hostname: {info.hostname}"]
    if info.name:
        lines.append(f"Name: {info.name}")
    lines += [
        f"IP: {', '.join(info.ip)}",
        f"RemoteAddr: {info.remote_addr}",
        f"Host: {info.host}",
        f"URL: {info.url}",
        f"Method: {info.method}",
        f"RealIP: {info.real_ip}",
        f"Protocol: {info.protocol}",
        f"OS: {info.os}",
        f"Architecture: {info.architecture}",
        f"Runtime: {info.runtime}",
        f"Time: {info.time}",
        f"Version: {info.version}",
        "",
    ]
    lines += _sorted_block("Headers", info.headers)
    lines.append("")
    lines += _sorted_block("Environment", info.environment)
    return "\n".join(lines) + "\n"

def render_structured(info: RequestInfo) -> bytes:
    """JSON report; ``name`` is left out when empty."""
    try:
        raw = json.dumps(info.to_dict(), ensure_ascii=False, sort_keys=True)
        # lone surrogates from undecodable host data are replaced, not fatal
        return (raw + "\n").encode("utf-8", errors="replace")
    except (TypeError, ValueError) as exc:
        raise RenderError(f"failed to encode report: {exc}") from exc

def parse_structured(data: bytes) -> RequestInfo:
    try:
        return RequestInfo.from_dict(json.loads(data))
    except (TypeError, ValueError, AttributeError) as exc:
        raise RenderError(f"failed to decode report: {exc}") from exc
