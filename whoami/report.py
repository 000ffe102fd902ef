# -*- coding: utf-8 -*-

from __future__ import annotations
import os
import time
import socket
import logging
import platform
from dataclasses import dataclass, field, asdict
from typing import Any, Dict, Tuple
from urllib.parse import quote

from flask import Request

from whoami.config import Config
from whoami.netinfo import join_host_port, list_local_ipv4, resolve_real_ip
from whoami.version import VERSION

logger = logging.getLogger(__name__)

# RFC 3986 pchar plus "/"
PATH_SAFE = "/:@!$&'()*+,;=-._~"

# ----------------------------- Model -----------------------------

@dataclass(frozen=True)
class RequestInfo:
    hostname: str
    name: str
    ip: Tuple[str, ...]
    remote_addr: str
    host: str
    url: str
    method: str
    real_ip: str
    protocol: str
    headers: Dict[str, str] = field(default_factory=dict)
    environment: Dict[str, str] = field(default_factory=dict)
    os: str = ""
    architecture: str = ""
    runtime: str = ""
    time: str = ""
    version: str = VERSION

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["ip"] = list(self.ip)
        if not self.name:
            del data["name"]
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RequestInfo":
        return cls(
            hostname=data.get("hostname", ""),
            name=data.get("name") or "",
            ip=tuple(data.get("ip") or ()),
            remote_addr=data.get("remote_addr", ""),
            host=data.get("host", ""),
            url=data.get("url", ""),
            method=data.get("method", ""),
            real_ip=data.get("real_ip", ""),
            protocol=data.get("protocol", ""),
            headers=dict(data.get("headers") or {}),
            environment=dict(data.get("environment") or {}),
            os=data.get("os", ""),
            architecture=data.get("architecture", ""),
            runtime=data.get("runtime", ""),
            time=data.get("time", ""),
            version=data.get("version", ""),
        )

# ----------------------------- Host introspection -----------------------------

def rfc3339_now() -> str:
    return time.strftime("%Y-%m-%dT%H:%M:%SZ", time.gmtime())

def _hostname() -> str:
    try:
        return socket.gethostname()
    except OSError as exc:
        logger.debug("hostname lookup failed: %s", exc)
        return ""

def _runtime() -> str:
    return f"{platform.python_implementation()} {platform.python_version()}"

# ----------------------------- Request facts -----------------------------

def remote_addr_of(req: Request) -> str:
    env = req.environ
    return join_host_port(env.get("REMOTE_ADDR") or "", env.get("REMOTE_PORT"))

def request_url(req: Request) -> str:
    """Request target as sent on the wire, percent-encoding intact."""
    env = req.environ
    raw = env.get("RAW_URI") or env.get("REQUEST_URI")
    if raw:
        return raw
    url = quote(req.path, safe=PATH_SAFE)
    if req.query_string:
        url += "?" + req.query_string.decode("latin-1")
    return url

def collect_headers(req: Request) -> Dict[str, str]:
    headers: Dict[str, str] = {}
    for key in req.headers.keys():
        # reported separately as `host`
        if key.lower() == "host" or key in headers:
            continue
        headers[key] = ", ".join(req.headers.getlist(key))
    return headers

def collect_environment() -> Dict[str, str]:
    """Process environment; undecodable bytes become U+FFFD."""
    environb = getattr(os, "environb", None)
    if environb is None:
        return dict(os.environ)
    return {
        key.decode("utf-8", "replace"): value.decode("utf-8", "replace")
        for key, value in environb.items()
    }

# ----------------------------- Builder -----------------------------

def build_report(req: Request, config: Config) -> RequestInfo:
    remote_addr = remote_addr_of(req)
    headers = collect_headers(req)
    return RequestInfo(
        hostname=_hostname(),
        name=config.name,
        ip=tuple(list_local_ipv4()),
        remote_addr=remote_addr,
        host=req.headers.get("Host", ""),
        url=request_url(req),
        method=req.method,
        real_ip=resolve_real_ip(headers, remote_addr),
        protocol=req.environ.get("SERVER_PROTOCOL", ""),
        headers=headers,
        environment=collect_environment(),
        os=platform.system().lower(),
        architecture=platform.machine(),
        runtime=_runtime(),
        time=rfc3339_now(),
        version=VERSION,
    )
