# -*- coding: utf-8 -*-

from __future__ import annotations
import socket
import logging
import ipaddress
from typing import List, Mapping, Optional, Tuple

import psutil

logger = logging.getLogger(__name__)

# ----------------------------- Local addresses -----------------------------

def _is_loopback_iface(stats) -> bool:
    flags = getattr(stats, "flags", "") or ""
    return "loopback" in flags.split(",")

def _as_ipv4(addr) -> Optional[ipaddress.IPv4Address]:
    family = getattr(addr, "family", None)
    text = (getattr(addr, "address", "") or "").split("%", 1)[0]
    try:
        if family == socket.AF_INET:
            return ipaddress.IPv4Address(text)
        if family == socket.AF_INET6:
            # only IPv4-mapped v6 addresses have a dotted-quad form
            return ipaddress.IPv6Address(text).ipv4_mapped
    except ValueError:
        return None
    return None

def list_local_ipv4() -> List[str]:
    """IPv4 addresses of every up, non-loopback interface, in enumeration order.

    Never raises: the list is informational, so enumeration errors yield [].
    """
    ips: List[str] = []
    try:
        stats = psutil.net_if_stats()
        addrs = psutil.net_if_addrs()
    except Exception as exc:
        logger.debug("interface enumeration failed: %s", exc)
        return ips
    for iface, iface_addrs in addrs.items():
        st = stats.get(iface)
        if st is None or not st.isup:
            continue
        if _is_loopback_iface(st):
            continue
        for addr in iface_addrs:
            ip = _as_ipv4(addr)
            if ip is None or ip.is_loopback or ip.is_unspecified:
                continue
            ips.append(str(ip))
    return ips

# ----------------------------- host:port -----------------------------

def split_host_port(hostport: str) -> Tuple[str, str]:
    """Split "host:port" or "[v6]:port". Raises ValueError when malformed."""
    if hostport.startswith("["):
        end = hostport.find("]")
        if end < 0:
            raise ValueError(f"missing ']' in address {hostport!r}")
        host, rest = hostport[1:end], hostport[end + 1:]
        if not rest.startswith(":"):
            raise ValueError(f"missing port in address {hostport!r}")
        port = rest[1:]
        if "[" in host or "]" in port:
            raise ValueError(f"stray bracket in address {hostport!r}")
        if ":" in port:
            raise ValueError(f"too many colons in address {hostport!r}")
        return host, port
    if hostport.count(":") != 1:
        raise ValueError(f"expected exactly one ':' in address {hostport!r}")
    host, port = hostport.split(":", 1)
    if "[" in hostport or "]" in hostport:
        raise ValueError(f"stray bracket in address {hostport!r}")
    return host, port

def join_host_port(host: str, port) -> str:
    if port in (None, ""):
        return host
    if ":" in host:
        return f"[{host}]:{port}"
    return f"{host}:{port}"

# ----------------------------- Client IP -----------------------------

def _header(headers: Mapping[str, str], name: str) -> str:
    wanted = name.lower()
    for key, value in headers.items():
        if key.lower() == wanted:
            return value or ""
    return ""

def resolve_real_ip(headers: Mapping[str, str], remote_addr: str) -> str:
    """Client IP as seen past the proxy chain.

    X-Forwarded-For (first entry, trimmed) wins over X-Real-IP (verbatim),
    which wins over the host part of the transport peer address. A peer
    address that can't be split is returned unchanged.
    """
    xff = _header(headers, "X-Forwarded-For")
    if xff:
        return xff.split(",")[0].strip()
    xri = _header(headers, "X-Real-IP")
    if xri:
        return xri
    try:
        host, _ = split_host_port(remote_addr)
    except ValueError:
        return remote_addr
    return host
