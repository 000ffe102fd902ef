"""Tests for local address enumeration and client IP resolution."""

import socket
from types import SimpleNamespace

import pytest

from whoami import netinfo
from whoami.netinfo import (
    join_host_port,
    list_local_ipv4,
    resolve_real_ip,
    split_host_port,
)


def _addr(family: int, address: str) -> SimpleNamespace:
    return SimpleNamespace(family=family, address=address)


def _stats(isup: bool = True, flags: str = "up,broadcast,running,multicast") -> SimpleNamespace:
    return SimpleNamespace(isup=isup, flags=flags)


@pytest.mark.parametrize(
    ("headers", "remote_addr", "expected"),
    [
        ({"X-Forwarded-For": "192.168.1.1"}, "10.0.0.1:1234", "192.168.1.1"),
        ({"X-Forwarded-For": "192.168.1.1, 10.0.0.1"}, "10.0.0.1:1234", "192.168.1.1"),
        ({"X-Forwarded-For": "  a , b, c"}, "10.0.0.1:1234", "a"),
        ({"X-Real-IP": "192.168.1.1"}, "10.0.0.1:1234", "192.168.1.1"),
        ({}, "192.168.1.1:1234", "192.168.1.1"),
        ({}, "invalid-addr", "invalid-addr"),
        ({}, "[2001:db8::1]:443", "2001:db8::1"),
        ({}, "2001:db8::1", "2001:db8::1"),
        ({}, "a]:80", "a]:80"),
        ({}, "a[:80", "a[:80"),
        ({}, "[a[b]:80", "[a[b]:80"),
        ({}, "[::1]:80]", "[::1]:80]"),
        ({}, "[::1]:80:90", "[::1]:80:90"),
    ],
)
def test_resolve_real_ip(headers: dict, remote_addr: str, expected: str) -> None:
    """Given proxy headers and a peer address, then the documented precedence applies."""
    assert resolve_real_ip(headers, remote_addr) == expected


def test_resolve_real_ip_prefers_forwarded_for_over_real_ip() -> None:
    """Given both proxy headers, then X-Forwarded-For wins."""
    headers = {"X-Real-IP": "10.9.9.9", "X-Forwarded-For": "172.16.0.5, 10.0.0.1"}

    assert resolve_real_ip(headers, "10.0.0.1:1234") == "172.16.0.5"


def test_resolve_real_ip_keeps_real_ip_untrimmed() -> None:
    """Given only X-Real-IP with padding, then the raw value is returned."""
    assert resolve_real_ip({"X-Real-IP": " 10.0.0.1 "}, "10.0.0.2:1") == " 10.0.0.1 "


def test_resolve_real_ip_matches_header_names_case_insensitively() -> None:
    """Given lower-case header names, then they are still honoured."""
    assert resolve_real_ip({"x-real-ip": "10.0.0.1"}, "10.0.0.2:1") == "10.0.0.1"


def test_resolve_real_ip_ignores_empty_forwarded_for() -> None:
    """Given an empty X-Forwarded-For, then resolution falls through."""
    headers = {"X-Forwarded-For": "", "X-Real-IP": "10.0.0.3"}

    assert resolve_real_ip(headers, "10.0.0.2:1") == "10.0.0.3"


def test_split_host_port_rejects_missing_port() -> None:
    """Given an address without a port, then ValueError is raised."""
    with pytest.raises(ValueError):
        split_host_port("10.0.0.1")


def test_join_host_port_brackets_ipv6() -> None:
    """Given an IPv6 host, then it is bracketed; a missing port leaves the host alone."""
    assert join_host_port("::1", "8080") == "[::1]:8080"
    assert join_host_port("10.0.0.1", 80) == "10.0.0.1:80"
    assert join_host_port("10.0.0.1", None) == "10.0.0.1"


def test_list_local_ipv4_returns_dotted_quads() -> None:
    """Given the real host, then every address is four octets in range."""
    for ip in list_local_ipv4():
        parts = ip.split(".")
        assert len(parts) == 4
        assert all(0 <= int(part) <= 255 for part in parts)


def test_list_local_ipv4_filters_interfaces(monkeypatch: pytest.MonkeyPatch) -> None:
    """Given down, loopback and v6-only interfaces, then only routable IPv4 remains."""
    stats = {
        "lo": _stats(flags="up,loopback,running"),
        "eth0": _stats(),
        "eth1": _stats(isup=False),
        "wlan0": _stats(),
        "tun0": _stats(),
    }
    addrs = {
        "lo": [_addr(socket.AF_INET, "127.0.0.1")],
        "eth0": [
            _addr(socket.AF_INET, "192.168.1.10"),
            _addr(socket.AF_INET6, "fe80::1%eth0"),
            _addr(socket.AF_INET, "10.0.0.5"),
        ],
        "eth1": [_addr(socket.AF_INET, "172.16.0.1")],
        "wlan0": [_addr(socket.AF_INET6, "::ffff:10.1.2.3"), _addr(socket.AF_INET, "127.0.0.2")],
        "tun0": [_addr(socket.AF_INET6, "2001:db8::1")],
    }
    monkeypatch.setattr(netinfo.psutil, "net_if_stats", lambda: stats)
    monkeypatch.setattr(netinfo.psutil, "net_if_addrs", lambda: addrs)

    assert list_local_ipv4() == ["192.168.1.10", "10.0.0.5", "10.1.2.3"]


def test_list_local_ipv4_swallows_enumeration_errors(monkeypatch: pytest.MonkeyPatch) -> None:
    """Given interface enumeration failing, then an empty list is returned."""

    def boom() -> dict:
        raise OSError("not supported")

    monkeypatch.setattr(netinfo.psutil, "net_if_stats", boom)

    assert list_local_ipv4() == []
