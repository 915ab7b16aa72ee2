"""
Probe constructors.

Timings are passed through as given. Kubernetes expects timeout and period
values of at least 1 second; the builder leaves that check to the API server.
"""
from typing import Optional

from .models import ExecAction, HTTPGetAction, HTTPHeader, Probe, TCPSocketAction


def http_probe(
    port: int,
    path: str,
    init_delay_sec: int,
    timeout_sec: int,
    period_sec: int,
    headers: Optional[dict[str, str]] = None,
) -> Probe:
    """
    HTTP GET probe against the container.
    headers: optional request headers, omitted from the probe when empty.
    """
    action = HTTPGetAction(port=port, path=path)
    if headers:
        action.http_headers = [HTTPHeader(name=k, value=v) for k, v in headers.items()]

    return Probe(
        http_get=action,
        initial_delay_seconds=init_delay_sec,
        timeout_seconds=timeout_sec,
        period_seconds=period_sec,
    )


def cmd_probe(cmd: list[str], init_delay_sec: int, timeout_sec: int, period_sec: int) -> Probe:
    """Probe that runs a command inside the container; exit code 0 is healthy."""
    return Probe(
        exec_=ExecAction(command=list(cmd)),
        initial_delay_seconds=init_delay_sec,
        timeout_seconds=timeout_sec,
        period_seconds=period_sec,
    )


def tcp_probe(host: str, port: int, init_delay_sec: int, timeout_sec: int, period_sec: int) -> Probe:
    return Probe(
        tcp_socket=TCPSocketAction(host=host, port=port),
        initial_delay_seconds=init_delay_sec,
        timeout_seconds=timeout_sec,
        period_seconds=period_sec,
    )
