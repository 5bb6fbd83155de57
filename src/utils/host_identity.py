# src/utils/host_identity.py
import socket
from dataclasses import dataclass


@dataclass(frozen=True)
class HostIdentity:
    hostname: str
    ip_address: str
    fqdn: str


def get_host_identity() -> HostIdentity:
    """클론 파이프라인을 실행하는 머신의 식별 정보"""
    hostname = socket.gethostname()
    try:
        ip_address = socket.gethostbyname(hostname)
    except socket.gaierror:
        ip_address = "127.0.0.1"
    return HostIdentity(hostname=hostname, ip_address=ip_address, fqdn=socket.getfqdn(hostname))
