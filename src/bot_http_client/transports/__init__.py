"""HTTP бэкенды: requests и httpx с одинаковым контрактом fetch()."""

from .base import Transport
from .httpx_transport import HttpxTransport
from .requests_transport import RequestsTransport

__all__ = [
    "Transport",
    "HttpxTransport",
    "RequestsTransport",
    "create_transport",
]


def create_transport(
    name: str,
    timeout=None,
    max_payload_size=None,
) -> Transport:
    """
    Создать транспорт по имени ("httpx" или "requests").

    Examples:
        >>> create_transport("requests", timeout=30)
    """
    transports = {
        HttpxTransport.name: HttpxTransport,
        RequestsTransport.name: RequestsTransport,
    }
    transport_class = transports.get(name)
    if transport_class is None:
        raise ValueError(
            f"Unknown transport: {name}. Available: {', '.join(transports.keys())}"
        )
    return transport_class(timeout=timeout, max_payload_size=max_payload_size)
