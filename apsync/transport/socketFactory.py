"""
SocketFactory: Resolves a server address to a socket adapter.

Multiworld servers are usually given as a bare 'host[:port]'. Those are read
as websocket addresses on the standard port; anything with an explicit scheme
goes to the adapter registered for that scheme.

Usage:
    uri = normalizeAddress('archipelago.gg')     # 'ws://archipelago.gg:38281'
    socket = createSocket('archipelago.gg:40000')

Property of Uncompromising Sensors LLC.
"""


# Imports
import re
from typing import Dict, List, Optional, Type
from urllib.parse import urlsplit, urlunsplit

# Local imports
from .socketBase import ClientSocket


DEFAULT_PORT = 38281
DEFAULT_SCHEME = 'ws'
WEBSOCKET_SCHEMES = ('ws', 'wss')

_SCHEME_PREFIX = re.compile(r'^[A-Za-z][A-Za-z0-9+.-]*://')


def normalizeAddress(address: str, defaultScheme: str = DEFAULT_SCHEME) -> str:
    """'host', 'host:port' or 'scheme://host[:port]' -> full URI. Websocket URIs get the default port."""
    address = (address or '').strip()
    if not address:
        raise ValueError('Server address is empty')
    if not _SCHEME_PREFIX.match(address):
        address = f'{defaultScheme}://{address}'

    parts = urlsplit(address)
    scheme = parts.scheme.lower()
    if scheme in WEBSOCKET_SCHEMES:
        if not parts.hostname:
            raise ValueError(f'Server address has no host: {address}')
        try:
            port = parts.port
        except ValueError as e:
            raise ValueError(f'Invalid port in server address: {address}') from e
        if port is None:
            parts = parts._replace(netloc=f'{parts.netloc}:{DEFAULT_PORT}')
    return urlunsplit(parts._replace(scheme=scheme))


class SocketRegistry:
    """Scheme -> ClientSocket subclass"""

    def __init__(self):
        self._adapters: Dict[str, Type[ClientSocket]] = {}

    def register(self, scheme: str, adapterClass: Type[ClientSocket]) -> None:
        if not (isinstance(adapterClass, type) and issubclass(adapterClass, ClientSocket)):
            raise TypeError(f"Adapter {adapterClass!r} must be a ClientSocket subclass")
        self._adapters[scheme.lower()] = adapterClass

    def get(self, scheme: str) -> Optional[Type[ClientSocket]]:
        return self._adapters.get(scheme.lower())

    def schemes(self) -> List[str]:
        return sorted(self._adapters)


_defaultRegistry = SocketRegistry()


def registerAdapter(scheme: str, adapterClass: Type[ClientSocket]) -> None:
    _defaultRegistry.register(scheme, adapterClass)


def getDefaultRegistry() -> SocketRegistry:
    return _defaultRegistry


def createSocket(address: str, registry: Optional[SocketRegistry] = None, **opts) -> ClientSocket:
    """Build an unconnected socket for address. Unknown schemes raise ValueError."""
    registry = registry or _defaultRegistry
    scheme = urlsplit(normalizeAddress(address)).scheme

    adapterClass = registry.get(scheme)
    if adapterClass is None:
        raise ValueError(f"No socket adapter for scheme '{scheme}'. Available: {', '.join(registry.schemes()) or 'none'}")
    return adapterClass(**opts)
