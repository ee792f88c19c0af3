"""Remote gateway package."""
from possync.gateway.base import RemoteGateway
from possync.gateway.http_gateway import HttpRemoteGateway

__all__ = ['RemoteGateway', 'HttpRemoteGateway']
