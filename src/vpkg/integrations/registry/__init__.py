from vpkg.integrations.registry.abc import RegistryClient, RemoteEntry, join_url
from vpkg.integrations.registry.real import RealRegistryClient

__all__ = ["RealRegistryClient", "RegistryClient", "RemoteEntry", "join_url"]
