"""vpkg: install templated packages from a multi-repository registry.

For external tool integration, use the public API:
    from vpkg.api import install, remove, run_sync_capabilities

Import from submodules:
- version: __version__
- api: Public API built on a per-invocation VpkgContext
"""

from vpkg.version import __version__ as __version__
