"""Operations of the package engine.

Each operation takes a VpkgContext as its first argument:
- resolve: specifier parsing and registry resolution
- discovery: template discovery strategies
- install: install_package
- remove: remove_package
- sync: run_sync_capabilities
- exec: exec_package
- listing: list_available, list_installed
"""
