"""Data models for vpkg.

Import from submodules:
- registry: RegistryIndex, RepositoryRef, RepositoryManifest, PackageDescriptor, SyncSpec
- installation: InstalledPackageRecord, InstallOptions, RenderContext, InstallReceipt
"""
