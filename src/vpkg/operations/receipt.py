"""Usage instructions shown after a successful install."""

from vpkg.models.installation import RenderContext
from vpkg.models.registry import PackageDescriptor


def build_usage(descriptor: PackageDescriptor, context: RenderContext) -> str:
    """Describe how to wire the installed package into the consuming project."""
    ident = context.sanitized_identifier
    import_path = f"{context.module_identifier}/{context.destination_path}"
    lines: list[str] = []

    if descriptor.kind == "library-module":
        lines.append("Import the package:")
        lines.append(f'   import {ident} "{import_path}"')
        lines.append("")
        lines.append("Register the module with your application:")
        lines.append(f"   {ident}.Module")
        if descriptor.dependencies:
            lines.append("")
            lines.append("Dependencies to add:")
            for dependency in descriptor.dependencies:
                lines.append(f"   {dependency}")
    else:
        lines.append("Run as a command:")
        lines.append(f"   vpkg exec {descriptor.name} [args]")
        lines.append("")
        lines.append("Or embed it in your application:")
        lines.append(f'   import {ident} "{import_path}"')

    if descriptor.has_sync_capability:
        lines.append("")
        lines.append("This package provides a sync capability:")
        lines.append("   vpkg sync")

    lines.append("")
    lines.append(f"See the README in {context.destination_path} for detailed usage.")
    return "\n".join(lines)
