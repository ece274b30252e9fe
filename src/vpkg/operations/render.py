"""Render context construction and Jinja2 template rendering."""

import logging
import re
import tomllib
from datetime import datetime
from pathlib import Path

import jinja2

from vpkg.errors import RenderError
from vpkg.models.installation import RenderContext
from vpkg.naming import (
    sanitize_identifier,
    to_camel_case,
    to_kebab_case,
    to_pascal_case,
    to_snake_case,
    to_title,
)
from vpkg.operations.resolve import ResolvedPackage, parse_specifier

logger = logging.getLogger(__name__)

_GO_MODULE_LINE = re.compile(r"^\s*module\s+(\S+)", re.MULTILINE)


def detect_module_identifier(project_root: Path) -> str:
    """Identify the consuming project for import statements.

    Uses the ``module`` line of go.mod, then ``[project].name`` from
    pyproject.toml, then the project directory name.
    """
    go_mod = project_root / "go.mod"
    if go_mod.exists():
        match = _GO_MODULE_LINE.search(go_mod.read_text(encoding="utf-8"))
        if match:
            return match.group(1).strip('"')

    pyproject = project_root / "pyproject.toml"
    if pyproject.exists():
        try:
            data = tomllib.loads(pyproject.read_text(encoding="utf-8"))
        except tomllib.TOMLDecodeError as e:
            logger.debug("Ignoring unreadable %s: %s", pyproject, e)
        else:
            name = data.get("project", {}).get("name")
            if isinstance(name, str) and name:
                return name

    return project_root.resolve().name


def build_render_context(
    specifier: str,
    resolved: ResolvedPackage,
    *,
    module_identifier: str,
    destination_path: str,
    timestamp: datetime,
) -> RenderContext:
    """Build the values every template of one install is rendered against.

    The identifier fields depend only on the specifier, so resolving the same
    specifier again yields identical identifiers.
    """
    spec = parse_specifier(specifier)
    descriptor = resolved.descriptor
    return RenderContext(
        module_identifier=module_identifier,
        package_specifier=spec.name,
        namespace=spec.namespace,
        short_name=spec.short_name,
        sanitized_identifier=sanitize_identifier(spec.short_name),
        destination_path=destination_path,
        version=resolved.version,
        author=descriptor.author or resolved.manifest.author,
        timestamp=timestamp.isoformat(timespec="seconds"),
        title=descriptor.title,
        description=descriptor.description,
    )


def create_environment() -> jinja2.Environment:
    """Jinja2 environment used for package templates.

    Undefined variables are errors rather than silently empty, and a
    trailing newline in the template is kept in the output.
    """
    env = jinja2.Environment(
        undefined=jinja2.StrictUndefined,
        keep_trailing_newline=True,
        autoescape=False,
    )
    env.filters["camel"] = to_camel_case
    env.filters["pascal"] = to_pascal_case
    env.filters["snake"] = to_snake_case
    env.filters["kebab"] = to_kebab_case
    env.filters["titlecase"] = to_title
    env.filters["ident"] = sanitize_identifier
    return env


class TemplateRenderer:
    """Renders template files of one install against a fixed RenderContext."""

    def __init__(self, context: RenderContext, env: jinja2.Environment | None = None) -> None:
        self._env = env if env is not None else create_environment()
        self._variables = context.as_template_vars()

    def render(self, template_path: str, content: bytes) -> bytes:
        """Render one template file.

        Raises:
            RenderError: If the file is not UTF-8, fails to parse, or references
                an undefined value
        """
        try:
            source = content.decode("utf-8")
        except UnicodeDecodeError as e:
            raise RenderError(template_path, f"not valid UTF-8: {e}") from e

        try:
            template = self._env.from_string(source)
            rendered = template.render(self._variables)
        except jinja2.TemplateSyntaxError as e:
            raise RenderError(template_path, f"line {e.lineno}: {e.message}") from e
        except jinja2.TemplateError as e:
            raise RenderError(template_path, str(e)) from e

        return rendered.encode("utf-8")
