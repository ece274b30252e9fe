"""Naming utilities for package identifiers and template filters.

Pure functions (no I/O) turning package names like ``redis-cache`` into the
case variants templates need. They are registered as Jinja2 filters by
vpkg.operations.render.
"""

import keyword
import re

_WORD_BOUNDARY = re.compile(r"[^A-Za-z0-9]+")
_CAMEL_HUMP = re.compile(r"(?<=[a-z0-9])(?=[A-Z])")


def split_words(name: str) -> list[str]:
    """Split a name into lowercase words.

    Separators are any non-alphanumeric run plus lower-to-upper case humps.

    Examples:
        >>> split_words("redis-cache")
        ['redis', 'cache']
        >>> split_words("HTTPServer_v2")
        ['httpserver', 'v2']
        >>> split_words("userProfile")
        ['user', 'profile']
    """
    dehumped = _CAMEL_HUMP.sub(" ", name)
    return [word.lower() for word in _WORD_BOUNDARY.split(dehumped) if word]


def to_pascal_case(name: str) -> str:
    """redis-cache -> RedisCache"""
    return "".join(word.capitalize() for word in split_words(name))


def to_camel_case(name: str) -> str:
    """redis-cache -> redisCache"""
    pascal = to_pascal_case(name)
    if not pascal:
        return ""
    return pascal[0].lower() + pascal[1:]


def to_snake_case(name: str) -> str:
    """redis-cache -> redis_cache"""
    return "_".join(split_words(name))


def to_kebab_case(name: str) -> str:
    """RedisCache -> redis-cache"""
    return "-".join(split_words(name))


def to_title(name: str) -> str:
    """redis-cache -> Redis Cache"""
    return " ".join(word.capitalize() for word in split_words(name))


def sanitize_identifier(name: str) -> str:
    """Convert a name into a valid lowercase package identifier.

    - Drops hyphens (``redis-cache`` becomes ``rediscache``)
    - Replaces any remaining character outside ``[a-z0-9_]`` with ``_``
    - Prefixes ``_`` when the result starts with a digit
    - Appends ``_`` when the result is a reserved keyword
    Returns ``"pkg"`` if nothing usable remains.

    Examples:
        >>> sanitize_identifier("redis-cache")
        'rediscache'
        >>> sanitize_identifier("2fa")
        '_2fa'
        >>> sanitize_identifier("import")
        'import_'
    """
    lowered = name.strip().lower().replace("-", "")
    replaced = re.sub(r"[^a-z0-9_]", "_", lowered)
    if not replaced.strip("_"):
        return "pkg"
    if replaced[0].isdigit():
        replaced = f"_{replaced}"
    if keyword.iskeyword(replaced):
        replaced = f"{replaced}_"
    return replaced
