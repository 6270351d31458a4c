import re

_SEPARATOR_RE = re.compile(r"-+([a-zA-Z0-9])")
_WHITESPACE_RE = re.compile(r"\s+")


def camel_case(property_name: str) -> str:
    """
    Converts a CSS property name to the camelCase key used by keyframe
    objects (``background-color`` -> ``backgroundColor``). Custom properties
    (``--accent``) are returned unchanged.
    """
    name = property_name.strip()
    if name.startswith("--"):
        return name
    name = name.lower().lstrip("-")
    return _SEPARATOR_RE.sub(lambda m: m.group(1).upper(), name)


def collapse_whitespace(text: str) -> str:
    """Collapse runs of whitespace to single spaces and trim the ends."""
    return _WHITESPACE_RE.sub(" ", text).strip()


def strip_whitespace(text: str) -> str:
    """Remove every whitespace character, for whitespace-insensitive matching."""
    return _WHITESPACE_RE.sub("", text)
