"""Template rendering for definition match fields.

Templates use ``{{ .name }}`` placeholders; ``name`` is either a captured
variable or a declared setting. Everything outside placeholders is copied
verbatim.
"""

import re
from collections.abc import Collection, Mapping

# Any {{ ... }} token, well-formed or not
_TOKEN_RE = re.compile(r"\{\{(.*?)\}\}")
# Contents of a well-formed token: ".name" with optional surrounding spaces
_REFERENCE_RE = re.compile(r"\s*\.([A-Za-z_][\w.]*)\s*")


class RenderError(RuntimeError):
    """Template referenced a name that was never declared.

    Unreachable for templates of a validated definition; raising it means the
    definition and the data handed to the renderer have drifted apart.
    """


def placeholders(template: str) -> list[str]:
    """List the names referenced by a template, in order of appearance.

    Args:
        template: Template string.

    Returns:
        Referenced names, duplicates preserved.
    """
    names = []
    for token in _TOKEN_RE.finditer(template):
        reference = _REFERENCE_RE.fullmatch(token.group(1))
        if reference:
            names.append(reference.group(1))
    return names


def malformed_tokens(template: str) -> list[str]:
    """List ``{{ ... }}`` tokens that are not a single ``.name`` reference."""
    return [
        token.group(0)
        for token in _TOKEN_RE.finditer(template)
        if not _REFERENCE_RE.fullmatch(token.group(1))
    ]


def render(
    template: str,
    variables: Mapping[str, str],
    settings: Mapping[str, str],
    declared: Collection[str] | None = None,
) -> str:
    """Expand every placeholder of a template, left to right.

    Variables shadow settings of the same name. A declared name without a
    value expands to the empty string.

    Args:
        template: Template string.
        variables: Captured variables.
        settings: Resolved setting values, secrets included.
        declared: Names the definition declares. When None, every name is
            considered declared and missing values render empty.

    Returns:
        The rendered string.

    Raises:
        RenderError: If a placeholder names something neither supplied nor
            declared.
    """

    def _substitute(token: re.Match[str]) -> str:
        reference = _REFERENCE_RE.fullmatch(token.group(1))
        if reference is None:
            raise RenderError(f"Malformed placeholder {token.group(0)!r}")
        name = reference.group(1)
        if name in variables:
            return variables[name]
        if name in settings:
            return settings[name]
        if declared is None or name in declared:
            return ""
        raise RenderError(f"Placeholder references undeclared name {name!r}")

    return _TOKEN_RE.sub(_substitute, template)
