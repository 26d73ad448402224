"""Build canonical releases from match results."""

from collections.abc import Mapping

from .models import MatchResult, Release, ValidDefinition
from .template import render

# Variable names recognised for each canonical field, in priority order
TITLE_VARS = ("torrentName", "title", "name", "releaseName")
CATEGORY_VARS = ("category",)
SIZE_VARS = ("torrentSize", "size")
DOWNLOAD_URL_VARS = ("torrentUrl",)

DOWNLOAD_URL_TEMPLATE = "torrenturl"


def _first_present(variables: Mapping[str, str], names: tuple[str, ...]) -> str:
    for name in names:
        if name in variables:
            return variables[name]
    return ""


def normalize(
    result: MatchResult,
    valid: ValidDefinition,
    settings: Mapping[str, str] | None = None,
) -> Release:
    """Assemble a Release from captured variables and rendered templates.

    Pure function: the same inputs always yield an identical Release.

    Args:
        result: Variables captured from an announce line.
        valid: Definition that produced the match.
        settings: Resolved setting values for the definition.

    Returns:
        Release: The canonical release.
    """
    settings = settings or {}
    variables = result.variables
    declared = valid.declared_names

    rendered = {
        field: render(template, variables, settings, declared)
        for field, template in valid.definition.match_templates.items()
    }

    download_url = rendered.get(DOWNLOAD_URL_TEMPLATE) or _first_present(
        variables, DOWNLOAD_URL_VARS
    )

    return Release(
        title=_first_present(variables, TITLE_VARS),
        category=_first_present(variables, CATEGORY_VARS),
        size=_first_present(variables, SIZE_VARS),
        download_url=download_url,
        indexer=valid.identifier,
        protocol=valid.definition.protocol,
        raw_variables=dict(variables),
        rendered=rendered,
    )
