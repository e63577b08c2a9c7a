"""
Utility functions and compiled regex patterns for Graph Memory MCP Server.

Contains Markdown entity parsing, the exception taxonomy, and pre-compiled patterns.
"""

import re
from dataclasses import dataclass, field

import yaml

# Pre-compiled regex patterns for performance
FRONTMATTER_PATTERN = re.compile(r'^---\s*\n(.*?)\n---\s*\n?', re.DOTALL)
RELATION_LINK_PATTERN = re.compile(r'\[\[([^:\]]+)(?:::([^\]]+))?\]\]')
OBSERVATIONS_HEADERS = ("## Observations", "### Observations")
RELATIONS_HEADERS = ("## Relations", "### Relations")
BULLET_PREFIXES = ("- ", "* ")

DEFAULT_RELATION_TYPE = "related_to"
INLINE_RELATION_TYPE = "mentioned_in"


# ============== Exceptions ==============

class IndexConstructionError(Exception):
    """Raised when an index provider cannot read its configured source."""
    pass


class OperationError(ValueError):
    """Raised when a dispatched operation receives invalid parameters."""
    pass


# ============== Parsed records ==============

@dataclass
class ParsedLink:
    """A relation link found in an entity file, before the source is known."""

    to: str
    relation_type: str
    qualification: str = ""


@dataclass
class ParsedEntity:
    """Front-matter, observations, and outgoing links of one entity file."""

    frontmatter: dict
    observations: list[str] = field(default_factory=list)
    links: list[ParsedLink] = field(default_factory=list)


# ============== Helper Functions ==============

def parse_frontmatter(content: str) -> tuple[dict, str]:
    """Extract YAML frontmatter and body from note content."""
    frontmatter = {}
    body = content

    match = FRONTMATTER_PATTERN.match(content)
    if match:
        try:
            loaded = yaml.safe_load(match.group(1)) or {}
            frontmatter = loaded if isinstance(loaded, dict) else {}
        except yaml.YAMLError:
            pass
        body = content[match.end():]

    return frontmatter, body


def split_relation_label(label: str) -> tuple[str, str]:
    """Split ``type.qualification`` on the first dot.

    A label without a dot has an empty qualification.
    """
    relation_type, _, qualification = label.strip().partition(".")
    return relation_type, qualification


def _link_from_match(match: re.Match, default_type: str) -> ParsedLink:
    label, target = match.group(1), match.group(2)
    if target is None:
        return ParsedLink(to=label.strip(), relation_type=default_type)
    relation_type, qualification = split_relation_label(label)
    return ParsedLink(to=target.strip(), relation_type=relation_type, qualification=qualification)


def parse_entity_markdown(content: str) -> ParsedEntity:
    """Parse an entity file into front-matter, observations, and links.

    Observations are the bullets of the Observations section. Relations are
    the ``[[type::target]]`` / ``[[target]]`` links of the Relations section
    (bare links default to ``related_to``); links anywhere else become
    ``mentioned_in`` relations unless they carry an explicit type.
    """
    frontmatter, body = parse_frontmatter(content)
    parsed = ParsedEntity(frontmatter=frontmatter)

    in_observations = False
    in_relations = False

    for line in body.splitlines():
        trimmed = line.strip()

        if trimmed in OBSERVATIONS_HEADERS:
            in_observations, in_relations = True, False
            continue
        if trimmed in RELATIONS_HEADERS:
            in_observations, in_relations = False, True
            continue
        if trimmed.startswith("##"):
            in_observations = in_relations = False

        is_bullet = trimmed.startswith(BULLET_PREFIXES)

        if in_observations and is_bullet:
            parsed.observations.append(trimmed[2:])

        if in_relations:
            if is_bullet:
                match = RELATION_LINK_PATTERN.search(trimmed)
                if match:
                    parsed.links.append(_link_from_match(match, DEFAULT_RELATION_TYPE))
            continue

        for match in RELATION_LINK_PATTERN.finditer(trimmed):
            parsed.links.append(_link_from_match(match, INLINE_RELATION_TYPE))

    return parsed
