"""
Skill search for skillregistry.

Parses search queries into include/exclude terms and ranks registered
skills against them.
"""

import shlex
from collections.abc import Iterable

from skillregistry.skills.models import ParsedSkillQuery, Skill, SkillRank, SkillSearchResult

# A single name hit must outrank any single description hit.
NAME_MATCH_WEIGHT = 3
DESC_MATCH_WEIGHT = 1
EXACT_NAME_BONUS = 10


def _split_terms(text: str) -> list[str]:
    try:
        return shlex.split(text)
    except ValueError:
        # Unbalanced quotes
        return text.split()


def parse_query(query: str | list[str]) -> ParsedSkillQuery:
    """Parse a raw query into include and exclude terms.

    Terms are whitespace-delimited (quotes group phrases). A leading ``-``
    marks an exclusion. Terms are lower-cased; empty terms are dropped.

    Args:
        query: Query string or list of query strings.

    Returns:
        The parsed query.
    """
    original = [query] if isinstance(query, str) else [str(q) for q in query]

    include: list[str] = []
    exclude: list[str] = []
    for chunk in original:
        for term in _split_terms(chunk):
            term = term.strip().lower()
            if term.startswith("-"):
                term = term[1:].strip()
                if term:
                    exclude.append(term)
            elif term:
                include.append(term)

    return ParsedSkillQuery(
        include=include,
        exclude=exclude,
        original_query=original,
        has_exclusions=bool(exclude),
        term_count=len(include) + len(exclude),
    )


def rank_skill(skill: Skill, query: ParsedSkillQuery) -> SkillRank:
    """Score one skill against the include terms of a query."""
    name = skill.name.lower()
    tool_name = skill.tool_name.lower()
    description = skill.description.lower()

    name_matches = sum(1 for term in query.include if term in name or term in tool_name)
    desc_matches = sum(1 for term in query.include if term in description)

    score = name_matches * NAME_MATCH_WEIGHT + desc_matches * DESC_MATCH_WEIGHT
    if len(query.include) == 1 and query.include[0] in (name, tool_name):
        score += EXACT_NAME_BONUS

    return SkillRank(
        skill=skill,
        name_matches=name_matches,
        desc_matches=desc_matches,
        total_score=score,
    )


def _matches_all(skill: Skill, terms: list[str]) -> bool:
    haystacks = (skill.name.lower(), skill.tool_name.lower(), skill.description.lower())
    return all(any(term in text for text in haystacks) for term in terms)


def _is_excluded(skill: Skill, terms: list[str]) -> bool:
    haystacks = (skill.name.lower(), skill.tool_name.lower(), skill.description.lower())
    return any(term in text for term in terms for text in haystacks)


def build_feedback(query: ParsedSkillQuery, matches: int, total_matches: int, total: int) -> str:
    """Build a one-line summary of a search."""
    if not query.include and not query.exclude:
        return f"Listing all {total} skills"

    parts = []
    if query.include:
        parts.append("Searching for: " + ", ".join(f'"{t}"' for t in query.include))
    else:
        parts.append("Listing all skills")
    if query.has_exclusions:
        parts.append("Excluding: " + ", ".join(f'"{t}"' for t in query.exclude))
        excluded = total_matches - matches
        if excluded:
            parts.append(f"{excluded} removed by exclusions")

    if matches:
        parts.append(f"Found {matches} of {total} skills")
    else:
        parts.append(f"No matches among {total} skills")

    return " | ".join(parts)


def search_skills(skills: Iterable[Skill], query: str | list[str]) -> SkillSearchResult:
    """Search skills by name, tool name, and description.

    Every include term must match somewhere (AND semantics); any exclude
    term matching anywhere drops the skill. Name hits outrank description
    hits, ties keep registration order.

    Args:
        skills: Skills in registration order.
        query: Raw query string or list of strings.

    Returns:
        Ranked search result.
    """
    skills = list(skills)
    parsed = parse_query(query)

    candidates = [s for s in skills if _matches_all(s, parsed.include)]
    total_matches = len(candidates)

    kept = [s for s in candidates if not _is_excluded(s, parsed.exclude)]
    ranks = [rank_skill(s, parsed) for s in kept]
    ranks.sort(key=lambda r: r.total_score, reverse=True)

    return SkillSearchResult(
        matches=[r.skill for r in ranks],
        total_matches=total_matches,
        total_skills=len(skills),
        feedback=build_feedback(parsed, len(ranks), total_matches, len(skills)),
        query=parsed,
    )
