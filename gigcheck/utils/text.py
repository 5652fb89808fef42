import re

from gigcheck import config


def normalize_whitespace(value):
    """Collapse runs of whitespace into a single space and trim the ends."""
    if not isinstance(value, str):
        return ""
    return re.sub(r"\s+", " ", value).strip()


def find_text_snippets(text, terms, context_length=None):
    """
    Search text for each of the given terms and return snippets of the
    surrounding text for every match.

    Matching is literal and case-sensitive. Each match yields one snippet made
    of the term plus up to context_length characters on each side, with "..."
    added where the snippet was cut short of the text bounds.
    Returns an empty list when nothing matches.
    """
    if context_length is None:
        context_length = config.SNIPPET_CONTEXT_LENGTH
    if not text:
        return []

    snippets = []
    for term in terms:
        if not term:
            continue

        start = text.find(term)
        while start != -1:
            snippet_start = max(0, start - context_length)
            snippet_end = min(len(text), start + len(term) + context_length)

            prefix = "..." if snippet_start > 0 else ""
            suffix = "..." if snippet_end < len(text) else ""

            snippet = f"{prefix}{text[snippet_start:snippet_end]}{suffix}".replace("\n", " ")
            snippets.append(normalize_whitespace(snippet))

            start = text.find(term, start + len(term))

    return snippets


def matches_filter(name, filters):
    """
    Check an event name against a list of filters.
    Strings match as case-insensitive substrings, compiled patterns via search().
    """
    name = name or ""
    for f in filters:
        if isinstance(f, str):
            if f.lower() in name.lower():
                return True
        elif f.search(name):
            return True
    return False
