"""
Term normalization for ontology search queries.

Two independent normalizations:

- ``normalize_search_query`` turns a free-text term into a search string
  (spaces become ``+``, ``%`` and ``.`` are removed).
- ``strip_identifier_prefix`` turns a prefixed identifier such as
  ``[NCBITAXON:9606]`` into its bare fragment ``9606``.
"""

import re

_SPACE = re.compile(" ")
_PERCENT = re.compile("%")
_DOT = re.compile(r"\.")
_BRACKETS = re.compile(r"[\[\]]")


def normalize_search_query(term: str) -> str:
    """
    Build a search string from a raw term.

    Examples:
        >>> normalize_search_query("Homo sapiens")
        'Homo+sapiens'
        >>> normalize_search_query("5.5% agar")
        '55+agar'
    """
    query = _SPACE.sub("+", term)
    query = _PERCENT.sub("", query)
    return _DOT.sub("", query)


def strip_identifier_prefix(value: str) -> str:
    """
    Reduce a (possibly bracketed) prefixed identifier to its bare fragment.

    Everything up to and including the first ``:`` is dropped.

    Examples:
        >>> strip_identifier_prefix("[NCBITAXON:9606]")
        '9606'
        >>> strip_identifier_prefix("liver")
        'liver'
    """
    result = _BRACKETS.sub("", value)
    if ":" in result:
        result = result.split(":", 1)[1]
    return result


def is_blank_query(query: str) -> bool:
    """True when a normalized query has no content beyond ``+`` separators and whitespace."""
    return not query.replace("+", "").strip()
