"""
Matching requested rights against granted rights specifications.

A rights specification names the rights granted to a token. Operators write
it the way the device form suggests, as a slash-delimited path such as
``/doorbell/tokens/``; whitespace or comma separated names are accepted too,
and a signed token may carry a JSON list. Every form is parsed into a set of
right names, and a requested right is granted only by exact membership in
that set. In particular ``tok`` is *not* granted by ``/tokens/``.

The wildcard ``*`` grants every right, whether it is the whole specification
or a single element of it.
"""

import re
from typing import FrozenSet, Iterable

from .domain import RightsSpec

WILDCARD = '*'

_SEPARATORS = re.compile(r'[/,\s]+')

# Mappings and other iterables are not rights, even if their keys look
# like right names.
_COLLECTIONS = (list, tuple, set, frozenset)


def parse(spec: RightsSpec) -> FrozenSet[str]:
    """Parse a rights specification into a set of right names."""
    if isinstance(spec, str):
        return frozenset(name for name in _SEPARATORS.split(spec) if name)
    if not isinstance(spec, _COLLECTIONS):
        return frozenset()
    rights: set = set()
    for item in spec:
        if isinstance(item, str):
            rights |= parse(item)
    return frozenset(rights)


def render(rights: Iterable[str]) -> str:
    """Render a set of rights in the canonical ``/right1/right2/`` form."""
    names = sorted(set(rights))
    if WILDCARD in names:
        return WILDCARD
    if not names:
        return ''
    return '/' + '/'.join(names) + '/'


def satisfies(spec: RightsSpec, requested: str) -> bool:
    """
    Check whether ``spec`` grants the ``requested`` right.

    Defined for every input: an empty or missing specification grants
    nothing, and anything other than a string or a list of strings is
    treated as empty.
    """
    granted = parse(spec)
    if WILDCARD in granted:
        return True
    return bool(requested) and requested in granted
