import re

"""
Removes notation that carries no duration from a measure before its beats are
counted: quoted chord symbols and annotations, !decorations! and +decorations+,
{grace notes} and [K:...] style inline fields. Letters inside these would
otherwise be read as notes.

Example:
    Input:  '"Am"A{g}B !trill! c [K:D] d'
    Output: 'AB  c  d'
"""


_TIMELESS_PATTERNS = [
    r'"[^"]*"',                                # "Am", "^above"
    r"![^!]*!",                                # !trill!
    r"\+[^+\s]*\+",                            # +fermata+
    r"\{[^}]*\}",                              # {grace notes}
    r"\[[ABCDFGHIKLMmNOPQRrSsTUVWwXZ]:[^\]]*\]",  # [K:D], [L:1/8]
]


def remove_timeless(measure: str) -> str:
    s = measure
    for pat in _TIMELESS_PATTERNS:
        s = re.sub(pat, "", s)
    return s
