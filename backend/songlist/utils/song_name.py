"""Song name cleaning used for non-detailed song lists."""

import re

# (Live), （伴奏）, [Remix], 【官方版】
_BRACKETED = re.compile(r"\([^()]*\)|（[^（）]*）|\[[^\[\]]*\]|【[^【】]*】")
_WHITESPACE = re.compile(r"\s+")


def standardize(name: str) -> str:
    """
    Strip bracketed qualifiers and extra whitespace from a song name.

    ``"晴天 (Live)"`` becomes ``"晴天"``. A name made only of brackets is
    returned stripped but otherwise untouched so it never renders empty.
    """
    stripped = name.strip()
    cleaned = _BRACKETED.sub(" ", stripped)
    cleaned = _WHITESPACE.sub(" ", cleaned).strip()
    return cleaned or stripped
