#!/usr/bin/env python3
"""Issue text normalization and similarity.

Both automation drivers describe the same UI problem in slightly different
words ("Missing Sidebar element" vs "missing sidebar"). Matching is purely
syntactic: lower-case, strip everything that is not an ASCII letter or digit,
then treat two issues as the same when either canonical form contains the
other.

Known limitation: a short or empty canonical form is a substring of almost
everything, so generic issue texts can match unrelated ones. Consumers rely on
this exact containment rule; do not tighten it here.
"""

from __future__ import annotations

import re

NON_ALNUM_RE = re.compile(r"[^a-z0-9]")


def normalize_issue(text: str) -> str:
    return NON_ALNUM_RE.sub("", text.lower())


def issues_similar(issue_a: str, issue_b: str) -> bool:
    norm_a = normalize_issue(issue_a)
    norm_b = normalize_issue(issue_b)
    return norm_b in norm_a or norm_a in norm_b
