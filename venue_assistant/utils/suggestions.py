import re

MAX_SUGGESTIONS = 3

_heading_re = re.compile(
    r"would you (?:also )?like to know|\brelated(?: topics| questions)?\s*:|you might also be interested|also interested",
    re.IGNORECASE,
)
_item_re = re.compile(r"^\s*(?:[-•*]|\d+[.)])\s+(.*\S)\s*$")
_markup_re = re.compile(r"\*\*|`")


def extract_suggestions(text: str) -> list[str]:
    """
    Best-effort follow-up suggestions from a provider answer.
    Looks for a heading like:
      - "Would you like to know about:"
      - "Related:" / "You might also be interested in:"
    and collects the bullet or numbered lines right under it (blank lines allowed
    before the first item). No heading -> [].
    """
    suggestions: list[str] = []
    lines = text.splitlines()

    for i, line in enumerate(lines):
        if not _heading_re.search(line) or _item_re.match(line):
            continue

        for follow in lines[i + 1:]:
            if not follow.strip():
                if suggestions:
                    break
                continue
            m = _item_re.match(follow)
            if not m:
                break
            item = _markup_re.sub("", m.group(1)).strip()
            if item:
                suggestions.append(item)
            if len(suggestions) >= MAX_SUGGESTIONS:
                return suggestions

        if suggestions:
            break

    return suggestions[:MAX_SUGGESTIONS]
