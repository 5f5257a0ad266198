import re

_word_re = re.compile(r"\w+")

# key -> synonyms; a hit on any term pulls in the whole group
SYNONYMS: dict[str, list[str]] = {
    "book": ["reserve", "booking", "reservation", "schedule"],
    "buy": ["purchase", "get", "acquire", "order"],
    "points": ["credits", "balance", "currency", "money"],
    "venue": ["location", "place", "hall", "space", "room"],
    "event": ["show", "concert", "party", "gathering", "function"],
    "ticket": ["pass", "entry", "admission", "seat"],
    "help": ["support", "assist", "contact", "issue", "problem"],
    "vendor": ["seller", "owner", "host", "organizer", "business"],
    "admin": ["administrator", "management", "support team"],
    "login": ["sign in", "log in", "access", "enter"],
    "signup": ["register", "sign up", "create account", "join"],
    "withdraw": ["payout", "cash out", "get paid", "withdrawal"],
    "lost": ["missing", "gone", "disappeared", "not showing"],
    "cancel": ["cancellation", "refund", "return"],
}

# "how", "do" etc. are too short to be found inside a longer term
MIN_REVERSE_MATCH_LEN = 4


def query_words(query: str) -> list[str]:
    # single letters ("i", "a") substring-match almost every keyword
    return [w for w in _word_re.findall(query.lower()) if len(w) > 1]


def _matches(word: str, term: str) -> bool:
    if term in word:
        return True
    return len(word) >= MIN_REVERSE_MATCH_LEN and word in term


def expand_query(query: str) -> set[str]:
    words = query_words(query)
    expanded = set(words)

    for word in words:
        for key, synonyms in SYNONYMS.items():
            if _matches(word, key) or any(_matches(word, s) for s in synonyms):
                expanded.add(key)
                expanded.update(synonyms)

    return expanded
