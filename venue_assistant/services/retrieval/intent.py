import re
from typing import NamedTuple


class IntentRule(NamedTuple):
    pattern: re.Pattern
    intent: str
    boost_categories: tuple[str, ...]


class IntentMatch(NamedTuple):
    intent: str
    boost_categories: tuple[str, ...]


# evaluated top to bottom, first match wins; keep it a sequence
INTENT_RULES: tuple[IntentRule, ...] = (
    IntentRule(re.compile(r"\bhow (?:do|can|to|should)\b", re.I), "how-to", ("user", "venue", "events", "vendor", "faq")),
    IntentRule(re.compile(r"\bwhat (?:is|are|does|do)\b", re.I), "explanation", ("about", "faq", "points")),
    IntentRule(re.compile(r"\bwhere (?:is|can|do)\b", re.I), "navigation", ("navigation",)),
    IntentRule(re.compile(r"help|support|issue|problem|error|contact", re.I), "support", ("support", "faq")),
    IntentRule(re.compile(r"lost|missing|gone|disappeared", re.I), "issue", ("support",)),
    IntentRule(re.compile(r"vendor|sell|list|host|business", re.I), "vendor", ("vendor",)),
    IntentRule(re.compile(r"admin|approve|manage|setting", re.I), "admin", ("admin",)),
    IntentRule(re.compile(r"book|reserve|attend", re.I), "booking", ("venue", "events", "user")),
    IntentRule(re.compile(r"points?|credits?|balance|buy|purchase", re.I), "points", ("points", "user")),
)

GENERAL = IntentMatch("general", ())


def classify_intent(query: str) -> IntentMatch:
    for rule in INTENT_RULES:
        if rule.pattern.search(query):
            return IntentMatch(rule.intent, rule.boost_categories)
    return GENERAL
