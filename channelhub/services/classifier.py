"""
Rule-based channel classifier.

Two ordered rule tables decide a channel's category and tags:
the group-title table is evaluated first-match-wins, the channel-name table
contributes the union of every matching rule and may override the category
(last matching override wins).
"""
import re
from dataclasses import dataclass, field
from typing import Iterable, Optional

from channelhub.models.channel import Classification, DEFAULT_CATEGORY


@dataclass(frozen=True)
class Rule:
    """A pattern with the tags it contributes and an optional category."""
    pattern: re.Pattern
    tags: tuple[str, ...]
    category: Optional[str] = None

    @classmethod
    def build(cls, pattern: str, *tags: str, category: Optional[str] = None) -> "Rule":
        return cls(re.compile(pattern, re.IGNORECASE), tags, category)

    def matches(self, text: str) -> bool:
        return self.pattern.search(text) is not None


@dataclass
class RuleOutcome:
    category: Optional[str] = None
    tags: list[str] = field(default_factory=list)


class FirstMatchRules:
    """The first matching rule supplies the category and tags."""

    def __init__(self, rules: Iterable[Rule], default: Rule):
        self.rules = list(rules)
        self.default = default

    def evaluate(self, text: str) -> RuleOutcome:
        for rule in self.rules:
            if rule.matches(text):
                return RuleOutcome(rule.category, list(rule.tags))
        return RuleOutcome(self.default.category, list(self.default.tags))


class AllMatchUnionRules:
    """Every matching rule adds its tags; the last category seen wins."""

    def __init__(self, rules: Iterable[Rule]):
        self.rules = list(rules)

    def evaluate(self, text: str) -> RuleOutcome:
        outcome = RuleOutcome()
        for rule in self.rules:
            if not rule.matches(text):
                continue
            outcome.tags.extend(rule.tags)
            if rule.category:
                outcome.category = rule.category
        return outcome


GROUP_TITLE_RULES = [
    Rule.build(r"fútbol|futbol|soccer|liga|champions|football", "Football", "Soccer", category="Sports"),
    Rule.build(r"ufc|fight|lucha|boxeo|boxing", "UFC", "MMA", "Fighting", category="Sports"),
    Rule.build(r"baloncesto|basket|nba", "Basketball", "NBA", category="Sports"),
    Rule.build(r"deportes|sports", "Sports", category="Sports"),
    Rule.build(r"películas|peliculas|movie|cine", "Movies", category="Movies"),
    Rule.build(r"series|shows", "TV Shows", "Series", category="Entertainment"),
    Rule.build(r"documentales|documentary|documental", "Documentary", category="Documentary"),
    Rule.build(r"noticias|news", "News", category="News"),
    Rule.build(r"infantil|kids|niños", "Kids", category="Kids"),
]

DEFAULT_GROUP_RULE = Rule.build(r"", DEFAULT_CATEGORY, category=DEFAULT_CATEGORY)

CHANNEL_NAME_RULES = [
    Rule.build(r"dazn", "DAZN", "Sports"),
    Rule.build(r"espn", "ESPN", "Sports"),
    Rule.build(r"eurosport", "Eurosport", "Sports"),
    Rule.build(r"movistar\s*\+?", "Movistar+"),
    Rule.build(r"liga\s*campeones|champions", "Champions League", "Football", category="Sports"),
    Rule.build(r"formula\s*1|f1", "Formula 1", "Racing", category="Sports"),
    Rule.build(r"tenis|tennis", "Tennis", category="Sports"),
    Rule.build(r"golf", "Golf", category="Sports"),
    Rule.build(r"ufc|mma", "UFC", "MMA", category="Sports"),
]


class RuleClassifier:
    """Classify a channel from its display name and group title."""

    def __init__(
        self,
        group_rules: Optional[FirstMatchRules] = None,
        name_rules: Optional[AllMatchUnionRules] = None,
    ):
        self.group_rules = group_rules or FirstMatchRules(GROUP_TITLE_RULES, DEFAULT_GROUP_RULE)
        self.name_rules = name_rules or AllMatchUnionRules(CHANNEL_NAME_RULES)

    def classify(self, channel_name: str, group_title: str) -> Classification:
        group_outcome = self.group_rules.evaluate(group_title.lower())
        name_outcome = self.name_rules.evaluate(channel_name.lower())

        category = name_outcome.category or group_outcome.category or DEFAULT_CATEGORY
        # dict.fromkeys keeps first-seen order while dropping duplicates
        tags = list(dict.fromkeys(group_outcome.tags + name_outcome.tags))
        return Classification(category, tags)
