"""Query intent rules, evaluated in order — first rule that renders wins.

Each rule pairs a keyword family (substring match on the lowercased query)
with a template builder. A builder may decline by returning None, in which
case evaluation continues with the next rule.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from datetime import datetime, timezone

from newsrag.dates import parse_datetime
from newsrag.models import ScoredPassage
from newsrag.rag import templates

# (passages, most relevant passage) -> response text, or None to fall through
Builder = Callable[[Sequence[ScoredPassage], ScoredPassage], str | None]

_UNDATED = datetime.min.replace(tzinfo=timezone.utc)


@dataclass(frozen=True)
class IntentRule:
    name: str
    keywords: tuple[str, ...]
    build: Builder

    def matches(self, query: str) -> bool:
        lowered = query.lower()
        return any(k in lowered for k in self.keywords)


def _compare(passages: Sequence[ScoredPassage], _: ScoredPassage) -> str | None:
    if len(passages) < 2:
        return None
    return templates.comparison(passages[0], passages[1])


def _latest(passages: Sequence[ScoredPassage], _: ScoredPassage) -> str | None:
    if not passages:
        return None
    return templates.most_recent(newest_first(passages)[0])


def newest_first(passages: Sequence[ScoredPassage]) -> list[ScoredPassage]:
    """Sort by publish date, newest first; undated passages go last."""
    return sorted(
        passages,
        key=lambda p: parse_datetime(p.published_at) or _UNDATED,
        reverse=True,
    )


INTENT_RULES: tuple[IntentRule, ...] = (
    IntentRule("date", ("when", "date", "time"), lambda _, p: templates.date_led(p)),
    IntentRule("attribution", ("who", "person", "people"), lambda _, p: templates.attribution_led(p)),
    IntentRule("explanation", ("why", "reason", "cause"), lambda _, p: templates.explanation_led(p)),
    IntentRule("process", ("how", "process", "method"), lambda _, p: templates.process_led(p)),
    IntentRule("location", ("where", "location", "place"), lambda _, p: templates.location_led(p)),
    IntentRule("comparison", ("compare", "difference", "versus", "vs"), _compare),
    IntentRule("recency", ("latest", "recent", "new", "update"), _latest),
)
