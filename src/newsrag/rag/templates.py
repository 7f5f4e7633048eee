"""Response templates for simplified (template-driven) synthesis.

Every rendered response ends with DISCLOSURE, separated by a blank line.
"""

from __future__ import annotations

import random
import re

from newsrag.dates import format_date
from newsrag.models import ScoredPassage

DISCLOSURE = "Note: I'm currently operating with simplified responses."

NO_INFO_TEMPLATES: tuple[str, ...] = (
    'I don\'t have specific information about "{query}" in my recent news database.',
    'I couldn\'t find any recent news articles about "{query}" in my database.',
    'I don\'t have enough information about "{query}" to provide a meaningful answer.',
    'I don\'t have any recent news coverage about "{query}" in my knowledge base.',
)

DEFAULT_INTROS: tuple[str, ...] = (
    'Based on recent news from "{title}":',
    'According to the article "{title}":',
    'The information from "{title}" indicates:',
    'As reported in "{title}":',
)

_FOLLOW_UP_STRIP_RE = re.compile(r"[?.,!]")


def with_disclosure(body: str) -> str:
    return f"{body}\n\n{DISCLOSURE}"


def no_passages(query: str, rng: random.Random) -> str:
    return with_disclosure(rng.choice(NO_INFO_TEMPLATES).format(query=query))


def follow_up(query: str, passage: ScoredPassage) -> str:
    topic = _FOLLOW_UP_STRIP_RE.sub("", query)
    return with_disclosure(
        f'Regarding your follow-up about {topic}, based on "{passage.article_title}":\n\n'
        f"{passage.text}\n\n"
        f"This information was published on {format_date(passage.published_at)}."
    )


def date_led(passage: ScoredPassage) -> str:
    published = format_date(passage.published_at)
    return with_disclosure(
        f'According to "{passage.article_title}" (published on {published}), {passage.text}\n\n'
        f"This information is from {published}."
    )


def attribution_led(passage: ScoredPassage) -> str:
    return with_disclosure(
        f'Based on the article "{passage.article_title}", {passage.text}\n\n'
        f"This information was published on {format_date(passage.published_at)}."
    )


def explanation_led(passage: ScoredPassage) -> str:
    return with_disclosure(
        f'The article "{passage.article_title}" provides this information: {passage.text}\n\n'
        "This might help explain the reasons you're asking about."
    )


def process_led(passage: ScoredPassage) -> str:
    return with_disclosure(
        f'According to "{passage.article_title}", {passage.text}\n\n'
        "This explains the process you're asking about."
    )


def location_led(passage: ScoredPassage) -> str:
    return with_disclosure(
        f'The article "{passage.article_title}" mentions: {passage.text}\n\n'
        f"This information about the location was published on "
        f"{format_date(passage.published_at)}."
    )


def comparison(first: ScoredPassage, second: ScoredPassage) -> str:
    return with_disclosure(
        "I found some information that might help with your comparison:\n\n"
        f'From "{first.article_title}": {first.text}\n\n'
        f'And from "{second.article_title}": {second.text}'
    )


def most_recent(passage: ScoredPassage) -> str:
    return with_disclosure(
        f'The most recent information I have is from "{passage.article_title}" '
        f"({format_date(passage.published_at)}):\n\n"
        f"{passage.text}"
    )


def default(passage: ScoredPassage, rng: random.Random) -> str:
    intro = rng.choice(DEFAULT_INTROS).format(title=passage.article_title)
    return with_disclosure(
        f"{intro}\n\n"
        f"{passage.text}\n\n"
        f"This information was published on {format_date(passage.published_at)}."
    )
