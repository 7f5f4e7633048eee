"""Article chunker — title, summary, then paragraphs in source order."""

from __future__ import annotations

from newsrag.models import Article, Chunk

_PARAGRAPH_SEP = "\n\n"
_SENTENCE_SEP = ". "


class ArticleChunker:
    """Split an Article into bounded-size Chunks.

    Output order is fixed: one ``title`` chunk, an optional ``summary``
    chunk, then ``paragraph`` chunks. Paragraphs that fit within
    ``max_chunk_size`` characters are kept whole; longer ones are packed
    sentence by sentence, each packed chunk closed with a period.
    """

    def __init__(self, max_chunk_size: int = 1_000) -> None:
        if max_chunk_size < 2:
            raise ValueError("max_chunk_size must be >= 2")
        self.max_chunk_size = max_chunk_size

    def chunk(self, article: Article) -> list[Chunk]:
        chunks = [Chunk(text=f"Title: {article.title}", type="title")]

        if article.summary:
            chunks.append(Chunk(text=f"Summary: {article.summary}", type="summary"))

        for paragraph in article.content.split(_PARAGRAPH_SEP):
            if not paragraph.strip():
                continue
            if len(paragraph) <= self.max_chunk_size:
                chunks.append(Chunk(text=paragraph.strip(), type="paragraph"))
            else:
                chunks.extend(
                    Chunk(text=t, type="paragraph") for t in self._pack_sentences(paragraph)
                )

        return chunks

    def _pack_sentences(self, paragraph: str) -> list[str]:
        """Greedily pack sentences into segments that fit with their closing period."""
        # One character is reserved for the period appended on flush.
        limit = self.max_chunk_size - 1
        segments: list[str] = []
        current = ""

        for sentence in self._sentences(paragraph, limit):
            if not current:
                current = sentence
            elif len(current) + len(_SENTENCE_SEP) + len(sentence) <= limit:
                current += _SENTENCE_SEP + sentence
            else:
                segments.append(_close(current))
                current = sentence

        if current.strip():
            segments.append(_close(current))

        return [s for s in segments if s != "."]

    @staticmethod
    def _sentences(paragraph: str, limit: int) -> list[str]:
        """Split on ``". "``; hard-wrap any sentence longer than *limit*."""
        out: list[str] = []
        for sentence in paragraph.split(_SENTENCE_SEP):
            while len(sentence) > limit:
                out.append(sentence[:limit])
                sentence = sentence[limit:]
            out.append(sentence)
        return out


def _close(segment: str) -> str:
    text = segment.strip()
    return text if text.endswith(".") else text + "."
