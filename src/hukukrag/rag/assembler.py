"""Context assembler: render ranked chunks into the block handed to generation.

Each result becomes

    [<document title>]                or   [<document title> - <section>]
    <chunk content>

and blocks are joined by a "---" divider line.
"""

from __future__ import annotations

import math

from hukukrag.models import RetrievalResult

AVG_CHARS_PER_TOKEN = 4
DIVIDER = "\n\n---\n\n"


def estimate_tokens(text: str) -> int:
    """Approximate token count: ceil(len / 4).

    Calibrated as a rough average for Turkish text; it is not a tokenizer
    and over- or under-counts for other languages and for code.
    """
    return math.ceil(len(text) / AVG_CHARS_PER_TOKEN)


def format_context_from_results(
    results: list[RetrievalResult],
    max_tokens: int | None = None,
) -> str:
    """Render *results* in order; ``""`` for no results.

    Args:
        results: Ranked retrieval results (best first).
        max_tokens: Optional budget on the rendered chunk contents; blocks
            stop being added once the next one would exceed it.
    """
    blocks: list[str] = []
    used = 0
    for result in results:
        content = result.chunk.content
        if max_tokens is not None:
            tokens = estimate_tokens(content)
            if used + tokens > max_tokens:
                break
            used += tokens
        blocks.append(f"{_header(result)}\n{content}")
    return DIVIDER.join(blocks)


def _header(result: RetrievalResult) -> str:
    meta = result.chunk.metadata
    if meta.section:
        return f"[{meta.document_title} - {meta.section}]"
    return f"[{meta.document_title}]"
