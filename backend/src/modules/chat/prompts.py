"""Prompt templates for retrieval-augmented chat."""

from typing import Sequence

from ..chunk.schemas import ChunkMatch

CONTEXT_SEPARATOR = "\n\n---\n\n"

CHAT_PROMPT_TEMPLATE = """
You are a helpful teaching assistant. Answer the user's question based ONLY on the following context.
Your answer must be grounded in the provided sources.
When you use information from a source, you MUST cite it by referencing the page number and quoting a 2-3 line snippet.
Format citations like this: "According to p. {{page_number}} of {{filename}}: '{{snippet}}'"

Context:
---
{context}
---

Question: {question}
"""


def build_context(matches: Sequence[ChunkMatch]) -> str:
    return CONTEXT_SEPARATOR.join(
        f"Source: {match.filename}, Page: {match.page_number}\nContent: {match.content}" for match in matches
    )


def build_chat_prompt(question: str, context: str) -> str:
    return CHAT_PROMPT_TEMPLATE.format(context=context, question=question)
