"""Prompt construction for article generation."""

from typing import Sequence

SYSTEM_INSTRUCTION = (
    "You are a senior SEO writer producing clear, human-friendly, "
    "well-structured articles for the web hosting industry."
)

MAX_HEADLINES_IN_PROMPT = 10


def build_prompt(
    topic: str,
    brand: str,
    min_words: int,
    competitor_headlines: Sequence[str] = (),
) -> str:
    """Compose the user prompt for one article.

    Pure and deterministic: identical arguments always yield the identical
    prompt. The competitor block is omitted entirely when there are no
    headlines.
    """
    sections = [
        "Write a clear, human-friendly, well-structured SEO article. "
        "Readability matters: use short paragraphs, simple sentences, bullet "
        "lists where helpful, and subheadings. Make it informative and "
        "authoritative for the web hosting industry.",
        f"Title: {topic}",
        "Include: an intro (2-3 short paragraphs), 4-6 H2 sections with H3 "
        "subsections where helpful, a comparison table if applicable, a short "
        "FAQ (3 Q&A), conclusion with an internal CTA to sign up for "
        f"{brand}, and a TL;DR summary at the top.",
        f"Target length: {min_words} words. Tone: human, expert yet friendly. "
        "Avoid copying competitor headlines verbatim. If this topic is a "
        "direct comparison, include balanced pros/cons and a clear "
        "recommendation.",
    ]

    headlines = list(competitor_headlines)[:MAX_HEADLINES_IN_PROMPT]
    if headlines:
        sections.append(
            "Recent competitor headlines:\n- " + "\n- ".join(headlines)
        )

    sections.append(
        "Write the article in plain English, easy to scan, with clear "
        "formatting markers (use headings). Also provide a 155-character meta "
        "description and 5 keyword suggestions at the end in JSON format "
        'like: {"meta":"...","keywords":[...]}'
    )
    return "\n\n".join(sections)
