"""Prompt templates for article and featured-image generation."""

from __future__ import annotations

from ..services.models import LinkSpec

ARTICLE_PROMPT = """\
You are an expert in SEO and content marketing.
Write a WordPress blog article about: "{topic}"

Reply with a single JSON object in exactly this shape:
{{
  "title": "an engaging, SEO-friendly title",
  "content": "the article body as HTML",
  "tags": ["tag1", "tag2", "tag3"],
  "meta_description": "a short description for search engines"
}}

Requirements:
1. The content must be at least {min_words} words long.
2. Structure the content with <h2> and <h3> sub-headings.
3. Emphasise important keywords with <strong> tags.
4. Keep it readable, engaging and genuinely useful.
5. Write the title, content, tags and meta description in {language}.
6. Return only the JSON object, with no Markdown code fences.{link_instruction}
"""

LINK_INSTRUCTION = """
7. Include exactly one link to {target}: {url}
   - {anchor_rule}
   - The anchor text must be words or a phrase that actually appear in the content.
   - Format: <a href="{url}"{target_attr}>relevant anchor text</a>
   - Never use generic anchor text such as "click here" or "read more".
   - Place the single link where the content connects to it naturally."""

KEYWORD_ANCHOR_RULE = (
    'Choose anchor text related to "{keyword}": find words or phrases in the content '
    'that relate to "{keyword}" and use one of them as the anchor text.'
)

TOPIC_ANCHOR_RULE = (
    "Choose anchor text from words or phrases in the content that relate to the "
    "article topic and fit the surrounding context."
)

IMAGE_PROMPT = """\
Create a professional, high-quality featured image for a blog post titled: "{title}"
Topic: {topic}
Style: modern, clean, professional blog header image
Include subtle visual elements related to the topic
Optimized for web display, 16:9 aspect ratio
"""


def render_link_instruction(link: LinkSpec | None) -> str:
    if link is None:
        return ""
    if link.anchor_keyword:
        anchor_rule = KEYWORD_ANCHOR_RULE.format(keyword=link.anchor_keyword)
    else:
        anchor_rule = TOPIC_ANCHOR_RULE
    return LINK_INSTRUCTION.format(
        target="a page on this site" if link.is_internal else "the money site",
        url=link.url,
        anchor_rule=anchor_rule,
        target_attr="" if link.is_internal else ' target="_blank"',
    )


def render_article_prompt(
    topic: str,
    link: LinkSpec | None = None,
    *,
    language: str = "English",
    min_words: int = 800,
) -> str:
    return ARTICLE_PROMPT.format(
        topic=topic,
        min_words=min_words,
        language=language,
        link_instruction=render_link_instruction(link),
    )


def render_image_prompt(topic: str, title: str) -> str:
    return IMAGE_PROMPT.format(topic=topic, title=title)


__all__ = ["render_article_prompt", "render_image_prompt", "render_link_instruction"]
