"""Regenerate a chapter's markdown from its sections."""

from docgen.document.models import Chapter


def rebuild_chapter_markdown(chapter: Chapter) -> str:
    """Render a chapter as markdown.

    The chapter heading comes first, then every section in stored order with a
    heading one level deeper than the section's level:

        # Chapter 1: Introduction

        ## 1.1 Background

        Section body...

    The output depends only on the chapter's title, numbers and contents, so
    repeated calls produce identical text.

    Args:
        chapter: Chapter with section contents loaded

    Returns:
        The chapter markdown.
    """
    parts = [f"# Chapter {chapter.number}: {chapter.title}\n\n"]
    for section in chapter.sections:
        heading = "#" * (section.level + 1)
        parts.append(f"{heading} {section.full_title}\n\n")
        parts.append(f"{section.content}\n\n")
    return "".join(parts)
