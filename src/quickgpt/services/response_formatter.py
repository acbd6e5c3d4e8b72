"""Segmentation of assistant replies into text and fenced-code blocks."""

import re
from functools import lru_cache

from quickgpt.models.content import CodeBlock, ContentBlock, TextBlock
from quickgpt.utils.logging import get_logger


logger = get_logger(__name__)

CODE_FENCE_PATTERN = r"```([a-zA-Z0-9+#]*)\s*\n(.*?)```"
DEFAULT_LANGUAGE = "text"


@lru_cache(maxsize=1)
def _code_fence_pattern() -> re.Pattern:
    return re.compile(CODE_FENCE_PATTERN, re.DOTALL)


def _code_block_from_match(match: re.Match) -> CodeBlock:
    language = match.group(1) or DEFAULT_LANGUAGE
    return CodeBlock(language=language, source=match.group(2))


def parse(content: str) -> list[ContentBlock]:
    """
    Split a raw reply into ordered text and code blocks.

    Fenced regions (```lang ... ```) become CodeBlocks; the text around
    them becomes TextBlocks, stripped, and only when something other than
    whitespace remains. A reply without any fence comes back unchanged as
    a single TextBlock.

    Args:
        content: Raw assistant reply

    Returns:
        Blocks in document order (empty list for empty input)

    Example:
        >>> parse("a\\n```js\\nb\\n```\\nc")
        [TextBlock(text='a'), CodeBlock(language='js', source='b\\n'), TextBlock(text='c')]
    """
    if not content:
        return []

    try:
        matches = list(_code_fence_pattern().finditer(content))
    except re.error as e:
        logger.error("response_parse_failed", error=str(e), content_length=len(content))
        return [TextBlock(text=content)]

    if not matches:
        return [TextBlock(text=content)]

    blocks: list[ContentBlock] = []
    last_end = 0

    for match in matches:
        text_before = content[last_end:match.start()].strip()
        if text_before:
            blocks.append(TextBlock(text=text_before))

        blocks.append(_code_block_from_match(match))
        last_end = match.end()

    text_after = content[last_end:].strip()
    if text_after:
        blocks.append(TextBlock(text=text_after))

    logger.debug(
        "response_parsed",
        content_length=len(content),
        block_count=len(blocks),
        code_block_count=len(matches),
    )

    return blocks


def extract_code_blocks(content: str) -> list[CodeBlock]:
    """
    Return only the fenced code regions of a reply.

    Args:
        content: Raw assistant reply

    Returns:
        CodeBlocks in document order
    """
    try:
        return [_code_block_from_match(m) for m in _code_fence_pattern().finditer(content)]
    except re.error as e:
        logger.error("code_block_extraction_failed", error=str(e))
        return []


def to_markdown(blocks: list[ContentBlock]) -> str:
    """
    Rebuild a fenced markdown document from blocks.

    Parsing the result yields an equivalent block sequence.
    """
    parts = []
    for block in blocks:
        if isinstance(block, CodeBlock):
            parts.append(f"```{block.language}\n{block.source}```")
        else:
            parts.append(block.text)
    return "\n".join(parts)
