"""Unit tests for response formatting."""

import re
from unittest.mock import patch

import pytest

from quickgpt.models.content import CodeBlock, TextBlock
from quickgpt.services import response_formatter
from quickgpt.services.response_formatter import extract_code_blocks, parse, to_markdown


class TestParse:
    """Test parse() segmentation."""

    def test_empty_input_returns_no_blocks(self):
        assert parse("") == []

    @pytest.mark.parametrize("content", [
        "Just a plain answer.",
        "  leading and trailing whitespace  \n",
        "Inline `code` is not a fence",
        "Two backticks `` are not a fence either",
    ])
    def test_no_fence_returns_single_text_block_equal_to_input(self, content):
        """Test input without triple backticks comes back unchanged."""
        assert parse(content) == [TextBlock(text=content)]

    def test_single_fenced_block_with_language(self):
        blocks = parse("```python\ncode\n```")

        assert blocks == [CodeBlock(language="python", source="code\n")]

    def test_fenced_block_without_language_defaults_to_text(self):
        blocks = parse("```\ncode\n```")

        assert len(blocks) == 1
        assert blocks[0].language == "text"
        assert blocks[0].source == "code\n"

    def test_text_code_text_in_document_order(self):
        blocks = parse("a\n```js\nb\n```\nc")

        assert blocks == [
            TextBlock(text="a"),
            CodeBlock(language="js", source="b\n"),
            TextBlock(text="c"),
        ]

    def test_whitespace_around_single_fence_is_dropped(self):
        """Test whitespace-only segments are not emitted as text blocks."""
        blocks = parse("\n\n   \n```sh\nls -la\n```\n   \n\t\n")

        assert blocks == [CodeBlock(language="sh", source="ls -la\n")]

    def test_whitespace_between_fences_is_dropped(self):
        blocks = parse("```a\nx\n```\n\n```b\ny\n```")

        assert blocks == [
            CodeBlock(language="a", source="x\n"),
            CodeBlock(language="b", source="y\n"),
        ]

    @pytest.mark.parametrize("tag", ["c++", "c#", "f#", "python3", "ObjectiveC"])
    def test_language_tags_with_symbols_and_digits(self, tag):
        blocks = parse(f"```{tag}\nx = 1\n```")

        assert blocks == [CodeBlock(language=tag, source="x = 1\n")]

    def test_spaces_after_language_tag_are_allowed(self):
        blocks = parse("```python   \nprint(1)\n```")

        assert blocks == [CodeBlock(language="python", source="print(1)\n")]

    def test_code_source_keeps_inner_blank_lines(self):
        source = "def f():\n\n    return 1\n"
        blocks = parse(f"Here:\n```python\n{source}```")

        assert blocks[1].source == source

    def test_unclosed_fence_is_plain_text(self):
        content = "Start\n```python\nprint('never closed')\n"

        assert parse(content) == [TextBlock(text=content)]

    def test_fence_without_newline_is_not_code(self):
        """Test an opening fence must be followed by a newline."""
        content = "```python print(1)```"

        assert parse(content) == [TextBlock(text=content)]

    def test_realistic_markdown_answer(self):
        content = (
            "# Breadth-First Search\n\n"
            "BFS explores neighbours level by level.\n\n"
            "## Python Implementation\n\n"
            "```python\n"
            "from collections import deque\n"
            "\n"
            "def bfs(graph, start):\n"
            "    queue = deque([start])\n"
            "```\n\n"
            "## Swift Implementation\n\n"
            "```swift\n"
            "func bfs() {}\n"
            "```\n"
        )

        blocks = parse(content)

        assert [type(b) for b in blocks] == [TextBlock, CodeBlock, TextBlock, CodeBlock]
        assert blocks[0].text.startswith("# Breadth-First Search")
        assert blocks[0].text.endswith("## Python Implementation")
        assert blocks[1].language == "python"
        assert blocks[2].text == "## Swift Implementation"
        assert blocks[3] == CodeBlock(language="swift", source="func bfs() {}\n")

    def test_parse_is_deterministic(self):
        content = "intro\n```go\nfmt.Println()\n```\noutro"

        assert parse(content) == parse(content)

    def test_reparsing_reconstructed_markdown_is_equivalent(self):
        """Test parse(to_markdown(parse(x))) == parse(x)."""
        content = "a\n```js\nb\n```\n\n```\nplain\n```\nc"
        blocks = parse(content)

        assert parse(to_markdown(blocks)) == blocks

    def test_pattern_failure_falls_back_to_single_text_block(self):
        content = "```python\ncode\n```"

        with patch.object(
            response_formatter,
            "_code_fence_pattern",
            side_effect=re.error("broken pattern"),
        ):
            blocks = parse(content)

        assert blocks == [TextBlock(text=content)]


class TestExtractCodeBlocks:
    """Test extract_code_blocks()."""

    def test_returns_only_code(self):
        content = "Intro\n```python\na = 1\n```\nMiddle\n```\nraw\n```\nEnd"

        assert extract_code_blocks(content) == [
            CodeBlock(language="python", source="a = 1\n"),
            CodeBlock(language="text", source="raw\n"),
        ]

    def test_no_code_returns_empty_list(self):
        assert extract_code_blocks("No code here") == []


class TestToMarkdown:
    """Test to_markdown()."""

    def test_rebuilds_fences(self):
        blocks = [
            TextBlock(text="Run this:"),
            CodeBlock(language="sh", source="make\n"),
        ]

        assert to_markdown(blocks) == "Run this:\n```sh\nmake\n```"

    def test_empty_blocks(self):
        assert to_markdown([]) == ""
