"""Output format names and their accepted spellings."""

from __future__ import annotations

from enum import Enum


class OutputFormat(str, Enum):
    """The format in which collected files are written."""

    MARKDOWN = "markdown"
    PLAINTEXT = "plaintext"
    XML = "xml"
    ARKLITE = "arklite"
    AUTO = "auto"

    @classmethod
    def parse(cls, value: str) -> OutputFormat:
        """Return the format named by ``value``; raise ValueError if unknown."""
        try:
            return _ALIASES[value]
        except (KeyError, TypeError):
            raise ValueError(
                f"invalid value: \"{value}\". "
                "Allowed values are 'markdown', 'plaintext', 'xml', 'auto'"
            ) from None

    def can_compress(self) -> bool:
        """Whether output in this format may be compressed."""
        return _COMPRESSIBLE[self]

    def __str__(self) -> str:
        return self.value


_ALIASES: dict[str, OutputFormat] = {
    "markdown": OutputFormat.MARKDOWN,
    "Markdown": OutputFormat.MARKDOWN,
    "MarkDown": OutputFormat.MARKDOWN,
    "mark_down": OutputFormat.MARKDOWN,
    "mark-down": OutputFormat.MARKDOWN,
    "md": OutputFormat.MARKDOWN,
    "mdn": OutputFormat.MARKDOWN,
    "mkd": OutputFormat.MARKDOWN,
    "plaintext": OutputFormat.PLAINTEXT,
    "plain_text": OutputFormat.PLAINTEXT,
    "plain-text": OutputFormat.PLAINTEXT,
    "PlainText": OutputFormat.PLAINTEXT,
    "Plaintext": OutputFormat.PLAINTEXT,
    "text": OutputFormat.PLAINTEXT,
    "txt": OutputFormat.PLAINTEXT,
    "xml": OutputFormat.XML,
    "Xml": OutputFormat.XML,
    "XML": OutputFormat.XML,
    "arklite": OutputFormat.ARKLITE,
    "arkl": OutputFormat.ARKLITE,
    "al": OutputFormat.ARKLITE,
    "compact": OutputFormat.ARKLITE,
    "auto": OutputFormat.AUTO,
}

_COMPRESSIBLE: dict[OutputFormat, bool] = {
    OutputFormat.MARKDOWN: True,
    OutputFormat.PLAINTEXT: True,
    OutputFormat.XML: True,
    OutputFormat.ARKLITE: False,
    OutputFormat.AUTO: False,
}


def ext_to_output_format(extension: str) -> OutputFormat:
    """Map a file extension or format name to a format, defaulting to plain text."""
    return _ALIASES.get(extension, OutputFormat.PLAINTEXT)