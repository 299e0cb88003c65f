import pytest

from arkmcp.model.output_format import OutputFormat, ext_to_output_format


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("markdown", OutputFormat.MARKDOWN),
        ("Markdown", OutputFormat.MARKDOWN),
        ("md", OutputFormat.MARKDOWN),
        ("mark_down", OutputFormat.MARKDOWN),
        ("plaintext", OutputFormat.PLAINTEXT),
        ("PlainText", OutputFormat.PLAINTEXT),
        ("plain_text", OutputFormat.PLAINTEXT),
        ("txt", OutputFormat.PLAINTEXT),
        ("compact", OutputFormat.ARKLITE),
        ("XML", OutputFormat.XML),
        ("auto", OutputFormat.AUTO),
    ],
)
def test_parse_valid(text, expected):
    assert OutputFormat.parse(text) is expected


@pytest.mark.parametrize("text", ["pdf", "docx", "", "textile"])
def test_parse_invalid(text):
    with pytest.raises(ValueError, match="invalid value"):
        OutputFormat.parse(text)


@pytest.mark.parametrize(
    ("fmt", "text"),
    [(OutputFormat.MARKDOWN, "markdown"), (OutputFormat.PLAINTEXT, "plaintext")],
)
def test_str(fmt, text):
    assert str(fmt) == text


@pytest.mark.parametrize(
    ("ext", "expected"),
    [
        ("md", "markdown"),
        ("Markdown", "markdown"),
        ("txt", "plaintext"),
        ("unknown", "plaintext"),
    ],
)
def test_ext_to_output_format(ext, expected):
    assert ext_to_output_format(ext) == expected


@pytest.mark.parametrize(
    ("fmt", "expected"),
    [
        (OutputFormat.MARKDOWN, True),
        (OutputFormat.PLAINTEXT, True),
        (OutputFormat.XML, True),
        (OutputFormat.ARKLITE, False),
        (OutputFormat.AUTO, False),
    ],
)
def test_can_compress(fmt, expected):
    assert fmt.can_compress() is expected