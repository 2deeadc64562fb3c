from __future__ import annotations

from translate_me.analysis.lexer import (
    extract_balanced,
    find_string_literals,
    inert_spans,
    iter_comment_spans,
    mask_literals,
)
from translate_me.analysis.model import StringLiteral


def test_single_literal_offsets() -> None:
    literals = find_string_literals("Text('Hello')")
    assert literals == [StringLiteral(delimiter="'", content="Hello", start=5, length=7)]
    assert literals[0].raw == "'Hello'"
    assert literals[0].end == 12


def test_all_delimiters_in_order() -> None:
    text = """a('one', "two", `three`)"""
    literals = find_string_literals(text)
    assert [(lit.delimiter, lit.content) for lit in literals] == [
        ("'", "one"),
        ('"', "two"),
        ("`", "three"),
    ]


def test_other_delimiters_do_not_close_literal() -> None:
    literals = find_string_literals("""Text("It's fine")""")
    assert [lit.content for lit in literals] == ["It's fine"]


def test_escaped_quote_does_not_close() -> None:
    literals = find_string_literals(r"Text('It\'s here')")
    assert [lit.content for lit in literals] == [r"It\'s here"]


def test_even_backslash_run_closes() -> None:
    literals = find_string_literals(r"x('a\\', 'b')")
    assert [lit.content for lit in literals] == [r"a\\", "b"]


def test_quotes_inside_interpolation_are_code() -> None:
    text = """Text("${isEnabled ? 'Yes' : 'No'}")"""
    literals = find_string_literals(text)
    assert len(literals) == 1
    assert literals[0].content == "${isEnabled ? 'Yes' : 'No'}"


def test_nested_braces_inside_interpolation() -> None:
    text = "'${items.map((e) { return e; }).join()} done'"
    literals = find_string_literals(text)
    assert [lit.content for lit in literals] == [
        "${items.map((e) { return e; }).join()} done"
    ]


def test_escaped_dollar_is_not_interpolation() -> None:
    literals = find_string_literals(r"'\${a' + 'b'")
    assert [lit.content for lit in literals] == [r"\${a", "b"]


def test_unterminated_literal_is_dropped() -> None:
    assert find_string_literals('Text("Hello') == []
    assert [lit.content for lit in find_string_literals("'a' + 'b")] == ["a"]


def test_literals_inside_comments_are_skipped() -> None:
    text = "// 'not this'\n/* 'nor this' */ 'but this'"
    assert [lit.content for lit in find_string_literals(text)] == ["but this"]


def test_extract_interpolated_argument() -> None:
    text = 'Text("Count: ${items.length}")'
    assert extract_balanced(text, 4) == '"Count: ${items.length}"'


def test_extract_nested_calls() -> None:
    text = "Column(children: [Text('a'), Text(b(c))])"
    assert extract_balanced(text, 6) == "children: [Text('a'), Text(b(c))]"


def test_extract_ignores_parentheses_in_literals() -> None:
    assert extract_balanced("Text('(not a paren')", 4) == "'(not a paren'"
    assert extract_balanced("Text(') :(')", 4) == "') :('"


def test_extract_counts_parentheses_in_interpolation() -> None:
    text = "Text('${format(value)}')"
    assert extract_balanced(text, 4) == "'${format(value)}'"


def test_extract_ternary_with_quotes() -> None:
    text = """Text(cond ? 'a)' : "b(")"""
    assert extract_balanced(text, 4) == """cond ? 'a)' : "b(\""""


def test_extract_empty_and_unbalanced() -> None:
    assert extract_balanced("Text()", 4) == ""
    assert extract_balanced("Text('a'", 4) is None
    assert extract_balanced("Text(foo(", 4) is None


def test_extract_requires_open_parenthesis() -> None:
    assert extract_balanced("Text('a')", 0) is None
    assert extract_balanced("Text('a')", 99) is None


def test_extract_skips_commented_parenthesis() -> None:
    text = "Foo(a, // )\n b)"
    assert extract_balanced(text, 3) == "a, // )\n b"


def test_comment_spans() -> None:
    text = "a // one\n/* two /* nested */ still */ b"
    spans = list(iter_comment_spans(text))
    assert [text[start:end] for start, end in spans] == [
        "// one",
        "/* two /* nested */ still */",
    ]


def test_unclosed_comment_runs_to_end() -> None:
    text = "x /* open"
    assert list(iter_comment_spans(text)) == [(2, len(text))]


def test_inert_spans_cover_literals_and_comments() -> None:
    text = "a 'x' // c\nb"
    assert inert_spans(text) == [(2, 5), (6, 10)]


def test_inert_spans_include_unterminated_literal() -> None:
    text = "a 'open"
    assert inert_spans(text) == [(2, 7)]


def test_mask_literals_preserves_offsets() -> None:
    text = "a: 'b: c',\n d: 2"
    masked = mask_literals(text)
    assert len(masked) == len(text)
    assert masked == "a:       ,\n d: 2"


def test_triple_quoted_literal_is_one_literal() -> None:
    literals = find_string_literals("Text('''Hello 'world' again''')")
    assert literals == [
        StringLiteral(delimiter="'''", content="Hello 'world' again", start=5, length=25)
    ]
    assert literals[0].raw == "'''Hello 'world' again'''"


def test_triple_double_quoted_literal_spans_lines() -> None:
    text = 'Text("""Line one\nline "two" here""")'
    literals = find_string_literals(text)
    assert [(lit.delimiter, lit.content) for lit in literals] == [
        ('"""', 'Line one\nline "two" here'),
    ]
    assert extract_balanced(text, 4) == '"""Line one\nline "two" here"""'
