import logging
from pathlib import Path

from pygments.token import Token
import pytest

from spansmith.adapters.classifiers import PygmentsClassifier, resolve_highlight_name
from spansmith.adapters.classifiers.queries import QueryTable, load_query_table
from spansmith.core.compiler import compile_events
from spansmith.core.events import HighlightSource, HighlightStart
from spansmith.core.exceptions import ClassificationError
from spansmith.core.nodes import SpanNode


PYTHON_SOURCE = "def f():\n    return 1\n"


def _nodes(classifier: PygmentsClassifier, source: str, language: str) -> list[SpanNode]:
    return compile_events(classifier.highlight(source, language), source)


def _by_text(nodes, text: str) -> SpanNode:
    return next(node for node in nodes if node.text == text)


@pytest.mark.parametrize(
    ("source", "language"),
    [
        (PYTHON_SOURCE, "python"),
        ("function sum(a, b) {\n  return a + b;\n}\n", "javascript"),
        ("## Title\n\nSome *text*\n", "markdown"),
        ("SELECT id FROM users;\n", "sql"),
    ],
)
def test_source_ranges_cover_the_text(source: str, language: str) -> None:
    events = PygmentsClassifier().highlight(source, language)
    ranges = [event for event in events if isinstance(event, HighlightSource)]
    assert "".join(source[event.start : event.end] for event in ranges) == source


def test_default_highlights() -> None:
    nodes = _nodes(PygmentsClassifier(), PYTHON_SOURCE, "python")
    assert _by_text(nodes, "def").highlight == "keyword"
    assert _by_text(nodes, "f").highlight == "function"
    assert _by_text(nodes, "1").highlight == "number"


def test_language_names_are_case_insensitive() -> None:
    nodes = _nodes(PygmentsClassifier(), PYTHON_SOURCE, "Python")
    assert _by_text(nodes, "def").highlight == "keyword"


def test_unknown_language_is_a_classification_error() -> None:
    with pytest.raises(ClassificationError, match="Unknown language klingon"):
        PygmentsClassifier().highlight("qapla'\n", "klingon")


def test_replacing_query_drops_the_defaults(write_query) -> None:
    queries = write_query("python", "highlights:\n  Token.Keyword: keyword\n")
    nodes = _nodes(PygmentsClassifier(query_paths=[queries]), PYTHON_SOURCE, "python")
    assert _by_text(nodes, "def").highlight == "keyword"
    assert _by_text(nodes, "f").highlight is None


def test_extending_query_overrides_single_entries(write_query) -> None:
    queries = write_query(
        "python", "extends: true\nhighlights:\n  Token.Name.Function: variable\n"
    )
    nodes = _nodes(PygmentsClassifier(query_paths=[queries]), PYTHON_SOURCE, "python")
    assert _by_text(nodes, "def").highlight == "keyword"
    assert _by_text(nodes, "f").highlight == "variable"


def test_later_query_directories_win(write_query) -> None:
    base = write_query("python", "extends: true\nhighlights:\n  Keyword: type\n", root="base")
    extra = write_query("python", "extends: true\nhighlights:\n  Keyword: constant\n", root="x")
    nodes = _nodes(PygmentsClassifier(query_paths=[base, extra]), PYTHON_SOURCE, "python")
    assert _by_text(nodes, "def").highlight == "constant"


def test_query_names_fall_back_to_recognized_prefixes(write_query) -> None:
    queries = write_query(
        "python",
        "extends: true\n"
        "highlights:\n"
        "  Token.Name.Function: function.method\n"
        "  Token.Keyword: bogus\n",
    )
    nodes = _nodes(PygmentsClassifier(query_paths=[queries]), PYTHON_SOURCE, "python")
    assert _by_text(nodes, "f").highlight == "function"
    assert _by_text(nodes, "def").highlight == "keyword"


def test_malformed_query_file_is_a_classification_error(write_query) -> None:
    queries = write_query("python", "highlights: [keyword]\n")
    with pytest.raises(ClassificationError, match="must map token types"):
        PygmentsClassifier(query_paths=[queries]).highlight(PYTHON_SOURCE, "python")


def test_query_mapped_to_none_hides_the_token(write_query) -> None:
    queries = write_query("python", "extends: true\nhighlights:\n  Token.Keyword: none\n")
    classifier = PygmentsClassifier(query_paths=[queries])
    events = classifier.highlight(PYTHON_SOURCE, "python")
    assert HighlightStart("none") in events
    assert _by_text(_nodes(classifier, PYTHON_SOURCE, "python"), "def").highlight is None


def test_injected_language_starts_a_fresh_scope(write_query) -> None:
    queries = write_query(
        "python", "extends: true\ninjections:\n  Token.Literal.String.Double: sql\n"
    )
    source = 'q = "SELECT 1"\n'
    classifier = PygmentsClassifier(query_paths=[queries])
    events = classifier.highlight(source, "python")
    nodes = compile_events(events, source)

    select = _by_text(nodes, "SELECT")
    assert select.highlight == "keyword"
    assert select.scopes == ("keyword",)
    assert _by_text(nodes, "1").highlight == "number"
    assert "".join(node.text for node in nodes) == source


def test_unknown_injected_language_keeps_the_host_highlight(write_query) -> None:
    queries = write_query(
        "python", "extends: true\ninjections:\n  Token.Literal.String.Double: klingon\n"
    )
    source = 'q = "abc"\n'
    nodes = _nodes(PygmentsClassifier(query_paths=[queries]), source, "python")
    assert _by_text(nodes, "abc").highlight == "string"


GRAMMAR = '''
from pygments.lexer import RegexLexer
from pygments.token import Keyword, Name, Text, Whitespace


class CustomLexer(RegexLexer):
    name = "Toy"
    aliases = ["toy", "toylang"]

    tokens = {
        "root": [
            (r"\\bfoo\\b", Keyword),
            (r"\\s+", Whitespace),
            (r"\\w+", Name),
            (r".", Text),
        ]
    }
'''


def test_grammar_files_register_custom_languages(tmp_path: Path) -> None:
    grammars = tmp_path / "grammars"
    grammars.mkdir()
    (grammars / "toy.py").write_text(GRAMMAR, encoding="utf-8")

    classifier = PygmentsClassifier(grammar_paths=[grammars])
    assert classifier.languages == ["toy", "toylang"]
    nodes = _nodes(classifier, "foo bar\n", "toylang")
    assert _by_text(nodes, "foo").highlight == "keyword"
    assert _by_text(nodes, "bar").highlight is None


def test_broken_grammar_files_are_skipped(
    tmp_path: Path, caplog: pytest.LogCaptureFixture
) -> None:
    (tmp_path / "broken.py").write_text("x = 1\n", encoding="utf-8")
    (tmp_path / "toy.py").write_text(GRAMMAR, encoding="utf-8")
    with caplog.at_level(logging.WARNING):
        classifier = PygmentsClassifier(grammar_paths=[tmp_path])
    assert "toy" in classifier.languages
    assert "broken" not in classifier.languages
    assert any("Failed to load grammar" in record.message for record in caplog.records)


def test_resolve_highlight_name() -> None:
    known = {"function", "keyword"}
    assert resolve_highlight_name("function.method.call", known) == "function"
    assert resolve_highlight_name("keyword", known) == "keyword"
    assert resolve_highlight_name("variable", known) is None
    assert resolve_highlight_name("none", known) == "none"


def test_query_tables_resolve_through_token_ancestors(tmp_path: Path) -> None:
    table = load_query_table("python", [tmp_path / "missing"])
    assert table.highlight_for(Token.Keyword.Namespace) == "keyword"
    assert table.highlight_for(Token.Literal.String.Double) == "string"
    assert table.highlight_for(Token.Text) is None
    assert QueryTable().injection_for(Token.Literal.String) is None


LINE_RELATIVE_GRAMMAR = '''
from pygments.lexer import Lexer
from pygments.token import Keyword, Text


class CustomLexer(Lexer):
    name = "Lines"
    aliases = ["lines"]

    def get_tokens_unprocessed(self, text):
        for line in text.splitlines(keepends=True):
            word = line.split(" ", 1)[0]
            yield 0, Keyword, word
            yield len(word), Text, line[len(word) :]
'''


def test_ranges_follow_token_values_not_lexer_indices(tmp_path: Path) -> None:
    (tmp_path / "lines.py").write_text(LINE_RELATIVE_GRAMMAR, encoding="utf-8")
    source = "alpha one\nbeta two\n"

    events = PygmentsClassifier(grammar_paths=[tmp_path]).highlight(source, "lines")
    nodes = compile_events(events, source)

    assert [node.text for node in nodes if node.highlight == "keyword"] == ["alpha", "beta"]
    assert "".join(node.text for node in nodes) == source


def test_sub_match_lexers_cover_the_source() -> None:
    source = "      PROGRAM HELLO\n      PRINT *, 'Hi'\n      END\n"
    nodes = _nodes(PygmentsClassifier(), source, "fortranfixed")

    assert "".join(node.text for node in nodes) == source
    assert any(node.highlight == "keyword" and "PROGRAM" in node.text for node in nodes)
