"""HTML code block highlighter built on the rule engine."""

from __future__ import annotations

from typing import Any

from bs4 import BeautifulSoup, FeatureNotFound

from spansmith.adapters.classifiers import ClassifierFactory, pygments_classifier_factory
from spansmith.core.config import HighlightConfig
from spansmith.core.context import (
    DocumentState,
    EnterHook,
    HighlightContext,
    LeaveHook,
    QueryResolver,
)
from spansmith.core.diagnostics import DiagnosticEmitter, NullEmitter
from spansmith.core.lifecycle import HighlighterLifecycle
from spansmith.core.rules import RenderEngine


class HtmlHighlighter:
    """Highlight ``<pre><code class="language-*">`` blocks of HTML documents."""

    def __init__(
        self,
        config: HighlightConfig | None = None,
        *,
        classifier_factory: ClassifierFactory | None = None,
        parser: str = "lxml",
        enter: EnterHook | None = None,
        leave: LeaveHook | None = None,
        resolve_query_path: QueryResolver | None = None,
        emitter: DiagnosticEmitter | None = None,
    ) -> None:
        self.config = config or HighlightConfig()
        self.parser_backend = parser
        self.enter = enter
        self.leave = leave
        self.resolve_query_path = resolve_query_path
        self.emitter = emitter or NullEmitter()

        self.lifecycle = HighlighterLifecycle(
            classifier_factory or pygments_classifier_factory,
            self.config.grammar_paths,
            self.config.query_paths,
            cache_transient=self.config.cache_transient,
            serialize=self.config.serialize_access,
            emitter=self.emitter,
        )

        self.engine = RenderEngine()
        self._register_builtin_handlers()

    def _register_builtin_handlers(self) -> None:
        from spansmith.adapters.handlers import code as code_handlers

        self.engine.collect_from(code_handlers)

    def register(self, handler: Any) -> None:
        """Register additional handlers.

        Accepts callables decorated with :func:`~spansmith.core.rules.renders`
        or modules/classes exposing decorated attributes.
        """
        if getattr(handler, "__render_rule__", None) is not None:
            self.engine.register(handler)
            return
        self.engine.collect_from(handler)

    def parse(self, html: str) -> BeautifulSoup:
        """Parse ``html``, falling back to ``html.parser`` when needed."""
        try:
            return BeautifulSoup(html, self.parser_backend)
        except FeatureNotFound:
            if self.parser_backend == "html.parser":
                raise
            self.emitter.event(
                "parser_fallback", {"preferred": self.parser_backend, "fallback": "html.parser"}
            )
            self.parser_backend = "html.parser"
            return BeautifulSoup(html, "html.parser")

    def highlight_tree(
        self,
        soup: BeautifulSoup,
        *,
        state: DocumentState | None = None,
        emitter: DiagnosticEmitter | None = None,
    ) -> DocumentState:
        """Highlight every code block of an already parsed document in place."""
        context = HighlightContext(
            config=self.config,
            lifecycle=self.lifecycle,
            document=soup,
            state=state or DocumentState(),
            emitter=emitter or self.emitter,
            enter=self.enter,
            leave=self.leave,
            resolve_query_path=self.resolve_query_path,
        )
        self.engine.run(soup, context)
        return context.state

    def render(
        self,
        html: str,
        *,
        state: DocumentState | None = None,
        emitter: DiagnosticEmitter | None = None,
    ) -> str:
        """Return ``html`` with its code blocks highlighted."""
        soup = self.parse(html)
        self.highlight_tree(soup, state=state, emitter=emitter)
        return str(soup)

    def render_markdown(
        self,
        text: str,
        *,
        state: DocumentState | None = None,
        emitter: DiagnosticEmitter | None = None,
    ) -> str:
        """Convert Markdown to HTML and highlight its fenced code blocks."""
        from spansmith.adapters.markdown import render_markdown

        return self.render(render_markdown(text), state=state, emitter=emitter)

    def describe_registered_rules(self) -> list[dict[str, object]]:
        """Return metadata about the registered rules."""
        return self.engine.registry.describe()


__all__ = ["HtmlHighlighter"]
