"""Rule declaration and execution engine for document transformations.

Handlers declare the tags they transform with the ``@renders`` decorator,
which attaches a :class:`RuleDefinition` to the callable. A
:class:`RenderEngine` collects those declarations into a
:class:`RenderRegistry`, ordered by priority then name, and walks the
BeautifulSoup tree depth-first, dispatching each element to the rules
registered for its tag. Processed-node and suppressed-children bookkeeping
lives on the :class:`~spansmith.core.context.HighlightContext` so a handler can
replace an element's children without the walker descending into them.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, cast


if TYPE_CHECKING:  # pragma: no cover - typing only
    from bs4.element import Tag

    from .context import HighlightContext


RuleCallable = Callable[[Any, "HighlightContext"], None]


@dataclass
class RenderRule:
    """Concrete rule registered in the engine."""

    priority: int
    tags: tuple[str, ...]
    name: str
    handler: RuleCallable
    auto_mark: bool = True
    nestable: bool = True

    @property
    def sort_key(self) -> tuple[int, str]:
        return (self.priority, self.name)


@dataclass(frozen=True)
class RuleDefinition:
    """Descriptor installed on handler callables by :func:`renders`."""

    tags: tuple[str, ...]
    priority: int = 0
    name: str | None = None
    auto_mark: bool = True
    nestable: bool = True

    def bind(self, handler: RuleCallable) -> RenderRule:
        """Create a rule bound to ``handler``."""
        name = self.name or getattr(handler, "__name__", handler.__class__.__name__)
        return RenderRule(
            priority=self.priority,
            tags=self.tags,
            name=name,
            handler=handler,
            auto_mark=self.auto_mark,
            nestable=self.nestable,
        )


class RenderRegistry:
    """Rules grouped by tag name."""

    def __init__(self) -> None:
        self._rules: dict[str, list[RenderRule]] = {}

    def register(self, rule: RenderRule) -> None:
        """Register ``rule`` for each of its tags."""
        for tag in rule.tags:
            bucket = self._rules.setdefault(tag, [])
            if any(existing.name == rule.name for existing in bucket):
                msg = f"A rule named '{rule.name}' is already registered for <{tag}>"
                raise ValueError(msg)
            bucket.append(rule)
            bucket.sort(key=lambda item: item.sort_key)

    def rules_for(self, tag: str) -> tuple[RenderRule, ...]:
        return tuple(self._rules.get(tag, ()))

    def __iter__(self) -> Iterator[RenderRule]:
        seen: set[int] = set()
        for bucket in self._rules.values():
            for rule in bucket:
                if id(rule) not in seen:
                    seen.add(id(rule))
                    yield rule

    def describe(self) -> list[dict[str, object]]:
        """Return a serialisable snapshot of the registered rules."""
        return [
            {"tag": tag, "name": rule.name, "priority": rule.priority, "order": order}
            for tag in sorted(self._rules)
            for order, rule in enumerate(self._rules[tag])
        ]


def renders(
    *tags: str,
    priority: int = 0,
    name: str | None = None,
    auto_mark: bool = True,
    nestable: bool = True,
) -> Callable[[RuleCallable], RuleCallable]:
    """Decorator registering a handler for the given element tags."""
    if not tags:
        msg = "@renders requires at least one tag name"
        raise TypeError(msg)
    definition = RuleDefinition(
        tags=tuple(tags),
        priority=priority,
        name=name,
        auto_mark=auto_mark,
        nestable=nestable,
    )

    def decorator(handler: RuleCallable) -> RuleCallable:
        cast(Any, handler).__render_rule__ = definition
        return handler

    return decorator


class RenderEngine:
    """Walk a document and apply the registered rules."""

    def __init__(self, registry: RenderRegistry | None = None) -> None:
        self.registry = registry or RenderRegistry()

    def collect_from(self, owner: Any) -> None:
        """Collect decorated callables from a module, class, or instance."""
        for attribute in dir(owner):
            handler = getattr(owner, attribute)
            definition = getattr(handler, "__render_rule__", None)
            if isinstance(definition, RuleDefinition):
                self.registry.register(definition.bind(handler))

    def register(self, handler: RuleCallable) -> None:
        """Register a standalone callable decorated with ``@renders``."""
        definition = getattr(handler, "__render_rule__", None)
        if not isinstance(definition, RuleDefinition):
            msg = "Handler must be decorated with @renders"
            raise TypeError(msg)
        self.registry.register(definition.bind(handler))

    def run(self, root: Tag, context: HighlightContext) -> None:
        """Apply every rule to ``root`` and its descendants."""
        self._walk(root, context)

    def _walk(self, node: Tag, context: HighlightContext) -> None:
        self._dispatch(node, context)
        if context.should_skip_children(node):
            return
        for child in list(getattr(node, "children", ())):
            if getattr(child, "name", None):
                self._walk(child, context)

    def _dispatch(self, node: Tag, context: HighlightContext) -> None:
        tag_name = getattr(node, "name", None)
        if not tag_name:
            return
        for rule in self.registry.rules_for(tag_name):
            if rule.auto_mark and context.is_processed(node):
                continue
            rule.handler(node, context)
            if rule.auto_mark:
                context.mark_processed(node)
            if not rule.nestable:
                context.suppress_children(node)


__all__ = [
    "RenderEngine",
    "RenderRegistry",
    "RenderRule",
    "RuleDefinition",
    "renders",
]
