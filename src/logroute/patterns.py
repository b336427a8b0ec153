"""
Wildcard namespace patterns

A pattern token is literal text in which ``*`` matches any run of zero or
more characters. Patterns always match the whole namespace.
"""

import re
from dataclasses import dataclass
from typing import Any, Callable, Generic, List, Mapping, Optional, Sequence, Tuple, TypeVar

DEFAULT_NAMESPACE = "global"

NamespacePredicate = Callable[[str], bool]

V = TypeVar("V")

_SPEC_SEPARATORS = re.compile(r"[\s,]+")


def compile_pattern(token: str) -> NamespacePredicate:
    """Compile a wildcard token into a full-match predicate"""
    token = str(token)
    if token == "*":
        return lambda namespace: True
    escaped = ".*".join(re.escape(part) for part in token.split("*"))
    regex = re.compile(escaped, re.DOTALL)
    return lambda namespace: regex.fullmatch(namespace) is not None


CATCH_ALL = compile_pattern("*")


def resolve_namespace(namespace: Any) -> str:
    """Return the namespace, or the default one when unset"""
    if isinstance(namespace, str) and namespace:
        return namespace
    return DEFAULT_NAMESPACE


def parse_namespace_spec(
    spec: Optional[str],
) -> Tuple[List[NamespacePredicate], List[NamespacePredicate]]:
    """Parse a spec like ``"app:*, db -app:verbose"`` into include/exclude lists"""
    if not isinstance(spec, str) or not spec.strip():
        return [CATCH_ALL], []

    includes: List[NamespacePredicate] = []
    excludes: List[NamespacePredicate] = []
    for token in _SPEC_SEPARATORS.split(spec):
        if not token:
            continue
        if token.startswith("-"):
            excludes.append(compile_pattern(token[1:]))
        else:
            includes.append(compile_pattern(token))

    if not includes:
        includes.append(CATCH_ALL)
    return includes, excludes


def is_namespace_enabled(
    namespace: Optional[str],
    includes: Sequence[NamespacePredicate],
    excludes: Sequence[NamespacePredicate],
) -> bool:
    """Excludes always win; otherwise at least one include must match"""
    ns = resolve_namespace(namespace)
    if any(matches(ns) for matches in excludes):
        return False
    return any(matches(ns) for matches in includes)


@dataclass(frozen=True)
class PatternRule(Generic[V]):
    """A wildcard token bound to a value"""

    source: str
    matcher: NamespacePredicate
    value: V

    def matches(self, namespace: str) -> bool:
        return self.matcher(namespace)


def compile_pattern_map(
    mapping: Optional[Mapping[str, Any]], transform: Callable[[Any], V]
) -> List[PatternRule[V]]:
    """Build an ordered rule table, preserving the mapping's insertion order"""
    if not isinstance(mapping, Mapping):
        return []
    return [
        PatternRule(source=str(key), matcher=compile_pattern(str(key)), value=transform(value))
        for key, value in mapping.items()
    ]


def first_match(rules: Sequence[PatternRule[V]], namespace: str) -> Optional[PatternRule[V]]:
    """Return the first rule matching the namespace"""
    for rule in rules:
        if rule.matches(namespace):
            return rule
    return None
