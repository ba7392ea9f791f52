"""Special-case (exception) rules."""

import threading
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple, Union

from spacy.attrs import IDS

from .errors import ConfigurationError

AttrKey = Union[str, int]
TokenSpec = Mapping[AttrKey, Any]

ORTH = "ORTH"

_ATTR_NAMES: Dict[int, str] = {attr_id: name for name, attr_id in IDS.items()}


def normalize_attrs(spec: TokenSpec) -> Dict[str, Any]:
    """Turn the keys of a token spec into upper case attribute names.

    Args:
        spec (:obj:`TokenSpec`):
            The token spec. Keys can be attribute names in any case (e.g.,
            ``"orth"``, ``"NORM"``) or spaCy attribute IDs (e.g.,
            :obj:`spacy.attrs.ORTH`).

    Returns:
        :obj:`Dict[str, Any]`: The same spec with normalized keys.

    Raises:
        :obj:`ConfigurationError`: If a key is neither a string nor a known
        spaCy attribute ID.
    """
    normalized = {}
    for key, value in spec.items():
        if isinstance(key, str):
            name = key.upper()
        elif isinstance(key, int) and key in _ATTR_NAMES:
            name = _ATTR_NAMES[key]
        else:
            raise ConfigurationError(f"Unknown token attribute {key!r}.")
        normalized[name] = value
    return normalized


class SpecialCaseTable:
    """Exact-match rules that replace a chunk with predetermined tokens.

    Every rule maps a literal string to the ordered list of tokens it splits
    into. The ``ORTH`` values of these tokens must add up to the literal
    itself, so special cases split text but never rewrite it.

    Each mutation bumps :attr:`version`, which callers use to tell whether
    results computed earlier are still valid.
    """

    def __init__(self, rules: Optional[Mapping[str, Iterable[TokenSpec]]] = None):
        self._rules: Dict[str, Tuple[Tuple[str, Dict[str, Any]], ...]] = {}
        self._lock = threading.RLock()
        self._version = 0
        if rules:
            self.update(rules)

    @property
    def version(self) -> int:
        """:obj:`int`: Monotonically increasing counter of rule changes."""
        return self._version

    def add(self, literal: str, specs: Iterable[TokenSpec]):
        """Register (or overwrite) the special case for ``literal``.

        Args:
            literal (:obj:`str`):
                The exact string the rule applies to.
            specs (:obj:`Iterable[TokenSpec]`):
                One attribute mapping per output token. Each of them must
                contain at least the ``ORTH`` attribute.

        Raises:
            :obj:`ConfigurationError`: If the rule is malformed.
        """
        rule = self._validate(literal, specs)
        with self._lock:
            self._rules[literal] = rule
            self._version += 1

    def update(self, rules: Mapping[str, Iterable[TokenSpec]]):
        """Register several special cases at once.

        The whole batch is validated before any rule is stored.
        """
        validated = {
            literal: self._validate(literal, specs)
            for literal, specs in rules.items()
        }
        with self._lock:
            self._rules.update(validated)
            self._version += 1

    def replace(self, rules: Mapping[str, Iterable[TokenSpec]]):
        """Replace every special case with ``rules``."""
        validated = {
            literal: self._validate(literal, specs)
            for literal, specs in rules.items()
        }
        with self._lock:
            self._rules = validated
            self._version += 1

    def clear(self):
        self.replace({})

    def lookup(self, chunk: str) -> Optional[List[Tuple[str, Dict[str, Any]]]]:
        """Look up the special case for ``chunk``.

        Args:
            chunk (:obj:`str`):
                The string to look up. Only exact matches count.

        Returns:
            :obj:`Optional[List[Tuple[str, Dict[str, Any]]]]`: The
            ``(orth, attribute overrides)`` pairs of the rule, or :obj:`None`
            if there is no rule for ``chunk``. The overrides are fresh copies
            that callers are free to modify.
        """
        rule = self._rules.get(chunk)
        if rule is None:
            return None
        return [(orth, dict(attrs)) for orth, attrs in rule]

    def to_dict(self) -> Dict[str, List[Dict[str, Any]]]:
        """Export the rules in the format accepted by :meth:`update`."""
        with self._lock:
            return {
                literal: [{ORTH: orth, **attrs} for orth, attrs in rule]
                for literal, rule in self._rules.items()
            }

    def __contains__(self, chunk: str) -> bool:
        return chunk in self._rules

    def __len__(self) -> int:
        return len(self._rules)

    @staticmethod
    def _validate(
        literal: str,
        specs: Iterable[TokenSpec],
    ) -> Tuple[Tuple[str, Dict[str, Any]], ...]:
        if not isinstance(literal, str) or not literal:
            raise ConfigurationError(
                f"Special case literals must be non-empty strings, got {literal!r}."
            )
        specs = list(specs) if specs is not None else []
        if not specs:
            raise ConfigurationError(
                f'Special case "{literal}" must produce at least one token.'
            )
        rule = []
        for spec in specs:
            attrs = normalize_attrs(spec)
            orth = attrs.pop(ORTH, None)
            if not isinstance(orth, str) or not orth:
                raise ConfigurationError(
                    f'Every token of special case "{literal}" needs a non-empty '
                    f"{ORTH} attribute, got {spec!r}."
                )
            rule.append((orth, attrs))
        joined = "".join([orth for orth, _ in rule])
        if joined != literal:
            raise ConfigurationError(
                f'The {ORTH} values of special case "{literal}" add up to '
                f'"{joined}". Special cases can split text, not modify it.'
            )
        return tuple(rule)
