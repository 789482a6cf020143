"""Resolve template placeholders against supplied values and the environment.

Resolution of a placeholder named ``NAME`` walks an ordered list of
*sources* -- the caller-supplied mapping first, then the process
environment -- under the alias expansion of ``NAME``::

    for candidate in (NAME, *ALIASES.get(NAME, ())):
        for source in (supplied, environ):
            if candidate in source:
                return source[candidate]

An explicitly supplied ``NAME`` therefore always wins; an alias only comes
into play when neither the supplied mapping nor the environment defines the
canonical name.  Unresolved optional placeholders become ``""``; unresolved
required placeholders raise :class:`~apicall.exceptions.MissingRequiredVariableError`.

Resolved values are substituted literally and never re-scanned.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from types import MappingProxyType
from typing import Any, Optional

from apicall.exceptions import MissingRequiredVariableError
from apicall.models import Placeholder
from apicall.templating.scanner import scan

logger = logging.getLogger(__name__)

ALIASES: Mapping[str, tuple[str, ...]] = MappingProxyType(
    {
        "API_KEY": ("OPENAI_API_KEY", "OPENROUTER_API_KEY"),
    }
)
"""Canonical variable name -> alternate names that may supply its value."""


def alias_chain(name: str, aliases: Mapping[str, tuple[str, ...]] = ALIASES) -> tuple[str, ...]:
    """Return ``name`` followed by its alternates, in lookup order."""
    return (name, *aliases.get(name, ()))


class VariableResolver:
    """Resolve placeholders through an ordered list of value sources.

    Args:
        supplied: Caller-supplied variables.  Non-string values are
            converted with :func:`str`.
        environ: Environment mapping consulted after *supplied*.  Defaults
            to :data:`os.environ`.
        aliases: Alias table; defaults to :data:`ALIASES`.
    """

    def __init__(
        self,
        supplied: Optional[Mapping[str, Any]] = None,
        environ: Optional[Mapping[str, str]] = None,
        aliases: Mapping[str, tuple[str, ...]] = ALIASES,
    ) -> None:
        self._supplied = {k: str(v) for k, v in (supplied or {}).items() if v is not None}
        self._environ = os.environ if environ is None else environ
        self._aliases = aliases

    @property
    def sources(self) -> tuple[Mapping[str, str], ...]:
        """Value sources in precedence order."""
        return (self._supplied, self._environ)

    def lookup(self, name: str) -> Optional[str]:
        """Return the value for *name*, or ``None`` when no source defines it."""
        for candidate in alias_chain(name, self._aliases):
            for index, source in enumerate(self.sources):
                value = source.get(candidate)
                if value is not None:
                    if candidate != name:
                        logger.debug("Variable %s resolved via alias %s", name, candidate)
                    elif index > 0:
                        logger.debug("Variable %s resolved from environment", name)
                    return value
        return None

    def value_for(self, placeholder: Placeholder) -> str:
        """Return the substitution text for *placeholder*.

        Raises:
            MissingRequiredVariableError: If *placeholder* is required and
                no source defines it.
        """
        value = self.lookup(placeholder.name)
        if value is not None:
            return value
        if placeholder.required:
            raise MissingRequiredVariableError(placeholder.name)
        return ""

    def resolve(self, template: str) -> str:
        """Substitute every placeholder in *template*, left to right."""
        parts: list[str] = []
        for token in scan(template):
            if isinstance(token, Placeholder):
                parts.append(self.value_for(token))
            else:
                parts.append(token.text)
        return "".join(parts)


def resolve(
    template: str,
    supplied: Optional[Mapping[str, Any]] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> str:
    """Resolve all placeholders in *template*.

    Convenience wrapper around :meth:`VariableResolver.resolve`.

    Args:
        template: Template text containing ``$NAME`` / ``!$NAME`` markers.
        supplied: Explicit variable values (highest precedence).
        environ: Environment mapping; defaults to :data:`os.environ`.

    Returns:
        The fully substituted string.

    Raises:
        MissingRequiredVariableError: If a required placeholder cannot be
            satisfied by any source.

    Example::

        >>> resolve("Bearer !$API_KEY", {"OPENAI_API_KEY": "sk-1"}, environ={})
        'Bearer sk-1'
    """
    return VariableResolver(supplied, environ).resolve(template)
