"""Placeholder scanning and resolution for catalog templates.

* :mod:`~apicall.templating.scanner` -- single-pass tokeniser turning a
  template into :class:`~apicall.models.TextSegment` and
  :class:`~apicall.models.Placeholder` tokens.
* :mod:`~apicall.templating.resolver` -- precedence and alias rules that turn
  each placeholder into its substitution text.
"""

from apicall.templating.resolver import ALIASES, VariableResolver, alias_chain, resolve
from apicall.templating.scanner import placeholders, required_variables, scan, template_variables

__all__ = [
    "ALIASES",
    "VariableResolver",
    "alias_chain",
    "placeholders",
    "required_variables",
    "resolve",
    "scan",
    "template_variables",
]
