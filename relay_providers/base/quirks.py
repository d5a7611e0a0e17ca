"""Model quirk rule table.

Some model families reject parameters that are valid for their siblings:
reasoning models refuse the ``system`` role, several families only accept
``temperature=1`` and expect ``max_completion_tokens`` instead of
``max_tokens``. Instead of scattering ``model.startswith(...)`` checks
through the adapters, each family is one row in :data:`MODEL_QUIRKS` and
request builders call :func:`resolve_quirks` once per request.

Rows are matched in order against the lower-cased model id (``re.match``,
anchored at the start). Every matching row contributes the fields it sets;
earlier rows win for a field set by several rows.
"""
from __future__ import annotations

import re
from dataclasses import dataclass, fields
from typing import Optional, Sequence

DEFAULT_TOKEN_LIMIT_PARAM = "max_tokens"


@dataclass(frozen=True)
class ModelQuirk:
    """One rule: model-id pattern plus the overrides it implies (``None`` = unset)."""

    pattern: str
    forbids_system_role: Optional[bool] = None
    fixed_temperature: Optional[float] = None
    token_limit_param: Optional[str] = None
    omit_top_p: Optional[bool] = None

    def matches(self, model: str) -> bool:
        return re.match(self.pattern, model.lower()) is not None


@dataclass(frozen=True)
class ResolvedQuirks:
    """Effective request constraints for one model id."""

    forbids_system_role: bool = False
    fixed_temperature: Optional[float] = None
    token_limit_param: str = DEFAULT_TOKEN_LIMIT_PARAM
    omit_top_p: bool = False

    def temperature(self, requested: Optional[float], default: Optional[float] = None) -> Optional[float]:
        """Return the temperature to send (fixed value wins over the request)."""
        if self.fixed_temperature is not None:
            return self.fixed_temperature
        return requested if requested is not None else default


MODEL_QUIRKS: tuple[ModelQuirk, ...] = (
    ModelQuirk(
        r"o1",
        forbids_system_role=True,
        fixed_temperature=1.0,
        token_limit_param="max_completion_tokens",
        omit_top_p=True,
    ),
    ModelQuirk(r"o[34]", fixed_temperature=1.0, token_limit_param="max_completion_tokens", omit_top_p=True),
    ModelQuirk(r"gpt-5", fixed_temperature=1.0, token_limit_param="max_completion_tokens", omit_top_p=True),
)


def resolve_quirks(model: str, rules: Sequence[ModelQuirk] = MODEL_QUIRKS) -> ResolvedQuirks:
    """Fold every rule matching ``model`` into a :class:`ResolvedQuirks`."""
    merged = {}
    for rule in rules:
        if not rule.matches(model):
            continue
        for f in fields(ModelQuirk):
            if f.name == "pattern":
                continue
            value = getattr(rule, f.name)
            if value is not None:
                merged.setdefault(f.name, value)
    return ResolvedQuirks(**merged)


__all__ = [
    "ModelQuirk",
    "ResolvedQuirks",
    "MODEL_QUIRKS",
    "DEFAULT_TOKEN_LIMIT_PARAM",
    "resolve_quirks",
]
