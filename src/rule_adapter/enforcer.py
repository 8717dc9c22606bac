"""CasbinAdapter — plugs a :class:`RuleAdapter` into a ``casbin.AsyncEnforcer``."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import TYPE_CHECKING

from casbin.persist.adapters.asyncio import AsyncAdapter

from rule_adapter.filters import RuleFilter

if TYPE_CHECKING:
    from casbin.model import Model

    from rule_adapter.adapter import RuleAdapter
    from rule_adapter.codec import Rule

logger = logging.getLogger(__name__)

# Model sections holding persisted rules: policies and role groupings.
_SECTIONS = ("p", "g")


class CasbinAdapter(AsyncAdapter):
    """pycasbin async adapter backed by a :class:`RuleAdapter`.

    The enforcer owns the in-memory model; this class only mirrors its
    loads and mutations to storage.

    Example:
        store = await RuleAdapter.create(config)
        enforcer = casbin.AsyncEnforcer("rbac_model.conf", CasbinAdapter(store))
        await enforcer.load_policy()
    """

    def __init__(self, rules: RuleAdapter) -> None:
        self._rules = rules
        self._filtered = False

    @property
    def rules(self) -> RuleAdapter:
        return self._rules

    # ── loading ──────────────────────────────────────────────

    async def load_policy(self, model: Model) -> None:
        _load_into(model, await self._rules.load_all())
        self._filtered = False

    async def load_filtered_policy(self, model: Model, filter: RuleFilter) -> None:
        """Load only the rules matching *filter* into *model*."""
        _load_into(model, await self._rules.load_filtered(filter))
        self._filtered = True

    def is_filtered(self) -> bool:
        return self._filtered

    # ── saving ───────────────────────────────────────────────

    async def save_policy(self, model: Model) -> bool:
        """Replace the stored rules with every policy in *model*."""
        rules = []
        for sec in _SECTIONS:
            for ptype, assertion in model.model.get(sec, {}).items():
                rules.extend((ptype, rule) for rule in assertion.policy)
        await self._rules.save_all(rules)
        logger.debug("Saved %d rules from model", len(rules))
        return True

    async def add_policy(self, sec: str, ptype: str, rule: Sequence[str]) -> bool:
        return await self._rules.add_one(ptype, rule)

    async def add_policies(self, sec: str, ptype: str, rules: Sequence[Sequence[str]]) -> bool:
        return await self._rules.add_many(ptype, rules)

    async def remove_policy(self, sec: str, ptype: str, rule: Sequence[str]) -> bool:
        return await self._rules.remove_one(ptype, rule)

    async def remove_policies(self, sec: str, ptype: str, rules: Sequence[Sequence[str]]) -> bool:
        return await self._rules.remove_many(ptype, rules)

    async def remove_filtered_policy(
        self, sec: str, ptype: str, field_index: int, *field_values: str
    ) -> bool:
        return await self._rules.remove_by_filter(ptype, field_index, list(field_values))


def _load_into(model: Model, rules: list[Rule]) -> None:
    """Add each rule to its assertion value-for-value; types the model lacks are skipped."""
    for rule_type, values in rules:
        sec = rule_type[0]
        if sec not in model.model or rule_type not in model.model[sec]:
            logger.debug("Skipping rule of unknown type '%s'", rule_type)
            continue
        model.add_policy(sec, rule_type, list(values))
