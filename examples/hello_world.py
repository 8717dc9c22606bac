"""
rule_adapter — Hello World

Policy rules live in one SQL table. The enforcer keeps its model in
memory; every change it makes is mirrored to storage.
"""

import asyncio
import logging
from pathlib import Path

import casbin

from rule_adapter import AdapterConfig, NotFoundError, RuleAdapter, RuleFilter
from rule_adapter.enforcer import CasbinAdapter

MODEL_PATH = str(Path(__file__).parent / "rbac_model.conf")


async def main():
    logging.basicConfig(level=logging.DEBUG)

    # ──────────────────────────────────────
    #  1. Open the store (set CASBIN_DB_* to point elsewhere)
    # ──────────────────────────────────────
    config = AdapterConfig.from_env()
    if config.backend == "postgres" and config.username is None:
        config = AdapterConfig(backend="sqlite", database="hello_rules.db")

    async with await RuleAdapter.create(config) as store:
        # ──────────────────────────────────────
        #  2. Seed rules in one transaction
        # ──────────────────────────────────────
        await store.save_all(
            [
                ("p", ["alice", "data1", "read"]),
                ("p", ["bob", "data2", "write"]),
                ("p", ["data2_admin", "data2", "read"]),
                ("p", ["data2_admin", "data2", "write"]),
                ("g", ["alice", "data2_admin"]),
            ]
        )

        # ──────────────────────────────────────
        #  3. Enforce through casbin
        # ──────────────────────────────────────
        enforcer = casbin.AsyncEnforcer(MODEL_PATH, CasbinAdapter(store))
        await enforcer.load_policy()

        print("\n=== Enforcement ===\n")
        print(f"  alice read data2:  {enforcer.enforce('alice', 'data2', 'read')}")
        print(f"  bob read data1:    {enforcer.enforce('bob', 'data1', 'read')}")

        # ──────────────────────────────────────
        #  4. Mutations are written through
        # ──────────────────────────────────────
        print("\n=== Runtime management ===\n")

        await enforcer.add_policy("bob", "data1", "read")
        print(f"  bob read data1:    {enforcer.enforce('bob', 'data1', 'read')}")

        await enforcer.remove_filtered_policy(0, "data2_admin")
        remaining = await store.load_filtered(RuleFilter("p", 1, ("data2",)))
        print(f"  data2 rules left:  {remaining}")

        try:
            await store.remove_one("p", ["nobody", "nothing", "never"])
        except NotFoundError as e:
            print(f"  [NOT FOUND] {e}")


if __name__ == "__main__":
    asyncio.run(main())
