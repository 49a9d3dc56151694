#!/usr/bin/env python3
"""
Demo script: run a few pipelines locally and print their outcomes.

Shows plain success, a recovery chain, fail_fast and a composed
sub-pipeline.

Usage:
    python -m scripts.demo_pipeline
"""

import asyncio
import os
import sys

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))


async def run_success_flow():
    """DEMO 1: steps only, every update merged in order."""
    from riel import pipeline

    _banner("DEMO 1: Success")

    async def load_user(ctx):
        await asyncio.sleep(0)
        return {"user": {"id": ctx["user_id"], "name": "Ada"}}

    outcome = await (
        pipeline("success")
        .step(load_user)
        .step(lambda ctx: {"greeting": f"hello {ctx['user']['name']}"})
        .run({"user_id": 7})
    )
    _print_outcome(outcome)


async def run_recovery_flow():
    """DEMO 2: a failing step, two fail handlers building the error context."""
    from riel import pipeline

    _banner("DEMO 2: Recovery chain")

    def charge(ctx):
        raise RuntimeError(f"card declined for order {ctx['order_id']}")

    outcome = await (
        pipeline("recovery")
        .step(charge)
        .step(lambda ctx: {"shipped": True})
        .fail(lambda error, error_ctx, ctx: {"reason": str(error)})
        .fail(lambda error, error_ctx, ctx: {"notified": ctx["order_id"], **error_ctx})
        .run({"order_id": "o-42"})
    )
    _print_outcome(outcome)


async def run_fail_fast_flow():
    """DEMO 3: fail_fast stops the recovery chain."""
    from riel import pipeline

    _banner("DEMO 3: fail_fast")

    def explode(ctx):
        raise ValueError("bad input")

    outcome = await (
        pipeline("fail-fast")
        .step(explode)
        .fail_fast(lambda error, error_ctx, ctx: {"stopped": True})
        .fail(lambda error, error_ctx, ctx: {"never": True})
        .run({})
    )
    _print_outcome(outcome)


async def run_composed_flow():
    """DEMO 4: a sub-pipeline registered as one step of another."""
    from riel import pipeline

    _banner("DEMO 4: Composition")

    inner = (
        pipeline("inner")
        .step(lambda ctx: {"token": "t-1"})
        .step(lambda ctx: {"scopes": ["read"]})
    )
    outcome = await (
        pipeline("outer")
        .step(inner.to_step())
        .step(lambda ctx: {"authorized": "read" in ctx["scopes"]})
        .run({"client": "demo"})
    )
    _print_outcome(outcome)


def _banner(title):
    print("\n" + "=" * 60)
    print(f"  {title}")
    print("=" * 60)


def _print_outcome(outcome):
    """Pretty-print an Outcome."""
    print(f"  ok       : {outcome.ok}")
    if outcome.ok:
        for key, value in outcome.ctx.items():
            print(f"    ctx.{key} = {value!r}")
    else:
        print(f"  error    : {outcome.error!r}")
        for key, value in outcome.error_ctx.items():
            print(f"    errorCtx.{key} = {value!r}")


async def main():
    from riel.core.logging import setup_logging
    setup_logging("WARNING")     # quiet logs, show formatted output only

    await run_success_flow()
    await run_recovery_flow()
    await run_fail_fast_flow()
    await run_composed_flow()

    print("\nAll demos completed.\n")


if __name__ == "__main__":
    asyncio.run(main())
