#!/usr/bin/env python3
"""
Demo script for the Wolfram knowledge service.

Runs each action once against the live Wolfram|Alpha API, then repeats a
query to show the result cache. Requires WOLFRAM_APP_ID.
"""

import asyncio
import time

from wolfram_knowledge import WolframService
from wolfram_knowledge.exceptions import WolframError
from wolfram_knowledge.services import formatter


def print_section(title: str) -> None:
    """Print a section header."""
    print("\n" + "=" * 70)
    print(f"  {title}")
    print("=" * 70)


async def demo_actions(service: WolframService) -> None:
    """Demonstrate the derived actions."""
    print_section("Actions")

    print("\n🧮 Solve: x + 3 = 7")
    print(f"  {await service.solve_math('x + 3 = 7')}")

    print("\n🧮 Compute: sqrt(2) to 10 digits")
    print(f"  {await service.compute('N[sqrt(2), 10]')}")

    print("\n📋 Steps: derivative of x^3")
    steps = await service.get_step_by_step("derivative of x^3")
    print(formatter.format_steps("derivative of x^3", steps))

    print("\n📚 Facts: Marie Curie")
    facts = await service.get_facts("Marie Curie")
    for fact in facts[: service.settings.max_results]:
        print(f"  - {fact}")

    print("\n📊 Analyze: 3, 1, 4, 1, 5, 9, 2, 6")
    analysis = await service.analyze_data("3, 1, 4, 1, 5, 9, 2, 6")
    print(formatter.format_analysis(analysis))

    print("\n💬 Spoken: distance to the Moon")
    spoken = await service.get_spoken_answer("distance to the Moon")
    print(f"  {spoken.spoken if spoken.success else spoken.error}")


async def demo_cache(service: WolframService) -> None:
    """Demonstrate cache hits on repeated queries."""
    print_section("Result Cache")

    for attempt in ("cold", "warm"):
        start = time.time()
        result = await service.query("population of Tokyo")
        duration = (time.time() - start) * 1000
        print(f"\n  {attempt}: {duration:.1f}ms, {result.numpods} pods")

    print(f"\n  Cache size: {service.get_stats().cache_size}")


async def demo_conversation(service: WolframService) -> None:
    """Demonstrate a two-turn conversation."""
    print_section("Conversation")

    for question in ("What is the tallest mountain on Earth?", "How tall is it in feet?"):
        reply = await service.conversational_query(question, user_id="demo-user")
        print(f"\n  Q: {question}")
        print(f"  A: {reply.error or reply.result}")

    service.clear_conversation("demo-user")


async def main() -> None:
    """Run all demos."""
    print("\n🚀 Wolfram Knowledge Demo")
    print("=" * 70)

    try:
        service = WolframService.create()
        await service.initialize()
    except WolframError as e:
        print(f"\n❌ Error: {e}")
        print("\nSet WOLFRAM_APP_ID to your Wolfram|Alpha App ID.")
        return

    try:
        await demo_actions(service)
        await demo_cache(service)
        await demo_conversation(service)

        print("\n" + "=" * 70)
        print("✅ Demo completed successfully!")
        print("=" * 70)

    except WolframError as e:
        print(f"\n❌ Error: {e}")
    finally:
        await service.close()


if __name__ == "__main__":
    asyncio.run(main())
