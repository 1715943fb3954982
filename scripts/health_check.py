#!/usr/bin/env python3
"""
Health and smoke check for the Inventory Assistant service
"""

import asyncio
import aiohttp
import os
import sys
from datetime import datetime
from typing import Dict, List, Tuple

ASSISTANT_URL = os.getenv("ASSISTANT_URL", "http://localhost:8010")
CHAT_MODEL_URL = os.getenv("ASSISTANT_CHAT_MODEL_URL", "http://localhost:11434")

# Utterance -> expected intent
SMOKE_PHRASES = {
    "hello": "GREETING",
    "show me stock levels": "STOCK_SUMMARY",
    "what needs to be restocked": "LOW_STOCK",
    "show me recent stok movements by Ivan": "FILTERED_TRANSACTIONS",
}


async def check_endpoint(session: aiohttp.ClientSession, name: str, url: str) -> Tuple[str, bool, Dict]:
    """Check that an endpoint answers with HTTP 200"""
    try:
        async with session.get(url, timeout=aiohttp.ClientTimeout(total=10)) as response:
            if response.status == 200:
                data = await response.json(content_type=None)
                return name, True, data if isinstance(data, dict) else {}
            return name, False, {"error": f"HTTP {response.status}"}
    except Exception as e:
        return name, False, {"error": str(e)}


async def classify(session: aiohttp.ClientSession, text: str, expected: str) -> Tuple[str, bool, Dict]:
    """Classify one smoke phrase and compare with the expected intent"""
    try:
        async with session.post(
            f"{ASSISTANT_URL}/classify",
            json={"text": text},
            timeout=aiohttp.ClientTimeout(total=30),
        ) as response:
            if response.status != 200:
                return text, False, {"error": f"HTTP {response.status}"}
            data = await response.json()
            return text, data.get("intent") == expected, data
    except Exception as e:
        return text, False, {"error": str(e)}


async def run_checks() -> Tuple[List[Tuple[str, bool, Dict]], List[Tuple[str, bool, Dict]]]:
    async with aiohttp.ClientSession() as session:
        endpoints = await asyncio.gather(
            check_endpoint(session, "assistant", f"{ASSISTANT_URL}/health"),
            check_endpoint(session, "chat-model", f"{CHAT_MODEL_URL}/api/tags"),
        )
        smoke = await asyncio.gather(*[
            classify(session, text, expected) for text, expected in SMOKE_PHRASES.items()
        ])
    return list(endpoints), list(smoke)


def print_results(endpoints, smoke) -> int:
    """Print check results, returns the process exit code"""
    print(f"\n🏥 Inventory Assistant Health Check")
    print(f"📅 {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}")
    print("=" * 60)

    assistant_healthy = False
    for name, healthy, data in endpoints:
        status = "✅ HEALTHY" if healthy else "❌ UNHEALTHY"
        print(f"{name.upper():12} | {status}")
        if healthy and "ai_enabled" in data:
            print(f"             | AI enabled: {data['ai_enabled']}")
            print(f"             | Active contexts: {data.get('active_contexts', 0)}")
        elif not healthy:
            print(f"             | Error: {data.get('error', 'Unknown error')}")
        if name == "assistant":
            assistant_healthy = healthy
        print("-" * 60)

    passed = 0
    for text, ok, data in smoke:
        mark = "✅" if ok else "❌"
        detail = data.get("intent") or data.get("error", "Unknown error")
        print(f"{mark} {text!r} -> {detail}")
        if ok:
            passed += 1

    print(f"\n📊 SMOKE: {passed}/{len(smoke)} phrases classified as expected")

    # The chat model is optional, the assistant falls back to its rules
    if assistant_healthy and passed == len(smoke):
        print("🎉 Assistant operational!")
        return 0
    print("⚠️  Assistant needs attention")
    return 1


async def main():
    print("🔍 Starting health checks...")

    try:
        endpoints, smoke = await run_checks()
        sys.exit(print_results(endpoints, smoke))
    except Exception as e:
        print(f"❌ Health check failed: {e}")
        sys.exit(1)


if __name__ == "__main__":
    asyncio.run(main())
