#!/usr/bin/env python3
"""Run a prompt that calls client-side tools, then keep chatting.

The prompt at ``weather/assistant`` is expected to declare a ``get_weather``
tool.  When the model calls it mid-stream, the SDK runs the handler below and
posts its result back before reading the next event.

Requirements:
    pip install latitude-sdk
    export LATITUDE_API_KEY=...
    export LATITUDE_PROJECT_ID=...
"""

from __future__ import annotations

import asyncio
import random
from typing import Any

from latitude_sdk import Latitude, ToolCall
from latitude_sdk.observability import ConsoleSpanExporter, InMemoryMetricsCollector, TracingInstrumentation


async def get_weather(args: dict[str, Any], details: ToolCall) -> dict[str, Any]:
    await asyncio.sleep(0.1)
    return {"city": args.get("city", "unknown"), "temperature_c": random.randint(5, 30)}


async def main() -> None:
    metrics = InMemoryMetricsCollector()
    instrumentation = TracingInstrumentation([ConsoleSpanExporter()], metrics)

    async with Latitude(instrumentation=instrumentation) as client:
        result = await client.prompts.run(
            "weather/assistant",
            parameters={"question": "Should I take an umbrella in Lisbon today?"},
            tools={"get_weather": get_weather},
        )
        print(result.text)

        follow_up = await client.prompts.chat(
            result.uuid,
            [{"role": "user", "content": "And tomorrow in Porto?"}],
            tools={"get_weather": get_weather},
        )
        print(follow_up.text)

    print("tokens used:", metrics.total("latitude.total_tokens"))


if __name__ == "__main__":
    asyncio.run(main())
