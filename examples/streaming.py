#!/usr/bin/env python3
"""Stream a prompt run and print text as the model writes it.

Requirements:
    pip install latitude-sdk
    export LATITUDE_API_KEY=...
    export LATITUDE_PROJECT_ID=...
"""

from __future__ import annotations

import asyncio
import logging
import sys

from latitude_sdk import Latitude, LatitudeApiError, StreamEvent
from latitude_sdk.models.events import TextDelta


def print_delta(event: StreamEvent) -> None:
    if isinstance(event.data, TextDelta):
        print(event.data.text_delta, end="", flush=True)


def report(error: LatitudeApiError) -> None:
    print(f"\nrun failed ({error.status} {error.error_code}): {error.message}", file=sys.stderr)


async def main(path: str) -> None:
    async with Latitude() as client:
        result = await client.prompts.run(
            path,
            parameters={"topic": "the history of the printing press"},
            on_event=print_delta,
            on_error=report,
        )
    if result is not None:
        usage = result.usage
        print(f"\n\nconversation {result.uuid}: {usage.total_tokens} tokens")


if __name__ == "__main__":
    logging.basicConfig(level=logging.WARNING)
    asyncio.run(main(sys.argv[1] if len(sys.argv) > 1 else "essay"))
