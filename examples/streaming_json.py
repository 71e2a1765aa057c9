#!/usr/bin/env python3
"""Consume a JSON array generated by the model one object at a time.

The prompt at ``data/fake-users`` is expected to answer with a JSON array of
user objects.  ``JsonObjectListener`` hands each object over as soon as its
closing brace arrives, long before the run finishes.

Requirements:
    pip install latitude-sdk
    export LATITUDE_API_KEY=...
    export LATITUDE_PROJECT_ID=...
"""

from __future__ import annotations

import asyncio
from typing import Any

from latitude_sdk import JsonObjectListener, Latitude


def show_user(user: Any) -> None:
    print(f"- {user.get('name')} <{user.get('email')}>")


async def main() -> None:
    listener = JsonObjectListener(on_object=show_user)
    async with Latitude() as client:
        await client.prompts.run("data/fake-users", parameters={"count": 10}, on_event=listener)
    print(f"{len(listener.objects)} users received")


if __name__ == "__main__":
    asyncio.run(main())
