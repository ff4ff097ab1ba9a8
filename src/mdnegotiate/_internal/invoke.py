"""Invoke helpers: call sync or async markdown producers uniformly.

Producers can be ``def`` or ``async def``. Any code that calls a
user-provided producer must handle both cases. This module keeps the
sync/async check in exactly one place.

Usage::

    from mdnegotiate._internal.invoke import invoke

    result = await invoke(handler, params)
"""

import functools
import inspect
from typing import Any

import anyio.to_thread


async def invoke(handler: Any, *args: Any, in_thread: bool = False, **kwargs: Any) -> Any:
    """Call a handler and await the result if it's awaitable.

    Coroutine functions are awaited directly. Plain functions run inline,
    or in a worker thread when *in_thread* is true so a blocking producer
    (file or database read) does not stall the event loop::

        def product(params):
            return Path(f"docs/{params['id']}.md").read_text()

        async def post(params):
            return await load_post(params["slug"])
    """
    if in_thread and not inspect.iscoroutinefunction(handler):
        result = await anyio.to_thread.run_sync(functools.partial(handler, *args, **kwargs))
    else:
        result = handler(*args, **kwargs)
    if inspect.isawaitable(result):
        result = await result
    return result
