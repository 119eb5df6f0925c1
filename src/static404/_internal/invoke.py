"""Call sync or async callbacks uniformly.

Not-found callbacks can be ``def`` or ``async def``. Everything that calls
one goes through :func:`invoke` so the check lives in exactly one place.
"""

import inspect
from typing import Any


async def invoke(callback: Any, *args: Any, **kwargs: Any) -> Any:
    """Call *callback* and await the result if it is awaitable.

    Both of these work as not-found callbacks::

        def plain(writer, request):
            ...

        async def rendered(writer, request):
            await writer.send_response(Response("gone", status=404))
    """
    result = callback(*args, **kwargs)
    if inspect.isawaitable(result):
        result = await result
    return result
