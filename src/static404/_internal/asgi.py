"""ASGI type aliases.

Raw ASGI messages stay plain dicts; these aliases just name the three
callables every app and wrapper passes around.
"""

from collections.abc import Awaitable, Callable, MutableMapping
from typing import Any, TypeAlias

Scope: TypeAlias = MutableMapping[str, Any]
Message: TypeAlias = MutableMapping[str, Any]
Receive: TypeAlias = Callable[[], Awaitable[Message]]
Send: TypeAlias = Callable[[Message], Awaitable[None]]

# Any ASGI 3.0 application
ASGIApp: TypeAlias = Callable[[Scope, Receive, Send], Awaitable[None]]
