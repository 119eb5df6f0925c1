"""Lexical URL path helpers.

These work on slash-separated URL paths only and never touch the disk.
``posixpath.normpath`` is not used because it keeps a leading ``//``.
"""


def clean_path(path: str) -> str:
    """Return the shortest path equivalent to *path*.

    Collapses repeated slashes, drops ``.`` segments and resolves ``..``
    against the preceding segment. A rooted path never climbs above
    ``/``. Trailing slashes are removed, except for the root itself::

        clean_path("/a//b/./c/..")  == "/a/b"
        clean_path("/../x")         == "/x"
        clean_path("")              == "."
    """
    if not path:
        return "."

    rooted = path.startswith("/")
    parts: list[str] = []
    for segment in path.split("/"):
        if segment in ("", "."):
            continue
        if segment == "..":
            if parts and parts[-1] != "..":
                parts.pop()
            elif not rooted:
                parts.append("..")
            continue
        parts.append(segment)

    cleaned = "/".join(parts)
    if rooted:
        return "/" + cleaned
    return cleaned or "."


def base_name(path: str) -> str:
    """Return the last element of *path*, ignoring trailing slashes.

    ``base_name("/assets")`` is ``"assets"``, ``base_name("/")`` is ``"/"``
    and ``base_name("")`` is ``"."``.
    """
    if not path:
        return "."
    stripped = path.rstrip("/")
    if not stripped:
        return "/"
    return stripped.rsplit("/", 1)[-1]


def has_hidden_segment(path: str) -> bool:
    """True if any segment after the leading slash starts with a dot.

    Operates on the path exactly as given, so ``..`` counts as hidden.
    """
    return any(segment.startswith(".") for segment in path.split("/")[1:])
