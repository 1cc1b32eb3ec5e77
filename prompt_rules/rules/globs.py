"""Path glob compilation.

``**`` spans any number of path segments (including none), ``*`` and ``?``
stay inside one segment and ``[...]`` is a character class. A glob without a
``/`` is matched against the basename at any depth.
"""

from __future__ import annotations

import re
from dataclasses import dataclass


class GlobError(ValueError):
    pass


@dataclass(frozen=True)
class CompiledGlob:
    source: str
    regex: re.Pattern[str]

    def matches(self, path: str) -> bool:
        return self.regex.fullmatch(normalize_path(path)) is not None


def normalize_path(path: str) -> str:
    text = path.replace("\\", "/")
    while text.startswith("./"):
        text = text[2:]
    return text


def compile_glob(source: str) -> CompiledGlob:
    if not source or not source.strip():
        raise GlobError("empty glob")
    glob = normalize_path(source.strip())
    if "/" not in glob.rstrip("/"):
        glob = f"**/{glob}"
    glob = glob.rstrip("/")
    regex = re.compile(_translate(glob))
    return CompiledGlob(source=source, regex=regex)


def _translate(glob: str) -> str:
    parts: list[str] = []
    i = 0
    n = len(glob)
    while i < n:
        char = glob[i]
        if char == "*":
            if glob.startswith("**", i):
                at_segment_start = i == 0 or glob[i - 1] == "/"
                end = i + 2
                if at_segment_start and end < n and glob[end] == "/":
                    parts.append("(?:[^/]*/)*")
                    i = end + 1
                    continue
                if at_segment_start and end == n:
                    parts.append(".*")
                    i = end
                    continue
                raise GlobError(f"'**' must be a whole path segment in {glob!r}")
            parts.append("[^/]*")
        elif char == "?":
            parts.append("[^/]")
        elif char == "[":
            close = glob.find("]", i + 2 if glob[i + 1 : i + 2] in ("!", "]") else i + 1)
            if close == -1:
                raise GlobError(f"unterminated character class in {glob!r}")
            body = glob[i + 1 : close]
            if body.startswith("!"):
                body = "^" + body[1:]
            if "/" in body:
                raise GlobError(f"character class cannot contain '/' in {glob!r}")
            parts.append(f"[{body.replace(chr(92), chr(92) * 2)}]")
            i = close + 1
            continue
        else:
            parts.append(re.escape(char))
        i += 1
    return "".join(parts)
