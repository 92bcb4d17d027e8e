# Copyright (c) Meta Platforms, Inc. and affiliates.
# All rights reserved.
"""Include/exclude rules deciding which mounts are reported.

Patterns are given as `glob:<pattern>`, `regex:<pattern>` or a bare glob. Several
patterns may be given in one value separated by commas, e.g.
`/tmp/**,regex:/var/adm/ras/.*`.

Glob syntax:
    *       any run of characters within one path component
    **      any run of characters, crossing `/`
    ?       exactly one character other than `/`
    [...]   a character class, `[!...]` negates it; it never matches `/`
    {a,b}   either `a` or `b`
"""
import logging
import re
from dataclasses import dataclass, field
from typing import Collection, FrozenSet, Iterable, List, Pattern, Tuple

from fsmon.monitoring.filesystem.constants import (
    NETWORK_FS_TYPES,
    PSEUDO_FS_TYPES,
    ROOT_PATH,
)

logger = logging.getLogger(__name__)

GLOB_PREFIX = "glob:"
REGEX_PREFIX = "regex:"


def class_to_regex(body: str) -> str:
    """Translate the inside of a glob `[...]` class. The class never matches `/`
    and a leading `^` is a literal.

    >>> class_to_regex("!0-9")
    '(?!/)[^0-9]'
    >>> class_to_regex("^b")
    '(?!/)[\\\\^b]'
    """
    negate = body.startswith("!")
    if negate:
        body = body[1:]
    chars = body.replace("\\", "\\\\").replace("[", "\\[").replace("^", "\\^")
    return "(?!/)[" + ("^" if negate else "") + chars + "]"


def glob_to_regex(glob: str) -> str:
    """Translate a path glob into an equivalent regular expression.

    >>> glob_to_regex("/var/**")
    '/var/.*'
    >>> glob_to_regex("/dev/hd?")
    '/dev/hd[^/]'
    >>> glob_to_regex("{/proc,/tmp}")
    '(?:/proc|/tmp)'
    """
    parts: List[str] = []
    in_group = False
    i = 0
    while i < len(glob):
        c = glob[i]
        if c == "*":
            if glob.startswith("**", i):
                parts.append(".*")
                i += 2
                continue
            parts.append("[^/]*")
        elif c == "?":
            parts.append("[^/]")
        elif c == "[":
            j = i + 1
            if glob.startswith("!", j):
                j += 1
            if glob.startswith("]", j):
                j += 1
            end = glob.find("]", j)
            if end < 0:
                parts.append(re.escape(c))
            else:
                parts.append(class_to_regex(glob[i + 1 : end]))  # noqa: E203
                i = end
        elif c == "{" and not in_group:
            in_group = True
            parts.append("(?:")
        elif c == "}" and in_group:
            in_group = False
            parts.append(")")
        elif c == "," and in_group:
            parts.append("|")
        elif c == "\\" and i + 1 < len(glob):
            i += 1
            parts.append(re.escape(glob[i]))
        else:
            parts.append(re.escape(c))
        i += 1
    return "".join(parts)


def split_patterns(value: str) -> List[str]:
    """Split a configured value into its patterns. Commas inside `{...}` do not
    split.

    >>> split_patterns("/tmp/**, {/a,/b} ,")
    ['/tmp/**', '{/a,/b}']
    """
    patterns = []
    depth = 0
    current: List[str] = []
    for c in value:
        if c == "{":
            depth += 1
        elif c == "}" and depth > 0:
            depth -= 1
        elif c == "," and depth == 0:
            patterns.append("".join(current).strip())
            current = []
            continue
        current.append(c)
    patterns.append("".join(current).strip())
    return [p for p in patterns if p]


def compile_pattern(pattern: str) -> Pattern[str]:
    """Raises `re.error` for an invalid regex."""
    if pattern.startswith(REGEX_PREFIX):
        return re.compile(pattern[len(REGEX_PREFIX) :])  # noqa: E203
    if pattern.startswith(GLOB_PREFIX):
        pattern = pattern[len(GLOB_PREFIX) :]  # noqa: E203
    return re.compile(glob_to_regex(pattern))


def compile_matchers(values: Iterable[str]) -> Tuple[Pattern[str], ...]:
    return tuple(
        compile_pattern(pattern)
        for value in values
        for pattern in split_patterns(value)
    )


def matches_any(s: str, matchers: Iterable[Pattern[str]]) -> bool:
    return any(m.fullmatch(s) is not None for m in matchers)


@dataclass(frozen=True)
class FilterPolicy:
    """Decides which mounts are eligible to be reported. Built once at startup and
    safe to share between threads."""

    path_includes: Tuple[Pattern[str], ...] = ()
    path_excludes: Tuple[Pattern[str], ...] = ()
    volume_includes: Tuple[Pattern[str], ...] = ()
    volume_excludes: Tuple[Pattern[str], ...] = ()
    pseudo_fs_types: FrozenSet[str] = field(default=PSEUDO_FS_TYPES)
    network_fs_types: FrozenSet[str] = field(default=NETWORK_FS_TYPES)

    @classmethod
    def from_config(
        cls,
        path_includes: Collection[str] = (),
        path_excludes: Collection[str] = (),
        volume_includes: Collection[str] = (),
        volume_excludes: Collection[str] = (),
    ) -> "FilterPolicy":
        policy = cls(
            path_includes=compile_matchers(path_includes),
            path_excludes=compile_matchers(path_excludes),
            volume_includes=compile_matchers(volume_includes),
            volume_excludes=compile_matchers(volume_excludes),
        )
        logger.debug(f"Loaded file store filter policy: {policy}")
        return policy

    def is_excluded(self, path: str, volume: str) -> bool:
        """Includes take precedence over excludes."""
        if matches_any(path, self.path_includes) or matches_any(
            volume, self.volume_includes
        ):
            return False
        return matches_any(path, self.path_excludes) or matches_any(
            volume, self.volume_excludes
        )

    def is_network(self, fs_type: str) -> bool:
        return fs_type in self.network_fs_types

    def is_eligible(
        self, path: str, volume: str, fs_type: str, local_only: bool
    ) -> bool:
        if local_only and self.is_network(fs_type):
            return False
        # the root is exempt from pseudo file system and pattern exclusion
        if path != ROOT_PATH and (
            fs_type in self.pseudo_fs_types or self.is_excluded(path, volume)
        ):
            return False
        return True
