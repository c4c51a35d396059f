"""Validated value types for branch names and commit ids.

Both types are frozen dataclasses so they can be used as dict keys, compare
by value, and sort by their raw string. Construction is the only place
validation happens: an instance that exists is always valid.
"""

import string
from dataclasses import dataclass

_FORBIDDEN_BRANCH_CHARS = frozenset("~^:?*[\\")
_HEX_DIGITS = frozenset(string.hexdigits)


class InvalidBranchNameError(ValueError):
    """Raised when a string is not an acceptable branch name."""

    def __init__(self, value: str, reason: str) -> None:
        super().__init__(f"Invalid branch name {value!r}: {reason}")
        self.value = value
        self.reason = reason


class InvalidCommitIdError(ValueError):
    """Raised when a string is not an acceptable git object id."""

    def __init__(self, value: str) -> None:
        super().__init__(
            f"Invalid commit id {value!r}: expected 7-40 or 64 hexadecimal characters"
        )
        self.value = value


def branch_name_problem(value: str) -> str | None:
    """Return why `value` is not a valid branch name, or None if it is.

    This is the subset of `git check-ref-format` rules the graph relies on.
    """
    if not value:
        return "name is empty"
    if value.startswith("/") or value.endswith("/"):
        return "name starts or ends with '/'"
    if " " in value:
        return "name contains a space"
    bad = sorted(_FORBIDDEN_BRANCH_CHARS.intersection(value))
    if bad:
        return f"name contains forbidden character(s) {''.join(bad)!r}"
    if ".." in value:
        return "name contains '..'"
    return None


def is_valid_commit_id(value: str) -> bool:
    """Check length (short/long SHA-1 or SHA-256) and that every char is hex."""
    length = len(value)
    if not (7 <= length <= 40 or length == 64):
        return False
    return all(ch in _HEX_DIGITS for ch in value)


@dataclass(frozen=True, order=True)
class BranchName:
    """A git branch name that passed validation."""

    value: str

    def __post_init__(self) -> None:
        problem = branch_name_problem(self.value)
        if problem is not None:
            raise InvalidBranchNameError(self.value, problem)

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True, order=True)
class CommitId:
    """A git object id (abbreviated or full SHA-1, or full SHA-256).

    Stored lowercase so the same id compares equal whatever case it was given in.
    """

    value: str

    def __post_init__(self) -> None:
        if not is_valid_commit_id(self.value):
            raise InvalidCommitIdError(self.value)
        object.__setattr__(self, "value", self.value.lower())

    def short(self) -> str:
        """First 7 characters, for display."""
        return self.value[:7]

    def __str__(self) -> str:
        return self.value
