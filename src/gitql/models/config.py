"""Configuration models for gitql.

GitqlConfig holds session settings used by open_database() and the CLI.
ModuleArguments validates the argument vector the host passes when a
virtual table is created or connected.
"""

from __future__ import annotations

from typing import Sequence

from pydantic import BaseModel, ValidationError, field_validator

from gitql.exceptions import MalformedPathError, MissingPathError, TooManyArgumentsError

# module name, database name, table name, repository path
MODULE_ARGUMENT_COUNT = 4


class GitqlConfig(BaseModel):
    """Session configuration."""

    repo_path: str = "."
    database: str = ":memory:"
    commits_table: str = "commits"
    refs_table: str = "refs"
    commits_module: str = "git_log"
    refs_module: str = "git_ref"


def unquote_path(raw: str) -> str:
    """Strip SQL-style quotes from a CREATE VIRTUAL TABLE argument.

    Accepts "..." or '...'; a doubled quote character inside is unescaped.
    Raises ValueError for anything else.
    """
    text = raw.strip()
    if len(text) < 2 or text[0] not in "\"'" or text[-1] != text[0]:
        raise ValueError(f"not a quoted string: {raw!r}")
    quote = text[0]
    inner = text[1:-1]
    if quote in inner.replace(quote * 2, ""):
        raise ValueError(f"unescaped quote in {raw!r}")
    inner = inner.replace(quote * 2, quote)
    if not inner:
        raise ValueError("empty repository path")
    return inner


class ModuleArguments(BaseModel):
    """Validated connect arguments for a gitql virtual table."""

    model_config = {"frozen": True}

    module_name: str
    database_name: str
    table_name: str
    repo_path: str

    @field_validator("repo_path", mode="before")
    @classmethod
    def _unquote(cls, v: object) -> object:
        if isinstance(v, str):
            return unquote_path(v)
        return v

    @classmethod
    def from_argv(cls, args: Sequence[str]) -> ModuleArguments:
        """Build from the host's argument vector.

        Raises:
            TooManyArgumentsError: More than one source-specific argument.
            MissingPathError: The repository path was not supplied.
            MalformedPathError: The path is not a quoted string.
        """
        if len(args) > MODULE_ARGUMENT_COUNT:
            raise TooManyArgumentsError(len(args))
        if len(args) < MODULE_ARGUMENT_COUNT:
            raise MissingPathError()
        module_name, database_name, table_name, raw_path = args
        try:
            return cls(
                module_name=module_name,
                database_name=database_name,
                table_name=table_name,
                repo_path=raw_path,
            )
        except ValidationError as exc:
            raise MalformedPathError(str(raw_path)) from exc
