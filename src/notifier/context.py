"""Application metadata carried on the execution context.

Metadata is stored in a :class:`contextvars.Context` under a module-private
:class:`~contextvars.ContextVar`. The variable object itself is the lookup
key, so nothing outside this module can overwrite or forge it.

Two ways to attach it:

* explicitly, by deriving a scope with :func:`with_metadata` and passing it
  to ``Notifier.alert(..., scope=scope)``;
* ambiently, with ``with bind_metadata(meta): ...`` — every alert sent inside
  the block (including from tasks spawned there) sees the metadata.
"""

from __future__ import annotations

import contextlib
from collections.abc import Iterator
from contextvars import Context, ContextVar, copy_context

from pydantic import BaseModel, ConfigDict, Field

_metadata_var: ContextVar[Metadata] = ContextVar("notifier_metadata")


class Metadata(BaseModel):
    """Information about the application sending the alert.

    Note: ``extra`` entries are merged last by :meth:`to_dict` and win over a
    well-known field with the same key (e.g. ``extra={"commit": ...}``).
    """

    model_config = ConfigDict(frozen=True)

    app_name: str = ""
    instance_name: str = ""
    commit: str = ""
    build_date: str = ""
    extra: dict[str, str] = Field(default_factory=dict)

    def to_dict(self) -> dict[str, str]:
        """Flatten to a mapping, dropping empty well-known fields."""
        out: dict[str, str] = {}
        if self.app_name:
            out["app_name"] = self.app_name
        if self.instance_name:
            out["instance_name"] = self.instance_name
        if self.commit:
            out["commit"] = self.commit
        if self.build_date:
            out["build_date"] = self.build_date
        out.update(self.extra)
        return out


def with_metadata(scope: Context | None, metadata: Metadata) -> Context:
    """Return a copy of *scope* carrying *metadata*.

    A fresh empty context is used when *scope* is None. The input scope is
    left untouched.
    """
    derived = scope.copy() if scope is not None else Context()
    derived.run(_metadata_var.set, metadata.model_copy(deep=True))
    return derived


def metadata_from_scope(scope: Context | None) -> Metadata | None:
    """Return the metadata attached to *scope*, or None."""
    if scope is None:
        return None
    return scope.get(_metadata_var)


def current_scope() -> Context:
    """Snapshot of the current execution context."""
    return copy_context()


@contextlib.contextmanager
def bind_metadata(metadata: Metadata) -> Iterator[Metadata]:
    """Attach *metadata* to the current context for the ``with`` block."""
    bound = metadata.model_copy(deep=True)
    token = _metadata_var.set(bound)
    try:
        yield bound
    finally:
        _metadata_var.reset(token)
