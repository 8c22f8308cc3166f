# src/ledger_cron/tasks/task_models.py

from __future__ import annotations

import json
from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass
from typing import Any, overload

from ..errors import MalformedTaskEntry, TaskDecodeError, TaskLoadError
from . import registry
from .params import Params
from .registry import Endpoint


@dataclass(frozen=True, slots=True)
class Task:
    """
    One scheduled action.

    `schedule` is a 6-field cron expression (seconds first). It is stored
    verbatim; whoever fires the task owns its interpretation.
    """

    schedule: str
    params: Params

    @property
    def endpoint(self) -> Endpoint:
        return registry.spec_for(self.params).endpoint

    @classmethod
    def from_dict(cls, entry: Mapping[str, Any]) -> Task:
        if not isinstance(entry, Mapping):
            raise MalformedTaskEntry("<entry>", f"expected an object, got {type(entry).__name__}")

        for key in ("schedule", "endpoint", "params"):
            if key not in entry:
                raise MalformedTaskEntry(key, "missing")
            if not isinstance(entry[key], str):
                raise MalformedTaskEntry(key, f"expected a string, got {type(entry[key]).__name__}")

        params = registry.decode_params(entry["endpoint"], entry["params"])
        return cls(schedule=entry["schedule"], params=params)


class TaskCollection:
    """
    Ordered, immutable set of tasks in document order.

    Re-iterable and indexable, so the same collection can be scanned on
    every scheduler tick.
    """

    __slots__ = ("_tasks",)

    def __init__(self, tasks: Iterable[Task] = ()) -> None:
        self._tasks: tuple[Task, ...] = tuple(tasks)

    @classmethod
    def from_document(cls, doc: Mapping[str, Any]) -> TaskCollection:
        """
        Parse `{"tasks": [{"schedule", "endpoint", "params"}, ...]}`.

        All-or-nothing: the first bad entry raises TaskLoadError carrying its
        zero-based index; no partial collection is ever returned.
        """
        if not isinstance(doc, Mapping):
            raise TaskLoadError(None, MalformedTaskEntry("tasks", "document must be an object"))
        entries = doc.get("tasks")
        if not isinstance(entries, list):
            raise TaskLoadError(None, MalformedTaskEntry("tasks", "expected a list"))

        tasks: list[Task] = []
        for index, entry in enumerate(entries):
            try:
                tasks.append(Task.from_dict(entry))
            except TaskDecodeError as e:
                raise TaskLoadError(index, e) from e
        return cls(tasks)

    @classmethod
    def from_json(cls, text: str) -> TaskCollection:
        try:
            doc = json.loads(text)
        except json.JSONDecodeError as e:
            raise TaskLoadError(None, e) from e
        return cls.from_document(doc)

    def __iter__(self) -> Iterator[Task]:
        return iter(self._tasks)

    def __len__(self) -> int:
        return len(self._tasks)

    @overload
    def __getitem__(self, index: int) -> Task: ...

    @overload
    def __getitem__(self, index: slice) -> tuple[Task, ...]: ...

    def __getitem__(self, index):
        return self._tasks[index]

    def __repr__(self) -> str:
        return f"TaskCollection({len(self._tasks)} tasks)"
