"""Bundled composition file sets.

The default compose files ship inside the package under
``opharness/data/compose/{services,stacks}/<name>/<file>``. Access goes through
the ``ResourceSet`` protocol so the materialization logic never touches the
package directory directly and can be exercised against ``MemoryResources``.
"""
from __future__ import annotations

from importlib import resources
from importlib.resources.abc import Traversable
from typing import Iterator, Mapping, Protocol, Union, runtime_checkable


@runtime_checkable
class ResourceSet(Protocol):
    """Read-only tree of files addressed by posix relative paths."""

    def walk(self) -> Iterator[str]:
        """Yield every file path (e.g. ``services/redis/docker-compose.yml``)."""
        ...

    def read_bytes(self, path: str) -> bytes:
        """Return file content.

        Raises:
            FileNotFoundError: If ``path`` is not in the set
        """
        ...


def _split(path: str) -> list[str]:
    parts = [p for p in str(path).replace("\\", "/").split("/") if p]
    if any(p in {".", ".."} for p in parts):
        raise FileNotFoundError(f"Invalid resource path: {path}")
    return parts


class PackagedResources:
    """Compose files bundled in ``opharness.data/compose``."""

    def __init__(self, package: str = "opharness.data", subdir: str = "compose") -> None:
        self.package = package
        self.subdir = subdir

    @property
    def root(self) -> Traversable:
        return resources.files(self.package).joinpath(self.subdir)

    def walk(self) -> Iterator[str]:
        def _walk(node: Traversable, prefix: str) -> Iterator[str]:
            for child in sorted(node.iterdir(), key=lambda c: c.name):
                if child.name.startswith((".", "__")):
                    continue
                rel = f"{prefix}{child.name}"
                if child.is_dir():
                    yield from _walk(child, rel + "/")
                elif child.is_file():
                    yield rel

        root = self.root
        if not root.is_dir():
            raise FileNotFoundError(f"Bundled resources not found: {self.package}/{self.subdir}")
        yield from _walk(root, "")

    def read_bytes(self, path: str) -> bytes:
        node = self.root
        for part in _split(path):
            node = node.joinpath(part)
        if not node.is_file():
            raise FileNotFoundError(f"Bundled resource not found: {path}")
        return node.read_bytes()


class MemoryResources:
    """In-memory resource set.

    Example:
        >>> res = MemoryResources({"stacks/demo/docker-compose.yml": "services: {}"})
        >>> list(res.walk())
        ['stacks/demo/docker-compose.yml']
    """

    def __init__(self, files: Mapping[str, Union[str, bytes]] | None = None) -> None:
        self._files: dict[str, bytes] = {}
        for path, content in (files or {}).items():
            key = "/".join(_split(path))
            self._files[key] = content.encode("utf-8") if isinstance(content, str) else bytes(content)
        self.reads: list[str] = []

    def walk(self) -> Iterator[str]:
        yield from sorted(self._files)

    def read_bytes(self, path: str) -> bytes:
        key = "/".join(_split(path))
        self.reads.append(key)
        try:
            return self._files[key]
        except KeyError as exc:
            raise FileNotFoundError(f"Resource not found: {path}") from exc


__all__ = ["ResourceSet", "PackagedResources", "MemoryResources"]
