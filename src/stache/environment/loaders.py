"""Partial and template sources for stache.

A loader maps a name to template text. It implements
``get_source(name) -> (source, filename)`` and raises
`TemplateNotFoundError` for unknown names. During a render the context asks
the loader for every ``{{>name}}``; a name the loader does not know renders
as empty text. `Environment.get_template` uses the same loader and lets the
error propagate.

Bundled loaders:
- `FileSystemLoader`: ``<name>.mustache`` files under one or more directories
- `DictLoader`: names mapped to source strings in memory
- `ChoiceLoader`: first hit across several loaders (overrides, themes)
- `FunctionLoader`: any callable ``name -> source | None``

Anything with a matching ``get_source`` works as a loader, e.g. partials
kept in a database table:

    ```python
    class SqlLoader:
        def get_source(self, name):
            row = conn.execute("SELECT body FROM partials WHERE name = ?", (name,)).fetchone()
            if row is None:
                raise TemplateNotFoundError(f"Template '{name}' not found")
            return row[0], f"sql:{name}"
    ```

"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Mapping
from difflib import get_close_matches
from pathlib import Path

from stache.context.base import Loader
from stache.environment.exceptions import TemplateNotFoundError

logger = logging.getLogger(__name__)

# Names listed in a not-found message before it is cut short
_MAX_LISTED = 10


def not_found(name: str, known: Iterable[str] = (), where: str = "") -> TemplateNotFoundError:
    """Build a not-found error, suggesting the closest known name.

    Example:
        >>> str(not_found("heade", ["header", "footer"]))
        "Template 'heade' not found. Did you mean 'header'?"
    """
    msg = f"Template '{name}' not found"
    if where:
        msg += f" in {where}"
    names = sorted(known)
    close = get_close_matches(name, names, n=1, cutoff=0.6)
    if close:
        msg += f". Did you mean '{close[0]}'?"
    elif names:
        msg += ". Available: " + ", ".join(names[:_MAX_LISTED])
        if len(names) > _MAX_LISTED:
            msg += f" ... ({len(names)} total)"
    return TemplateNotFoundError(msg)


class FileSystemLoader:
    """Read ``<name><extension>`` files from a list of directories.

    Directories are searched in order and the first existing file wins, so
    a project directory listed before a shared one overrides its partials.
    Names may contain ``/`` to reach subdirectories (``{{>forms/input}}``).

    Loaded sources are kept per name for the loader's lifetime. Call
    ``clear_cache()`` after templates change on disk.

    Example:
            >>> loader = FileSystemLoader(["site/partials", "shared/partials"])
            >>> source, filename = loader.get_source("header")
            >>> filename
            'site/partials/header.mustache'

    """

    __slots__ = ("_cache", "_encoding", "_extension", "_paths")

    def __init__(
        self,
        paths: str | Path | list[str | Path],
        extension: str = ".mustache",
        encoding: str = "utf-8",
    ):
        if isinstance(paths, (str, Path)):
            paths = [paths]
        self._paths = [Path(p) for p in paths]
        self._extension = extension
        self._encoding = encoding
        self._cache: dict[str, tuple[str, str]] = {}

    @property
    def paths(self) -> list[Path]:
        return list(self._paths)

    def _locate(self, name: str) -> Path | None:
        filename = name + self._extension
        for directory in self._paths:
            candidate = directory / filename
            if candidate.is_file():
                return candidate
        return None

    def get_source(self, name: str) -> tuple[str, str]:
        if name in self._cache:
            logger.debug("Partial cache hit: %s", name)
            return self._cache[name]

        path = self._locate(name)
        if path is None:
            searched = ", ".join(str(p) for p in self._paths)
            raise not_found(name, self.list_templates(), where=searched)

        entry = (path.read_text(self._encoding), str(path))
        self._cache[name] = entry
        return entry

    def clear_cache(self) -> None:
        self._cache.clear()

    def list_templates(self) -> list[str]:
        """Names (extension stripped, ``/``-separated) found under all paths."""
        names: set[str] = set()
        cut = len(self._extension)
        for directory in self._paths:
            if not directory.is_dir():
                continue
            for path in directory.rglob("*" + self._extension):
                relative = path.relative_to(directory).as_posix()
                names.add(relative[:-cut] if cut else relative)
        return sorted(names)


class DictLoader:
    """Serve sources from a name -> text mapping.

    Handy in tests and for partials generated at runtime. The mapping is
    used by reference, so later changes to it are visible.

    Example:
            >>> env = Environment(loader=DictLoader({"user": "<b>{{name}}</b>"}))
            >>> env.render("{{#users}}{{>user}}{{/users}}", {"users": [{"name": "Ann"}]})
            '<b>Ann</b>'

    """

    __slots__ = ("_mapping",)

    def __init__(self, mapping: Mapping[str, str]):
        self._mapping = mapping

    def get_source(self, name: str) -> tuple[str, None]:
        try:
            return self._mapping[name], None
        except KeyError:
            raise not_found(name, self._mapping) from None

    def list_templates(self) -> list[str]:
        return sorted(self._mapping)


class ChoiceLoader:
    """Ask several loaders in turn and use the first that has the name.

    Example:
            >>> site = DictLoader({"nav": "<nav>site</nav>"})
            >>> base = DictLoader({"nav": "<nav>base</nav>", "footer": "<footer/>"})
            >>> loader = ChoiceLoader([site, base])
            >>> loader.get_source("nav")[0], loader.get_source("footer")[0]
            ('<nav>site</nav>', '<footer/>')

    """

    __slots__ = ("_loaders",)

    def __init__(self, loaders: list[Loader]):
        self._loaders = list(loaders)

    def get_source(self, name: str) -> tuple[str, str | None]:
        for loader in self._loaders:
            try:
                return loader.get_source(name)
            except TemplateNotFoundError:
                pass
        raise TemplateNotFoundError(
            f"Template '{name}' not found in any of {len(self._loaders)} loaders"
        )

    def list_templates(self) -> list[str]:
        names: set[str] = set()
        for loader in self._loaders:
            lister = getattr(loader, "list_templates", None)
            if lister is not None:
                names.update(lister())
        return sorted(names)


class FunctionLoader:
    """Adapt a plain callable into a loader.

    The callable gets the name and returns the source text, a
    ``(source, filename)`` pair, or None when it has no such template.

    Example:
            >>> def load(name):
            ...     return "Hi {{name}}" if name == "hi" else None
            >>> env = Environment(loader=FunctionLoader(load))
            >>> env.render("{{>hi}}", {"name": "Bo"})
            'Hi Bo'

    """

    __slots__ = ("_load",)

    def __init__(self, load: Callable[[str], str | tuple[str, str | None] | None]):
        self._load = load

    def get_source(self, name: str) -> tuple[str, str | None]:
        result = self._load(name)
        if result is None:
            raise TemplateNotFoundError(f"Template '{name}' not found")
        if isinstance(result, str):
            return result, "<function>"
        return result

    def list_templates(self) -> list[str]:
        return []
