"""Template lookup for project scaffolding.

Templates are addressed by a logical identifier such as
``"project/main.go.tmpl"``.  :class:`TemplateResolver` builds a Jinja2
``ChoiceLoader`` that looks the identifier up in an injected resource store
first (normally the bundle shipped inside the package) and falls back to a
short, ordered list of directories on disk so that a live template tree can
be tested without reinstalling the package.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from importlib import resources
from importlib.resources.abc import Traversable
from pathlib import Path

from jinja2 import ChoiceLoader, Environment, FileSystemLoader, FunctionLoader, TemplateNotFound

from readygo.errors import TemplateNotFoundError


# ---------------------------------------------------------------------------
# Bundle
# ---------------------------------------------------------------------------

BUNDLE_PREFIX = "templates/"

# Tried in this order, relative to the base directory.
DEFAULT_SEARCH_PATHS: tuple[str, ...] = (
    "templates",
    "../../templates",
    "",
)


class BundledTemplates(Mapping[str, bytes]):
    """Read-only view of the templates packaged under ``readygo/templates/``.

    Keys are ``"templates/<identifier>"``; values are the raw file bytes.
    """

    def __init__(self, package: str = "readygo") -> None:
        self._root = resources.files(package)

    def _locate(self, key: str) -> Traversable | None:
        if not key.startswith(BUNDLE_PREFIX):
            return None
        node = self._root
        for part in key.split("/"):
            if not part or part in (".", ".."):
                return None
            node = node / part
        return node if node.is_file() else None

    def __getitem__(self, key: str) -> bytes:
        node = self._locate(key)
        if node is None:
            raise KeyError(key)
        return node.read_bytes()

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and self._locate(key) is not None

    def __iter__(self) -> Iterator[str]:
        base = self._root / BUNDLE_PREFIX.rstrip("/")
        if not base.is_dir():
            return
        pending: list[tuple[Traversable, str]] = [(base, BUNDLE_PREFIX.rstrip("/"))]
        while pending:
            node, prefix = pending.pop()
            for child in sorted(node.iterdir(), key=lambda c: c.name):
                key = f"{prefix}/{child.name}"
                if child.is_dir():
                    pending.append((child, key))
                elif child.is_file():
                    yield key

    def __len__(self) -> int:
        return sum(1 for _ in self)


# ---------------------------------------------------------------------------
# TemplateResolver
# ---------------------------------------------------------------------------


class TemplateResolver:
    """Maps a logical template identifier to its text.

    Args:
        store: Resource mapping keyed by ``"templates/<identifier>"``.
            Defaults to :class:`BundledTemplates`.  Pass an empty dict to
            resolve from disk only.
        search_paths: Ordered directories tried when the store misses.
            The first candidate that exists wins.
        base_dir: Directory the search paths are relative to.  Defaults to
            the current working directory at lookup time.
    """

    def __init__(
        self,
        store: Mapping[str, bytes] | None = None,
        search_paths: tuple[str, ...] | list[str] | None = None,
        base_dir: str | Path | None = None,
    ) -> None:
        self.store: Mapping[str, bytes] = BundledTemplates() if store is None else store
        self.search_paths = tuple(DEFAULT_SEARCH_PATHS if search_paths is None else search_paths)
        self.base_dir = Path(base_dir) if base_dir is not None else None
        self.loader = ChoiceLoader(
            [
                FunctionLoader(self._load_from_store),
                FileSystemLoader(self._search_dirs()),
            ]
        )
        self._environment = Environment(loader=self.loader)

    def _load_from_store(self, name: str) -> str | None:
        data = self.store.get(BUNDLE_PREFIX + name)
        return None if data is None else data.decode("utf-8")

    def _search_dirs(self) -> list[str]:
        # Relative entries are resolved against the cwd when a lookup happens.
        if self.base_dir is None:
            return [directory or "." for directory in self.search_paths]
        return [
            str(self.base_dir / directory) if directory else str(self.base_dir)
            for directory in self.search_paths
        ]

    def candidates(self, name: str) -> list[Path]:
        """Return the on-disk locations tried for *name*, in order."""
        base = self.base_dir if self.base_dir is not None else Path.cwd()
        return [base / directory / name if directory else base / name for directory in self.search_paths]

    def searched(self, name: str) -> list[str]:
        """Every location consulted for *name*, bundle key first."""
        return [f"bundle:{BUNDLE_PREFIX}{name}"] + [str(c) for c in self.candidates(name)]

    def resolve(self, name: str) -> str:
        """Return the text of template *name*.

        Raises:
            TemplateNotFoundError: If neither the store nor any disk
                candidate provides the template.
        """
        try:
            source, _, _ = self.loader.get_source(self._environment, name)
        except TemplateNotFound as exc:
            raise TemplateNotFoundError(name, self.searched(name)) from exc
        return source

    def list_templates(self) -> list[str]:
        """Return every identifier available in the store, sorted."""
        return sorted(
            key[len(BUNDLE_PREFIX):] for key in self.store if key.startswith(BUNDLE_PREFIX)
        )
