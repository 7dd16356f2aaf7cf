"""Cart persistence port and its adapters.

A ``CartStore`` keeps the serialized cart between requests or sessions:
- InMemoryCartStore for tests and single-process use
- JsonFileCartStore for a local file, one JSON document per cart
"""

import json
from abc import ABC, abstractmethod
from pathlib import Path

from storefront.errors import InvalidRequest


class CartStore(ABC):
    """Abstract cart persistence interface."""

    @abstractmethod
    def load(self, cart_id: str) -> dict | None:
        """Return the stored cart document, or None when nothing is stored."""
        ...

    @abstractmethod
    def save(self, cart_id: str, document: dict) -> None:
        """Replace the stored cart document."""
        ...


class InMemoryCartStore(CartStore):
    def __init__(self) -> None:
        self.documents: dict[str, dict] = {}

    def load(self, cart_id: str) -> dict | None:
        document = self.documents.get(cart_id)
        return json.loads(json.dumps(document)) if document is not None else None

    def save(self, cart_id: str, document: dict) -> None:
        self.documents[cart_id] = json.loads(json.dumps(document))


class JsonFileCartStore(CartStore):
    """Stores each cart as ``<directory>/<cart_id>.json``."""

    def __init__(self, directory) -> None:
        self.directory = Path(directory)

    def _path(self, cart_id: str) -> Path:
        path = (self.directory / f"{cart_id}.json").resolve()
        if path.parent != self.directory.resolve():
            raise InvalidRequest(f"Invalid cart id: {cart_id}")
        return path

    def load(self, cart_id: str) -> dict | None:
        path = self._path(cart_id)
        if not path.exists():
            return None
        return json.loads(path.read_text(encoding="utf-8"))

    def save(self, cart_id: str, document: dict) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)
        path = self._path(cart_id)
        tmp = path.with_suffix(".json.tmp")
        tmp.write_text(json.dumps(document, indent=2), encoding="utf-8")
        tmp.replace(path)
