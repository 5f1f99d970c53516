import json
from pathlib import Path
from typing import Any, Dict, Iterator

from .models import MatchCandidate

COLLECTIONS = {"listings": "listing", "requests": "request"}


def empty_store() -> Dict[str, Any]:
    return {name: {} for name in COLLECTIONS}


def load_store(path: Path) -> Dict[str, Any]:
    if not path.exists():
        return empty_store()
    try:
        with path.open("r", encoding="utf-8") as f:
            content = f.read().strip()
            if not content:
                return empty_store()
            store = json.loads(content)
    except (json.JSONDecodeError, IOError):
        return empty_store()
    if not isinstance(store, dict):
        return empty_store()
    for name in COLLECTIONS:
        if not isinstance(store.get(name), dict):
            store[name] = {}
    return store


def save_store(path: Path, store: Dict[str, Any]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as f:
        json.dump(store, f, indent=2, ensure_ascii=False)


def iter_documents(store: Dict[str, Any]) -> Iterator[Dict[str, Any]]:
    """Yield every listing, then every request, as the stored dicts."""
    for name in COLLECTIONS:
        for doc in store.get(name, {}).values():
            if isinstance(doc, dict):
                yield doc


def iter_candidates(store: Dict[str, Any]) -> Iterator[MatchCandidate]:
    for name, kind in COLLECTIONS.items():
        for doc_id, doc in store.get(name, {}).items():
            if isinstance(doc, dict):
                yield MatchCandidate.from_document(doc, kind=kind, candidate_id=doc_id)
