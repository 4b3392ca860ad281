"""
Storefront Backend — Identifier Normalization
===============================================

What:  Maps store documents onto their external shape: the store's internal
       `_id` becomes the `id` attribute API consumers expect.
How:   Pure functions returning new dicts; the store document is never
       modified and `_id` does not appear in the result.

    {"_id": "9f1c…", "name": "Lamp"}  →  {"id": "9f1c…", "name": "Lamp"}
"""

from typing import Any, Dict, Iterable, List, Mapping

INTERNAL_ID = "_id"
EXTERNAL_ID = "id"


def normalize_id(doc: Mapping[str, Any]) -> Dict[str, Any]:
    out: Dict[str, Any] = {EXTERNAL_ID: doc[INTERNAL_ID]}
    out.update((k, v) for k, v in doc.items() if k not in (INTERNAL_ID, EXTERNAL_ID))
    return out


def normalize_ids(docs: Iterable[Mapping[str, Any]]) -> List[Dict[str, Any]]:
    return [normalize_id(doc) for doc in docs]
