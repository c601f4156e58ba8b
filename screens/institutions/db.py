# screens/institutions/db.py
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, List

from core.document_store import DocumentStore

log = logging.getLogger(__name__)

COLLECTION = "facultyCodes"


@dataclass(frozen=True)
class Institution:
    """One institution and its enrollment (faculty) code."""
    id: str
    institution: str
    faculty_code: str

    @classmethod
    def from_document(cls, doc: Dict[str, Any]) -> "Institution":
        return cls(
            id=str(doc.get("id") or ""),
            institution=str(doc.get("institution") or ""),
            faculty_code=str(doc.get("facultyCode") or ""),
        )

    def to_document(self) -> Dict[str, str]:
        return {"institution": self.institution, "facultyCode": self.faculty_code}


def fetch_institutions(store: DocumentStore) -> List[Institution]:
    """Load the whole collection. A failed read yields an empty list."""
    try:
        docs = store.get_all(COLLECTION)
    except Exception as e:
        log.error(f"Error fetching institutions: {e}", exc_info=True)
        return []
    institutions = [Institution.from_document(d) for d in docs]
    log.info(f"✅ {len(institutions)} institutions loaded")
    return institutions


def create_institution(store: DocumentStore, name: str, faculty_code: str) -> Institution:
    record = {"institution": name, "facultyCode": faculty_code}
    doc_id = store.add(COLLECTION, record)
    log.info(f"✅ Institution created with ID: {doc_id}")
    return Institution(id=doc_id, institution=name, faculty_code=faculty_code)


def update_institution(store: DocumentStore, inst_id: str, changes: Dict[str, str]) -> None:
    store.update(COLLECTION, inst_id, changes)
    log.info(f"✅ Institution {inst_id} updated")


def delete_institution(store: DocumentStore, inst_id: str) -> None:
    store.delete(COLLECTION, inst_id)
    log.info(f"✅ Institution {inst_id} deleted")
