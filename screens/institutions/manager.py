# screens/institutions/manager.py
"""
State and actions of the Institutions screen.

Streamlit reruns the page script on every interaction, so the page keeps one
InstitutionsManager in st.session_state and renders from it. Nothing in here
imports streamlit.
"""
from __future__ import annotations

import logging
from dataclasses import replace
from typing import Callable, Dict, List, Optional

from core.codes import generate_faculty_code
from core.document_store import DocumentStore
from screens.institutions import db as idb
from screens.institutions.db import Institution
from screens.institutions.utils import (
    DEFAULT_SORT,
    SortOption,
    filter_institutions,
    generate_unique_code,
    is_code_unique,
    normalize_code,
    sort_institutions,
    validate_institution_form,
)

log = logging.getLogger(__name__)

ADD_FAILED_MSG = "Error creating the institution. Please try again."
UPDATE_FAILED_MSG = "Error updating the institution. Please try again."
DELETE_FAILED_MSG = "Error deleting the institution. Please try again."
NO_MATCHES_MSG = "No institutions match that search"
NO_INSTITUTIONS_MSG = "No institutions registered"


def _empty_form() -> Dict[str, str]:
    return {"institution": "", "faculty_code": ""}


class InstitutionsManager:
    def __init__(self, store: DocumentStore, code_generator: Callable[[], str] = generate_faculty_code):
        self.store = store
        self.code_generator = code_generator

        self.institutions: List[Institution] = []
        self.is_loading: bool = False
        self.loaded: bool = False
        self.search_term: str = ""
        self.sort_option: SortOption = DEFAULT_SORT

        self.show_add_modal: bool = False
        self.show_edit_modal: bool = False
        self.show_delete_modal: bool = False
        self.selected_institution: Optional[Institution] = None

        self.form_data: Dict[str, str] = _empty_form()
        self.is_saving: bool = False
        self.is_deleting: bool = False
        self.form_error: str = ""
        self.alert: str = ""

    # ---------- list ----------

    def fetch_institutions(self) -> None:
        self.is_loading = True
        try:
            self.institutions = idb.fetch_institutions(self.store)
        finally:
            self.is_loading = False
            self.loaded = True

    def ensure_loaded(self) -> None:
        """Fetch once per session."""
        if not self.loaded:
            self.fetch_institutions()

    @property
    def filtered_institutions(self) -> List[Institution]:
        filtered = filter_institutions(self.institutions, self.search_term)
        return sort_institutions(filtered, self.sort_option)

    def set_search_term(self, term: str) -> None:
        self.search_term = term or ""

    def set_sort_option(self, option) -> None:
        self.sort_option = SortOption(option)

    def empty_message(self) -> str:
        return NO_MATCHES_MSG if self.search_term.strip() else NO_INSTITUTIONS_MSG

    def is_code_unique(self, code: str, exclude_id: Optional[str] = None) -> bool:
        return is_code_unique(code, self.institutions, exclude_id)

    # ---------- add ----------

    def open_add_modal(self) -> None:
        self.form_data = {
            "institution": "",
            "faculty_code": generate_unique_code(self.institutions, self.code_generator),
        }
        self.form_error = ""
        self.show_add_modal = True

    def generate_new_code(self) -> str:
        code = generate_unique_code(self.institutions, self.code_generator)
        self.form_data = {**self.form_data, "faculty_code": code}
        return code

    def add_institution(self) -> bool:
        if self.is_saving:
            return False
        name = self.form_data.get("institution", "")
        code = self.form_data.get("faculty_code", "")
        error = validate_institution_form(name, code, self.institutions)
        if error:
            self.form_error = error
            return False

        self.is_saving = True
        self.form_error = ""
        try:
            created = idb.create_institution(self.store, name.strip(), normalize_code(code))
        except Exception as e:
            log.error(f"Error creating institution: {e}", exc_info=True)
            self.form_error = ADD_FAILED_MSG
            return False
        finally:
            self.is_saving = False

        self.institutions = [*self.institutions, created]
        self.show_add_modal = False
        self.form_data = _empty_form()
        return True

    # ---------- edit ----------

    def open_edit_modal(self, institution: Institution) -> None:
        self.selected_institution = institution
        self.form_data = {
            "institution": institution.institution,
            "faculty_code": institution.faculty_code,
        }
        self.form_error = ""
        self.show_edit_modal = True

    def edit_institution(self) -> bool:
        selected = self.selected_institution
        if selected is None or self.is_saving:
            return False
        name = self.form_data.get("institution", "")
        code = self.form_data.get("faculty_code", "")
        error = validate_institution_form(name, code, self.institutions, exclude_id=selected.id)
        if error:
            self.form_error = error
            return False

        changes = {"institution": name.strip(), "facultyCode": normalize_code(code)}
        self.is_saving = True
        self.form_error = ""
        try:
            idb.update_institution(self.store, selected.id, changes)
        except Exception as e:
            log.error(f"Error updating institution {selected.institution}: {e}", exc_info=True)
            self.form_error = UPDATE_FAILED_MSG
            return False
        finally:
            self.is_saving = False

        self.institutions = [
            replace(inst, institution=changes["institution"], faculty_code=changes["facultyCode"])
            if inst.id == selected.id else inst
            for inst in self.institutions
        ]
        self.show_edit_modal = False
        self.selected_institution = None
        self.form_data = _empty_form()
        return True

    # ---------- delete ----------

    def open_delete_modal(self, institution: Institution) -> None:
        self.selected_institution = institution
        self.alert = ""
        self.show_delete_modal = True

    def delete_institution(self) -> bool:
        selected = self.selected_institution
        if selected is None or self.is_deleting:
            return False

        self.is_deleting = True
        self.alert = ""
        try:
            idb.delete_institution(self.store, selected.id)
        except Exception as e:
            log.error(f"Error deleting institution {selected.institution}: {e}", exc_info=True)
            self.alert = DELETE_FAILED_MSG
            return False
        finally:
            self.is_deleting = False

        self.institutions = [inst for inst in self.institutions if inst.id != selected.id]
        self.show_delete_modal = False
        self.selected_institution = None
        return True

    def close_modals(self) -> None:
        self.show_add_modal = False
        self.show_edit_modal = False
        self.show_delete_modal = False
        self.selected_institution = None
        self.form_error = ""
        self.alert = ""
