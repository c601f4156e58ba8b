# screens/institutions/ui.py
from __future__ import annotations

import pandas as pd
import streamlit as st

from core.db import get_engine, init_db
from core.document_store import DocumentStore
from core.policy import can_edit_page, user_roles
from core.settings import load_settings
from core.codes import FACULTY_CODE_LENGTH
from screens.institutions.db import Institution
from screens.institutions.manager import InstitutionsManager
from screens.institutions.utils import SORT_LABELS

PAGE_KEY = "Institutions"
MANAGER_KEY = "institutions__manager"
DIALOG_KEY = "institutions__dialog"
NAME_KEY = "institutions__form_name"
CODE_KEY = "institutions__form_code"

NAME_PLACEHOLDER = "e.g. Colegio Rioclaro"
CODE_PLACEHOLDER = f"{FACULTY_CODE_LENGTH} characters"


def _k(s: str) -> str:
    """Per-page key namespace."""
    return f"institutions__{s}"


def _get_manager() -> InstitutionsManager:
    mgr = st.session_state.get(MANAGER_KEY)
    if mgr is None:
        settings = load_settings()
        engine = get_engine(settings.db.url, settings.db.echo)
        init_db(engine)
        st.session_state["engine"] = engine
        mgr = InstitutionsManager(DocumentStore(engine))
        st.session_state[MANAGER_KEY] = mgr
    return mgr


# ---------- widget callbacks ----------

def _load_form_widgets(mgr: InstitutionsManager) -> None:
    st.session_state[NAME_KEY] = mgr.form_data.get("institution", "")
    st.session_state[CODE_KEY] = mgr.form_data.get("faculty_code", "")


def _sync_form(mgr: InstitutionsManager) -> None:
    mgr.form_data = {
        "institution": st.session_state.get(NAME_KEY, ""),
        "faculty_code": st.session_state.get(CODE_KEY, ""),
    }


def _on_open_add(mgr: InstitutionsManager) -> None:
    mgr.open_add_modal()
    _load_form_widgets(mgr)
    st.session_state[DIALOG_KEY] = "add"


def _on_open_edit(mgr: InstitutionsManager, institution: Institution) -> None:
    mgr.open_edit_modal(institution)
    _load_form_widgets(mgr)
    st.session_state[DIALOG_KEY] = "edit"


def _on_open_delete(mgr: InstitutionsManager, institution: Institution) -> None:
    mgr.open_delete_modal(institution)
    st.session_state[DIALOG_KEY] = "delete"


def _on_generate(mgr: InstitutionsManager) -> None:
    _sync_form(mgr)
    st.session_state[CODE_KEY] = mgr.generate_new_code()


def _on_code_change() -> None:
    st.session_state[CODE_KEY] = (st.session_state.get(CODE_KEY) or "").upper()


def _on_search_change(mgr: InstitutionsManager) -> None:
    mgr.set_search_term(st.session_state.get(_k("search"), ""))


# ---------- dialogs ----------

def _close_and_rerun(mgr: InstitutionsManager) -> None:
    mgr.close_modals()
    st.rerun()


@st.dialog("Add Institution")
def _add_dialog(mgr: InstitutionsManager, can_edit: bool) -> None:
    error_box = st.empty()
    st.text_input("Institution name", key=NAME_KEY, placeholder=NAME_PLACEHOLDER)
    col_code, col_gen = st.columns([3, 1], vertical_alignment="bottom")
    with col_code:
        st.text_input(
            "Faculty code",
            key=CODE_KEY,
            max_chars=FACULTY_CODE_LENGTH,
            placeholder=CODE_PLACEHOLDER,
            on_change=_on_code_change,
        )
    with col_gen:
        st.button("Generate", key=_k("generate"), on_click=_on_generate, args=(mgr,))
    st.caption("Faculty members use this code to register.")

    c1, c2 = st.columns(2)
    with c1:
        if st.button("Cancel", key=_k("add_cancel"), disabled=mgr.is_saving, use_container_width=True):
            _close_and_rerun(mgr)
    with c2:
        label = "Saving..." if mgr.is_saving else "Add"
        if st.button(label, key=_k("add_submit"), type="primary",
                     disabled=mgr.is_saving or not can_edit, use_container_width=True):
            _sync_form(mgr)
            if mgr.add_institution():
                st.rerun()

    if mgr.form_error:
        error_box.error(mgr.form_error)


@st.dialog("Edit Institution")
def _edit_dialog(mgr: InstitutionsManager, can_edit: bool) -> None:
    if mgr.selected_institution is None:
        return
    error_box = st.empty()
    st.text_input("Institution name", key=NAME_KEY, placeholder=NAME_PLACEHOLDER)
    st.text_input(
        "Faculty code",
        key=CODE_KEY,
        max_chars=FACULTY_CODE_LENGTH,
        placeholder=CODE_PLACEHOLDER,
        on_change=_on_code_change,
    )
    st.caption("⚠️ Changing the code may affect faculty members already registered with it.")

    c1, c2 = st.columns(2)
    with c1:
        label = "Saving..." if mgr.is_saving else "Save Changes"
        if st.button(label, key=_k("edit_submit"), type="primary",
                     disabled=mgr.is_saving or not can_edit, use_container_width=True):
            _sync_form(mgr)
            if mgr.edit_institution():
                st.rerun()
    with c2:
        if st.button("Cancel", key=_k("edit_cancel"), disabled=mgr.is_saving, use_container_width=True):
            _close_and_rerun(mgr)

    if mgr.form_error:
        error_box.error(mgr.form_error)


@st.dialog("⚠️ Confirm deletion")
def _delete_dialog(mgr: InstitutionsManager, can_edit: bool) -> None:
    selected = mgr.selected_institution
    if selected is None:
        return
    alert_box = st.empty()
    st.write("Are you sure you want to delete this institution?")
    with st.container(border=True):
        st.markdown(f"**{selected.institution}**")
        st.caption(f"🔑 Code: `{selected.faculty_code}`")
    st.markdown(
        ":red[This action cannot be undone. Faculty members holding this code "
        "will no longer be able to use it to register.]"
    )

    c1, c2 = st.columns(2)
    with c1:
        if st.button("Cancel", key=_k("delete_cancel"), disabled=mgr.is_deleting, use_container_width=True):
            _close_and_rerun(mgr)
    with c2:
        label = "Deleting..." if mgr.is_deleting else "Delete institution"
        if st.button(label, key=_k("delete_submit"), type="primary",
                     disabled=mgr.is_deleting or not can_edit, use_container_width=True):
            if mgr.delete_institution():
                st.rerun()

    if mgr.alert:
        alert_box.error(mgr.alert)
        st.toast(mgr.alert, icon="❌")


_DIALOGS = {"add": _add_dialog, "edit": _edit_dialog, "delete": _delete_dialog}


# ---------- page sections ----------

def _render_header(mgr: InstitutionsManager, can_edit: bool) -> None:
    col_left, col_right = st.columns([2, 2])
    with col_left:
        st.title("🏛️ Institutions")
        st.caption(f"Total institutions: {len(mgr.institutions)}")
    with col_right:
        st.text_input(
            "Search",
            key=_k("search"),
            placeholder="Search institutions or codes...",
            on_change=_on_search_change,
            args=(mgr,),
            label_visibility="collapsed",
        )
        st.button(
            "➕ Add Institution",
            key=_k("open_add"),
            type="primary",
            disabled=not can_edit,
            on_click=_on_open_add,
            args=(mgr,),
        )
    st.metric("Registered institutions", len(mgr.institutions))


def _render_sort_options(mgr: InstitutionsManager) -> None:
    if mgr.is_loading or not mgr.institutions:
        return
    st.markdown("**Sort by:**")
    cols = st.columns(len(SORT_LABELS))
    for col, (option, label) in zip(cols, SORT_LABELS.items()):
        with col:
            st.button(
                label,
                key=_k(f"sort_{option.value}"),
                type="primary" if mgr.sort_option == option else "secondary",
                on_click=mgr.set_sort_option,
                args=(option,),
                use_container_width=True,
            )


def _render_table(mgr: InstitutionsManager, can_edit: bool) -> None:
    rows = mgr.filtered_institutions
    if not rows:
        st.info(f"🏛️ {mgr.empty_message()}")
        return

    head = st.columns([4, 2, 2])
    head[0].markdown("**Institution**")
    head[1].markdown("**Faculty code**")
    head[2].markdown("**Actions**")
    for inst in rows:
        c_name, c_code, c_actions = st.columns([4, 2, 2], vertical_alignment="center")
        c_name.markdown(f"**{inst.institution}**")
        c_code.markdown(f"🔑 `{inst.faculty_code}`")
        with c_actions:
            b_edit, b_delete = st.columns(2)
            b_edit.button("✏️ Edit", key=_k(f"edit_{inst.id}"), disabled=not can_edit,
                          on_click=_on_open_edit, args=(mgr, inst))
            b_delete.button("🗑️ Delete", key=_k(f"delete_{inst.id}"), disabled=not can_edit,
                            on_click=_on_open_delete, args=(mgr, inst))

    df = pd.DataFrame(
        [{"institution": i.institution, "faculty_code": i.faculty_code} for i in rows]
    )
    st.download_button(
        "⬇️ Download CSV",
        data=df.to_csv(index=False).encode("utf-8"),
        file_name="institutions.csv",
        mime="text/csv",
        key=_k("export_csv"),
    )


def render() -> None:
    """Institutions management screen."""
    can_edit = can_edit_page(PAGE_KEY, user_roles())
    mgr = _get_manager()

    if not mgr.loaded:
        with st.spinner("Loading institutions..."):
            mgr.ensure_loaded()

    _render_header(mgr, can_edit)
    _render_sort_options(mgr)
    _render_table(mgr, can_edit)

    pending = st.session_state.pop(DIALOG_KEY, None)
    dialog = _DIALOGS.get(pending)
    if dialog is None:
        # A full rerun with no pending dialog means any open one was dismissed.
        mgr.close_modals()
        return
    dialog(mgr, can_edit)
