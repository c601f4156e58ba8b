# screens/institutions/page.py
from __future__ import annotations

import sys
from pathlib import Path

import streamlit as st

# Ensure project root is importable when run as a Streamlit page
project_root = Path(__file__).resolve().parents[2]
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from core.policy import require_page  # noqa: E402
from screens.institutions.ui import PAGE_KEY, render as _render_institutions  # noqa: E402


@require_page(PAGE_KEY)
def render():
    """Institutions page: list, search, sort and maintain enrollment codes."""
    try:
        _render_institutions()
    except Exception as e:
        st.error("An unexpected error occurred while rendering the Institutions page.")
        st.exception(e)


render()
