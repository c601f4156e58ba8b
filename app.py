# app.py
"""Institutions admin. Run with: streamlit run app.py"""
from __future__ import annotations

import logging

import streamlit as st

from core.db import get_engine, init_db
from core.policy import user_roles, can_view_page
from core.settings import load_settings

settings = load_settings()
logging.basicConfig(
    level=getattr(logging, settings.log_level, logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

st.set_page_config(page_title="Institutions", page_icon="🏛️", layout="wide")

# No login screen here; the configured admin is the session user.
if "user" not in st.session_state:
    st.session_state["user"] = {
        "email": settings.admin.email,
        "roles": list(settings.admin.roles),
    }

if "engine" not in st.session_state:
    engine = get_engine(settings.db.url, settings.db.echo)
    init_db(engine)
    st.session_state["engine"] = engine

pages = []
if can_view_page("Institutions", user_roles()):
    pages.append(st.Page("screens/institutions/page.py", title="Institutions", icon="🏛️", default=True))

if not pages:
    st.error("Access Denied. You don't have permission to view any page.")
    st.stop()

st.sidebar.caption(f"Signed in as **{st.session_state['user'].get('email')}**")
st.navigation(pages).run()
