# core/policy.py
from __future__ import annotations
from typing import Dict, Any, Callable, Set
import functools
import streamlit as st

PAGE_ACCESS = {
    "Login":  {"view": {"public"}},
    "Logout": {"view": {"public"}},
    "Institutions": {"view": {"superadmin", "tech_admin", "principal", "director"}, "edit": {"superadmin", "tech_admin"}},
}

def current_user() -> Dict[str, Any]:
    return st.session_state.get("user") or {}

def user_roles() -> Set[str]:
    user_data = current_user()
    if user_data:
        return set(user_data.get("roles") or [])
    return {"public"}

def can_view_page(page_name: str, roles: Set[str]) -> bool:
    rules = PAGE_ACCESS.get(page_name) or {}
    allowed = set(rules.get("view") or [])
    return True if not allowed else bool(roles & allowed)

def can_edit_page(page_name: str, roles: Set[str]) -> bool:
    rules = PAGE_ACCESS.get(page_name) or {}
    allowed = set(rules.get("edit") or [])
    return bool(roles & allowed)

def require_page(page_name: str):
    def _wrap(fn: Callable):
        @functools.wraps(fn)
        def _inner(*args, **kwargs):
            roles = user_roles()
            if not can_view_page(page_name, roles):
                st.error("Access Denied. You don't have permission to view this page.")
                st.stop()
            return fn(*args, **kwargs)
        return _inner
    return _wrap

def visible_pages_for(roles: Set[str]) -> list[str]:
    return [p for p in PAGE_ACCESS.keys() if can_view_page(p, roles)]
