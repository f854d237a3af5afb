"""Per-feature buckets in st.session_state, stored under "slice.<name>"."""

import streamlit as st


def _bucket(name) -> dict:
    return st.session_state.setdefault(f"slice.{name}", {})


def get_value(name, field, default=None):
    return _bucket(name).get(field, default)


def set_value(name, field, value):
    _bucket(name)[field] = value


def setdefault(name, field, factory):
    bucket = _bucket(name)
    if field not in bucket:
        bucket[field] = factory()
    return bucket[field]


def reset(name):
    st.session_state.pop(f"slice.{name}", None)
