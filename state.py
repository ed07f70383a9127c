# Session state helpers.

import random
from typing import List, Tuple

import streamlit as st

import constants


def init_state() -> None:
    for key, default_value in constants.DEFAULT_SESSION_STATE.items():
        if key not in st.session_state:
            st.session_state[key] = default_value


def clear_all_state() -> None:
    """Clear conversion results and reset the uploader widget."""
    for key in ('converted_rows', 'converted_name'):
        if key in st.session_state:
            del st.session_state[key]
    st.session_state['uploader_id'] = str(random.randint(constants.MIN_RANDOM_ID, constants.MAX_RANDOM_ID))


def set_converted_state(rows: List[Tuple[str, str]], source_name: str) -> None:
    st.session_state['converted_rows'] = rows
    st.session_state['converted_name'] = source_name
