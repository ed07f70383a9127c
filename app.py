"""
Deck Convert – Streamlit entry point.
Upload an exported package or data file, preview and download the two-column TSV.
Logic lives in markup, records, deck_package; config and errors are shared with the CLI.
"""
import logging

import pandas as pd
import streamlit as st

import constants
from config import get_config
from deck_package import convert_bytes
from errors import ErrorHandler
from records import rows_to_tsv
from state import clear_all_state, init_state, set_converted_state
from utils import base_name_no_ext

logger = logging.getLogger(__name__)

st.set_page_config(
    page_title="Deck Convert",
    page_icon="🗂️",
    layout="centered",
)

# Logging: ensure root logger has a handler when running as main app
if not logging.getLogger().handlers:
    logging.basicConfig(
        level=logging.INFO,
        format="%(levelname)s:%(name)s:%(message)s",
    )

init_state()
cfg = get_config()

st.title("🗂️ Deck Convert")
st.caption("ZIP 导出包或 TSV → 两列 TSV（正文 / 译文）")

uploaded_file = st.file_uploader(
    "上传导出包 (.zip) 或数据文件 (.csv / .tsv / .txt)",
    type=constants.UPLOAD_TYPES,
    key=f"uploader_{st.session_state['uploader_id']}",
)
color = st.text_input("Cloze 颜色", value=cfg["cloze_color"])

col_go, col_clear = st.columns([3, 1])
with col_go:
    clicked = st.button("🚀 转换", type="primary", use_container_width=True, disabled=uploaded_file is None)
with col_clear:
    st.button("清空", use_container_width=True, on_click=clear_all_state)

if clicked and uploaded_file is not None:
    if uploaded_file.size > constants.MAX_UPLOAD_BYTES:
        st.error(f"❌ 文件超过 {constants.MAX_UPLOAD_MB} MB 限制。")
    else:
        try:
            with st.spinner("正在转换..."):
                rows = convert_bytes(uploaded_file.name, uploaded_file.getvalue(), color.strip() or cfg["cloze_color"])
            set_converted_state(rows, uploaded_file.name)
        except Exception as e:
            ErrorHandler.handle(e, "转换失败")

rows = st.session_state.get('converted_rows')
if rows is not None:
    source_name = st.session_state.get('converted_name', "items")
    st.success(f"✅ {source_name}: {len(rows)} 条记录")
    preview = pd.DataFrame(rows[:constants.MAX_PREVIEW_ROWS], columns=["markup", "translation"])
    st.dataframe(preview, use_container_width=True, hide_index=True)
    st.download_button(
        label="📥 下载 TSV",
        data=rows_to_tsv(rows).encode("utf-8"),
        file_name=base_name_no_ext(source_name) + constants.OUTPUT_SUFFIX,
        mime="text/tab-separated-values",
        type="primary",
    )
