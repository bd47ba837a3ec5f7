"""Streamlit UI for the Excel to Liquibase converter."""
from __future__ import annotations

from pathlib import Path
from typing import List, Optional, Tuple

import streamlit as st

from codelog import (
    AppConfig,
    CodelogError,
    ConversionResult,
    NoValidSheetsError,
    build_template_workbook,
    convert,
    load_config,
    sheet_names,
    summarise_result,
    summarise_skips,
)
from codelog.template import TEMPLATE_FILENAME

st.set_page_config(page_title="Excel to Liquibase Converter", layout="wide")

CONFIG_PATH = Path("config/config.yaml")
CONFIG = load_config(CONFIG_PATH) if CONFIG_PATH.exists() else AppConfig()


def _read_sheet_names(raw: bytes) -> List[str]:
    try:
        return sheet_names(raw)
    except CodelogError as exc:
        st.error(str(exc))
        return []


def _run_conversion(raw: bytes, author: str, sheets: List[str]) -> None:
    st.session_state.pop("result", None)
    st.session_state.pop("skipped", None)
    try:
        st.session_state["result"] = convert(raw, author, sheets, settings=CONFIG.changelog)
    except NoValidSheetsError as exc:
        st.session_state["error"] = str(exc)
        st.session_state["skipped"] = exc.skipped_sheets
    except CodelogError as exc:
        st.session_state["error"] = str(exc)


def _reset_when_inputs_change(key: Tuple[str, str, Tuple[str, ...]]) -> None:
    if st.session_state.get("inputs") != key:
        st.session_state["inputs"] = key
        for name in ("result", "error", "skipped"):
            st.session_state.pop(name, None)


st.title("Excel to Liquibase Converter")
st.write("Convert code-table workbooks into a Liquibase XML changelog.")

with st.sidebar:
    st.header("Configuration")
    author = st.text_input("Author Name", value=CONFIG.changelog.author)
    st.download_button(
        "Download Template",
        data=build_template_workbook(),
        file_name=TEMPLATE_FILENAME,
        mime="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    )

uploaded = st.file_uploader("Upload Excel File", type=["xlsx", "xlsm", "xls"])
if uploaded is None:
    st.info("Upload an Excel file with code values to convert.")
    st.stop()

raw = uploaded.getvalue()
available = _read_sheet_names(raw)
if not available:
    st.stop()

st.subheader("Sheet Selection")
process_all = st.checkbox("Process all sheets", value=True)
if process_all:
    selected = list(available)
else:
    selected = st.multiselect("Sheets", available, default=available)

_reset_when_inputs_change((f"{uploaded.name}:{len(raw)}", author, tuple(selected)))

if st.button("Process Selected Sheets", disabled=not selected):
    with st.spinner("Processing..."):
        st.session_state["error"] = None
        _run_conversion(raw, author, selected)

error: Optional[str] = st.session_state.get("error")
if error:
    st.error(error)
    skipped = st.session_state.get("skipped")
    if skipped:
        st.dataframe(summarise_skips(skipped), use_container_width=True)

result: Optional[ConversionResult] = st.session_state.get("result")
if result is None:
    st.stop()

st.success(f"Processed sheets: {', '.join(result.processed_sheets)}")
if result.skipped_sheets:
    st.warning("Some sheets were skipped.")
st.dataframe(summarise_result(result), use_container_width=True)

st.subheader("Generated Liquibase XML")
st.code(result.xml, language="xml")
st.download_button(
    "Download XML",
    data=result.xml.encode("utf-8"),
    file_name=CONFIG.output.changelog_file,
    mime="text/xml",
)
