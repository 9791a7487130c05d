"""
CV Intake AI – Streamlit frontend.
No business logic in layout; extraction, anonymization and edits live in cv_pipeline and services.
"""

import json
from typing import Optional

import streamlit as st

from cv_intake_ai.config import CV_DESIGNS, MAX_UPLOAD_BYTES, OPENAI_API_KEY, SUPPORTED_EXTENSIONS
from cv_intake_ai.cv_pipeline.upload_pipeline import run_upload_pipeline
from cv_intake_ai.schemas.candidate import AnonymousCandidateRecord
from cv_intake_ai.schemas.processed_upload import ProcessedUpload
from cv_intake_ai.services.candidate_editor import (
    add_skill,
    move_section,
    move_skill,
    remove_skill,
    set_rating,
    update_fields,
)
from cv_intake_ai.services.cv_renderer import LetterHead, render_candidate
from cv_intake_ai.services.llm_client import build_llm_client
from cv_intake_ai.services.record_store import RecordStore
from cv_intake_ai.utils.errors import CVIntakeError, PersistenceFailed
from cv_intake_ai.utils.logger import get_logger

logger = get_logger(__name__)


@st.cache_resource
def _record_store() -> Optional[RecordStore]:
    try:
        return RecordStore()
    except PersistenceFailed:
        logger.exception("Record store unavailable; results will not be saved")
        return None


def _process(file_bytes: bytes, filename: str) -> ProcessedUpload:
    return run_upload_pipeline(
        file_bytes,
        filename,
        llm_client=build_llm_client(),
        record_store=_record_store(),
    )


def _render_quality(upload: ProcessedUpload) -> None:
    quality = upload.quality
    st.metric("Overall quality", f"{quality.overall_score}/100")
    col_s, col_w, col_g = st.columns(3)
    for col, title, items in (
        (col_s, "Strengths", quality.strengths),
        (col_w, "Weaknesses", quality.weaknesses),
        (col_g, "Suggestions", quality.suggestions),
    ):
        with col:
            st.markdown(f"**{title}**")
            for item in items:
                st.markdown(f"- {item}")


def _render_editor(record: AnonymousCandidateRecord) -> AnonymousCandidateRecord:
    """Editing controls for the anonymous copy; returns the edited record."""
    title = st.text_input("Title", value=record.title, key="edit_title")
    summary = st.text_area("Summary", value=record.summary, key="edit_summary", height=120)
    if title != record.title or summary != record.summary:
        record = update_fields(record, title=title, summary=summary)

    rating = st.slider("Cultural fit", 1, 5, value=record.cultural_fit_rating, key="edit_rating")
    if rating != record.cultural_fit_rating:
        record = set_rating(record, rating)

    st.markdown("**Skills**")
    for i, skill in enumerate(record.skills):
        c1, c2, c3, c4 = st.columns([6, 1, 1, 1])
        c1.markdown(f"`{skill}`")
        if c2.button("↑", key=f"skill_up_{i}", disabled=i == 0):
            return move_skill(record, i, i - 1)
        if c3.button("↓", key=f"skill_down_{i}", disabled=i == len(record.skills) - 1):
            return move_skill(record, i, i + 1)
        if c4.button("✕", key=f"skill_rm_{i}"):
            return remove_skill(record, i)
    new_skill = st.text_input("Add skill", key="new_skill")
    if st.button("Add", key="add_skill_btn") and new_skill.strip():
        return add_skill(record, new_skill)

    st.markdown("**Section order**")
    for i, section in enumerate(record.section_order):
        c1, c2, c3 = st.columns([6, 1, 1])
        c1.markdown(section.title())
        if c2.button("↑", key=f"section_up_{i}", disabled=i == 0):
            return move_section(record, i, i - 1)
        if c3.button("↓", key=f"section_down_{i}", disabled=i == len(record.section_order) - 1):
            return move_section(record, i, i + 1)
    return record


def render_layout() -> None:
    """Streamlit page layout; processing and edits use the pipeline and services layers."""
    st.set_page_config(page_title="CV Intake AI", layout="wide")
    st.title("CV Intake AI")
    st.markdown("*Upload a CV to extract structured data, remove personal information and review quality.*")
    if not OPENAI_API_KEY:
        st.info("OPENAI_API_KEY is not set; using rule-based extraction and redaction.")
    st.divider()

    if "upload" not in st.session_state:
        st.session_state["upload"] = None
    if "anonymous" not in st.session_state:
        st.session_state["anonymous"] = None
    if "error" not in st.session_state:
        st.session_state["error"] = None

    # ----- Upload section -----
    uploaded = st.file_uploader(
        "Upload CV",
        type=list(SUPPORTED_EXTENSIONS),
        help=f"PDF, DOC, DOCX or TXT, up to {MAX_UPLOAD_BYTES // (1024 * 1024)}MB.",
        key="cv_file",
    )
    if st.button("Process CV", type="primary", key="process_btn", disabled=uploaded is None):
        with st.spinner("Extracting text, structuring and anonymizing…"):
            try:
                upload = _process(uploaded.getvalue(), uploaded.name)
                st.session_state["upload"] = upload
                st.session_state["anonymous"] = upload.anonymized
                st.session_state["error"] = None
            except CVIntakeError as e:
                st.session_state["error"] = str(e)
                st.session_state["upload"] = None
                st.session_state["anonymous"] = None

    if st.session_state.get("error"):
        st.error(st.session_state["error"])

    upload: Optional[ProcessedUpload] = st.session_state.get("upload")
    if upload is None:
        if not st.session_state.get("error"):
            st.info("Upload a CV, then click **Process CV**.")
        return

    if upload.candidate.extraction_source == "fallback":
        st.warning("Structured with rule-based fallback; reflective answers are templates.")
    if upload.record_id is None:
        st.caption("Result was not saved to the record store.")

    # ----- Design + letterhead -----
    dcol, lcol = st.columns([1, 2])
    with dcol:
        design = st.selectbox(
            "CV design",
            options=list(CV_DESIGNS),
            format_func=lambda k: CV_DESIGNS[k],
            key="design",
        )
    with lcol:
        company = st.text_input("Letterhead company (optional)", key="letterhead_company")
    letterhead = LetterHead(company_name=company.strip()) if company.strip() else None

    # ----- Split view: original vs anonymous editor -----
    left, right = st.columns(2)
    with left:
        st.subheader("Extracted CV")
        st.markdown(render_candidate(upload.candidate, design))
    with right:
        st.subheader("Anonymous CV")
        edited = _render_editor(st.session_state["anonymous"])
        if edited is not st.session_state["anonymous"]:
            st.session_state["anonymous"] = edited
            st.rerun()
        with st.expander("Preview", expanded=True):
            st.markdown(render_candidate(st.session_state["anonymous"], design, letterhead))
        store = _record_store()
        if st.button("Save edits", key="save_edits", disabled=store is None or upload.internal_record_id is None):
            try:
                store.update_anonymous(upload.internal_record_id, st.session_state["anonymous"])
                st.success("Anonymous CV saved.")
            except PersistenceFailed as e:
                st.error(f"Save failed: {e}")
        st.download_button(
            "Download anonymous JSON",
            data=json.dumps(st.session_state["anonymous"].model_dump(mode="json", by_alias=True), indent=2),
            file_name=f"{st.session_state['anonymous'].id}.json",
            mime="application/json",
            key="download_json",
        )

    st.divider()
    st.subheader("Quality")
    _render_quality(upload)
    with st.expander("Redacted text"):
        st.text(upload.redacted_text)


if __name__ == "__main__":
    render_layout()
