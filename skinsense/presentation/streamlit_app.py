import logging
import os

import streamlit as st

from skinsense.application.report import build_report
from skinsense.application.use_cases import AnalysisFailedError, SkinAnalysisUseCase
from skinsense.infrastructure.agent.http_agent import HttpAgentAdapter
from skinsense.infrastructure.agent.mock_agent import MockAgentAdapter, sample_analysis_result
from skinsense.infrastructure.config import Settings
from skinsense.infrastructure.history.history_store import HistoryStore
from skinsense.infrastructure.images.validators import ACCEPTED_EXTENSIONS, validate_image
from skinsense.infrastructure.llm.json_parser import parse_llm_json
from skinsense.presentation.results_view import (
    decode_data_url,
    format_score,
    format_timestamp,
    render_empty_state,
    render_report,
)


logger = logging.getLogger(__name__)


DISCLAIMER = (
    "⚠️ **Medical Disclaimer:** This tool is for informational purposes only and is not a "
    "substitute for professional medical diagnosis. Always consult a healthcare professional "
    "for any skin concerns."
)


def _init_session_state(history_store: HistoryStore):
    if "history" not in st.session_state:
        st.session_state.history = history_store.load()
    if "current_result" not in st.session_state:
        st.session_state.current_result = None
    if "sample_mode" not in st.session_state:
        st.session_state.sample_mode = False
    if "disclaimer_dismissed" not in st.session_state:
        st.session_state.disclaimer_dismissed = False
    if "upload_error" not in st.session_state:
        st.session_state.upload_error = ""


def _build_agent(settings: Settings):
    if settings.agent_api_key:
        return HttpAgentAdapter(settings=settings)
    logger.warning("AGENT_API_KEY not set; using the offline mock agent.")
    return MockAgentAdapter()


def _render_disclaimer_banner():
    if st.session_state.disclaimer_dismissed:
        return
    col1, col2 = st.columns([12, 1])
    with col1:
        st.warning(DISCLAIMER)
    with col2:
        if st.button("✕", key="dismiss_disclaimer", help="Dismiss disclaimer"):
            st.session_state.disclaimer_dismissed = True
            st.rerun()


def _on_sample_toggle():
    if st.session_state.sample_mode:
        st.session_state.current_result = sample_analysis_result()
    else:
        st.session_state.current_result = None


def _reset_analysis():
    st.session_state.current_result = None
    st.session_state.sample_mode = False


def _render_sidebar(settings: Settings, history_store: HistoryStore):
    st.sidebar.title("🕘 Analysis History")

    history = st.session_state.history
    if not history:
        st.sidebar.markdown("**No analyses yet**")
        st.sidebar.caption("Your past skin analyses will appear here.")
    else:
        for index, entry in enumerate(history):
            with st.sidebar.container(border=True):
                thumbnail = decode_data_url(entry.image_data_url)
                if thumbnail:
                    st.image(thumbnail, width=48)
                st.markdown(f"**{entry.condition_name}**")
                st.caption(
                    f"{format_score(entry.confidence_score)} · {entry.urgency_level} · "
                    f"{format_timestamp(entry.timestamp)}"
                )
                if st.button("View", key=f"history_{index}_{entry.id}", use_container_width=True):
                    st.session_state.current_result = entry
                    st.rerun()

        if st.sidebar.button("🗑️ Clear History", use_container_width=True):
            history_store.clear()
            st.session_state.history = []
            st.rerun()

    st.sidebar.divider()
    st.sidebar.markdown("### Agent")
    st.sidebar.caption(f"**Skin Analysis Agent** · Idle · ID: {settings.agent_id}")
    if settings.agent_api_key:
        st.sidebar.success("✓ Skin Analysis Agent configured")
    else:
        st.sidebar.warning("⚠️ Using mock analysis results")


def _render_upload_section(usecase: SkinAnalysisUseCase, history_store: HistoryStore):
    st.markdown("### 📷 Upload Image")
    uploaded = st.file_uploader(
        "Click to upload or drag and drop",
        type=list(ACCEPTED_EXTENSIONS),
        help="JPG, PNG (max 10MB)",
    )
    if uploaded is None:
        st.session_state.upload_error = ""
        return

    content = uploaded.getvalue()
    is_valid, error = validate_image(uploaded.type, len(content))
    if not is_valid:
        st.error(error)
        return

    st.image(content, caption=uploaded.name, use_container_width=True)

    if st.session_state.upload_error:
        st.error(st.session_state.upload_error)

    if st.button("Analyze Skin Condition", type="primary", use_container_width=True):
        st.session_state.upload_error = ""
        with st.status("Analyzing skin condition...", expanded=False) as status:
            st.caption("Skin Analysis Agent: Processing")
            try:
                result = usecase.analyze(uploaded.name, content, uploaded.type)
            except AnalysisFailedError as e:
                st.session_state.upload_error = str(e)
                status.update(label="Analysis failed", state="error")
            except Exception as e:
                logger.exception("Analysis failed: %s", e)
                st.session_state.upload_error = "An unexpected error occurred. Please try again."
                status.update(label="Analysis failed", state="error")
            else:
                st.session_state.current_result = result
                st.session_state.history = history_store.add(result)
                status.update(label="Analysis complete", state="complete")
        st.rerun()


def _render_results_section():
    result = st.session_state.current_result
    if result is None:
        render_empty_state()
        return

    render_report(build_report(result))
    st.button("New Analysis", on_click=_reset_analysis, use_container_width=True)


def main():
    logging.basicConfig(level=os.environ.get("LOG_LEVEL", "INFO"))

    st.set_page_config(
        page_title="SkinSense",
        page_icon="🩺",
        layout="wide",
        initial_sidebar_state="collapsed",
    )

    settings = Settings()
    history_store = HistoryStore(storage_path=settings.history_path, max_entries=settings.max_history)
    usecase = SkinAnalysisUseCase(
        agent=_build_agent(settings),
        json_parser=parse_llm_json,
        agent_id=settings.agent_id,
    )

    _init_session_state(history_store)
    _render_disclaimer_banner()

    header, toggle = st.columns([4, 1])
    with header:
        st.markdown("# 🩺 SkinSense")
        st.caption("AI Skin Disease Prediction")
    with toggle:
        st.toggle("Sample Data", key="sample_mode", on_change=_on_sample_toggle)

    _render_sidebar(settings, history_store)

    left, right = st.columns(2)
    with left:
        _render_upload_section(usecase, history_store)
    with right:
        _render_results_section()


if __name__ == "__main__":
    main()
