"""Results panel for a skin analysis."""
import base64
import binascii
from datetime import datetime
from typing import Optional

import streamlit as st

from skinsense.application.schemas import AnalysisReport
from skinsense.domain.rules import confidence_band, urgency_badge


def format_score(score) -> str:
    if isinstance(score, float) and score.is_integer():
        score = int(score)
    return f"{score}%"


def decode_data_url(data_url: str) -> Optional[bytes]:
    if not data_url or not data_url.startswith("data:") or "," not in data_url:
        return None
    try:
        return base64.b64decode(data_url.split(",", 1)[1])
    except (binascii.Error, ValueError):
        return None


def format_timestamp(ts: str) -> str:
    """Format an ISO timestamp like 'Jan 15, 2025 10:30 AM'."""
    try:
        d = datetime.fromisoformat(ts.replace("Z", "+00:00"))
    except (ValueError, AttributeError):
        return "Unknown date"
    return d.strftime("%b %d, %Y %I:%M %p")


def format_report_markdown(report: AnalysisReport) -> str:
    """Format the report as Markdown, skipping empty sections."""
    icon, _ = urgency_badge(report.urgency_level)
    lines = ["# 🩺 Predicted Condition\n"]
    lines.append(f"## {report.condition_name}")
    lines.append(f"{icon} **{report.urgency_level} Urgency** · Confidence: {format_score(report.confidence_score)}\n")

    if report.description:
        lines.append("## 📋 Description")
        lines.append(report.description + "\n")

    sections = [
        ("🔍 Symptoms", report.symptoms),
        ("🧪 Possible Causes", report.possible_causes),
        ("💊 Treatment Options", report.treatment_options),
    ]
    for title, items in sections:
        if items:
            lines.append(f"## {title}")
            for item in items:
                lines.append(f"- {item}")
            lines.append("")

    if report.when_to_see_doctor:
        lines.append("## 👨‍⚕️ When to See a Doctor")
        lines.append(report.when_to_see_doctor + "\n")

    lines.append("---")
    lines.append(f"⚠️ **Disclaimer:** {report.disclaimer}")

    return "\n".join(lines)


def render_report(report: AnalysisReport) -> None:
    icon, colour = urgency_badge(report.urgency_level)
    band = confidence_band(report.confidence_score)

    with st.container(border=True):
        st.caption("PREDICTED CONDITION")
        col1, col2 = st.columns([3, 1])
        with col1:
            st.markdown(f"## {report.condition_name}")
            st.markdown(f"{icon} :{colour}[**{report.urgency_level} Urgency**]")
        with col2:
            st.markdown(f"### :{band}[{format_score(report.confidence_score)}]")
            st.caption("confidence")

    if report.description:
        with st.expander("📋 Description", expanded=True):
            st.markdown(report.description)
    if report.symptoms:
        with st.expander("🔍 Symptoms"):
            st.markdown("\n".join(f"- {s}" for s in report.symptoms))
    if report.possible_causes:
        with st.expander("🧪 Possible Causes"):
            st.markdown("\n".join(f"- {c}" for c in report.possible_causes))
    if report.treatment_options:
        with st.expander("💊 Treatment Options"):
            st.markdown("\n".join(f"- {t}" for t in report.treatment_options))
    if report.when_to_see_doctor:
        with st.expander("👨‍⚕️ When to See a Doctor"):
            st.markdown(report.when_to_see_doctor)

    st.warning(f"**Disclaimer:** {report.disclaimer}")
    st.download_button(
        "📄 Download Report",
        data=format_report_markdown(report),
        file_name="skinsense-report.md",
        mime="text/markdown",
        use_container_width=True,
    )


def render_empty_state() -> None:
    st.markdown("### No Analysis Yet")
    st.caption(
        "Upload a photo of a skin condition to receive an AI-powered analysis "
        "with predictions and recommendations."
    )
