import base64
import logging
import os

import streamlit as st

from healthlens.infrastructure.api.client import ApiError, HealthLensApiClient
from healthlens.infrastructure.config import Settings


logger = logging.getLogger(__name__)


DISCLAIMER = (
    "⚕️ **DISCLAIMER:** This is NOT medical advice and NOT a diagnosis. "
    "Results are for educational purposes only. "
    "Always consult a qualified healthcare professional."
)


def encode_image(data: bytes, mime_type: str | None = None) -> str:
    """Encode raw image bytes as a base64 data URL."""
    mime_type = mime_type or "image/jpeg"
    return f"data:{mime_type};base64,{base64.b64encode(data).decode('ascii')}"


def format_prediction(prediction: dict) -> str:
    """Markdown block for one enriched prediction."""
    details = prediction.get("details") or {}
    confidence_pct = float(prediction.get("confidence", 0)) * 100
    severity = prediction.get("severity", "Unknown")
    icon = "🔴" if severity == "Severe" else ("🟠" if severity == "Moderate" else "🟢")

    lines = [f"### {icon} {prediction.get('disease', 'Unknown')}"]
    lines.append(f"**Severity:** {severity} · **Confidence:** {confidence_pct:.1f}%")
    for label, key in (
        ("Symptoms", "symptoms"),
        ("Causes", "causes"),
        ("Treatment", "treatment"),
        ("Prevention", "prevention"),
    ):
        if details.get(key):
            lines.append(f"- **{label}:** {details[key]}")
    return "\n".join(lines)


def format_record(record: dict) -> str:
    """Markdown block for one mental-health record; every field is optional."""
    lines = [f"### {record.get('title') or 'Insight ' + str(record.get('_id', ''))}"]
    if record.get("description"):
        lines.append(record["description"])
    meta = []
    if record.get("category"):
        meta.append(f"**Category:** {record['category']}")
    if record.get("severity"):
        meta.append(f"**Severity:** {record['severity']}")
    if meta:
        lines.append(" · ".join(meta))
    for rec in record.get("recommendations") or []:
        lines.append(f"- {rec}")
    return "\n".join(lines)


def _render_skin_analysis(client: HealthLensApiClient):
    st.markdown("## 🔬 Skin Analysis")
    source = st.radio("Image source", ["Camera", "Upload"], horizontal=True)
    if source == "Camera":
        image_file = st.camera_input("Take a photo of the affected area")
    else:
        image_file = st.file_uploader("Upload an image", type=["jpg", "jpeg", "png"])

    if not st.button("Analyze", use_container_width=True):
        if image_file is None:
            st.caption("Capture or upload an image to begin analysis")
        return

    if image_file is None:
        st.error("❌ Please capture or upload an image first")
        return

    image = encode_image(image_file.getvalue(), getattr(image_file, "type", None))
    with st.spinner("⏳ Analyzing image..."):
        try:
            result = client.analyze_skin(image)
        except Exception as e:
            logger.exception("Skin analysis failed: %s", e)
            st.error(f"❌ **Failed to analyze image:** {e}")
            return

    for prediction in result.get("predictions", []):
        st.markdown(format_prediction(prediction))
        st.progress(min(1.0, max(0.0, float(prediction.get("confidence", 0)))))
    st.caption(f"Analyzed at {result.get('timestamp', '')}")


def _retry_button():
    if st.button("Try Again"):
        st.rerun()


def _render_insights(client: HealthLensApiClient):
    st.markdown("## 🧠 Mental Health Insights")
    try:
        health = client.health()
        if health.get("mongodb") != "connected":
            st.warning("⚠️ Database is not connected. Please try again later.")
            return
        records = client.mental_health_records()
    except ApiError as e:
        if e.status_code == 404:
            st.info("No mental health insights available yet.")
        else:
            st.error(f"❌ {e.message}")
            _retry_button()
        return
    except Exception as e:
        logger.exception("Failed to fetch mental health data: %s", e)
        st.error(f"❌ Failed to fetch mental health data: {e}")
        _retry_button()
        return

    if not isinstance(records, list):
        logger.error("Unexpected feed payload type: %s", type(records).__name__)
        st.error("❌ Invalid data format received from server")
        _retry_button()
        return

    for record in records:
        st.markdown(format_record(record))
        st.divider()


def main():
    logging.basicConfig(level=os.environ.get("LOG_LEVEL", "INFO"))

    st.set_page_config(
        page_title="HealthLens",
        page_icon="⚕️",
        layout="centered",
        initial_sidebar_state="expanded",
    )

    settings = Settings()
    client = HealthLensApiClient(settings=settings)

    st.sidebar.title("⚙️ HealthLens")
    page = st.sidebar.radio("Page", ["Skin Analysis", "Mental Health Insights"])
    st.sidebar.caption(f"**API:** {settings.api_url}")

    st.info(DISCLAIMER)
    if page == "Skin Analysis":
        _render_skin_analysis(client)
    else:
        _render_insights(client)


if __name__ == "__main__":
    main()
