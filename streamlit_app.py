"""
Streamlit front end for the AI Email Composer

Enter recipients and a prompt, generate a draft, edit it, then send it.
The page calls the same pipelines as the HTTP API.
"""
from typing import Tuple

import streamlit as st

from api.server import build_pipelines
from layer_1_composition.generation_pipeline import GenerationPipeline
from layer_2_delivery.delivery_pipeline import DeliveryPipeline
from layer_2_delivery.recipient_validator import validate_recipients
from models.errors import PipelineError
from utils.async_runner import BackgroundLoop
from utils.logger import get_logger

logger = get_logger(__name__)

# Page configuration
st.set_page_config(
    page_title="AI Email Composer",
    page_icon="📧",
    layout="centered",
)


@st.cache_resource
def get_pipelines() -> Tuple[GenerationPipeline, DeliveryPipeline]:
    """Build collaborators once per server process"""
    return build_pipelines()


@st.cache_resource
def get_runner() -> BackgroundLoop:
    """One event loop for every click, so cached clients stay usable"""
    return BackgroundLoop()


def check_recipients(recipients: str) -> bool:
    """Show a problem message and return False if the recipients are unusable"""
    result = validate_recipients(recipients)
    if result.empty:
        st.error("Please enter at least one recipient email")
        return False
    if not result.valid:
        st.error(f"Invalid email addresses: {', '.join(result.invalid_emails)}")
        return False
    return True


def clear_form():
    for key in ("recipients", "prompt", "subject", "body", "draft_ready", "last_receipt"):
        st.session_state.pop(key, None)


def generate(pipeline: GenerationPipeline, prompt: str):
    with st.spinner("Generating email..."):
        try:
            draft = get_runner().run(pipeline.generate(prompt))
        except PipelineError as e:
            st.error(f"Failed to generate email: {e.details or e.message}")
            return

    st.session_state["subject"] = draft.subject
    st.session_state["body"] = draft.body
    st.session_state["draft_ready"] = True
    if draft.parse_degraded:
        st.warning("The model did not follow the expected format; please review the draft carefully.")
    st.success("Email generated successfully!")


def send(pipeline: DeliveryPipeline, recipients: str, subject: str, body: str):
    with st.spinner("Sending email..."):
        try:
            receipt = get_runner().run(pipeline.send(recipients, subject, body))
        except PipelineError as e:
            st.error(f"Failed to send email: {e.details or e.message}")
            return

    st.session_state["last_receipt"] = receipt
    st.success(f"Email sent successfully to {len(receipt.recipients)} recipient(s)!")


def main():
    generation, delivery = get_pipelines()

    st.title("📧 AI Email Composer")

    with st.sidebar:
        st.header("⚙️ Services")
        st.markdown(f"**Generation:** {'✅ available' if generation.available else '❌ not configured'}")
        st.markdown(f"**Delivery:** {'✅ available' if delivery.available else '❌ not configured'}")

    # ============================================================
    # Step 1: Prompt
    # ============================================================
    recipients = st.text_input("Recipients (comma-separated)", key="recipients")
    prompt = st.text_area("What should the email say?", key="prompt", height=120)

    col1, col2 = st.columns(2)
    with col1:
        generate_clicked = st.button("✨ Generate Email", type="primary")
    with col2:
        regenerate_clicked = st.button("🔄 Regenerate", disabled=not st.session_state.get("draft_ready"))

    if generate_clicked or regenerate_clicked:
        if not prompt.strip():
            st.error("Please enter a prompt for the email")
        elif check_recipients(recipients):
            generate(generation, prompt)

    # ============================================================
    # Step 2: Review and send
    # ============================================================
    if st.session_state.get("draft_ready"):
        st.markdown("---")
        st.subheader("Review")
        subject = st.text_input("Subject", key="subject")
        body = st.text_area("Body", key="body", height=300)

        if st.button("📨 Send Email", type="primary"):
            if not (recipients.strip() and subject.strip() and body.strip()):
                st.error("Please fill in all required fields")
            elif check_recipients(recipients):
                send(delivery, recipients, subject, body)

    receipt = st.session_state.get("last_receipt")
    if receipt:
        st.info(
            f"✅ Email sent successfully!\n\n"
            f"📧 Recipients: {', '.join(receipt.recipients)}\n\n"
            f"📝 Subject: {receipt.subject}"
        )
        st.button("🧹 Clear form", on_click=clear_form)


main()
