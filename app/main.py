"""
Streamlit Dashboard for Transaction Statistics

An operator view over the running service. Everything goes through the
HTTP API via TransactionStatsClient; the dashboard holds no account
state of its own.

DESIGN PRINCIPLES:
1. Every outcome is shown exactly as the service reported it
2. Destructive actions (reset) are explicit buttons
3. Timestamps default to "now" in the reference timezone, since the
   service reads wall-clock fields as reference-zone time

Run with:
    streamlit run app/main.py
"""

from datetime import datetime

import streamlit as st

from txstats.client import TransactionStatsClient, TransactionStatsError
from txstats.config import get_settings, validate_all_settings
from txstats.models.transaction import Outcome


# Page configuration
st.set_page_config(
    page_title="Transaction Statistics",
    page_icon="📈",
    layout="wide",
    initial_sidebar_state="expanded",
)

st.markdown("""
<style>
    .stButton>button {
        width: 100%;
        margin-top: 10px;
    }
    .success-box {
        padding: 20px;
        background-color: #d4edda;
        border-radius: 10px;
        border-left: 5px solid #28a745;
        margin: 10px 0;
    }
    .warning-box {
        padding: 20px;
        background-color: #fff3cd;
        border-radius: 10px;
        border-left: 5px solid #ffc107;
        margin: 10px 0;
    }
    .error-box {
        padding: 20px;
        background-color: #f8d7da;
        border-radius: 10px;
        border-left: 5px solid #dc3545;
        margin: 10px 0;
    }
</style>
""", unsafe_allow_html=True)


ADMISSION_MESSAGES = {
    Outcome.CREATED: ("success-box", "✅ Transaction recorded"),
    Outcome.MALFORMED_INPUT: ("error-box", "❌ Amount must be non-zero and the timestamp must be set"),
    Outcome.STALE_OR_FUTURE: ("warning-box", "⏱️ Timestamp is in the future or older than the freshness window"),
}


@st.cache_resource
def get_client() -> TransactionStatsClient:
    """Get or create the API client (cached)."""
    return TransactionStatsClient(get_settings().client)


def render_box(css_class: str, text: str) -> None:
    st.markdown(f'<div class="{css_class}">{text}</div>', unsafe_allow_html=True)


def main():
    """Main application entry point."""
    client = get_client()

    st.sidebar.title("📈 Transaction Statistics")
    st.sidebar.markdown("---")

    page = st.sidebar.radio(
        "Navigate to:",
        ["➕ Record", "📊 Statistics", "📍 Location", "⚙️ Settings"],
        index=0,
    )

    try:
        if page == "➕ Record":
            render_record_page(client)
        elif page == "📊 Statistics":
            render_statistics_page(client)
        elif page == "📍 Location":
            render_location_page(client)
        elif page == "⚙️ Settings":
            render_settings_page(client)
    except TransactionStatsError as e:
        render_box("error-box", f"❌ Service error: {e}")


def render_record_page(client: TransactionStatsClient):
    """Render the transaction entry page."""
    st.title("➕ Record Transaction")

    zone = get_settings().aggregator.zone

    with st.form("transaction"):
        amount = st.number_input("Amount *", value=0.0, step=0.01, format="%.2f")
        use_now = st.checkbox("Use current time", value=True)
        raw_timestamp = st.text_input(
            "Timestamp (ISO 8601)",
            placeholder="2024-12-15T10:30:00",
            help="Read as wall-clock time in the reference timezone",
        )
        submitted = st.form_submit_button("Submit", type="primary")

    if submitted:
        if use_now:
            timestamp = datetime.now(zone)
        else:
            try:
                timestamp = datetime.fromisoformat(raw_timestamp.strip())
            except ValueError:
                render_box("error-box", "❌ Timestamp is not a valid ISO 8601 date and time")
                return
        outcome = client.create_transaction(amount, timestamp)
        css_class, text = ADMISSION_MESSAGES[outcome]
        render_box(css_class, text)

    st.markdown("---")
    if st.button("🗑️ Delete All Transactions"):
        client.delete_transactions()
        render_box("success-box", "✅ All transactions deleted")


def render_statistics_page(client: TransactionStatsClient):
    """Render the statistics page."""
    st.title("📊 Statistics")

    location = st.text_input(
        "Your location",
        help="Required only if the account has a location set",
    )

    if st.button("🔍 Get Statistics", type="primary"):
        result = client.get_statistics(location or None)

        if result.outcome == Outcome.DENIED:
            render_box("error-box", "🔒 Unauthorized: location does not match the account")
        elif result.outcome == Outcome.EMPTY:
            render_box("warning-box", "📭 No transactions recorded yet")
        else:
            stats = result.statistics
            cols = st.columns(5)
            cols[0].metric("Sum", f"{stats.sum:,.2f}")
            cols[1].metric("Average", f"{stats.average:,.2f}")
            cols[2].metric("Max", f"{stats.max:,.2f}")
            cols[3].metric("Min", f"{stats.min:,.2f}")
            cols[4].metric("Count", stats.count)


def render_location_page(client: TransactionStatsClient):
    """Render the account location page."""
    st.title("📍 Account Location")
    st.markdown(
        "When a location is set, statistics are only shown to requests "
        "asserting exactly that location."
    )

    city = st.text_input("City")

    col1, col2 = st.columns(2)
    with col1:
        if st.button("Set Location", type="primary"):
            outcome = client.set_location(city)
            if outcome == Outcome.LOCATION_SET:
                render_box("success-box", f"✅ Location set to {city.strip()}")
            else:
                render_box("error-box", "❌ Location cannot be empty")
    with col2:
        if st.button("Reset Location"):
            client.reset_location()
            render_box("success-box", "✅ Location reset: statistics open to everyone")


def render_settings_page(client: TransactionStatsClient):
    """Render the settings page."""
    st.title("⚙️ Settings")

    st.markdown("### Connection Status")
    try:
        health = client.health()
        st.success(f"✅ {health['service']} v{health['version']} - {health['status']}")
    except TransactionStatsError as e:
        st.error(f"❌ API unreachable - {e}")

    st.markdown("### Configuration")
    status = validate_all_settings()
    for key in ("aggregator", "server", "client", "app"):
        if status.get(key, False):
            st.success(f"✅ {key}")
        else:
            st.error(f"❌ {key} - {status.get(f'{key}_error', 'Not configured')}")

    settings = get_settings()
    st.markdown(
        f"- Reference timezone: `{settings.aggregator.reference_timezone}`\n"
        f"- Freshness window: `{settings.aggregator.freshness_window_seconds}s`\n"
        f"- API: `{settings.client.base_url}`"
    )


if __name__ == "__main__":
    main()
