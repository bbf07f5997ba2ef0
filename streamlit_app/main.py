# streamlit_app/main.py

import streamlit as st
from streamlit_folium import folium_static
from pathlib import Path
import sys
import logging

# Add src to path
sys.path.append(str(Path(__file__).parent.parent / 'src'))

from chat.webhook_client import ChatSession
from config import config
from data.dataset_store import DatasetStore
from search.lookup_engine import suggest_ids
from search.series_extractor import measurement_table
from visualization.plot_generator import FloatPlotGenerator
from visualization.view_binding import ViewBinding

# Configure page
st.set_page_config(
    page_title="Argonauts Float Explorer",
    page_icon="🌊",
    layout="wide",
    initial_sidebar_state="expanded"
)

# Custom CSS for styling
st.markdown("""
<style>
    .main-header {
        font-size: 2.5rem;
        color: #1f77b4;
        text-align: center;
        margin-bottom: 1rem;
        font-weight: bold;
    }
    .section-header {
        font-size: 1.5rem;
        color: #2e86ab;
        margin-top: 1.5rem;
        margin-bottom: 1rem;
        font-weight: bold;
    }
    .folium-map {
        border-radius: 10px;
        border: 2px solid #dee2e6;
    }
</style>
""", unsafe_allow_html=True)

PAGES = ["Home", "Float Explorer", "Float Map", "Chatbot"]


class FloatExplorerDashboard:
    def __init__(self):
        config.setup_logging()
        self.logger = logging.getLogger(__name__)
        self.plot_generator = FloatPlotGenerator()
        self.initialize_session()

    def initialize_session(self):
        """Per-session store, view binding and chat history"""
        if 'dataset_store' not in st.session_state:
            st.session_state.dataset_store = DatasetStore(config.get_dataset_source())
        if 'view_binding' not in st.session_state:
            st.session_state.view_binding = ViewBinding()
        if 'chat_session' not in st.session_state:
            st.session_state.chat_session = ChatSession()

        store = st.session_state.dataset_store
        if not store.is_loaded:
            with st.spinner("Loading float dataset..."):
                store.load()

    @property
    def store(self) -> DatasetStore:
        return st.session_state.dataset_store

    @property
    def binding(self) -> ViewBinding:
        return st.session_state.view_binding

    def render_load_warning(self):
        if self.store.load_error is not None:
            st.warning(f"Float data unavailable: {self.store.load_error.cause}")

    def render_sidebar(self):
        with st.sidebar:
            st.markdown('<div class="main-header">🌊 Argonauts</div>', unsafe_allow_html=True)
            st.markdown("### Navigation")
            page = st.radio("Page", PAGES, label_visibility="collapsed")

            st.markdown("---")
            summary = self.store.summary()
            st.caption(f"{summary['floats']} floats · {summary['records']} profiles")
            return page

    def render_home_page(self):
        st.markdown('<div class="main-header">🌊 Argo Float Explorer</div>', unsafe_allow_html=True)
        self.render_load_warning()

        summary = self.store.summary()
        col1, col2, col3 = st.columns(3)
        with col1:
            st.metric("Floats", f"{summary['floats']:,}")
        with col2:
            st.metric("Profiles", f"{summary['records']:,}")
        with col3:
            st.metric("Depth Samples", f"{summary['samples']:,}")

        st.markdown("---")
        st.markdown("### What are Argo floats?")
        st.markdown(
            "Argo floats are autonomous profiling buoys that drift with ocean currents, "
            "dive to depth and report temperature and salinity profiles as they surface. "
            "Search a float by its identifier to chart its profile and locate it on the map."
        )

    def render_float_explorer(self):
        st.markdown('<div class="section-header">🔎 Float Explorer</div>', unsafe_allow_html=True)
        self.render_load_warning()

        with st.form("float_search"):
            raw_id = st.text_input("Float ID", placeholder="e.g. 2902256")
            submitted = st.form_submit_button("Search")

        if submitted:
            self.binding.search(self.store.dataset, raw_id)

        state = self.binding.state
        if state.message:
            st.info(state.message)
            hints = suggest_ids(self.store.dataset, raw_id, limit=5) if submitted and raw_id.strip() else []
            if hints:
                st.caption("Known floats: " + ", ".join(hints))

        if state.has_charts:
            col1, col2 = st.columns(2)
            with col1:
                st.plotly_chart(
                    self.plot_generator.create_profile_plot(state.temperature_series, 'temperature', state.highlighted_id),
                    use_container_width=True
                )
            with col2:
                st.plotly_chart(
                    self.plot_generator.create_profile_plot(state.salinity_series, 'salinity', state.highlighted_id),
                    use_container_width=True
                )

            if len(state.temperature_time_series) > 1 or len(state.salinity_time_series) > 1:
                col1, col2 = st.columns(2)
                with col1:
                    st.plotly_chart(
                        self.plot_generator.create_time_series_plot(state.temperature_time_series, 'temperature', state.highlighted_id),
                        use_container_width=True
                    )
                with col2:
                    st.plotly_chart(
                        self.plot_generator.create_time_series_plot(state.salinity_time_series, 'salinity', state.highlighted_id),
                        use_container_width=True
                    )

        if state.result is not None and state.focus is not None:
            st.markdown("### Depth-wise measurements")
            st.dataframe(measurement_table(state.result.record), use_container_width=True)

        st.markdown("### Location")
        folium_static(self.plot_generator.create_float_map(self.store.dataset, state), width=900, height=500)

    def render_float_map(self):
        st.markdown('<div class="section-header">🗺️ Float Map</div>', unsafe_allow_html=True)
        self.render_load_warning()
        folium_static(self.plot_generator.create_float_map(self.store.dataset), width=1100, height=650)

    def render_chatbot(self):
        st.markdown('<div class="section-header">🤖 Argonauts Chatbot</div>', unsafe_allow_html=True)
        st.markdown("Ask me anything about Argo floats!")

        session = st.session_state.chat_session
        for message in session.messages:
            with st.chat_message(message["role"]):
                st.markdown(message["content"])

        prompt = st.chat_input("Type your message here...")
        if prompt and prompt.strip():
            with st.chat_message("user"):
                st.markdown(prompt)
            with st.chat_message("assistant"):
                with st.spinner("Thinking..."):
                    reply = session.send(prompt)
                st.markdown(reply)

    def run(self):
        page = self.render_sidebar()

        if page == "Home":
            self.render_home_page()
        elif page == "Float Explorer":
            self.render_float_explorer()
        elif page == "Float Map":
            self.render_float_map()
        elif page == "Chatbot":
            self.render_chatbot()

# Run the application
if __name__ == "__main__":
    dashboard = FloatExplorerDashboard()
    dashboard.run()
