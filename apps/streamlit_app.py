import streamlit as st
import time

# ============================================================
# Backend Import Configuration
# ============================================================
# The page is a thin shell over search_howto.web_search:
#   - "Features" tab: full-text search over the geonames index
#   - "Jobs" tab: suggestions, autocomplete and agency facets over nycjobs
# ============================================================
import sys
from pathlib import Path
sys.path.append(str(Path(__file__).parent.parent))

from search_howto.clients import get_search_client
from search_howto.config import ConfigurationError, load_settings, require_query_access
from search_howto.web_search import (
    FEATURES_INDEX_NAME,
    NYC_JOBS_INDEX_NAME,
    FeaturesSearch,
    agency_facets,
    autocomplete,
    display_html,
    suggest,
    suggest_and_autocomplete,
)

# Page configuration
st.set_page_config(
    page_title="Search How-To Demo",
    page_icon="",
    layout="wide",
    initial_sidebar_state="collapsed"
)

st.markdown("""
<style>
    .header-container {
        background: linear-gradient(135deg, #0078d4 0%, #2b88d8 100%);
        border-radius: 12px;
        padding: 1.5rem 2rem;
        margin-bottom: 1.5rem;
        color: white;
    }
    .header-title {
        font-size: 2rem;
        font-weight: 700;
        margin: 0;
    }
    .header-subtitle {
        font-size: 1rem;
        opacity: 0.9;
        margin-top: 0.3rem;
    }
    .section-header {
        color: #0078d4;
        font-size: 1.2rem;
        font-weight: 600;
        margin: 1.2rem 0 0.8rem 0;
    }
    .suggestion b {
        color: #0078d4;
    }
    #MainMenu {visibility: hidden;}
    footer {visibility: hidden;}
</style>
""", unsafe_allow_html=True)

st.markdown("""
<div class="header-container">
    <h1 class="header-title">Search How-To Demo</h1>
    <p class="header-subtitle">Feature search, suggestions and autocomplete with Azure AI Search</p>
</div>
""", unsafe_allow_html=True)


# ============================================================
# Configuration with Caching
# ============================================================
# Settings are read from .env once per app process. Query clients are
# cached separately per index by search_howto.clients.
# ============================================================
@st.cache_resource
def get_settings():
    """
    Load and cache the search service settings.

    Returns:
        Settings, or None when the service endpoint or both keys are missing.
    """
    settings = load_settings()
    try:
        require_query_access(settings)
    except ConfigurationError:
        return None
    return settings


settings = get_settings()
if settings is None:
    st.error("Missing environment variables. Configure .env with the search service name or endpoint and keys.")
    st.stop()

features_tab, jobs_tab = st.tabs(["Features", "Jobs"])

# ============================================================
# Feature search (geonames)
# ============================================================
with features_tab:
    col1, col2 = st.columns([4, 1])
    with col1:
        search_text = st.text_input(
            "Search features",
            placeholder="e.g., 'mount rainier', 'lake', leave empty for everything",
            label_visibility="collapsed",
            key="features_input"
        )
    with col2:
        search_button = st.button("Search", use_container_width=True, key="features_button")

    if search_button or search_text:
        started = time.time()
        with st.spinner("Searching..."):
            features = FeaturesSearch(get_search_client(settings, FEATURES_INDEX_NAME))
            results = features.search(search_text)
        elapsed_ms = (time.time() - started) * 1000

        if results is None:
            st.error(f"Error querying index: {features.error_message}")
        else:
            st.markdown('<div class="section-header">Search Results</div>', unsafe_allow_html=True)
            st.markdown(f"**Found {len(results)} features** in {elapsed_ms:.0f}ms")
            if results:
                st.dataframe(
                    [{k: v for k, v in doc.items() if not k.startswith("@")} for doc in results],
                    use_container_width=True,
                    hide_index=True,
                    height=400
                )

# ============================================================
# Suggestions, autocomplete and facets (nycjobs)
# ============================================================
with jobs_tab:
    jobs_client = get_search_client(settings, NYC_JOBS_INDEX_NAME)

    mode = st.radio(
        "Type-ahead mode",
        ["Suggest", "Suggest with highlights", "Fuzzy suggest", "Autocomplete", "Both", "Facets"],
        horizontal=True
    )

    if mode == "Facets":
        # Agency facets drive the "filter by agency" box
        try:
            agencies = agency_facets(jobs_client)
        except Exception as e:
            st.error(f"Error loading facets: {str(e)}")
            agencies = []
        term = st.text_input("Agency", key="agency_input")
        matches = [a for a in agencies if term.lower() in a.lower()] if term else agencies
        st.markdown(f"**{len(matches)} agencies**")
        st.write(matches)
    else:
        term = st.text_input(
            "Job search",
            placeholder="Start typing, e.g. 'prog' or 'assis'",
            key="jobs_input"
        )
        if term:
            try:
                if mode == "Suggest":
                    items = suggest(jobs_client, term)
                elif mode == "Suggest with highlights":
                    items = suggest(jobs_client, term, highlights=True)
                elif mode == "Fuzzy suggest":
                    items = suggest(jobs_client, term, fuzzy=True)
                elif mode == "Autocomplete":
                    items = autocomplete(jobs_client, term)
                else:
                    items = [f"{item['label']} ({item['category']})" for item in suggest_and_autocomplete(jobs_client, term)]
            except Exception as e:
                st.error(f"Error processing query: {str(e)}")
                items = []

            highlighted = mode == "Suggest with highlights"
            for item in items:
                st.markdown(
                    f'<div class="suggestion">{display_html(item, highlighted=highlighted)}</div>',
                    unsafe_allow_html=True
                )
            if not items:
                st.info("No matches")

# Footer
st.markdown("---")
st.markdown("""
<div style="text-align: center; color: #666; font-size: 0.9rem; padding: 1rem;">
    <p>Built with Streamlit & Azure AI Search</p>
</div>
""", unsafe_allow_html=True)
