"""
Backend for the web demo (``apps/streamlit_app.py``).

Two indexes are exposed:
- ``geonames``: full-text feature search (see ``data_indexer``)
- ``nycjobs``: suggestions, autocomplete and agency facets for a search box
"""

import html
from typing import Any, Dict, List, Optional

from azure.core.exceptions import HttpResponseError
from azure.search.documents import SearchClient

SUGGESTER_NAME = "sg"
HIGHLIGHT_PRE_TAG = "<b>"
HIGHLIGHT_POST_TAG = "</b>"
NYC_JOBS_INDEX_NAME = "nycjobs"
FEATURES_INDEX_NAME = "geonames"


class FeaturesSearch:
    """Full-text search over the geonames index."""

    def __init__(self, search_client: SearchClient):
        self.search_client = search_client
        self.error_message: Optional[str] = None

    def search(self, search_text: str) -> Optional[List[Dict[str, Any]]]:
        """
        Search all features, requiring every term to match.

        A blank query is treated as "search everything". Service errors are
        printed and recorded in ``error_message``, and None is returned.
        """
        if not search_text or not search_text.strip():
            search_text = "*"
        try:
            return list(self.search_client.search(search_text=search_text, search_mode="all"))
        except HttpResponseError as e:
            self.error_message = e.message
            print(f"Error querying index: {e.message}\n")
        return None


def suggest(search_client: SearchClient, term: str, highlights: bool = False, fuzzy: bool = False) -> List[str]:
    kwargs: Dict[str, Any] = {"use_fuzzy_matching": fuzzy, "top": 5}
    if highlights:
        kwargs["highlight_pre_tag"] = HIGHLIGHT_PRE_TAG
        kwargs["highlight_post_tag"] = HIGHLIGHT_POST_TAG
    results = search_client.suggest(search_text=term, suggester_name=SUGGESTER_NAME, **kwargs)
    return [item.text for item in results]


def autocomplete(search_client: SearchClient, term: str) -> List[str]:
    results = search_client.autocomplete(
        search_text=term,
        suggester_name=SUGGESTER_NAME,
        mode="oneTermWithContext",
        use_fuzzy_matching=False,
        top=5,
        minimum_coverage=80,
    )
    return [item.text for item in results]


def suggest_and_autocomplete(search_client: SearchClient, term: str) -> List[Dict[str, str]]:
    """Autocompleted terms first, then suggestions, each tagged with its category."""
    combined = [{"label": text, "category": "Autocomplete"} for text in autocomplete(search_client, term)]
    combined.extend({"label": text, "category": "Suggestions"} for text in suggest(search_client, term))
    return combined


def agency_facets(search_client: SearchClient) -> List[str]:
    results = search_client.search(search_text="*", facets=["agency,count:500"])
    facets = results.get_facets() or {}
    return [str(facet["value"]) for facet in facets.get("agency", [])]


def display_html(text: str, highlighted: bool = False) -> str:
    """
    Escape index text for the page.

    Suggestions come straight from indexed documents, so markup is shown as
    text. With ``highlighted`` the ``<b>`` tags added by the service are
    kept.
    """
    escaped = html.escape(text)
    if highlighted:
        for tag in (HIGHLIGHT_PRE_TAG, HIGHLIGHT_POST_TAG):
            escaped = escaped.replace(html.escape(tag), tag)
    return escaped
