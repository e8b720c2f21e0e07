"""
Dashboard page: headline user counts.
"""
import streamlit as st

from config import API_URL
from utils.api import APIClient, error_message
from utils.formatters import format_count


def render():
    """Render the dashboard."""
    st.title("Tableau de bord")

    api = APIClient(API_URL)
    with st.spinner("Chargement des statistiques..."):
        result = api.get_user_stats()

    if result["status"] != 200:
        st.error(error_message(result, "Erreur lors du chargement des statistiques."))
        return

    stats = result["data"]
    col1, col2, col3, col4 = st.columns(4)
    with col1:
        st.metric("Utilisateurs", format_count(stats.get("total")))
    with col2:
        st.metric("Admins", format_count(stats.get("admins")))
    with col3:
        st.metric("Vérifiés", format_count(stats.get("verified")))
    with col4:
        st.metric("Non vérifiés", format_count(stats.get("unverified")))

    if st.button("Gérer les utilisateurs", use_container_width=True):
        st.session_state["nav_override"] = "Utilisateurs"
        st.rerun()
