import streamlit as st
from utils.api import APIClient
from utils.formatters import format_date
from config import API_URL


def logout():
    """Forget the token and go back to the login screen."""
    for key in ("token", "user", "user_id"):
        st.session_state[key] = None
    st.session_state.is_authenticated = False
    st.rerun()


def render():
    st.title("Mon Compte")
    
    api = APIClient(API_URL)
    
    user_info = api.get_me()
    if user_info["status"] == 200:
        operator = user_info["data"]
        col1, col2 = st.columns(2)
        with col1:
            st.write(f"**Nom :** {operator.get('full_name') or '-'}")
            st.write(f"**Email :** {operator.get('email')}")
        with col2:
            st.write(f"**ID :** {operator.get('id')}")
            st.write(f"**Créé le :** {format_date(operator.get('created_at'))}")
    elif user_info["status"] in (401, 403):
        st.warning("Session expirée ou privilèges admin retirés.")
        logout()
    else:
        st.error("Impossible de récupérer les informations du compte.")
    
    st.divider()
    
    if st.button("Se déconnecter", use_container_width=True):
        logout()
