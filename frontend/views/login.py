# views/login.py

import streamlit as st
from utils.api import APIClient, error_message
from config import API_URL, APP_NAME

api = APIClient(API_URL)


def render():
    st.title(APP_NAME)
    st.subheader("Connexion")
    with st.form("login_form"):
        email = st.text_input("Email")
        password = st.text_input("Mot de passe", type="password")
        submitted = st.form_submit_button("Se connecter")
        
        if submitted:
            if not (email and password):
                st.warning("Veuillez saisir l'email et le mot de passe.")
                return
            result = api.login(email, password)
            if result["status"] == 200:
                st.session_state.token = result["data"]["access_token"]
                st.session_state.user_id = result["data"]["user_id"]
                # Fetch operator info
                me = api.get_me()
                if me["status"] == 200:
                    st.session_state.user = me["data"]
                st.session_state["is_authenticated"] = True
                st.rerun()
            else:
                st.error(f"Échec de la connexion : {error_message(result, 'Login failed')}")
