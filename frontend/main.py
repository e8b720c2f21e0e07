import streamlit as st
from streamlit_option_menu import option_menu
from views import login, dashboard, users, account
from config import APP_NAME

NAV_OPTIONS = ["Tableau de bord", "Utilisateurs", "Compte"]
NAV_ICONS = ["speedometer2", "people", "gear"]


def init_session():
    defaults = {
        "is_authenticated": False,
        "user_id": None,
        "user": None,
        "token": None,
        "nav_page": "Utilisateurs",
        "nav_override": None,
    }
    for key, value in defaults.items():
        if key not in st.session_state:
            st.session_state[key] = value


def main():
    st.set_page_config(page_title=APP_NAME, layout="wide")
    init_session()

    # --- Access control
    if not st.session_state["is_authenticated"]:
        login.render()
        st.stop()

    # --- Programmatic navigation (dashboard shortcut)
    nav_override = st.session_state.get("nav_override")
    if nav_override:
        st.session_state["nav_page"] = nav_override
        st.session_state["nav_override"] = None
        # Increment nav_key to force widget recreation
        st.session_state["nav_key"] = st.session_state.get("nav_key", 0) + 1
        st.rerun()

    # --- Sidebar navigation
    with st.sidebar:
        current_page = st.session_state.get("nav_page", "Utilisateurs")
        try:
            default_index = NAV_OPTIONS.index(current_page)
        except ValueError:
            default_index = 0

        page_selected = option_menu(
            menu_title=APP_NAME,
            options=NAV_OPTIONS,
            icons=NAV_ICONS,
            default_index=default_index,
            key=f"main_nav_{st.session_state.get('nav_key', 0)}",
        )

        if page_selected != current_page:
            st.session_state["nav_page"] = page_selected
            st.rerun()

    # --- Routing
    page = st.session_state.get("nav_page", "Utilisateurs")
    if page == "Tableau de bord":
        dashboard.render()
    elif page == "Utilisateurs":
        users.render()
    elif page == "Compte":
        account.render()


if __name__ == "__main__":
    main()
