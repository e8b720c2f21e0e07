"""
Users page: the user management table.

Features:
- Search on full name, email or matricule, sorting and pagination
- Row selection with bulk verify / unverify / delete
- Per-user edit, delete, admin toggle and verified toggle
- CSV export of every user matching the search
"""

import streamlit as st

from config import API_URL, DEFAULT_PAGE_SIZE, PAGE_SIZE_OPTIONS, YEAR_OPTIONS
from utils.api import APIClient, error_message
from utils.formatters import admin_label, user_display_name, verified_label
from utils.tables import (
	SELECT_COLUMN,
	SORT_OPTIONS,
	build_profile_payload,
	build_users_dataframe,
	missing_required_fields,
	profile_form_defaults,
	selected_uids,
	summarize_bulk_result,
)


def _init_state():
	"""Initialize session state variables."""
	defaults = {
		"users_search": "",
		"users_page": 1,
		"users_page_size": DEFAULT_PAGE_SIZE,
		"users_sort": "Nom Complet",
		"users_sort_desc": False,
		"users_table_version": 0,
		"users_flash": None,
		"users_export": None,
	}
	for key, value in defaults.items():
		if key not in st.session_state:
			st.session_state[key] = value


def _flash(level: str, message: str):
	"""Message shown once, after the next rerun.

	Every write reports through here, so an export built before the write
	is dropped and the next download reflects it.
	"""
	st.session_state.users_flash = (level, message)
	st.session_state.users_export = None


def _show_flash():
	flash = st.session_state.users_flash
	if not flash:
		return
	level, message = flash
	getattr(st, level)(message)
	st.session_state.users_flash = None


def _reset_selection():
	# A new key gives st.data_editor a fresh, unticked state
	st.session_state.users_table_version += 1


def _on_filter_change():
	st.session_state.users_page = 1
	st.session_state.users_export = None
	_reset_selection()


# ==================== Dialogs ====================


@st.dialog("Modifier l'Utilisateur")
def _edit_dialog(api: APIClient, user: dict):
	defaults = profile_form_defaults(user)
	year_options = list(YEAR_OPTIONS)
	if defaults["year"] and defaults["year"] not in year_options:
		year_options.append(defaults["year"])

	with st.form("edit_user_form"):
		full_name = st.text_input("Nom Complet *", value=defaults["full_name"])
		email = st.text_input("Email *", value=defaults["email"])
		matricule = st.text_input("Matricule", value=defaults["matricule"])
		year = st.selectbox(
			"Année",
			options=year_options,
			index=year_options.index(defaults["year"] or None),
			format_func=lambda y: y or "Aucune",
		)
		speciality = st.text_input("Spécialité", value=defaults["speciality"])
		phone_number = st.text_input("Numéro de Téléphone", value=defaults["phone_number"])
		section = st.text_input("Section", value=defaults["section"])
		group = st.text_input("Groupe", value=defaults["group"])
		profile_pic_url = st.text_input("URL de la Photo de Profil", value=defaults["profile_pic_url"])

		col1, col2 = st.columns(2)
		cancelled = col1.form_submit_button("Annuler", use_container_width=True)
		saved = col2.form_submit_button("Sauvegarder", type="primary", use_container_width=True)

	if cancelled:
		st.rerun()

	if saved:
		values = {
			"full_name": full_name,
			"email": email,
			"matricule": matricule,
			"year": year,
			"speciality": speciality,
			"phone_number": phone_number,
			"section": section,
			"group": group,
			"profile_pic_url": profile_pic_url,
		}
		if missing_required_fields(values):
			st.error("Le nom complet et l'email sont requis.")
			return

		result = api.update_user(user["uid"], build_profile_payload(values))
		if result["status"] == 200:
			_flash("success", f"Utilisateur « {user_display_name(result['data'])} » mis à jour.")
			st.rerun()
		st.error(error_message(result, "Erreur lors de la mise à jour de l'utilisateur."))


@st.dialog("Confirmer la Suppression")
def _delete_dialog(api: APIClient, user: dict):
	st.write(
		f"Supprimer le document utilisateur de « {user.get('full_name') or '-'} » "
		f"({user.get('email') or '-'}) ?"
	)
	st.caption(":red[Attention : ceci ne supprime PAS le compte d'authentification.]")

	col1, col2 = st.columns(2)
	if col1.button("Annuler", use_container_width=True):
		st.rerun()
	if col2.button("Supprimer Document", type="primary", use_container_width=True):
		result = api.delete_user(user["uid"])
		if result["status"] == 204:
			_flash("success", f"Document de « {user_display_name(user)} » supprimé.")
		else:
			_flash("error", error_message(result, "Erreur lors de la suppression du document utilisateur."))
		_reset_selection()
		st.rerun()


# ==================== Actions ====================


def _toggle_admin(api: APIClient, user: dict):
	was_admin = bool(user.get("is_admin"))
	result = api.toggle_admin(user["uid"])
	if result["status"] == 200:
		now_admin = result["data"]["is_admin"]
		_flash("success", f"{user_display_name(user)} : {admin_label(now_admin)}.")
	else:
		verb = "retirer" if was_admin else "accorder"
		_flash("error", f"Échec de {verb} le statut admin : {error_message(result, 'erreur inconnue')}")
	st.rerun()


def _toggle_verified(api: APIClient, user: dict):
	was_verified = bool(user.get("is_verified"))
	result = api.toggle_verified(user["uid"])
	if result["status"] == 200:
		now_verified = result["data"]["is_verified"]
		_flash("success", f"{user_display_name(user)} : {verified_label(now_verified)}.")
	else:
		verb = "retirer" if was_verified else "accorder"
		_flash("error", f"Échec de {verb} le statut vérifié : {error_message(result, 'erreur inconnue')}")
	st.rerun()


def _bulk_verify(api: APIClient, uids: list[str], verify: bool):
	label = "Vérification" if verify else "Dévérification"
	result = api.bulk_verify(uids, verify)
	if result["status"] == 200:
		_flash(*summarize_bulk_result(result["data"], label))
	else:
		_flash("error", f"Échec de la mise à jour du statut vérifié pour les utilisateurs sélectionnés : "
						f"{error_message(result, 'erreur inconnue')}")
	_reset_selection()
	st.rerun()


def _bulk_delete(api: APIClient, uids: list[str]):
	result = api.bulk_delete(uids)
	if result["status"] == 200:
		_flash(*summarize_bulk_result(result["data"], "Suppression"))
	else:
		_flash("error", f"Échec de la suppression des utilisateurs sélectionnés : "
						f"{error_message(result, 'erreur inconnue')}")
	_reset_selection()
	st.rerun()


# ==================== Page ====================


def _render_toolbar(api: APIClient):
	col_search, col_sort, col_order, col_size = st.columns([3, 2, 1, 1])
	with col_search:
		st.text_input(
			"Rechercher",
			key="users_search",
			placeholder="Rechercher un utilisateur...",
			on_change=_on_filter_change,
		)
	with col_sort:
		st.selectbox("Trier par", list(SORT_OPTIONS), key="users_sort", on_change=_on_filter_change)
	with col_order:
		st.toggle("Décroissant", key="users_sort_desc", on_change=_on_filter_change)
	with col_size:
		st.selectbox("Par page", PAGE_SIZE_OPTIONS, key="users_page_size", on_change=_on_filter_change)

	export_col, download_col = st.columns([1, 3])
	with export_col:
		if st.button("📥 Exporter CSV", use_container_width=True):
			result = api.export_users_csv(
				st.session_state.users_search or None,
				sort_by=SORT_OPTIONS[st.session_state.users_sort],
				sort_order="desc" if st.session_state.users_sort_desc else "asc",
			)
			if result["status"] == 200:
				st.session_state.users_export = {"data": result["data"], "filename": result["filename"]}
			else:
				st.error(error_message(result, "Erreur lors de l'export CSV."))
	with download_col:
		export = st.session_state.users_export
		if export:
			st.download_button(
				label=f"Télécharger {export['filename']}",
				data=export["data"],
				file_name=export["filename"],
				mime="text/csv",
			)


def _render_bulk_actions(api: APIClient, uids: list[str]):
	st.caption(f"{len(uids)} utilisateur(s) sélectionné(s)")
	col1, col2, col3 = st.columns(3)
	if col1.button("Vérifier Sélection", type="primary", use_container_width=True):
		_bulk_verify(api, uids, True)
	if col2.button("Dévérifier Sélection", use_container_width=True):
		_bulk_verify(api, uids, False)
	if col3.button("Supprimer Sélection", use_container_width=True):
		_bulk_delete(api, uids)


def _render_row_actions(api: APIClient, users: list[dict]):
	by_uid = {user["uid"]: user for user in users}
	uid = st.selectbox(
		"Utilisateur",
		list(by_uid),
		format_func=lambda u: f"{user_display_name(by_uid[u])} ({by_uid[u].get('email') or '-'})",
	)
	user = by_uid[uid]

	col1, col2, col3, col4 = st.columns(4)
	if col1.button("✏️ Modifier", use_container_width=True):
		_edit_dialog(api, user)
	if col2.button("🗑️ Supprimer", use_container_width=True):
		_delete_dialog(api, user)
	admin_action = "Retirer les privilèges Admin" if user.get("is_admin") else "Accorder les privilèges Admin"
	if col3.button(admin_action, use_container_width=True):
		_toggle_admin(api, user)
	verified_action = "Retirer la vérification" if user.get("is_verified") else "Vérifier l'utilisateur"
	if col4.button(verified_action, use_container_width=True):
		_toggle_verified(api, user)


def _render_pagination(data: dict):
	total = data.get("total", 0)
	page = data.get("page", 1)
	page_size = data.get("page_size", DEFAULT_PAGE_SIZE)
	last_page = max(1, -(-total // page_size))

	col_prev, col_info, col_next = st.columns([1, 2, 1])
	if col_prev.button("◀ Précédent", disabled=page <= 1, use_container_width=True):
		st.session_state.users_page = page - 1
		_reset_selection()
		st.rerun()
	col_info.markdown(f"Page **{page}** / {last_page} · {total} utilisateur(s)")
	if col_next.button("Suivant ▶", disabled=not data.get("has_more"), use_container_width=True):
		st.session_state.users_page = page + 1
		_reset_selection()
		st.rerun()


def render():
	"""Render the users page."""
	_init_state()
	st.title("Gestion des Utilisateurs")

	api = APIClient(API_URL)
	_show_flash()
	_render_toolbar(api)

	with st.spinner("Chargement des utilisateurs..."):
		result = api.list_users(
			search=st.session_state.users_search or None,
			page=st.session_state.users_page,
			page_size=st.session_state.users_page_size,
			sort_by=SORT_OPTIONS[st.session_state.users_sort],
			sort_order="desc" if st.session_state.users_sort_desc else "asc",
		)

	if result["status"] != 200:
		st.error(error_message(result, "Erreur lors du chargement des utilisateurs."))
		return

	data = result["data"]
	users = data.get("users") or []
	if not users:
		st.info("Aucun utilisateur ne correspond à la recherche.")
		return

	table = build_users_dataframe(users)
	edited = st.data_editor(
		table,
		key=f"users_table_{st.session_state.users_table_version}",
		hide_index=True,
		use_container_width=True,
		height=600,
		disabled=[column for column in table.columns if column != SELECT_COLUMN],
		column_config={
			SELECT_COLUMN: st.column_config.CheckboxColumn(width="small"),
			"Photo URL": st.column_config.LinkColumn(width="medium"),
		},
	)

	uids = selected_uids(edited)
	if uids:
		_render_bulk_actions(api, uids)

	_render_pagination(data)

	st.divider()
	st.subheader("Actions")
	_render_row_actions(api, users)
