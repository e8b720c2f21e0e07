import re
from typing import Optional

import requests
import streamlit as st

DEFAULT_EXPORT_NAME = "users_export.csv"


class APIClient:
    """Simple API client for backend requests.

    Never raises: every call returns {"status", "data"} or, when the backend
    cannot be reached, {"status": 0, "error"}.
    """
    
    def __init__(self, base_url: str):
        self.base_url = base_url
    
    def _headers(self) -> dict:
        """Get headers with auth token if available."""
        headers = {"Content-Type": "application/json"}
        if st.session_state.get("token"):
            headers["Authorization"] = f"Bearer {st.session_state.token}"
        return headers
    
    def _parse_json(self, resp) -> Optional[dict]:
        """Safely parse JSON, return None or text on failure."""
        if resp is None or not resp.text:
            return None
        try:
            return resp.json()
        except ValueError:
            # Non-JSON response
            return {"raw": resp.text}

    def _request(
        self,
        method: str,
        endpoint: str,
        data: Optional[dict] = None,
        params: Optional[dict] = None,
        raw: bool = False,
    ) -> dict:
        """Send a request with the token as query param."""
        params = dict(params or {})
        if st.session_state.get("token"):
            params["token"] = st.session_state.token
        try:
            resp = requests.request(
                method,
                f"{self.base_url}{endpoint}",
                headers=self._headers(),
                json=data,
                params=params,
                timeout=30,
            )
        except requests.exceptions.ConnectionError:
            return {"status": 0, "error": "Cannot connect to backend"}
        except requests.exceptions.RequestException as e:
            return {"status": 0, "error": str(e)}
        if raw and resp.ok:
            return {"status": resp.status_code, "data": resp.content, "headers": resp.headers}
        return {"status": resp.status_code, "data": self._parse_json(resp)}

    def _get(self, endpoint: str, params: Optional[dict] = None) -> dict:
        return self._request("GET", endpoint, params=params)
    
    def _post(self, endpoint: str, data: Optional[dict] = None) -> dict:
        return self._request("POST", endpoint, data=data)

    # Auth endpoints
    def login(self, email: str, password: str) -> dict:
        """Login and get token."""
        return self._post("/auth/login", {
            "email": email,
            "password": password,
        })
    
    def get_me(self) -> dict:
        """Get current operator profile."""
        return self._get("/auth/me")
    
    # Health endpoint
    def health(self) -> dict:
        """Check API health."""
        return self._get("/health")
    
    # Users endpoints
    def list_users(
        self,
        search: Optional[str] = None,
        page: int = 1,
        page_size: int = 25,
        sort_by: str = "full_name",
        sort_order: str = "asc",
    ) -> dict:
        """List users with their admin and verified flags."""
        params = {
            "page": page,
            "page_size": page_size,
            "sort_by": sort_by,
            "sort_order": sort_order,
        }
        if search:
            params["search"] = search
        return self._get("/users", params)

    def get_user_stats(self) -> dict:
        """Get user counts."""
        return self._get("/users/stats")

    def export_users_csv(
        self,
        search: Optional[str] = None,
        sort_by: str = "full_name",
        sort_order: str = "asc",
    ) -> dict:
        """Get the CSV export in table order.

        On success data holds the bytes and filename the name sent by the
        backend.
        """
        params = {"sort_by": sort_by, "sort_order": sort_order}
        if search:
            params["search"] = search
        result = self._request("GET", "/users/export", params=params, raw=True)
        if result["status"] == 200:
            disposition = result.pop("headers", {}).get("Content-Disposition")
            result["filename"] = filename_from_disposition(disposition)
        return result

    def update_user(self, uid: str, profile: dict) -> dict:
        """Overwrite the editable profile fields."""
        return self._request("PATCH", f"/users/{uid}", data=profile)

    def delete_user(self, uid: str) -> dict:
        """Delete a user document (not the auth account)."""
        return self._request("DELETE", f"/users/{uid}")

    def toggle_admin(self, uid: str) -> dict:
        """Flip the admin flag."""
        return self._post(f"/users/{uid}/admin/toggle")

    def toggle_verified(self, uid: str) -> dict:
        """Flip the verified flag."""
        return self._post(f"/users/{uid}/verified/toggle")

    def bulk_verify(self, uids: list[str], verified: bool) -> dict:
        """Verify or unverify a selection."""
        return self._post("/users/bulk/verify", {"uids": uids, "verified": verified})

    def bulk_delete(self, uids: list[str]) -> dict:
        """Delete a selection."""
        return self._post("/users/bulk/delete", {"uids": uids})


def error_message(result: dict, default: str) -> str:
    """Best human-readable error from an APIClient result."""
    data = result.get("data")
    if isinstance(data, dict) and data.get("detail"):
        detail = data["detail"]
        if isinstance(detail, list):
            # FastAPI validation errors
            return "; ".join(str(item.get("msg", item)) for item in detail)
        return str(detail)
    return result.get("error") or default


def filename_from_disposition(header: Optional[str], default: str = DEFAULT_EXPORT_NAME) -> str:
    """File name from a Content-Disposition header, default when absent."""
    match = re.search(r'filename="?([^";]+)"?', header or "")
    return match.group(1).strip() if match else default
