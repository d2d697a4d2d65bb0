# finance_client/api.py
import logging

import requests
from requests.utils import quote

logger = logging.getLogger("finance-client")

RESOURCES = ("transactions", "budgets", "goals")


class ApiError(Exception):
    def __init__(self, status_code, message):
        super().__init__(f"{status_code}: {message}")
        self.status_code = status_code
        self.message = message


def safe_json(resp):
    try:
        return resp.json()
    except ValueError:
        return None


class ApiClient:
    """Thin wrapper over the REST API. Every call raises ApiError on a non-2xx."""

    def __init__(self, session):
        self.session = session

    def api_request(self, method, path, json=None, params=None, auth=True):
        headers = self.session.auth_headers() if auth else {}
        try:
            response = self.session.http.request(
                method.upper(),
                self.session.url(path),
                headers=headers,
                json=json,
                params=params,
                timeout=self.session.timeout,
            )
        except requests.RequestException as e:
            logger.error(f"Connection failed: {e}")
            raise ApiError(0, f"Connection failed: {e}") from e

        if response.status_code >= 400:
            payload = safe_json(response) or {}
            message = payload.get("error") or payload.get("message") or response.reason
            logger.warning(f"{method.upper()} {path} failed with {response.status_code}: {message}")
            raise ApiError(response.status_code, message)
        return response

    # ---------------- Auth ----------------
    def register(self, username, email, password):
        r = self.api_request("POST", "/api/auth/register", auth=False,
                             json={"username": username, "email": email, "password": password})
        return r.json()["user"]

    def login(self, email, password):
        r = self.api_request("POST", "/api/auth/login", auth=False, json={"email": email, "password": password})
        data = r.json()
        self.session.start(data["accessToken"], user_id=data.get("userId"), username=data.get("username"))
        return data

    def refresh(self):
        r = self.api_request("POST", "/api/auth/refresh", auth=False)
        token = r.json()["accessToken"]
        self.session.tokens.set(token)
        return token

    def logout(self):
        try:
            self.api_request("POST", "/api/auth/logout", auth=False)
        finally:
            self.session.reset()

    def me(self):
        return self.api_request("GET", "/api/auth/me").json()

    # ---------------- Records ----------------
    def _resource(self, resource):
        if resource not in RESOURCES:
            raise ValueError(f"Unknown resource '{resource}'")
        return f"/api/{resource}"

    def list(self, resource):
        return self.api_request("GET", self._resource(resource)).json()

    def get(self, resource, record_id):
        return self.api_request("GET", f"{self._resource(resource)}/{record_id}").json()

    def create(self, resource, data):
        return self.api_request("POST", self._resource(resource), json=data).json()

    def update(self, resource, record_id, data):
        return self.api_request("PUT", f"{self._resource(resource)}/{record_id}", json=data).json()

    def delete(self, resource, record_id):
        return self.api_request("DELETE", f"{self._resource(resource)}/{record_id}").json()

    def budgets_by_category(self, category, page=0, size=10):
        return self.api_request("GET", f"/api/budgets/category/{quote(str(category), safe='')}",
                                params={"page": page, "size": size}).json()

    def budgets_by_date_range(self, start_date, end_date, page=0, size=10):
        params = {"startDate": str(start_date), "endDate": str(end_date), "page": page, "size": size}
        return self.api_request("GET", "/api/budgets/date-range", params=params).json()

    # ---------------- Reports ----------------
    def transaction_report(self):
        return self.api_request("GET", "/api/reports/transactions").json()

    def budget_report(self):
        return self.api_request("GET", f"/api/reports/budgets/{self.session.user_id}").json()

    def goal_report(self):
        return self.api_request("GET", "/api/reports/goals").json()

    def budget_plan(self, income=None):
        params = {"income": income} if income is not None else None
        return self.api_request("GET", "/api/reports/budget-plan", params=params).json()

    def export(self, kind, fmt="pdf", income=None):
        params = {"format": fmt}
        if income is not None:
            params["income"] = income
        return self.api_request("GET", f"/api/reports/{kind}/export", params=params).content
