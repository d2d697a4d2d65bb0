# finance_client/session.py
import requests

DEFAULT_API_BASE = "http://localhost:5000"


class TokenStore:
    """Where a Session keeps its access token between calls."""

    def get(self):
        raise NotImplementedError

    def set(self, token):
        raise NotImplementedError

    def clear(self):
        raise NotImplementedError


class MemoryTokenStore(TokenStore):
    def __init__(self, token=None):
        self._token = token

    def get(self):
        return self._token

    def set(self, token):
        self._token = token

    def clear(self):
        self._token = None


class MappingTokenStore(TokenStore):
    """
    Keeps the token under ``key`` in any mutable mapping, e.g. a web
    framework's per-user session state.
    """

    def __init__(self, mapping, key="token"):
        self.mapping = mapping
        self.key = key

    def get(self):
        return self.mapping.get(self.key)

    def set(self, token):
        self.mapping[self.key] = token

    def clear(self):
        self.mapping.pop(self.key, None)


class Session:
    """
    One logged-in (or anonymous) user of the API.

    Passed explicitly to whatever needs to talk to the backend instead of
    living in global state. The underlying ``requests.Session`` holds the
    httpOnly refresh cookie.
    """

    def __init__(self, base_url=DEFAULT_API_BASE, token_store=None, http=None, timeout=10):
        self.base_url = base_url.rstrip("/")
        self.tokens = token_store or MemoryTokenStore()
        self.http = http or requests.Session()
        self.timeout = timeout
        self.user_id = None
        self.username = None

    @property
    def is_authenticated(self):
        return bool(self.tokens.get())

    def url(self, path):
        return self.base_url + path

    def auth_headers(self):
        token = self.tokens.get()
        return {"Authorization": f"Bearer {token}"} if token else {}

    def start(self, access_token, user_id=None, username=None):
        self.tokens.set(access_token)
        if user_id is not None:
            self.user_id = user_id
        if username is not None:
            self.username = username

    def reset(self):
        self.tokens.clear()
        self.user_id = None
        self.username = None
        self.http.cookies.clear()
