import asyncio
import json

import httpx

from springops.api import ApiClient, Backend
from springops.api.results import ErrorKind
from springops.api.session import REFRESH_KEY, ROLE_KEY, TOKEN_KEY, USER_KEY, SessionStore

LOGIN_PAYLOAD = {
    "success": True,
    "data": {
        "access": "access-abc",
        "refresh": "refresh-xyz",
        "user": {"id": 3, "email": "sup@plant.test", "first_name": "Sam", "primary_role": {"name": "supervisor"}},
    },
}


def _backend(handler, storage=None):
    storage = {} if storage is None else storage
    client = ApiClient("http://backend.test/api", SessionStore(storage), transport=httpx.MockTransport(handler))
    return Backend(client), storage


def test_login_persists_session():
    seen = {}

    def handler(request):
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json=LOGIN_PAYLOAD)

    backend, storage = _backend(handler)
    res = asyncio.run(backend.auth.login("sup@plant.test", "pw"))
    assert res.ok
    assert res.data["role"] == "supervisor"
    assert seen["body"] == {"email": "sup@plant.test", "password": "pw"}
    assert storage[TOKEN_KEY] == "access-abc"
    assert storage[REFRESH_KEY] == "refresh-xyz"
    assert storage[ROLE_KEY] == "supervisor"
    assert storage[USER_KEY]["first_name"] == "Sam"
    assert backend.session.current().display_name == "Sam"


def test_login_for_wrong_role_is_denied():
    backend, storage = _backend(lambda request: httpx.Response(200, json=LOGIN_PAYLOAD))
    res = asyncio.run(backend.auth.login("sup@plant.test", "pw", expected_role="manager"))
    assert not res.ok
    assert res.error == ErrorKind.AUTH
    assert res.message == (
        "Access denied. Only managers are allowed to login here. You are logged in as a supervisor."
    )
    assert storage == {}


def test_bad_credentials_keep_backend_message():
    backend, storage = _backend(lambda request: httpx.Response(400, json={"error": "Invalid email or password"}))
    res = asyncio.run(backend.auth.login("x@plant.test", "nope"))
    assert res.message == "Invalid email or password"
    assert storage == {}


def test_logout_clears_session_even_when_backend_fails(signed_in_storage):
    calls = []

    def handler(request):
        calls.append(json.loads(request.content))
        return httpx.Response(500, json={"error": "boom"})

    backend, storage = _backend(handler, signed_in_storage)
    asyncio.run(backend.auth.logout())
    assert calls == [{"refresh": "r"}]
    assert storage == {}
