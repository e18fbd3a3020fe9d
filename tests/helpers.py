# tests/helpers.py

ADMIN = ("admin@judoclub.es", "AdminPassw0rd!")
MEMBER = ("member@judoclub.es", "MemberPassw0rd!")


def auth_header(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


def login(client, credentials) -> str:
    email, password = credentials
    res = client.post("/api/v1/auth/login", json={"email": email, "password": password})
    assert res.status_code == 200, res.text
    return res.json()["session_token"]


def navigate(client, token, page, filters=None):
    body = {"page": page}
    if filters is not None:
        body["filters"] = filters
    res = client.post("/api/v1/portal/navigate", json=body, headers=auth_header(token))
    assert res.status_code == 200, res.text
    return res.json()


def render(client, token, **params):
    res = client.get("/api/v1/portal/view", params=params, headers=auth_header(token))
    assert res.status_code == 200, res.text
    return res.json()
