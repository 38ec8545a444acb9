"""Request helpers shared by the API tests."""

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 32


def signup(client, email="alice@test.com", password="secret123", name="Alice"):
    return client.put("/auth/signup", json={"email": email, "password": password, "name": name})


def login_headers(client, email="alice@test.com", password="secret123", name="Alice"):
    signup(client, email=email, password=password, name=name)
    response = client.post("/auth/login", json={"email": email, "password": password})
    assert response.status_code == 200, f"Login failed: {response.json()}"
    return {"Authorization": f"Bearer {response.json()['token']}"}


def png_file(name="photo.png"):
    return {"image": (name, PNG_BYTES, "image/png")}


def create_post(client, headers, title="First post", content="Hello there", image_name="photo.png"):
    return client.post(
        "/feed/post",
        data={"title": title, "content": content},
        files=png_file(image_name),
        headers=headers,
    )


def gql(client, query, variables=None, headers=None):
    response = client.post("/graphql", json={"query": query, "variables": variables or {}}, headers=headers or {})
    assert response.status_code == 200
    return response.json()
