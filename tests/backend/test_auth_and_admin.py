from httpx import ASGITransport, AsyncClient
from fastapi import status

from src.inside_notes.main import app


async def test_technician_cannot_manage_templates():
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        login_resp = await ac.post("/api/auth/login", json={"email": "ronaldo@cliente.com", "password": "x"})
        assert login_resp.status_code == status.HTTP_200_OK
        assert login_resp.json()["role"] == "standard"
        try:
            me_resp = await ac.get("/api/auth/me")
            assert me_resp.json()["id"] == login_resp.json()["id"]

            forbidden = await ac.post("/api/templates", json={"name": "Curto", "content": "[TEXTO_BRUTO_AQUI]"})
            assert forbidden.status_code == status.HTTP_403_FORBIDDEN
            assert forbidden.json()["error"] == "FORBIDDEN"
        finally:
            logout_resp = await ac.post("/api/auth/logout")
        assert logout_resp.status_code == status.HTTP_204_NO_CONTENT

        me_after = await ac.get("/api/auth/me")
        assert me_after.status_code == status.HTTP_401_UNAUTHORIZED


async def test_admin_login_and_template_management():
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        login_resp = await ac.post(
            "/api/auth/login",
            json={"email": "admin@inside.com.br", "password": "Admin123456"},
        )
        assert login_resp.json()["role"] == "admin"
        try:
            create_resp = await ac.post("/api/templates", json={"name": "Curto", "content": "Resuma: [TEXTO_BRUTO_AQUI]"})
            assert create_resp.status_code == status.HTTP_201_CREATED

            templates = (await ac.get("/api/templates")).json()
            assert templates[-1]["name"] == "Curto"

            delete_resp = await ac.delete(f"/api/templates/{len(templates) - 1}")
            assert delete_resp.status_code == status.HTTP_204_NO_CONTENT

            missing = await ac.delete("/api/templates/99")
            assert missing.status_code == status.HTTP_404_NOT_FOUND
        finally:
            await ac.post("/api/auth/logout")


async def test_users_listing_and_admin_create():
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        users = (await ac.get("/api/users")).json()
        assert {"admin", "standard"} <= {u["role"] for u in users}

        # No session and auth disabled: the seeded admin is acting.
        create_resp = await ac.post(
            "/api/users",
            json={"name": "Maria Souza", "email": "maria.souza@inside.com.br", "department": "Campo"},
        )
    assert create_resp.status_code == status.HTTP_201_CREATED
    assert create_resp.json()["role"] == "standard"
