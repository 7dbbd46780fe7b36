from uuid import uuid4

from httpx import ASGITransport, AsyncClient
from fastapi import status

from src.inside_notes.main import app


async def _create_visit(ac: AsyncClient) -> str:
    client_resp = await ac.post("/api/clientes", json={"nome_fantasia": f"Hotel {uuid4().hex[:6]}"})
    assert client_resp.status_code == status.HTTP_201_CREATED
    visit_resp = await ac.post(
        "/api/visits",
        json={"client_id": client_resp.json()["id"], "extra_description": "Recepção"},
    )
    assert visit_resp.status_code == status.HTTP_201_CREATED
    return visit_resp.json()["id"]


async def test_visit_requires_client():
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        response = await ac.post("/api/visits", json={})
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["detail"] == "Por favor, selecione um cliente."


async def test_listing_visits_with_mixed_start_times():
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        client_resp = await ac.post("/api/clientes", json={"nome_fantasia": f"Loja {uuid4().hex[:6]}"})
        client_id = client_resp.json()["id"]
        default_resp = await ac.post("/api/visits", json={"client_id": client_id})
        naive_resp = await ac.post(
            "/api/visits",
            json={"client_id": client_id, "start_time": "2025-01-01T10:00:00"},
        )
        list_resp = await ac.get("/api/visits")

    assert default_resp.status_code == status.HTTP_201_CREATED
    assert naive_resp.status_code == status.HTTP_201_CREATED
    assert list_resp.status_code == status.HTTP_200_OK
    ids = [v["id"] for v in list_resp.json()]
    assert ids.index(default_resp.json()["id"]) < ids.index(naive_resp.json()["id"])


async def test_annotation_workflow_and_report_via_api():
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        visit_id = await _create_visit(ac)

        open_resp = await ac.post("/api/workflows", json={"visit_id": visit_id, "kind": "action"})
        assert open_resp.status_code == status.HTTP_201_CREATED
        workflow_id = open_resp.json()["id"]
        assert open_resp.json()["phase"] == "idle"

        await ac.post(f"/api/workflows/{workflow_id}/fragments", json={"text": "Trocou o cabo de rede"})
        add_resp = await ac.post(f"/api/workflows/{workflow_id}/fragments", json={"text": "Testou conectividade."})
        assert add_resp.json()["fragments"] == ["Trocou o cabo de rede", "Testou conectividade."]

        finalize_resp = await ac.post(f"/api/workflows/{workflow_id}/finalize")
        assert finalize_resp.status_code == status.HTTP_200_OK
        snapshot = finalize_resp.json()
        assert snapshot["phase"] == "reviewing"
        assert snapshot["raw_text"] == "- Trocou o cabo de rede\n\n- Testou conectividade."
        assert snapshot["rewritten_text"] == "Resumo técnico: Trocou o cabo de rede. Testou conectividade."

        conflict = await ac.post(f"/api/workflows/{workflow_id}/fragments", json={"text": "tarde demais"})
        assert conflict.status_code == status.HTTP_409_CONFLICT

        save_resp = await ac.post(f"/api/workflows/{workflow_id}/save")
        assert save_resp.json()["phase"] == "saved"
        saved = save_resp.json()["saved_annotation"]
        assert saved["is_draft"] is False

        annotations_resp = await ac.get(f"/api/visits/{visit_id}/annotations")
        assert [a["id"] for a in annotations_resp.json()] == [saved["id"]]

        notifications = await ac.get("/api/notifications")
        assert "Anotação salva como final." in [n["message"] for n in notifications.json()]

        close_resp = await ac.delete(f"/api/workflows/{workflow_id}")
        assert close_resp.status_code == status.HTTP_204_NO_CONTENT
        assert (await ac.get(f"/api/workflows/{workflow_id}")).status_code == status.HTTP_404_NOT_FOUND

        missing_report = await ac.get(f"/api/visits/{visit_id}/report")
        assert missing_report.status_code == status.HTTP_404_NOT_FOUND

        report_resp = await ac.post(f"/api/visits/{visit_id}/report")
        assert report_resp.status_code == status.HTTP_200_OK
        assert report_resp.json()["final_report_ref"]

        stored = await ac.get(f"/api/visits/{visit_id}/report")
        assert stored.status_code == status.HTTP_200_OK
        assert stored.json()["report"].startswith("Laudo técnico - Hotel")
        assert "ACAO: Resumo técnico" in stored.json()["report"]


async def test_recording_adds_transcribed_fragment():
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        visit_id = await _create_visit(ac)
        workflow_id = (await ac.post("/api/workflows", json={"visit_id": visit_id, "kind": "diagnosis"})).json()["id"]
        await ac.post(f"/api/workflows/{workflow_id}/fragments", json={"text": "Equipamento sem energia"})

        start_resp = await ac.post(f"/api/workflows/{workflow_id}/recording/start")
        assert start_resp.json()["audio_state"] == "recording"

        chunk_resp = await ac.post(
            f"/api/workflows/{workflow_id}/recording/chunks",
            files={"file": ("chunk.webm", b"abc", "audio/webm")},
        )
        assert chunk_resp.status_code == status.HTTP_200_OK

        stop_resp = await ac.post(f"/api/workflows/{workflow_id}/recording/stop")
        snapshot = stop_resp.json()
        assert snapshot["audio_state"] == "idle"
        assert snapshot["fragments"] == [
            "Equipamento sem energia",
            "Transcrição de demonstração (3 bytes, audio/webm)",
        ]

        draft_resp = await ac.post(f"/api/workflows/{workflow_id}/draft")
        assert draft_resp.json()["saved_annotation"]["is_draft"] is True


async def test_empty_recording_reports_transcription_failure():
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        visit_id = await _create_visit(ac)
        workflow_id = (await ac.post("/api/workflows", json={"visit_id": visit_id, "kind": "test"})).json()["id"]

        await ac.post(f"/api/workflows/{workflow_id}/recording/start")
        stop_resp = await ac.post(f"/api/workflows/{workflow_id}/recording/stop")

        snapshot = stop_resp.json()
        assert snapshot["fragments"] == []
        assert snapshot["audio_state"] == "idle"
        assert snapshot["error"]["message"] == "Falha ao transcrever o áudio."

        stop_again = await ac.post(f"/api/workflows/{workflow_id}/recording/stop")
        assert stop_again.status_code == status.HTTP_409_CONFLICT


async def test_workflow_for_unknown_visit_is_404():
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        response = await ac.post("/api/workflows", json={"visit_id": str(uuid4()), "kind": "action"})
    assert response.status_code == status.HTTP_404_NOT_FOUND
