"""Supabase REST handle tests using an httpx mock transport."""

from __future__ import annotations

import json
import unittest

import httpx
from fastapi.testclient import TestClient

from board_admin.adapters.store import (
    CredentialRejected,
    RowNotFound,
    StoreError,
    SupabasePrivilegedHandle,
    SupabaseScopedHandle,
    UniqueViolation,
)
from board_admin.core.config import Settings
from board_admin.main import create_app
from board_admin.schemas.auth import Role
from board_admin.schemas.board import BoardInsert

_URL = "https://project.supabase.test/"
_BOARD_ID = "5f0c2a9e-3b1d-4c7e-9a2f-1d2e3f4a5b6c"


class _Recorder:
    def __init__(self, response: httpx.Response | Exception) -> None:
        self._response = response
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if isinstance(self._response, Exception):
            raise self._response
        return self._response


class ScopedHandleTests(unittest.IsolatedAsyncioTestCase):
    async def test_resolves_principal_with_caller_credential_and_anon_key(self) -> None:
        recorder = _Recorder(httpx.Response(200, json={"id": "user-1", "email": "a@example.test"}))
        handle = SupabaseScopedHandle(
            url=_URL,
            anon_key="anon",
            authorization="Bearer caller-jwt",
            transport=httpx.MockTransport(recorder),
        )

        principal = await handle.resolve_principal()
        await handle.aclose()

        self.assertEqual(principal.user_id, "user-1")
        request = recorder.requests[0]
        self.assertEqual(str(request.url), "https://project.supabase.test/auth/v1/user")
        self.assertEqual(request.headers["apikey"], "anon")
        self.assertEqual(request.headers["authorization"], "Bearer caller-jwt")

    async def test_rejects_error_status_missing_id_and_network_failure(self) -> None:
        responses = (
            httpx.Response(401, json={"code": 401, "msg": "invalid JWT"}),
            httpx.Response(200, json={"email": "a@example.test"}),
            httpx.ConnectError("connection refused"),
        )
        for response in responses:
            with self.subTest(response=response):
                handle = SupabaseScopedHandle(
                    url=_URL,
                    anon_key="anon",
                    authorization="Bearer caller-jwt",
                    transport=httpx.MockTransport(_Recorder(response)),
                )
                with self.assertRaises(CredentialRejected):
                    await handle.resolve_principal()
                await handle.aclose()


class PrivilegedHandleTests(unittest.IsolatedAsyncioTestCase):
    def _handle(self, recorder: _Recorder) -> SupabasePrivilegedHandle:
        return SupabasePrivilegedHandle(
            url=_URL,
            service_role_key="service",
            transport=httpx.MockTransport(recorder),
        )

    async def test_query_role_requests_single_profile_with_service_key(self) -> None:
        recorder = _Recorder(httpx.Response(200, json={"role": "janitor"}))
        handle = self._handle(recorder)

        role = await handle.query_role("user-1")
        await handle.aclose()

        self.assertIs(role, Role.JANITOR)
        request = recorder.requests[0]
        self.assertEqual(request.url.path, "/rest/v1/profiles")
        self.assertEqual(request.url.params["id"], "eq.user-1")
        self.assertEqual(request.url.params["select"], "role")
        self.assertEqual(request.headers["accept"], "application/vnd.pgrst.object+json")
        self.assertEqual(request.headers["apikey"], "service")
        self.assertEqual(request.headers["authorization"], "Bearer service")

    async def test_query_role_maps_no_rows_and_other_errors(self) -> None:
        no_rows = _Recorder(
            httpx.Response(406, json={"code": "PGRST116", "message": "JSON object requested, multiple (or no) rows returned"})
        )
        with self.assertRaises(RowNotFound):
            await self._handle(no_rows).query_role("user-1")

        broken = _Recorder(httpx.Response(500, json={"code": "XX000", "message": "internal error"}))
        with self.assertRaises(StoreError) as ctx:
            await self._handle(broken).query_role("user-1")
        self.assertNotIsInstance(ctx.exception, RowNotFound)
        self.assertEqual(ctx.exception.code, "XX000")

        unknown_role = _Recorder(httpx.Response(200, json={"role": "overlord"}))
        with self.assertRaises(StoreError):
            await self._handle(unknown_role).query_role("user-1")

    async def test_insert_row_returns_representation(self) -> None:
        row = {
            "id": _BOARD_ID,
            "short_name": "tech",
            "name": "Technology",
            "description": None,
            "created_at": "2026-10-18T12:00:00+00:00",
        }
        recorder = _Recorder(httpx.Response(201, json=row))

        result = await self._handle(recorder).insert_row(
            "boards", BoardInsert(short_name="tech", name="Technology")
        )

        self.assertEqual(result, row)
        request = recorder.requests[0]
        self.assertEqual(request.method, "POST")
        self.assertEqual(request.url.path, "/rest/v1/boards")
        self.assertEqual(request.headers["prefer"], "return=representation")
        self.assertEqual(
            json.loads(request.content),
            {"short_name": "tech", "name": "Technology", "description": None},
        )

    async def test_insert_row_maps_unique_violation(self) -> None:
        recorder = _Recorder(
            httpx.Response(
                409,
                json={"code": "23505", "message": 'duplicate key value violates unique constraint "boards_short_name_key"'},
            )
        )

        with self.assertRaises(UniqueViolation):
            await self._handle(recorder).insert_row("boards", BoardInsert(short_name="tech", name="Technology"))

    async def test_delete_rows_returns_affected_ids(self) -> None:
        recorder = _Recorder(httpx.Response(200, json=[{"id": _BOARD_ID}]))

        deleted = await self._handle(recorder).delete_rows("boards", {"id": _BOARD_ID})

        self.assertEqual(deleted, [_BOARD_ID])
        request = recorder.requests[0]
        self.assertEqual(request.method, "DELETE")
        self.assertEqual(request.url.params["id"], f"eq.{_BOARD_ID}")
        self.assertEqual(request.url.params["select"], "id")

    async def test_non_json_success_bodies_are_store_errors(self) -> None:
        insert_recorder = _Recorder(httpx.Response(201, content=b"<html>gateway</html>"))
        with self.assertRaises(StoreError):
            await self._handle(insert_recorder).insert_row(
                "boards", BoardInsert(short_name="tech", name="Technology")
            )

        delete_recorder = _Recorder(httpx.Response(200, content=b""))
        with self.assertRaises(StoreError):
            await self._handle(delete_recorder).delete_rows("boards", {"id": _BOARD_ID})

    async def test_network_failure_is_store_error(self) -> None:
        recorder = _Recorder(httpx.ReadTimeout("timed out"))

        with self.assertRaises(StoreError):
            await self._handle(recorder).delete_rows("boards", {"id": _BOARD_ID})


class _FakeSupabase:
    """Minimal GoTrue/PostgREST emulation for end-to-end pipeline tests."""

    def __init__(self) -> None:
        self.tokens = {"admin-jwt": "admin-1", "user-jwt": "user-1"}
        self.roles = {"admin-1": "admin", "user-1": "user"}
        self.boards: dict[str, dict] = {}
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path
        if path == "/auth/v1/user":
            token = request.headers.get("authorization", "").removeprefix("Bearer ")
            if token not in self.tokens:
                return httpx.Response(401, json={"code": 401, "msg": "invalid JWT"})
            return httpx.Response(200, json={"id": self.tokens[token]})

        if request.headers.get("apikey") != "service":
            return httpx.Response(401, json={"message": "Invalid API key"})

        if path == "/rest/v1/profiles":
            user_id = request.url.params["id"].removeprefix("eq.")
            if user_id not in self.roles:
                return httpx.Response(406, json={"code": "PGRST116", "message": "no rows"})
            return httpx.Response(200, json={"role": self.roles[user_id]})

        if path == "/rest/v1/boards" and request.method == "POST":
            values = json.loads(request.content)
            if any(board["short_name"] == values["short_name"] for board in self.boards.values()):
                return httpx.Response(409, json={"code": "23505", "message": "duplicate key"})
            row = {"id": _BOARD_ID, "created_at": "2026-10-18T12:00:00+00:00", **values}
            self.boards[row["id"]] = row
            return httpx.Response(201, json=row)

        if path == "/rest/v1/boards" and request.method == "DELETE":
            board_id = request.url.params["id"].removeprefix("eq.")
            removed = self.boards.pop(board_id, None)
            return httpx.Response(200, json=[{"id": removed["id"]}] if removed else [])

        return httpx.Response(404, json={"message": "unexpected route"})


class RestPipelineTests(unittest.TestCase):
    def setUp(self) -> None:
        self.fake = _FakeSupabase()
        self.app = create_app(
            Settings(url=_URL, anon_key="anon", service_role_key="service", store_backend="rest")
        )
        self.app.state.http_transport = httpx.MockTransport(self.fake)
        self.client = TestClient(self.app)

    def test_create_then_delete_through_rest_backend(self) -> None:
        created = self.client.post(
            "/create-board",
            headers={"Authorization": "Bearer admin-jwt"},
            json={"short_name": "tech", "name": "Technology", "description": None},
        )
        self.assertEqual(created.status_code, 200)
        self.assertEqual(created.json()["board"]["short_name"], "tech")

        replay = self.client.post(
            "/create-board",
            headers={"Authorization": "Bearer admin-jwt"},
            json={"short_name": "tech", "name": "Technology", "description": None},
        )
        self.assertEqual(replay.status_code, 409)
        self.assertEqual(replay.json(), {"error": "Board short name '/tech/' already exists."})

        deleted = self.client.request(
            "DELETE",
            "/delete-board",
            headers={"Authorization": "Bearer admin-jwt"},
            json={"id": _BOARD_ID},
        )
        self.assertEqual(deleted.status_code, 200)
        self.assertEqual(deleted.json(), {"success": True})
        self.assertEqual(self.fake.boards, {})

        missing = self.client.request(
            "DELETE",
            "/delete-board",
            headers={"Authorization": "Bearer admin-jwt"},
            json={"id": _BOARD_ID},
        )
        self.assertEqual(missing.status_code, 404)
        self.assertEqual(missing.json(), {"error": "Board not found."})

    def test_invalid_jwt_and_wrong_role(self) -> None:
        invalid = self.client.post(
            "/create-board",
            headers={"Authorization": "Bearer forged"},
            json={"short_name": "tech", "name": "Technology"},
        )
        self.assertEqual(invalid.status_code, 401)

        forbidden = self.client.post(
            "/create-board",
            headers={"Authorization": "Bearer user-jwt"},
            json={"short_name": "tech", "name": "Technology"},
        )
        self.assertEqual(forbidden.status_code, 403)
        self.assertEqual(self.fake.boards, {})

    def test_non_json_store_responses_map_to_mutation_errors(self) -> None:
        self.app.state.http_transport = httpx.MockTransport(self._empty_mutation_bodies)

        created = self.client.post(
            "/create-board",
            headers={"Authorization": "Bearer admin-jwt"},
            json={"short_name": "tech", "name": "Technology"},
        )
        self.assertEqual(created.status_code, 500)
        self.assertEqual(created.json(), {"error": "Failed to create board due to a server error."})

        deleted = self.client.request(
            "DELETE",
            "/delete-board",
            headers={"Authorization": "Bearer admin-jwt"},
            json={"id": _BOARD_ID},
        )
        self.assertEqual(deleted.status_code, 500)
        self.assertEqual(deleted.json(), {"error": "Failed to delete board due to a database error."})

    def _empty_mutation_bodies(self, request: httpx.Request) -> httpx.Response:
        if request.url.path == "/rest/v1/boards":
            return httpx.Response(200, content=b"")
        return self.fake(request)

    def test_preflight_makes_no_outbound_requests(self) -> None:
        response = self.client.options("/delete-board")

        self.assertEqual(response.status_code, 200)
        self.assertEqual(self.fake.requests, [])


if __name__ == "__main__":
    unittest.main()
