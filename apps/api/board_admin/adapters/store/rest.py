"""Supabase REST handles (GoTrue for identity, PostgREST for rows)."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

import httpx
from pydantic import BaseModel

from board_admin.adapters.store.base import (
    PROFILES_TABLE,
    CredentialRejected,
    PrivilegedHandle,
    RowNotFound,
    ScopedHandle,
    StoreError,
    UniqueViolation,
)
from board_admin.schemas.auth import Principal, Role

_SINGLE_OBJECT_ACCEPT = "application/vnd.pgrst.object+json"
_RETURN_REPRESENTATION = "return=representation"
_NO_ROWS_CODE = "PGRST116"
_UNIQUE_VIOLATION_CODE = "23505"


def _error_details(response: httpx.Response) -> tuple[str, str | None]:
    try:
        body = response.json()
    except ValueError:
        return response.text or f"HTTP {response.status_code}", None
    if not isinstance(body, dict):
        return str(body), None

    message = body.get("message") or body.get("msg") or body.get("error_description") or body.get("error")
    code = body.get("code") or body.get("error_code")
    return str(message or f"HTTP {response.status_code}"), str(code) if code is not None else None


def _json_body(response: httpx.Response, operation: str) -> Any:
    try:
        return response.json()
    except ValueError as exc:
        raise StoreError(f"{operation} response is not JSON") from exc


def _raise_for_store_error(response: httpx.Response) -> None:
    if response.is_success:
        return

    message, code = _error_details(response)
    if code == _NO_ROWS_CODE:
        raise RowNotFound(message, code=code)
    if code == _UNIQUE_VIOLATION_CODE:
        raise UniqueViolation(message, code=code)
    raise StoreError(message, code=code)


class SupabaseScopedHandle(ScopedHandle):
    """Presents the caller's bearer credential with the public anon key."""

    def __init__(
        self,
        *,
        url: str,
        anon_key: str,
        authorization: str,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._client = httpx.AsyncClient(
            base_url=url.rstrip("/"),
            headers={"apikey": anon_key, "Authorization": authorization},
            transport=transport,
        )

    async def resolve_principal(self) -> Principal:
        try:
            response = await self._client.get("/auth/v1/user")
        except httpx.HTTPError as exc:
            raise CredentialRejected(f"identity request failed: {exc}") from exc

        if not response.is_success:
            message, code = _error_details(response)
            raise CredentialRejected(message, code=code)

        try:
            user = response.json()
        except ValueError as exc:
            raise CredentialRejected("identity response is not JSON") from exc

        user_id = str(user.get("id") or "").strip() if isinstance(user, dict) else ""
        if not user_id:
            raise CredentialRejected("identity response missing user id")
        return Principal(user_id=user_id)

    async def aclose(self) -> None:
        await self._client.aclose()


class SupabasePrivilegedHandle(PrivilegedHandle):
    """Presents the service role key, which bypasses row level security."""

    def __init__(
        self,
        *,
        url: str,
        service_role_key: str,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._client = httpx.AsyncClient(
            base_url=url.rstrip("/"),
            headers={"apikey": service_role_key, "Authorization": f"Bearer {service_role_key}"},
            transport=transport,
        )

    async def _send(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        try:
            response = await self._client.request(method, path, **kwargs)
        except httpx.HTTPError as exc:
            raise StoreError(f"store request failed: {exc}") from exc
        _raise_for_store_error(response)
        return response

    async def query_role(self, principal_id: str) -> Role:
        response = await self._send(
            "GET",
            f"/rest/v1/{PROFILES_TABLE}",
            params={"select": "role", "id": f"eq.{principal_id}"},
            headers={"Accept": _SINGLE_OBJECT_ACCEPT},
        )
        try:
            return Role(response.json()["role"])
        except (ValueError, KeyError, TypeError) as exc:
            raise StoreError("profile row has no recognised role") from exc

    async def insert_row(self, table: str, values: BaseModel) -> dict[str, Any]:
        response = await self._send(
            "POST",
            f"/rest/v1/{table}",
            json=values.model_dump(mode="json"),
            headers={"Accept": _SINGLE_OBJECT_ACCEPT, "Prefer": _RETURN_REPRESENTATION},
        )
        row = _json_body(response, "insert")
        if not isinstance(row, dict):
            raise StoreError("insert did not return a single row")
        return row

    async def delete_rows(self, table: str, match: Mapping[str, str]) -> list[str]:
        params = {column: f"eq.{value}" for column, value in match.items()}
        params["select"] = "id"
        response = await self._send(
            "DELETE",
            f"/rest/v1/{table}",
            params=params,
            headers={"Prefer": _RETURN_REPRESENTATION},
        )
        rows = _json_body(response, "delete")
        if not isinstance(rows, list):
            raise StoreError("delete did not return a row list")
        return [str(row["id"]) for row in rows if isinstance(row, dict) and "id" in row]

    async def aclose(self) -> None:
        await self._client.aclose()


__all__ = ["SupabasePrivilegedHandle", "SupabaseScopedHandle"]
