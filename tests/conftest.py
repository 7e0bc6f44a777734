"""Pytest configuration and shared fixtures."""

from __future__ import annotations

import asyncio
import copy
from http import HTTPStatus
from typing import TYPE_CHECKING, Any
from unittest.mock import AsyncMock

import pytest
from aiohttp import ClientSession, web

from pyebeco.client import EbecoClient
from pyebeco.models import DeviceSnapshot


if TYPE_CHECKING:
    from collections.abc import AsyncGenerator

    from aiohttp.test_utils import TestClient
    from multidict import CIMultiDict


SAMPLE_DEVICE: dict[str, Any] = {
    "id": 1,
    "displayName": "Bathroom",
    "powerOn": True,
    "selectedProgram": "Manual",
    "programState": "Active",
    "temperatureSet": 20,
    "temperatureFloor": 21,
    "temperatureRoom": 22,
    "hasError": False,
    "errorMessage": None,
}

SECOND_DEVICE: dict[str, Any] = {
    "id": 7,
    "displayName": "Hallway",
    "powerOn": False,
    "selectedProgram": "Week",
    "programState": "Standby",
    "temperatureSet": 18.5,
    "temperatureFloor": 19.2,
    "temperatureRoom": 20.1,
    "hasError": False,
    "errorMessage": None,
}

UNAUTHORIZED_ENVELOPE: dict[str, Any] = {
    "result": None,
    "success": False,
    "error": {"code": 0, "message": "Current user did not login to the application!", "details": None},
    "unAuthorizedRequest": True,
}


def envelope(result: Any, *, success: bool = True) -> dict[str, Any]:
    """Wrap a payload in the standard response envelope."""
    return {"result": result, "success": success, "error": None, "unAuthorizedRequest": False}


class FakeEbecoServer:
    """In-process stand-in for the Ebeco cloud API.

    Issues sequential tokens ("token-1", "token-2", ...). Only the most recently
    issued token is accepted, and ``reject_next`` forces the next N
    authenticated requests to be answered with 401.
    """

    def __init__(self) -> None:
        self.devices: list[dict[str, Any]] = [copy.deepcopy(SAMPLE_DEVICE), copy.deepcopy(SECOND_DEVICE)]
        self.login_status = HTTPStatus.OK
        self.requires_two_factor = False
        self.update_success = True
        self.reject_next = 0
        self.list_status = HTTPStatus.OK
        self.list_gate: asyncio.Event | None = None

        self.valid_token: str | None = None
        self.login_bodies: list[dict[str, Any]] = []
        self.login_headers: list[CIMultiDict[str]] = []
        self.list_headers: list[CIMultiDict[str]] = []
        self.update_bodies: list[dict[str, Any]] = []
        self._token_counter = 0

    @property
    def login_calls(self) -> int:
        return len(self.login_bodies)

    def invalidate_tokens(self) -> None:
        """Make the server reject the current token, as if it had expired."""
        self.valid_token = None

    def build_app(self) -> web.Application:
        app = web.Application()
        app.router.add_post("/api/TokenAuth/Authenticate", self._login)
        app.router.add_get("/api/services/app/Devices/GetUserDevices", self._get_devices)
        app.router.add_put("/api/services/app/Devices/UpdateUserDevice", self._update_device)
        return app

    def _authorized(self, request: web.Request) -> bool:
        if self.reject_next > 0:
            self.reject_next -= 1
            return False
        return self.valid_token is not None and request.headers.get("Authorization") == f"Bearer {self.valid_token}"

    async def _login(self, request: web.Request) -> web.Response:
        self.login_bodies.append(await request.json())
        self.login_headers.append(request.headers.copy())

        if self.login_status != HTTPStatus.OK:
            return web.json_response(UNAUTHORIZED_ENVELOPE, status=self.login_status)

        self._token_counter += 1
        token = f"token-{self._token_counter}"
        if not self.requires_two_factor:
            self.valid_token = token

        return web.json_response(
            envelope(
                {
                    "accessToken": token,
                    "expireInSeconds": 84600,
                    "requiresTwoFactorVerification": self.requires_two_factor,
                }
            )
        )

    async def _get_devices(self, request: web.Request) -> web.Response:
        self.list_headers.append(request.headers.copy())
        if not self._authorized(request):
            return web.json_response(UNAUTHORIZED_ENVELOPE, status=HTTPStatus.UNAUTHORIZED)

        if self.list_gate is not None:
            await self.list_gate.wait()

        if self.list_status != HTTPStatus.OK:
            return web.Response(status=self.list_status)

        return web.json_response(envelope(self.devices))

    async def _update_device(self, request: web.Request) -> web.Response:
        if not self._authorized(request):
            return web.json_response(UNAUTHORIZED_ENVELOPE, status=HTTPStatus.UNAUTHORIZED)

        body = await request.json()
        self.update_bodies.append(body)

        if self.update_success:
            for device in self.devices:
                if device["id"] == body["id"]:
                    device["powerOn"] = body["powerOn"]
                    device["temperatureSet"] = body["temperatureSet"]

        return web.json_response(envelope(None, success=self.update_success))


@pytest.fixture
def fake_server() -> FakeEbecoServer:
    """Create a fake Ebeco API."""
    return FakeEbecoServer()


@pytest.fixture
async def api_server(aiohttp_client: Any, fake_server: FakeEbecoServer) -> TestClient:
    """Serve the fake Ebeco API."""
    return await aiohttp_client(fake_server.build_app())


@pytest.fixture
async def ebeco_client(api_server: TestClient) -> AsyncGenerator[EbecoClient]:
    """Create an EbecoClient talking to the fake API."""
    client = EbecoClient(
        username="hello",
        password="world",
        base_url=str(api_server.make_url("")),
        session=api_server.session,
    )
    async with client:
        yield client


@pytest.fixture
async def mock_session() -> AsyncGenerator[ClientSession]:
    """Create a mock aiohttp ClientSession.

    Yields:
        Mock ClientSession for testing.
    """
    session = AsyncMock(spec=ClientSession)
    session.closed = False

    async def mock_close() -> None:
        session.closed = True

    session.close = mock_close

    yield session

    if not session.closed:
        await session.close()


@pytest.fixture
def snapshot() -> DeviceSnapshot:
    """Create the snapshot matching SAMPLE_DEVICE."""
    return DeviceSnapshot(
        id=1,
        display_name="Bathroom",
        power_on=True,
        selected_program="Manual",
        program_state="Active",
        temperature_set=20.0,
        temperature_floor=21.0,
        temperature_room=22.0,
        has_error=False,
        error_message=None,
    )
