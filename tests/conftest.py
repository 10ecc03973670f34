import json
import os
from typing import Any, Optional
from unittest.mock import MagicMock, patch

import pytest
import requests

from deepself.config.settings import DeepselfSettings
from deepself.core.api_client import DeepselfClient
from deepself.core.toolbox import DeepselfToolbox
from deepself.tools import build_tool_definitions


@pytest.fixture(autouse=True)
def mock_settings_env_vars(tmp_path):
    """Automatically mock HOME and environment variables to ensure test isolation."""
    fake_home = tmp_path / "fake_home"
    fake_home.mkdir()

    with patch("pathlib.Path.home", return_value=fake_home):
        with patch.dict(os.environ, {"HOME": str(fake_home)}):
            os.environ.pop("DEEPSELF_API_KEY", None)
            yield


def _build_response(
    status_code: int = 200,
    json_body: Any = None,
    text: Optional[str] = None,
) -> MagicMock:
    response = MagicMock(spec=requests.Response)
    response.status_code = status_code
    if text is None:
        text = "" if json_body is None else json.dumps(json_body)
    response.text = text
    response.content = text.encode("utf-8")
    if json_body is None and text:
        response.json.side_effect = ValueError("No JSON object could be decoded")
    else:
        response.json.return_value = json_body
    return response


@pytest.fixture
def make_response():
    """Builder for requests.Response stand-ins with status, text, content and json()."""
    return _build_response


@pytest.fixture
def settings():
    return DeepselfSettings(api_key="sk-test-123", base_url="https://api.example.test/v1")


@pytest.fixture
def session():
    mock_session = MagicMock(spec=requests.Session)
    mock_session.request.return_value = _build_response(200, {})
    return mock_session


@pytest.fixture
def sent_request(session):
    """Return the keyword arguments of the last request made on the session."""

    def _last_request() -> dict:
        return session.request.call_args.kwargs

    return _last_request


@pytest.fixture
def client(settings, session):
    return DeepselfClient(settings, session=session, session_factory=lambda: session)


@pytest.fixture
def toolbox_factory(settings, session):
    """Return a builder for a toolbox with every tool registered on the fake session."""

    def _build(custom_settings: Optional[DeepselfSettings] = None) -> DeepselfToolbox:
        active = custom_settings or settings
        toolbox = DeepselfToolbox(
            active,
            client=DeepselfClient(active, session=session, session_factory=lambda: session),
        )
        toolbox.register_all(build_tool_definitions())
        return toolbox

    return _build


@pytest.fixture
def toolbox(toolbox_factory):
    return toolbox_factory()
