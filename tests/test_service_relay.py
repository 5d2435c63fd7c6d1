"""Tests for RelayDispatcher (OpenClaw CLI and gateway transports)."""
from unittest.mock import MagicMock, patch

import pytest

from img2img_relay.core.errors import RelayError
from img2img_relay.models.relay import RelayConfig, RelayMessage
from img2img_relay.services.relay import RelayDispatcher

MESSAGE = RelayMessage(channel="art", message="Generated image: red dress", media="FramesNew/0.png")


def _completed(returncode: int = 0, stdout: str = "", stderr: str = "") -> MagicMock:
    result = MagicMock()
    result.returncode = returncode
    result.stdout = stdout
    result.stderr = stderr
    return result


def _response(status_code: int = 200, text: str = "") -> MagicMock:
    response = MagicMock()
    response.status_code = status_code
    response.ok = 200 <= status_code < 300
    response.text = text
    return response


class TestCliTransport:
    """Tests for the openclaw CLI transport (default)."""

    @pytest.fixture
    def dispatcher(self) -> RelayDispatcher:
        return RelayDispatcher(RelayConfig())

    def test_runs_command_as_argument_vector(self, dispatcher: RelayDispatcher) -> None:
        with patch("img2img_relay.services.relay.subprocess.run", return_value=_completed()) as mock_run:
            dispatcher.send(MESSAGE)

        cmd = mock_run.call_args.args[0]
        assert cmd == [
            "openclaw", "message", "send",
            "--action", "send",
            "--channel", "art",
            "--message", "Generated image: red dress",
            "--media", "FramesNew/0.png",
        ]
        assert not mock_run.call_args.kwargs.get("shell", False)

    def test_shell_metacharacters_are_passed_verbatim(self, dispatcher: RelayDispatcher) -> None:
        """Caption text with quotes or ; must reach the command as a single argument."""
        hostile = RelayMessage(channel='a"; rm -rf ~', message="$(whoami) \"x\"")
        with patch("img2img_relay.services.relay.subprocess.run", return_value=_completed()) as mock_run:
            dispatcher.send(hostile)

        cmd = mock_run.call_args.args[0]
        assert 'a"; rm -rf ~' in cmd
        assert "$(whoami) \"x\"" in cmd

    def test_media_flag_omitted_without_media(self, dispatcher: RelayDispatcher) -> None:
        cmd = dispatcher.build_command(RelayMessage(channel="art", message="hi"))
        assert "--media" not in cmd

    def test_custom_command_name(self) -> None:
        dispatcher = RelayDispatcher(RelayConfig(command="/opt/bin/openclaw"))
        assert dispatcher.build_command(MESSAGE)[0] == "/opt/bin/openclaw"

    def test_non_zero_exit_raises_with_stderr(self, dispatcher: RelayDispatcher) -> None:
        with patch(
            "img2img_relay.services.relay.subprocess.run",
            return_value=_completed(returncode=2, stderr="unknown channel art"),
        ):
            with pytest.raises(RelayError) as excinfo:
                dispatcher.send(MESSAGE)

        assert "unknown channel art" in str(excinfo.value)

    def test_missing_executable_raises_relay_error(self, dispatcher: RelayDispatcher) -> None:
        with patch("img2img_relay.services.relay.subprocess.run", side_effect=FileNotFoundError()):
            with pytest.raises(RelayError):
                dispatcher.send(MESSAGE)

    def test_cli_mode_makes_no_http_call(self, dispatcher: RelayDispatcher) -> None:
        with patch("img2img_relay.services.relay.subprocess.run", return_value=_completed()), \
                patch("img2img_relay.services.relay.requests.post") as mock_post:
            dispatcher.send(MESSAGE)

        mock_post.assert_not_called()


class TestGatewayTransport:
    """Tests for the direct gateway HTTP transport."""

    def test_posts_message_json(self) -> None:
        dispatcher = RelayDispatcher(RelayConfig(use_cli=False))
        with patch("img2img_relay.services.relay.requests.post", return_value=_response()) as mock_post:
            dispatcher.send(MESSAGE)

        assert mock_post.call_args.args[0] == "http://localhost:18789/message"
        assert mock_post.call_args.kwargs["json"] == {
            "action": "send",
            "channel": "art",
            "message": "Generated image: red dress",
            "media": "FramesNew/0.png",
        }

    def test_bearer_token_header_when_configured(self) -> None:
        dispatcher = RelayDispatcher(RelayConfig(use_cli=False, gateway_token="tok"))
        with patch("img2img_relay.services.relay.requests.post", return_value=_response()) as mock_post:
            dispatcher.send(MESSAGE)

        assert mock_post.call_args.kwargs["headers"]["Authorization"] == "Bearer tok"

    def test_no_authorization_header_without_token(self) -> None:
        dispatcher = RelayDispatcher(RelayConfig(use_cli=False))
        with patch("img2img_relay.services.relay.requests.post", return_value=_response()) as mock_post:
            dispatcher.send(MESSAGE)

        assert "Authorization" not in mock_post.call_args.kwargs["headers"]

    def test_custom_gateway_url(self) -> None:
        dispatcher = RelayDispatcher(RelayConfig(use_cli=False, gateway_url="http://gw:1/"))
        with patch("img2img_relay.services.relay.requests.post", return_value=_response()) as mock_post:
            dispatcher.send(MESSAGE)

        assert mock_post.call_args.args[0] == "http://gw:1/message"

    def test_non_2xx_raises_with_body(self) -> None:
        dispatcher = RelayDispatcher(RelayConfig(use_cli=False))
        with patch(
            "img2img_relay.services.relay.requests.post",
            return_value=_response(401, text="invalid token"),
        ):
            with pytest.raises(RelayError) as excinfo:
                dispatcher.send(MESSAGE)

        assert "invalid token" in str(excinfo.value)
