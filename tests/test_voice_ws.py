"""
Remote Voice Session Tests

End-to-end tests for the /ws/voice WebSocket protocol.
"""

import pytest
from fastapi.testclient import TestClient


@pytest.fixture
def ws_client(fresh_services):
    from main import app

    with TestClient(app) as test_client:
        yield test_client


def receive_until(websocket, message_type, limit=10):
    """Read messages until one of ``message_type`` arrives."""
    for _ in range(limit):
        message = websocket.receive_json()
        if message["type"] == message_type:
            return message
    raise AssertionError(f"No '{message_type}' message received")


class TestVoiceWebSocket:
    """Tests for the remote session protocol."""

    def test_start_commands_recognition(self, ws_client):
        with ws_client.websocket_connect("/ws/voice?language=fr&muted=true") as websocket:
            websocket.send_json({"type": "start"})

            command = websocket.receive_json()
            assert command["type"] == "recognition.start"
            assert command["language"] == "fr-FR"

            state = websocket.receive_json()
            assert state == {"type": "state", "state": "listening", "previous": "idle"}

    def test_final_transcript_result(self, ws_client):
        with ws_client.websocket_connect("/ws/voice?muted=true") as websocket:
            websocket.send_json({"type": "start"})
            receive_until(websocket, "state")

            websocket.send_json({"type": "final", "text": "twenty plus five"})
            result = receive_until(websocket, "result")

            assert result["equation"] == "20 + 5"
            assert result["result"] == "25"
            assert result["transcript"] == "twenty plus five"

    def test_result_is_spoken_then_resumes(self, ws_client):
        with ws_client.websocket_connect("/ws/voice?muted=false") as websocket:
            websocket.send_json({"type": "start"})
            receive_until(websocket, "state")

            websocket.send_json({"type": "final", "text": "two plus two"})
            speak = receive_until(websocket, "speak")
            assert speak["text"] == "4"
            assert speak["language"] == "en-US"

            websocket.send_json({"type": "speech.done"})
            state = receive_until(websocket, "state")
            while state["state"] != "listening":
                state = receive_until(websocket, "state")
            assert state["previous"] == "speaking"

    def test_error_event(self, ws_client):
        with ws_client.websocket_connect("/ws/voice?muted=true") as websocket:
            websocket.send_json({"type": "start"})
            receive_until(websocket, "state")

            websocket.send_json({"type": "final", "text": "seven"})
            error = receive_until(websocket, "error")
            assert error["kind"] == "ambiguous_voice_number"
            assert error["transcript"] == "seven"

    def test_keypad_preview(self, ws_client):
        with ws_client.websocket_connect("/ws/voice") as websocket:
            websocket.send_json({"type": "keypad", "expression": "2+3"})

            preview = receive_until(websocket, "preview")
            assert preview["display"] == "5"

    def test_unknown_message_is_ignored(self, ws_client):
        with ws_client.websocket_connect("/ws/voice?muted=true") as websocket:
            websocket.send_json({"type": "teleport"})
            websocket.send_json({"type": "start"})

            assert websocket.receive_json()["type"] == "recognition.start"

    def test_malformed_messages_keep_session_open(self, ws_client):
        with ws_client.websocket_connect("/ws/voice?muted=true") as websocket:
            websocket.send_json({"type": "start"})
            receive_until(websocket, "state")

            websocket.send_json({"type": "final", "text": 123})
            websocket.send_json({"type": "interim", "text": ["two"]})
            websocket.send_json({"type": "final", "text": "two plus two", "source": ["web"]})
            websocket.send_json({"type": "voices", "voices": "Samantha"})
            websocket.send_json({"type": "language", "language": 42})

            websocket.send_json({"type": "final", "text": "twenty plus five"})
            result = receive_until(websocket, "result")
            assert result["result"] == "25"

    def test_stop(self, ws_client):
        with ws_client.websocket_connect("/ws/voice?muted=true") as websocket:
            websocket.send_json({"type": "start"})
            receive_until(websocket, "state")

            websocket.send_json({"type": "stop"})
            assert receive_until(websocket, "recognition.stop")
            state = receive_until(websocket, "state")
            assert state["state"] == "idle"
