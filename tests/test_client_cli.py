from client_cli.main import parse_frame


def test_parse_frame_reads_agent_frames():
    assert parse_frame('data: {"content": "Hello"}') == ("content", "Hello")
    assert parse_frame(b'data: {"error": "boom"}') == ("error", "boom")
    assert parse_frame("data: [DONE]") == ("done", None)

    kind, value = parse_frame('data: {"toolCall": "{\\"name\\": \\"get_wishlist\\", \\"args\\": {}}"}')
    assert kind == "tool_call"
    assert value == {"name": "get_wishlist", "args": {}}


def test_parse_frame_ignores_noise():
    assert parse_frame("") is None
    assert parse_frame(": keep-alive") is None
    assert parse_frame("data: not json") is None
    assert parse_frame('data: ["list"]') is None
