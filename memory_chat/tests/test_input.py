from memory_chat.session.input import can_send, sanitize_input, validation_error


def test_sanitize_strips_scripts_and_tags():
    assert sanitize_input("  <p>Hello <b>world</b></p>  ") == "Hello world"
    assert sanitize_input("a<script type='x'>alert(1)</script>b") == "ab"
    assert sanitize_input("<SCRIPT>x</SCRIPT>") == ""
    assert sanitize_input("2 < 3") == "2 < 3"


def test_validation_error():
    assert validation_error("", 10) is None
    assert validation_error("short", 10) is None
    assert validation_error("  " + "x" * 11 + "  ", 10) == "Message is too long (11/10 characters)"


def test_can_send():
    assert can_send("hi", 10, in_flight=False)
    assert not can_send("hi", 10, in_flight=True)
    assert not can_send("  ", 10, in_flight=False)
    assert not can_send("x" * 11, 10, in_flight=False)
