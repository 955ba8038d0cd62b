"""Input Sanitization — markup and script vectors are stripped."""

import pytest

from urbanestate.core.errors import ValidationFailedError
from urbanestate.core.sanitize import sanitize_input, sanitize_required, sanitize_text


def test_non_string_and_empty_return_empty():
    assert sanitize_input(None) == ""
    assert sanitize_input(42) == ""
    assert sanitize_input("") == ""


def test_script_block_removed_with_content():
    assert sanitize_input("hi <script>alert(1)</script> there") == "hi  there"


def test_tags_protocol_and_handlers_removed():
    out = sanitize_input('<a href="javascript:x" onclick=go()>link</a>')
    assert out == "link"
    assert sanitize_input("JavaScript:alert(1)") == "alert(1)"
    assert sanitize_input("onload = boom") == "boom"


def test_truncates_before_stripping():
    assert sanitize_input("abcdef<b>", max_length=3) == "abc"


def test_result_is_trimmed():
    assert sanitize_text("   hello  ") == "hello"
    assert len(sanitize_text("x" * 600)) == 500


def test_leading_script_block():
    assert sanitize_input("<script>alert(1)</script>hello") == "hello"


def test_required_keeps_text():
    assert sanitize_required(" <b>Hi</b> there ", 100, "message", "Message is required") == "Hi there"


@pytest.mark.parametrize("value", ["<b></b>", "<script>x</script>", "   ", None])
def test_required_markup_only_raises(value):
    with pytest.raises(ValidationFailedError) as exc:
        sanitize_required(value, 100, "message", "Message is required")
    assert exc.value.field == "message"
    assert exc.value.http_status == 400
