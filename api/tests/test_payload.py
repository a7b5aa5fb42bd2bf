"""Tests for publishing payload checks."""

import pytest

from synthgate.errors import PayloadRejected
from synthgate.services.payload import contains_suspicious_content, validate_request_data


class TestValidateRequestData:
    def test_plain_post_passes(self):
        validate_request_data({"title": "Hello", "content": "<p>Body text</p>"})

    def test_oversized_payload_is_413(self):
        with pytest.raises(PayloadRejected) as exc_info:
            validate_request_data({"content": "x" * 200}, max_size=100)
        assert exc_info.value.status_code == 413
        assert exc_info.value.code == "request_too_large"

    def test_script_content_is_400(self):
        with pytest.raises(PayloadRejected) as exc_info:
            validate_request_data({"content": "<p>hi</p><script>alert(1)</script>"})
        assert exc_info.value.status_code == 400
        assert exc_info.value.code == "suspicious_content"

    def test_other_fields_are_not_scanned(self):
        validate_request_data({"title": "javascript: a primer", "content": "safe"})


class TestSuspiciousContent:
    @pytest.mark.parametrize(
        "content",
        [
            "<SCRIPT type='text/javascript'>\nx()\n</script>",
            '<a href="javascript:void(0)">x</a>',
            '<a href="VBScript:run">x</a>',
            '<img src="x" onerror = "x()">',
            '<body onload="x()">',
            '<button onclick="x()">',
            '<iframe src="https://example.com"></iframe>',
            '<object data="x.swf">',
            '<embed src="x.swf">',
        ],
    )
    def test_flags_injection_markers(self, content):
        assert contains_suspicious_content(content)

    @pytest.mark.parametrize(
        "content",
        ["<p>Just text</p>", "<img src='a.png' alt='chart'>", "Scripting tips for writers"],
    )
    def test_allows_normal_markup(self, content):
        assert not contains_suspicious_content(content)
