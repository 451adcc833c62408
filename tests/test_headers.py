# Copyright 2025 Loopper-AI
# Tests for header file loading

from __future__ import annotations

import pytest


class TestLoadHeaders:
    """Test suite for load_headers."""

    def test_valid_file(self, tmp_path):
        from sqs_forwarder.utils import load_headers

        path = tmp_path / "headers.json"
        path.write_text('{"Authorization": "Bearer abc", "X-Source": "sqs"}', encoding="utf-8")

        assert load_headers(str(path)) == {"Authorization": "Bearer abc", "X-Source": "sqs"}

    def test_missing_file_is_empty(self, tmp_path):
        from sqs_forwarder.utils import load_headers

        assert load_headers(str(tmp_path / "nope.json")) == {}

    @pytest.mark.parametrize("content", ["", "   \n", "null"])
    def test_empty_file_is_empty(self, tmp_path, content):
        from sqs_forwarder.utils import load_headers

        path = tmp_path / "headers.json"
        path.write_text(content, encoding="utf-8")

        assert load_headers(str(path)) == {}

    def test_read_fresh_each_call(self, tmp_path):
        from sqs_forwarder.utils import load_headers

        path = tmp_path / "headers.json"
        path.write_text('{"X-Version": "1"}', encoding="utf-8")
        assert load_headers(str(path)) == {"X-Version": "1"}

        path.write_text('{"X-Version": "2"}', encoding="utf-8")
        assert load_headers(str(path)) == {"X-Version": "2"}

    @pytest.mark.parametrize(
        "content, match",
        [
            ("{broken", "Invalid JSON"),
            ('["a"]', "JSON object"),
            ('{"X-Retries": 3}', "must be a string"),
        ],
    )
    def test_invalid_file_raises(self, tmp_path, content, match):
        from sqs_forwarder.utils import HeaderFileError, load_headers

        path = tmp_path / "headers.json"
        path.write_text(content, encoding="utf-8")

        with pytest.raises(HeaderFileError, match=match):
            load_headers(str(path))
