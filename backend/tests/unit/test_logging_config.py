"""
Unit tests for log formatting and request correlation.
"""

import json
import logging

import pytest
from flask import Flask, g

from mentorship.core.logging_config import JSONFormatter, RequestContextFilter

pytestmark = pytest.mark.unit


def make_record(**extra):
    record = logging.LogRecord(
        name="mentorship.test",
        level=logging.INFO,
        pathname=__file__,
        lineno=1,
        msg="mentor %s assigned",
        args=(7,),
        exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestRequestContextFilter:
    def test_outside_request(self):
        record = make_record()

        assert RequestContextFilter().filter(record) is True
        assert record.correlation_id == "-"
        assert record.user_id is None

    def test_inside_request(self):
        app = Flask(__name__)
        record = make_record()

        with app.test_request_context("/api/learnings"):
            g.correlation_id = "abc-123"
            g.current_user_id = 42
            RequestContextFilter().filter(record)

        assert record.correlation_id == "abc-123"
        assert record.user_id == 42


class TestJSONFormatter:
    def test_fields_and_context(self):
        record = make_record(
            correlation_id="abc-123", user_id=42, context={"mentor_id": 7}
        )

        entry = json.loads(JSONFormatter().format(record))

        assert entry["msg"] == "mentor 7 assigned"
        assert entry["level"] == "INFO"
        assert entry["correlation_id"] == "abc-123"
        assert entry["user_id"] == 42
        assert entry["context"] == {"mentor_id": 7}
        assert "exc" not in entry

    def test_anonymous_record_omits_user(self):
        entry = json.loads(JSONFormatter().format(make_record(correlation_id="-")))

        assert "user_id" not in entry
        assert "context" not in entry
