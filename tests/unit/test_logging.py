import json
import logging

from ansible_watches.logging import StructuredJSONFormatter, StructuredLogger
from ansible_watches.models import GroupVersionKind


class _ListHandler(logging.Handler):
    def __init__(self):
        super().__init__()
        self.records: list[logging.LogRecord] = []

    def emit(self, record: logging.LogRecord) -> None:
        self.records.append(record)


def test_structured_logger_attaches_fields():
    """Test that keyword fields are attached to the log record."""
    handler = _ListHandler()
    std_logger = logging.getLogger("test-structured-watches")
    std_logger.addHandler(handler)
    std_logger.setLevel(logging.DEBUG)
    try:
        logger = StructuredLogger("test-structured-watches")
        gvk = GroupVersionKind(group="example.com", version="v1", kind="Foo")
        logger.error("Watch failed validation", gvk=gvk, event="validate", env_var="WORKER_FOO")
    finally:
        std_logger.removeHandler(handler)

    record = handler.records[0]
    assert record.levelno == logging.ERROR
    assert record.gvk == "example.com/v1, Kind=Foo"
    assert record.event == "validate"
    assert record.env_var == "WORKER_FOO"
    assert not hasattr(record, "reason")


def test_json_formatter_output():
    """Test the JSON formatter output."""
    record = logging.LogRecord(
        "ansible-watches", logging.INFO, __file__, 1, "Loading %s", ("watches",), None
    )
    record.path = "/opt/ansible/watches.yaml"
    record.count = 2

    entry = json.loads(StructuredJSONFormatter().format(record))

    assert entry["level"] == "INFO"
    assert entry["logger"] == "ansible-watches"
    assert entry["message"] == "Loading watches"
    assert entry["path"] == "/opt/ansible/watches.yaml"
    assert entry["count"] == 2
    assert "lineno" not in entry
    assert "exception" not in entry
