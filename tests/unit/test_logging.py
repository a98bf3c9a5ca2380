from __future__ import annotations

from extractschema import logger as package_logger
from extractschema.logging import _truncate_source_text, configure_logging, get_logger
from extractschema.settings import Settings


def test_stdlib_logger_is_configured(capsys) -> None:
    configure_logging(settings=Settings(log_json=False, log_level="INFO"), force=True)
    logger = get_logger("tests")
    logger.info("hello")

    captured = capsys.readouterr()
    assert "hello" in captured.err.lower()


def test_package_logger_created_on_import() -> None:
    assert callable(getattr(package_logger, "info", None))


def test_long_source_text_is_truncated() -> None:
    source = "<input name='x' />" * 50
    event = _truncate_source_text(None, "info", {"event": "parsed", "extra": {"source": source}, "code": source})

    assert event["event"] == "parsed"
    assert len(event["extra"]["source"]) < len(source)
    assert event["extra"]["source"].endswith(f"({len(source)} chars)")
    assert event["code"].startswith("<input name='x' />")


def test_short_values_are_kept() -> None:
    event = _truncate_source_text(None, "info", {"event": "parsed", "extra": {"component": "Form", "fields": 3}})

    assert event["extra"] == {"component": "Form", "fields": 3}
