import json
import logging

from app.core.config import Settings
from app.core.logging import ROOT_LOGGER_NAME, JSONFormatter, configure_logging, get_logger


def test_json_formatter_flattens_context_and_errors() -> None:
    record = logging.LogRecord(
        name="resource_planning.test",
        level=logging.WARNING,
        pathname=__file__,
        lineno=1,
        msg="Assignment rejected",
        args=(),
        exc_info=None,
    )
    record.context = {"project_id": 7, "replaced": True}
    try:
        raise ValueError("bad range")
    except ValueError as exc:
        record.exc_info = (type(exc), exc, exc.__traceback__)

    payload = json.loads(JSONFormatter().format(record))

    assert payload["level"] == "WARNING"
    assert payload["logger"] == "resource_planning.test"
    assert payload["message"] == "Assignment rejected"
    assert payload["project_id"] == "7"
    assert payload["replaced"] == "True"
    assert payload["error"] == "bad range"
    assert payload["error_type"] == "ValueError"


def _json_handler_count(logger: logging.Logger) -> int:
    return sum(isinstance(handler.formatter, JSONFormatter) for handler in logger.handlers)


def test_get_logger_returns_child_of_application_logger() -> None:
    logger = get_logger("services")
    get_logger("repositories")
    root = logging.getLogger(ROOT_LOGGER_NAME)

    assert logger.name == f"{ROOT_LOGGER_NAME}.services"
    assert root.propagate is False
    assert _json_handler_count(root) == 1


def test_configure_logging_adds_json_handler_next_to_foreign_handlers() -> None:
    root = logging.getLogger(ROOT_LOGGER_NAME)
    saved = list(root.handlers)
    foreign = logging.NullHandler()
    root.handlers = [foreign]
    try:
        configure_logging()
        configure_logging()

        assert foreign in root.handlers
        assert _json_handler_count(root) == 1
    finally:
        root.handlers = saved


def test_settings_parse_comma_separated_origins_and_log_level() -> None:
    settings = Settings(allowed_origins="http://a.test, http://b.test,", log_level=" debug ")

    assert settings.allowed_origins == ["http://a.test", "http://b.test"]
    assert settings.log_level == "DEBUG"
    assert settings.high_stress_threshold == 50
