import json
import logging

from mapdraw_features.logging import LogEvent, StructuredLogger, configure_logging, create_logger


def test_entries_are_json(caplog):
    logger = StructuredLogger(component="test_component")
    with caplog.at_level(logging.WARNING, logger="mapdraw_features.test_component"):
        logger.warning(
            event=LogEvent.QUERY_EXECUTED,
            message="Matched 1 of 2 features",
            metadata={'matched': 1}
        )

    entry = json.loads(caplog.records[0].getMessage())
    assert entry["level"] == "WARNING"
    assert entry["component"] == "test_component"
    assert entry["event"] == "query.executed"
    assert entry["metadata"] == {'matched': 1}
    assert "timestamp" in entry


def test_error_carries_exception(caplog):
    logger = create_logger("test_errors")
    with caplog.at_level(logging.ERROR, logger="mapdraw_features.test_errors"):
        logger.error(
            event=LogEvent.GEOJSON_PARSE_ERROR,
            message="Invalid payload",
            exc_info=ValueError("boom")
        )

    entry = json.loads(caplog.records[0].getMessage())
    assert entry["exception"] == {'type': 'ValueError', 'message': 'boom'}


def test_component_loggers_inherit_package_level(caplog, package_logger):
    logger = create_logger("test_levels")
    assert logger.logger.level == logging.NOTSET

    configure_logging(logging.WARNING)
    with caplog.at_level(logging.DEBUG, logger="mapdraw_features.other"):
        logger.debug(event=LogEvent.GEOJSON_NORMALIZED, message="hidden")
        logger.warning(event=LogEvent.GEOMETRY_INVALID, message="shown")

    messages = [json.loads(r.getMessage())["message"] for r in caplog.records if r.name == "mapdraw_features.test_levels"]
    assert messages == ["shown"]


def test_configure_logging_reaches_every_component(package_logger):
    configure_logging(logging.ERROR)
    for name in ("normalizer", "predicates", "query", "record"):
        assert not logging.getLogger(f"mapdraw_features.{name}").isEnabledFor(logging.WARNING)

    configure_logging(logging.DEBUG)
    for name in ("normalizer", "predicates", "query", "record"):
        assert logging.getLogger(f"mapdraw_features.{name}").isEnabledFor(logging.DEBUG)
