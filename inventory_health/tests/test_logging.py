from inventory_health.config import set_config_for_test
from inventory_health.logging import AppLogger, get_logger


def test_logger_is_bound_with_name():
    messages = []
    log = get_logger("inventory_health.test")
    sink = log.add(lambda m: messages.append(m.record["extra"]["name"]), level="WARNING")
    try:
        log.warning("hello")
    finally:
        log.remove(sink)
    assert messages == ["inventory_health.test"]


def test_sink_follows_config_level():
    set_config_for_test(log_level="error")
    get_logger()
    assert AppLogger._level == "ERROR"
    first_sink = AppLogger._sink_id

    get_logger("again")
    assert AppLogger._sink_id == first_sink

    set_config_for_test(log_level="WARNING")
    get_logger()
    assert AppLogger._level == "WARNING"
