# tests/test_logging.py
import json
import logging
import uuid

from shopcart.core.logging import JsonFormatter, get_logger


def test_bound_context_is_attached_to_records(caplog):
    caplog.set_level(logging.INFO, logger="shopcart.tests")
    cart_id = uuid.uuid4()
    logger = get_logger("shopcart.tests", operation="add_item").bind(cart_id=cart_id)

    logger.info("Cart updated", extra={"items": 2})

    record = caplog.records[-1]
    assert record.operation == "add_item"
    assert record.cart_id == str(cart_id)
    assert record.items == 2


def test_call_site_extra_overrides_bound_context(caplog):
    caplog.set_level(logging.INFO, logger="shopcart.tests")
    logger = get_logger("shopcart.tests", phase="abandon")

    logger.info("Phase done", extra={"phase": "purge"})

    assert caplog.records[-1].phase == "purge"


def test_json_formatter_lifts_cart_context():
    record = logging.makeLogRecord(
        {
            "name": "shopcart.cart",
            "levelname": "INFO",
            "msg": "Cart %s marked as abandoned",
            "args": ("abc",),
            "cart_id": "abc",
            "operation": None,
            "total_price": "10.00",
        }
    )

    line = json.loads(JsonFormatter().format(record))

    assert line["message"] == "Cart abc marked as abandoned"
    assert line["cart_id"] == "abc"
    assert "operation" not in line
    assert line["extra"] == {"total_price": "10.00"}
