"""Tests for structlog configuration and log redaction."""

import json
import logging
from unittest.mock import MagicMock, patch

import pytest
import structlog

from src.config import logging as logging_config
from src.config.logging import REDACTED, build_processors, redact, redact_event


@pytest.fixture
def settings():
    mock = MagicMock()
    mock.app_name = "RxDesk Pharmacy System"
    mock.environment = "production"
    return mock


class TestRedact:
    def test_masks_keys_at_any_depth(self):
        payload = {"sale": {"Customer_Name": "Asha", "lines": [{"token": "t", "qty": 2}]}}

        assert redact(payload, {"customer_name", "token"}) == {
            "sale": {"Customer_Name": REDACTED, "lines": [{"token": REDACTED, "qty": 2}]}
        }

    def test_does_not_mutate_input(self):
        payload = {"password": "hunter2"}
        redact(payload, {"password"})
        assert payload == {"password": "hunter2"}

    def test_event_processor_strips_patient_fields(self):
        event = {
            "event": "prescription_uploaded",
            "prescription_id": "p-1",
            "patient_name": "Asha Verma",
            "patient_id": "91-1234-5678-9012",
            "details": {"password": "x", "fhir_bundle": {"resourceType": "Bundle"}},
        }

        cleaned = redact_event(None, "info", event)

        assert cleaned["event"] == "prescription_uploaded"
        assert cleaned["prescription_id"] == "p-1"
        assert cleaned["patient_name"] == REDACTED
        assert cleaned["patient_id"] == REDACTED
        assert cleaned["details"] == {"password": REDACTED, "fhir_bundle": REDACTED}


class TestProcessorChain:
    @pytest.mark.parametrize(
        ("environment", "renderer"),
        [
            ("development", structlog.dev.ConsoleRenderer),
            ("production", structlog.processors.JSONRenderer),
        ],
    )
    def test_renderer_per_environment(self, environment, renderer):
        processors = build_processors(environment)

        assert isinstance(processors[-1], renderer)
        assert processors.index(redact_event) < len(processors) - 1

    def test_json_output_is_redacted(self, settings, caplog):
        stdlib_logger = logging.getLogger("rxdesk.tests.redaction")
        caplog.set_level(logging.INFO, logger=stdlib_logger.name)

        with patch.object(logging_config, "get_settings", return_value=settings):
            log = structlog.wrap_logger(
                stdlib_logger,
                processors=build_processors("production"),
                wrapper_class=structlog.stdlib.BoundLogger,
            )
            log.info("sale_created", sale_id="s-1", customer_name="Asha Verma")

        record = json.loads(caplog.records[-1].getMessage())
        assert record["event"] == "sale_created"
        assert record["sale_id"] == "s-1"
        assert record["customer_name"] == REDACTED
        assert record["service"] == "RxDesk Pharmacy System"
        assert record["environment"] == "production"
        assert "Asha Verma" not in caplog.text
