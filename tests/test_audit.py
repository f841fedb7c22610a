"""
Tests for the per-request audit record.
"""
from __future__ import annotations

import json
import logging


def _records(caplog):
    return [json.loads(r.getMessage()) for r in caplog.records if r.name == "passsync.audit"]


def test_audit_record_carries_pass_code(app_client, caplog):
    _app, client = app_client
    caplog.set_level(logging.INFO, logger="passsync.audit")

    client.get("/api/settings/REQ-001")
    client.get("/api/slots/link/link-final-interview")
    client.get("/health")

    settings_rec, slots_rec, health_rec = _records(caplog)[-3:]
    assert settings_rec["area"] == "settings"
    assert settings_rec["pass_code"] == "REQ-001"
    assert settings_rec["status"] == 200
    assert slots_rec["area"] == "slots"
    assert slots_rec["link_id"] == "link-final-interview"
    assert health_rec["area"] is None
    assert "pass_code" not in health_rec
