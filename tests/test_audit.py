"""Tests for the best-effort audit trail and record builders."""

from exhibit_guide.audit import AuditTrail, generation_record, retrieval_record
from exhibit_guide.models import DESCRIPTION_RETRIEVAL, LLM_GENERATION, CatalogItem


def test_record_appends(storage):
    trail = AuditTrail(storage)
    item = CatalogItem(id=3, name="X", type="Y", generated_description="Cached.")
    assert trail.record(retrieval_record, "p1", item, "description") is True
    stored = storage.get_interactions()
    assert len(stored) == 1
    assert stored[0].interaction_type == DESCRIPTION_RETRIEVAL
    assert stored[0].item_id == 3


def test_record_failure_returns_false(failing_audit_log, caplog):
    trail = AuditTrail(failing_audit_log)
    assert trail.record(generation_record, "p1", 1, "story", None, "prompt", "response") is False
    assert failing_audit_log.attempts == 1
    assert "Failed to save interaction log" in caplog.text


def test_record_tolerates_any_sink_error(caplog):
    class ExplodingLog:
        def append_interaction(self, record):
            raise KeyError("unexpected")

    trail = AuditTrail(ExplodingLog())
    assert trail.record(generation_record, "p1", 1, "story", None, "prompt", "response") is False
    assert "Failed to save interaction log" in caplog.text


def test_record_tolerates_corrupt_log_file(storage, tmp_path):
    (tmp_path / "data" / "interactions.json").write_text("{not json")
    trail = AuditTrail(storage)
    assert trail.record(generation_record, "p1", 1, "story", None, "prompt", "response") is False


def test_record_rejected_by_model_is_not_raised(storage):
    trail = AuditTrail(storage)
    item = CatalogItem(id=3, name="X", type="Y", generated_description="Cached.")
    assert trail.record(retrieval_record, "p" * 65, item, "description") is False
    assert storage.get_interactions() == []


def test_generation_record_fields():
    record = generation_record(
        "p1", 7, "facts", "Engine?", "the prompt", "the answer",
        tokens=31, duration_ms=120,
    )
    assert record.interaction_type == LLM_GENERATION
    assert record.used_llm is True
    assert record.was_successful is True
    assert record.llm_tokens == 31
    assert record.duration_ms == 120
    assert record.interaction_data == {"content_type": "facts", "specific_request": "Engine?"}


def test_failed_generation_record():
    record = generation_record("p1", 7, "facts", None, "prompt", "HTTP 500", success=False)
    assert record.was_successful is False
    assert record.used_llm is True
    assert record.llm_response == "HTTP 500"
