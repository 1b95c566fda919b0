# server/tests/test_config.py
"""Settings loading and schema model configuration"""
from datetime import datetime
from types import SimpleNamespace

from core.config import Settings
from schemas.ticket import RemarkRequest, RemarkResponse


class TestSettings:
    def test_env_file_values_and_unknown_keys(self, tmp_path):
        env_file = tmp_path / ".env"
        env_file.write_text("MAX_UPLOAD_SIZE=1234\nUNRELATED_KEY=anything\n")

        settings = Settings(_env_file=env_file)

        assert settings.max_upload_size == 1234
        assert not hasattr(settings, "unrelated_key")

    def test_environment_names_are_case_insensitive(self, monkeypatch):
        monkeypatch.setenv("CONTROL_NUMBER_PREFIX", "WO")
        assert Settings(_env_file=None).control_number_prefix == "WO"


class TestSchemaConfig:
    def test_remark_request_accepts_alias_and_field_name(self):
        assert RemarkRequest.model_validate({"body": "x", "addedBy": "Ana"}).added_by == "Ana"
        assert RemarkRequest(body="x", added_by="Ana").added_by == "Ana"

    def test_response_reads_attributes_and_dumps_camel_case(self):
        row = SimpleNamespace(
            id=1,
            ticket_id=7,
            body="Checked wiring",
            added_by="Ana",
            created_at=datetime(2024, 3, 1, 8, 0),
            updated_at=None,
        )

        dumped = RemarkResponse.model_validate(row).model_dump(by_alias=True)

        assert dumped["ticketId"] == 7
        assert dumped["addedBy"] == "Ana"
        assert "ticket_id" not in dumped
