"""
Unit tests for Stage 2: JSON Schema and model validation.
"""

import pytest

from conversation_classifier.models.result import CategoryMatch, NewCategory
from conversation_classifier.validation.exceptions import SchemaValidationError
from conversation_classifier.validation.stage2_schema import Stage2SchemaValidation


@pytest.fixture
def stage2(result_model):
    return Stage2SchemaValidation(result_model)


class TestStage2SchemaValidation:
    """Test suite for Stage 2 schema validation."""

    def test_schema_generated_from_model(self, stage2, result_model):
        """The JSON Schema comes from the result model."""
        assert stage2.schema == result_model.model_json_schema()
        assert stage2.schema_name == "ConversationClassification"

    def test_valid_match(self, stage2, make_match_payload):
        result = stage2.validate(make_match_payload())

        assert isinstance(result.classification, CategoryMatch)
        assert result.topic == "language_understanding"

    def test_valid_new_category(self, stage2, make_new_category_payload):
        result = stage2.validate(make_new_category_payload())

        assert isinstance(result.classification, NewCategory)

    def test_missing_required_field(self, stage2, make_match_payload):
        payload = make_match_payload()
        del payload["classification"]

        with pytest.raises(SchemaValidationError) as exc_info:
            stage2.validate(payload)

        assert "JSON Schema validation failed" in exc_info.value.message
        assert exc_info.value.details["schema_name"] == "ConversationClassification"
        assert any("classification" in err for err in exc_info.value.details["validation_errors"])

    def test_wrong_type(self, stage2, make_match_payload):
        payload = make_match_payload()
        payload["error"] = "no"

        with pytest.raises(SchemaValidationError):
            stage2.validate(payload)

    def test_unknown_top_level_field(self, stage2, make_match_payload):
        payload = make_match_payload()
        payload["confidence"] = 0.9

        with pytest.raises(SchemaValidationError):
            stage2.check_schema(payload)

    def test_match_with_message_field_rejected(self, stage2, make_match_payload):
        """A category variant does not accept a message."""
        payload = make_match_payload(topic="reasoning")
        payload["classification"]["message"] = "extra"

        with pytest.raises(SchemaValidationError):
            stage2.validate(payload)

    def test_error_flag_mismatch_rejected_by_model(self, stage2, make_match_payload):
        """Schema-valid data that breaks the error/variant invariant fails model validation."""
        payload = make_match_payload()
        payload["error"] = True

        stage2.check_schema(payload)
        with pytest.raises(SchemaValidationError) as exc_info:
            stage2.build_model(payload)

        assert "Pydantic model validation failed" in exc_info.value.message
        assert any("error is true" in err for err in exc_info.value.details["validation_errors"])

    def test_new_category_missing_message(self, stage2, make_new_category_payload):
        payload = make_new_category_payload()
        del payload["classification"]["message"]

        with pytest.raises(SchemaValidationError):
            stage2.validate(payload)
