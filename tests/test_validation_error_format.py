from core.validation_errors import format_validation_error_details


def test_missing_required_field_summary_is_readable():
    errors = [
        {
            "type": "missing",
            "loc": ("body", "title"),
            "msg": "Field required",
            "input": {"description": "Renewal copy"},
        }
    ]

    details = format_validation_error_details(errors)

    assert details["summary"] == "Validation failed: missing required field: title."
    assert details["missingFields"] == ["title"]
    assert details["fieldErrors"] == [
        {
            "path": "title",
            "location": "body",
            "message": "Field required",
            "errorType": "missing",
        }
    ]


def test_invalid_enum_value_has_field_error_without_missing_summary():
    errors = [
        {
            "type": "enum",
            "loc": ("body", "storage_provider"),
            "msg": "Input should be 'LOCAL' or 'S3'",
            "input": "FTP",
        }
    ]

    details = format_validation_error_details(errors)

    assert details["summary"] == "Validation failed for 1 field."
    assert details["missingFields"] == []
    assert details["fieldErrors"][0]["path"] == "storage_provider"
    assert details["fieldErrors"][0]["errorType"] == "enum"


def test_nested_location_is_joined_and_root_is_named():
    errors = [
        {"type": "less_than_equal", "loc": ("query", "limits", 0), "msg": "Too large"},
        {"type": "model_type", "loc": ("body",), "msg": "Input should be an object"},
    ]

    details = format_validation_error_details(errors)

    assert details["fieldErrors"][0]["path"] == "limits.0"
    assert details["fieldErrors"][0]["location"] == "query"
    assert details["fieldErrors"][1]["path"] == "(root)"
    assert details["summary"] == "Validation failed for 2 fields."


def test_multiple_missing_fields_are_deduplicated_and_listed():
    errors = [
        {"type": "missing", "loc": ("body", "email"), "msg": "Field required", "input": {}},
        {"type": "missing", "loc": ("body", "password"), "msg": "Field required", "input": {}},
        {"type": "missing", "loc": ("body", "email"), "msg": "Field required", "input": {}},
    ]

    details = format_validation_error_details(errors)

    assert details["summary"] == "Validation failed: missing required fields: email, password."
    assert details["missingFields"] == ["email", "password"]
