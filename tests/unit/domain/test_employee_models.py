import pytest

from emporch.domain.models.employee import (
    CreationInput,
    EmployeeRecord,
    UpstreamEnvelope,
    email_from_name,
)


@pytest.mark.parametrize(
    "name, expected",
    [
        ("John Doe", "johnd@company.com"),
        ("Mary Ann Smith", "marys@company.com"),
        ("  Ada   Lovelace ", "adal@company.com"),
        ("Cher", "cher@company.com"),
    ],
)
def test_email_from_name(name, expected):
    assert email_from_name(name) == expected


@pytest.mark.parametrize("name", ["", "   ", None])
def test_email_from_blank_name_is_rejected(name):
    with pytest.raises(ValueError):
        email_from_name(name)


def test_record_from_wire(make_wire_employee):
    record = EmployeeRecord.from_wire(make_wire_employee("7", "John Doe", 50000, age=41, title="Manager"))

    assert record == EmployeeRecord(
        id="7",
        name="John Doe",
        title="Manager",
        salary=50000,
        age=41,
        email="johnd@company.com",
    )


def test_record_from_wire_tolerates_missing_and_bad_fields():
    record = EmployeeRecord.from_wire({"id": 12, "employee_name": "Jo", "employee_salary": "n/a"})

    assert record.id == "12"
    assert record.salary is None
    assert record.age is None
    assert record.title is None


def test_record_from_wire_accepts_numeric_strings():
    record = EmployeeRecord.from_wire({"id": "1", "employee_salary": "3200", "employee_age": "29"})

    assert record.salary == 3200
    assert record.age == 29


def test_record_to_wire_uses_prefixed_fields(make_wire_employee):
    wire = make_wire_employee("3", "Bob Johnson", 75000)

    assert EmployeeRecord.from_wire(wire).to_wire() == wire


def test_creation_payload_derives_email_without_id():
    payload = CreationInput(name="Jane Smith", title="Director", salary=100000, age=45).to_payload()

    assert payload == {
        "employee_name": "Jane Smith",
        "employee_title": "Director",
        "employee_salary": 100000,
        "employee_age": 45,
        "employee_email": "janes@company.com",
    }


def test_envelope_from_json():
    envelope = UpstreamEnvelope.from_json({"data": [{"id": "1"}], "status": "Successfully processed request."})

    assert envelope.status == "Successfully processed request."
    assert not envelope.is_empty
    assert envelope.records() == [{"id": "1"}]


def test_envelope_without_data_is_empty():
    envelope = UpstreamEnvelope.from_json({"status": "ok"})

    assert envelope.is_empty
    assert envelope.records() == []


def test_envelope_wraps_single_object():
    assert UpstreamEnvelope(data={"id": "5"}).records() == [{"id": "5"}]


def test_envelope_skips_malformed_entries():
    envelope = UpstreamEnvelope(data=[{"id": "1"}, "garbage", 3, {"id": "2"}])

    assert envelope.records() == [{"id": "1"}, {"id": "2"}]


def test_record_from_wire_drops_non_string_text_fields(caplog):
    record = EmployeeRecord.from_wire(
        {"id": "4", "employee_name": 12345, "employee_title": ["Engineer"], "employee_email": False}
    )

    assert record.name is None
    assert record.title is None
    assert record.email is None
    assert "non-string value" in caplog.text
