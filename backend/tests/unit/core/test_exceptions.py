from beautibook.core.exceptions import (
    HoldGoneException,
    NotFoundException,
    SlotUnavailableException,
    ValidationException,
)


def test_domain_exception_converts_to_http_exception():
    exc = SlotUnavailableException(code="SLOT_HELD", details={"staff_id": "01J"})

    http_exc = exc.to_http_exception()

    assert http_exc.status_code == 409
    assert http_exc.detail == {
        "message": "Slot not available",
        "code": "SLOT_HELD",
        "details": {"staff_id": "01J"},
    }


def test_status_codes_per_failure_kind():
    assert ValidationException("bad").status_code == 400
    assert NotFoundException("missing").status_code == 404
    assert HoldGoneException("gone").status_code == 410


def test_default_codes():
    assert ValidationException("bad").code == "VALIDATION_ERROR"
    assert SlotUnavailableException().code == "SLOT_UNAVAILABLE"
