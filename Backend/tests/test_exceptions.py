from core.exceptions import (
    AuthenticationError, AuthorizationError, FutureDateError, NetworkError,
    NotFoundError, ValidationError, error_from_payload)


def test_to_dict_shape():
    error = FutureDateError("Cannot mark 2999-01-01 before it happens", details={"date": "2999-01-01"})
    assert error.status_code == 422
    assert error.to_dict() == {
        "detail": "Cannot mark 2999-01-01 before it happens",
        "error_type": "future_date",
        "details": {"date": "2999-01-01"},
    }


def test_payload_error_type_wins():
    error = error_from_payload(422, {"detail": "future", "error_type": "future_date"})
    assert isinstance(error, FutureDateError)
    assert isinstance(error, ValidationError)


def test_status_fallbacks():
    assert isinstance(error_from_payload(401, {"detail": "Invalid token"}), AuthenticationError)
    assert isinstance(error_from_payload(403, None), AuthorizationError)
    assert isinstance(error_from_payload(404, {}), NotFoundError)
    assert isinstance(error_from_payload(422, {"detail": [{"msg": "field required"}]}), ValidationError)
    assert isinstance(error_from_payload(502, {"detail": "bad gateway"}), NetworkError)


def test_custom_error_type_is_kept():
    error = error_from_payload(400, {"detail": "taken", "error_type": "username_taken"})
    assert isinstance(error, ValidationError)
    assert error.error_type == "username_taken"
