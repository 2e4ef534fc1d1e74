import logging
from http import HTTPStatus

from django.http import Http404
from rest_framework.exceptions import NotAuthenticated
from rest_framework.exceptions import ValidationError

from eventhub.events.errors import AlreadyAttendingError
from eventhub.events.errors import EventNotFoundError
from eventhub.events.errors import InvalidDateRangeError
from eventhub.events.errors import NotEventCreatorError
from eventhub.users.errors import EmailAlreadyRegisteredError
from eventhub.utils.exceptions import InvalidQueryError
from eventhub.utils.exceptions import api_exception_handler
from eventhub.utils.exceptions import flatten_errors


def test_flatten_dots_nested_paths():
    detail = {
        "title": ["This field may not be blank."],
        "imagesUrl": {1: ["Enter a valid URL."]},
        "creator": {"email": ["Enter a valid email address."]},
    }

    assert flatten_errors(detail) == [
        {"field": "title", "message": "This field may not be blank."},
        {"field": "imagesUrl.1", "message": "Enter a valid URL."},
        {"field": "creator.email", "message": "Enter a valid email address."},
    ]


def test_flatten_keeps_every_message_for_a_field():
    detail = {"password": ["Too short", "Needs a digit"]}

    assert [e["message"] for e in flatten_errors(detail)] == [
        "Too short",
        "Needs a digit",
    ]


def test_domain_errors_map_to_status_and_message():
    cases = [
        (EventNotFoundError("x"), HTTPStatus.NOT_FOUND, "Event not found"),
        (NotEventCreatorError("x"), HTTPStatus.FORBIDDEN, "Not authorized"),
        (AlreadyAttendingError("x"), HTTPStatus.CONFLICT, "Already joined"),
        (
            InvalidDateRangeError(),
            HTTPStatus.BAD_REQUEST,
            "startDate must be before endDate",
        ),
        (
            EmailAlreadyRegisteredError(),
            HTTPStatus.CONFLICT,
            "Email already registered",
        ),
    ]
    for exc, expected_status, message in cases:
        response = api_exception_handler(exc, {})
        assert response.status_code == expected_status
        assert response.data == {"message": message}


def test_validation_error_body():
    response = api_exception_handler(ValidationError({"title": ["Required."]}), {})

    assert response.status_code == HTTPStatus.BAD_REQUEST
    assert response.data == {
        "message": "Validation failed",
        "errors": [{"field": "title", "message": "Required."}],
    }


def test_query_validation_error_has_its_own_message():
    response = api_exception_handler(InvalidQueryError({"page": ["Too small."]}), {})

    assert response.status_code == HTTPStatus.BAD_REQUEST
    assert response.data == {
        "message": "Invalid query parameters",
        "errors": [{"field": "page", "message": "Too small."}],
    }


def test_framework_errors_become_message_only():
    response = api_exception_handler(NotAuthenticated(), {})

    assert response.status_code == HTTPStatus.UNAUTHORIZED
    assert response.data == {
        "message": "Authentication credentials were not provided.",
    }

    not_found = api_exception_handler(Http404(), {})
    assert not_found.status_code == HTTPStatus.NOT_FOUND
    assert set(not_found.data) == {"message"}


def test_unexpected_errors_are_hidden_and_logged(caplog):
    with caplog.at_level(logging.ERROR, logger="eventhub.utils.exceptions"):
        response = api_exception_handler(RuntimeError("db password is hunter2"), {})

    assert response.status_code == HTTPStatus.INTERNAL_SERVER_ERROR
    assert response.data == {"message": "Internal server error"}
    assert "hunter2" not in str(response.data)
    assert caplog.records[-1].exc_info is not None


def test_domain_error_str_includes_code():
    assert str(EventNotFoundError("x")) == "EVENT_NOT_FOUND: Event not found"
