# tests/core/test_errors_mapping.py
"""
Testes do mapeamento exceção → WorksheetErrorPayload.

Subclasses devem receber o código mais específico, e exceções desconhecidas
nunca expõem stack trace: viram WORKSHEET_INTERNAL_ERROR com a classe de origem.
"""

import pytest

from atlas_worksheets.core import errors
from atlas_worksheets.core.errors import error_code_for, exception_to_error
from atlas_worksheets.core.exceptions import (
    AlreadyExists,
    ArchiveError,
    Conflict,
    DownloadTimeout,
    EditVersionConflict,
    InvalidPath,
    NameTooLong,
    NotFound,
    PartialBatchFailure,
    UnsupportedLocation,
)


@pytest.mark.parametrize(
    "exc, code",
    [
        (InvalidPath("x"), errors.WORKSHEET_INVALID_PATH),
        (NameTooLong("x"), errors.WORKSHEET_NAME_TOO_LONG),
        (AlreadyExists("x"), errors.WORKSHEET_ALREADY_EXISTS),
        (NotFound("x"), errors.WORKSHEET_NOT_FOUND),
        (EditVersionConflict("x"), errors.WORKSHEET_EDIT_VERSION_CONFLICT),
        (Conflict("x"), errors.WORKSHEET_CONFLICT),
        (UnsupportedLocation("x"), errors.WORKSHEET_UNSUPPORTED_LOCATION),
        (PartialBatchFailure("x"), errors.WORKSHEET_PARTIAL_BATCH_FAILURE),
        (ArchiveError("x"), errors.WORKSHEET_ARCHIVE_ERROR),
        (DownloadTimeout("x"), errors.WORKSHEET_DOWNLOAD_TIMEOUT),
        (RuntimeError("x"), errors.WORKSHEET_INTERNAL_ERROR),
    ],
)
def test_error_code_for(exc, code):
    assert error_code_for(exc) == code


def test_domain_exception_keeps_details_and_hint():
    payload = exception_to_error(NotFound("Worksheet não encontrado", {"path": "/Worksheets/x"}, hint="h"))

    assert payload.to_dict() == {
        "type": errors.WORKSHEET_NOT_FOUND,
        "message": "Worksheet não encontrado",
        "details": {"path": "/Worksheets/x"},
        "hint": "h",
    }


def test_unknown_exception_becomes_internal_error():
    payload = exception_to_error(KeyError("boom"))

    assert payload.type == errors.WORKSHEET_INTERNAL_ERROR
    assert payload.details == {"exception_class": "KeyError"}
    assert payload.hint


def test_exceptions_render_message():
    assert str(InvalidPath("Path vazio")) == "Path vazio"
