# tests/core/worksheet/test_batch_result.py
"""Testes do acumulador `BatchOperationResult`."""

import pytest

from atlas_worksheets.core.errors import WORKSHEET_NOT_FOUND, not_found
from atlas_worksheets.core.exceptions import PartialBatchFailure
from atlas_worksheets.core.path import WorksheetPath
from atlas_worksheets.core.worksheet import BatchOperationResult, BatchStatus, Worksheet


def _node(raw: str, node_id: int) -> Worksheet:
    return Worksheet.of_file(1, WorksheetPath.parse(raw), "k").with_id(node_id)


def test_status_transitions():
    result = BatchOperationResult()
    assert result.status == BatchStatus.EMPTY

    result.add_success(_node("/Worksheets/a.sql", 1))
    assert result.status == BatchStatus.SUCCESS
    assert result.all_successful

    result.add_failure("/Worksheets/x", not_found(path="/Worksheets/x"))
    assert result.status == BatchStatus.PARTIAL_FAILURE
    assert not result.all_successful

    assert BatchOperationResult.failed_for(["/Worksheets/x"], not_found(path="/Worksheets/x")).status == BatchStatus.FAILED


def test_merge_and_removed_ids():
    left = BatchOperationResult(successes=[_node("/Worksheets/a.sql", 1)])
    right = BatchOperationResult(successes=[_node("/Repos/demo/y", 2)])
    right.add_failure("/Repos/demo/z", not_found(path="/Repos/demo/z"))

    merged = left.merge(right)

    assert merged is left
    assert merged.removed_ids() == {1, 2}
    assert merged.failed_paths() == ["/Repos/demo/z"]


def test_raise_for_failures():
    result = BatchOperationResult(successes=[_node("/Worksheets/a.sql", 1)])
    result.raise_for_failures()

    result.add_failure("/Worksheets/x", not_found(path="/Worksheets/x"))
    with pytest.raises(PartialBatchFailure) as exc:
        result.raise_for_failures()

    assert exc.value.details["succeeded"] == 1
    assert exc.value.details["failures"][0]["error"]["type"] == WORKSHEET_NOT_FOUND


def test_to_dict():
    result = BatchOperationResult()
    result.add_failure(WorksheetPath.parse("/Worksheets/x"), not_found(path="/Worksheets/x", project_id=1))

    data = result.to_dict()

    assert data["status"] == "failed"
    assert data["failures"][0]["path"] == "/Worksheets/x"
    assert data["failures"][0]["error"]["details"] == {"path": "/Worksheets/x", "project_id": 1}
