from ttpforge.results import (
    ActResult,
    ExecutionResult,
    StepResultsRecord,
    aggregate_results,
)


def test_record_starts_empty():
    record = StepResultsRecord()
    assert record.by_name == {}
    assert record.by_index == []


def test_add_indexes_by_name_and_order():
    record = StepResultsRecord()
    first = ExecutionResult(stdout="one")
    second = ExecutionResult(stdout="two")
    record.add("first", first)
    record.add("second", second)
    assert record.by_index == [first, second]
    assert record.by_name["first"] is first
    assert record.by_name["second"] is second


def test_cleanup_update_is_shared_between_views():
    record = StepResultsRecord()
    record.add("step", ExecutionResult(stdout="out"))
    cleanup = ActResult(stdout="cleaned")
    record.by_index[0].cleanup = cleanup
    assert record.by_name["step"].cleanup is cleanup


def test_execution_result_defaults():
    result = ExecutionResult(stdout="out", stderr="err")
    assert result.cleanup is None
    assert result.outputs == {}
    assert (result.stdout, result.stderr) == ("out", "err")


def test_aggregate_results_concatenates_in_order():
    combined = aggregate_results(
        [ActResult(stdout="a", stderr="x"), ActResult(stdout="b", stderr="y")]
    )
    assert combined.stdout == "a" + "b"
    assert combined.stderr == "x" + "y"


def test_aggregate_results_skips_missing_entries():
    combined = aggregate_results([None, ActResult(stdout="a"), None])
    assert combined.stdout == "a"
    assert combined.stderr == ""


def test_aggregate_of_nothing_is_empty():
    assert aggregate_results([]) == ActResult()