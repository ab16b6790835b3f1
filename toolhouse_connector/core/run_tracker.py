"""Run identifier tracking across start/continue calls."""

from toolhouse_connector.models.schemas import Operation


def track_run_id(operation: Operation, input_run_id: str, transport_run_id: str) -> str:
    """
    Decide the run identifier an item ends up with.

    start:    whatever the response supplied (possibly empty)
    continue: the response's identifier if non-empty, else the caller's
    """
    if operation is Operation.START:
        return transport_run_id or ""
    return transport_run_id or input_run_id
