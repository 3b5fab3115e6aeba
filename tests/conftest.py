import pytest


@pytest.fixture(autouse=True)
def _reset_lambda_dispatcher():
    """Make sure no dispatcher created by one test is reused by the Lambda entry point in another one."""
    from databootstrap import handler

    handler._dispatcher = None
    yield
    handler._dispatcher = None
