from pytest import fixture

from aiodisposal import DisposalController


@fixture
def anyio_backend():
    return "asyncio"


@fixture
def controller():
    return DisposalController()
