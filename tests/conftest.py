from typing import Callable

import pytest

from energy_token.models import ExecutionContext, TokenConfig
from energy_token.token import EnergyToken

ADMIN = "ST1PQHQKV0RJXZFY1DGX8MNSNYVE3VGZJSRTPGZGM"
MINTER = "ST2CY5V39NHDP5PWEEDAHR9H0YETWQGYDXMHD4R2Q"
ALICE = "ST3NBRSFKX28FQ2ZJ1MAKX58HKHSDGNV5N7R21XCP"
BOB = "ST4QY9HV9HJ2JMB926V22XJDACRQTS4GXPXP3GRS"
MALLORY = "ST2JHG361ZXG51QTKY2NQCVBPPRRE2KZB1HR05NNC"


@pytest.fixture()
def make_ctx() -> Callable[..., ExecutionContext]:
    """Build an execution context for a caller at a given block height"""

    def _make_ctx(caller: str, block_height: int = 100) -> ExecutionContext:
        return ExecutionContext(caller=caller, block_height=block_height)

    return _make_ctx


@pytest.fixture()
def admin_ctx(make_ctx) -> ExecutionContext:
    return make_ctx(ADMIN)


@pytest.fixture()
def minter_ctx(make_ctx) -> ExecutionContext:
    return make_ctx(MINTER)


@pytest.fixture()
def config() -> TokenConfig:
    return TokenConfig()


@pytest.fixture()
def token(config) -> EnergyToken:
    return EnergyToken(ADMIN, config=config)


@pytest.fixture()
def minter_token(token, admin_ctx) -> EnergyToken:
    """Token with ``MINTER`` already authorized"""
    token.add_minter(admin_ctx, MINTER)
    return token


@pytest.fixture()
def funded_token(minter_token, minter_ctx) -> EnergyToken:
    """Token where ALICE holds 500 solar units at carbon footprint 50"""
    minter_token.mint(minter_ctx, ALICE, 500, "solar", 50)
    return minter_token
