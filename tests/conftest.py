import json
from types import SimpleNamespace

import pytest

from racing_deployment.client import NetworkClient
from racing_deployment.constants import DEFAULT_PARAMS_FILEPATH
from racing_deployment.params import DeploymentParameters

DEPLOYER_ADDRESS = "0xDEP"
TOKEN_ADDRESS = "0xAAA"
RACING_ADDRESS = "0xBBB"
TOURNAMENTS_ADDRESS = "0xCCC"

ADDRESSES = {
    "RacingToken": TOKEN_ADDRESS,
    "SomniaRacing": RACING_ADDRESS,
    "SomniaTournaments": TOURNAMENTS_ADDRESS,
}

ONE_AND_A_HALF_ETHER = 1_500_000_000_000_000_000


class FakeNetworkClient(NetworkClient):
    """Records every call; fails the ones it is told to fail."""

    def __init__(self, addresses=None, balance=ONE_AND_A_HALF_ETHER):
        self.addresses = dict(addresses or ADDRESSES)
        self.balance = balance
        self.calls = list()
        self.failing_deployments = dict()
        self.failing_methods = dict()
        self.missing_methods = set()

    def get_account(self):
        self.calls.append(("get_account",))
        return SimpleNamespace(address=DEPLOYER_ADDRESS)

    def get_balance(self, address):
        self.calls.append(("get_balance", address))
        return self.balance

    def deploy(self, contract_name, *args):
        self.calls.append(("deploy", contract_name, args))
        if contract_name in self.failing_deployments:
            raise self.failing_deployments[contract_name]
        return SimpleNamespace(name=contract_name, address=self.addresses[contract_name])

    def supports(self, contract, method_name):
        return method_name not in self.missing_methods

    def transact(self, contract, method_name, *args):
        self.calls.append(("transact", contract.name, method_name, args))
        if method_name in self.failing_methods:
            raise self.failing_methods[method_name]
        return SimpleNamespace(txn_hash=f"0x{method_name}")

    @property
    def deployed(self):
        return [call[1] for call in self.calls if call[0] == "deploy"]

    @property
    def transacted(self):
        return [call[2] for call in self.calls if call[0] == "transact"]


def read_report(filepath):
    with open(filepath, "r") as file:
        return json.load(file)


@pytest.fixture
def client():
    return FakeNetworkClient()


@pytest.fixture
def env_filepath(tmp_path):
    return tmp_path / ".env"


@pytest.fixture
def report_filepath(tmp_path):
    return tmp_path / "deployment-split-contracts.json"


@pytest.fixture
def params(env_filepath, report_filepath):
    return DeploymentParameters.from_yaml(
        filepath=DEFAULT_PARAMS_FILEPATH,
        env_filepath=env_filepath,
        report_filepath=report_filepath,
    )
