import typing
from abc import ABC, abstractmethod
from typing import Any, Optional

from ape import networks
from ape.api import AccountAPI, ReceiptAPI
from ape.cli.choices import select_account
from ape.contracts.base import ContractInstance

from racing_deployment.confirm import _confirm_resolution, _continue
from racing_deployment.utils import get_contract_container


class NetworkClient(ABC):
    """
    The orchestrator's view of the network: a signer, balances, and
    deploy/transact calls that return once the network has confirmed them.
    """

    class UnsupportedMethod(Exception):
        """Raised when a contract does not expose the requested method."""

    @abstractmethod
    def get_account(self) -> Any:
        """Returns the signing account; it must expose an ``address``."""
        raise NotImplementedError

    @abstractmethod
    def get_balance(self, address: str) -> int:
        """Returns the balance of ``address`` in wei."""
        raise NotImplementedError

    @abstractmethod
    def deploy(self, contract_name: str, *args) -> Any:
        """Deploys a contract and returns an instance exposing its ``address``."""
        raise NotImplementedError

    @abstractmethod
    def supports(self, contract: Any, method_name: str) -> bool:
        """Returns True if ``contract`` exposes a transaction method ``method_name``."""
        raise NotImplementedError

    @abstractmethod
    def transact(self, contract: Any, method_name: str, *args) -> Any:
        """Sends a transaction to ``contract`` and returns its receipt."""
        raise NotImplementedError


class Transactor:
    """
    Represents an ape account plus annotated transaction execution.
    """

    def __init__(self, account: typing.Optional[AccountAPI] = None, autosign: bool = False):
        if account is None:
            self._account = select_account()
        else:
            self._account = account
        if autosign:
            print("WARNING: Autosign is enabled. Transactions will be signed automatically.")
        self._autosign = autosign
        self._account.set_autosign(autosign)

    def get_account(self) -> AccountAPI:
        """Returns the transactor account."""
        return self._account


class ApeNetworkClient(Transactor, NetworkClient):
    """Deploys and links contracts of the active ape project on the connected network."""

    def __init__(
        self,
        account: typing.Optional[AccountAPI] = None,
        autosign: bool = False,
        required_confirmations: Optional[int] = None,
    ):
        super().__init__(account, autosign)
        self.required_confirmations = required_confirmations

    def _get_kwargs(self) -> typing.Dict[str, Any]:
        """Returns the transaction kwargs."""
        kwargs = dict()
        if self.required_confirmations is not None:
            kwargs["required_confirmations"] = self.required_confirmations
        return kwargs

    def get_balance(self, address: str) -> int:
        return networks.provider.get_balance(address)

    def deploy(self, contract_name: str, *args) -> ContractInstance:
        container = get_contract_container(contract_name)
        if not self._autosign:
            _confirm_resolution(args, contract_name)
        return self._account.deploy(container, *args, publish=False, **self._get_kwargs())

    def supports(self, contract: ContractInstance, method_name: str) -> bool:
        method_abis = contract.contract_type.mutable_methods
        return any(abi.name == method_name for abi in method_abis)

    def transact(self, contract: ContractInstance, method_name: str, *args) -> ReceiptAPI:
        contract_name = contract.contract_type.name
        if not self.supports(contract, method_name):
            raise self.UnsupportedMethod(f"{contract_name} does not expose '{method_name}'")

        base_message = f"\nTransacting {contract_name}[{contract.address[:10]}].{method_name}"
        if args:
            pretty_args = "\n\t".join(str(arg) for arg in args)
            message = f"{base_message} with arguments:\n\t{pretty_args}"
        else:
            message = f"{base_message} with no arguments"
        print(message)
        if not self._autosign:
            _continue()

        method = getattr(contract, method_name)
        return method(*args, sender=self._account, **self._get_kwargs())

    def print_network_info(self) -> None:
        print(
            f"Account: {self._account.address}",
            f"Ecosystem: {networks.provider.network.ecosystem.name}",
            f"Network: {networks.provider.network.name}",
            f"Chain ID: {networks.provider.network.chain_id}",
            f"Gas Price: {networks.provider.gas_price}",
            sep="\n",
        )
