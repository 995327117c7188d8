import typing
from abc import ABC, abstractmethod
from collections import OrderedDict
from pathlib import Path
from typing import Any, Dict, List, NamedTuple, Optional

from racing_deployment.constants import (
    CONTRACTS,
    DEFAULT_ENV_FILEPATH,
    DEFAULT_REPORT_FILEPATH,
    SOMNIA_TESTNET,
)
from racing_deployment.utils import _load_yaml

CONTRACT_CONSTRUCTOR_PARAMETER_KEY = "constructor"


class DeploymentTarget(NamedTuple):
    """A contract to instantiate, with its resolved constructor arguments."""

    contract_name: str
    constructor_args: List[Any]


class VariableContext:
    def __init__(self, contract_names: List[str], contract_name: str):
        self.contract_names = contract_names or list()
        self.contract_name = contract_name

    @property
    def earlier_contracts(self) -> List[str]:
        """Contracts deployed before this one; the only ones it may reference."""
        return self.contract_names[: self.contract_names.index(self.contract_name)]


# Variables


class Variable(ABC):
    VARIABLE_PREFIX = "$"

    @abstractmethod
    def resolve(self, deployer: str, deployments: Dict[str, Any]) -> Any:
        raise NotImplementedError

    @classmethod
    def is_variable(cls, param: Any) -> bool:
        """Returns True if the param is a variable."""
        result = isinstance(param, str) and param.startswith(cls.VARIABLE_PREFIX)
        return result


class DeployerAccount(Variable):
    DEPLOYER_INDICATOR = "deployer"

    @classmethod
    def is_deployer(cls, value: str) -> bool:
        """Returns True if the variable is a special deployer variable."""
        return value == cls.DEPLOYER_INDICATOR

    def resolve(self, deployer: str, deployments: Dict[str, Any]) -> Any:
        return deployer

    def __repr__(self) -> str:
        return f"${self.DEPLOYER_INDICATOR}"


class ContractName(Variable):
    def __init__(self, contract_name: str, context: VariableContext):
        if contract_name not in context.contract_names:
            raise ConstructorParameters.Invalid(f"Contract name {contract_name} not found")
        if contract_name not in context.earlier_contracts:
            raise ConstructorParameters.Invalid(
                f"{context.contract_name} cannot reference {contract_name}; "
                f"it is not deployed before {context.contract_name}"
            )
        self.contract_name = contract_name

    def resolve(self, deployer: str, deployments: Dict[str, Any]) -> Any:
        """Resolves the address of a contract deployed earlier in this run."""
        try:
            contract = deployments[self.contract_name]
        except KeyError:
            raise ConstructorParameters.Invalid(
                f"{self.contract_name} has not been deployed yet; its address is unknown"
            )
        return contract.address

    def __repr__(self) -> str:
        return f"${self.contract_name}"


def _variable_from_value(variable: str, context: VariableContext) -> Variable:
    variable = variable[len(Variable.VARIABLE_PREFIX) :]
    if DeployerAccount.is_deployer(variable):
        return DeployerAccount()
    return ContractName(variable, context)


def _process_raw_value(value: Any, context: VariableContext) -> Any:
    if isinstance(value, list):
        return [_process_raw_value(v, context) for v in value]

    if Variable.is_variable(value):
        value = _variable_from_value(value, context)

    return value


def _resolve_param(value: Any, deployer: str, deployments: Dict[str, Any]) -> Any:
    """Resolves a single parameter value or a list of parameter values."""
    if isinstance(value, list):
        return [_resolve_param(v, deployer, deployments) for v in value]

    if isinstance(value, Variable):
        return value.resolve(deployer, deployments)

    return value  # literally a value


def _get_contract_names(config: typing.Dict) -> List[str]:
    contract_names = list()
    for contract_info in config["contracts"]:
        if isinstance(contract_info, str):
            contract_names.append(contract_info)
        elif isinstance(contract_info, dict):
            contract_names.extend(list(contract_info.keys()))
        else:
            raise ValueError("Malformed constructor parameters YAML.")

    return contract_names


class ConstructorParameters:
    """Represents the constructor parameters for the contracts of a single run."""

    class Invalid(Exception):
        """Raised when the constructor parameters are invalid"""

    def __init__(self, parameters: OrderedDict):
        self.parameters = parameters

    @classmethod
    def from_config(cls, config: typing.Dict) -> "ConstructorParameters":
        print("Processing contract constructor parameters...")
        contract_names = _get_contract_names(config)
        if contract_names != CONTRACTS:
            raise cls.Invalid(
                f"Parameters must list exactly {', '.join(CONTRACTS)} in deployment order; "
                f"got {', '.join(contract_names)}."
            )

        contracts_config = OrderedDict()
        for contract_info in config["contracts"]:
            if isinstance(contract_info, str):
                contracts_config[contract_info] = OrderedDict()
                continue

            if len(contract_info) != 1:
                raise ValueError("Malformed constructor parameters YAML.")

            contract_name = list(contract_info.keys())[0]  # only one entry
            contract_data = contract_info[contract_name] or dict()
            context = VariableContext(contract_names=contract_names, contract_name=contract_name)
            raw_values = contract_data.get(CONTRACT_CONSTRUCTOR_PARAMETER_KEY) or dict()
            if not isinstance(raw_values, dict):
                raise ValueError(f"Malformed constructor parameter config for {contract_name}.")

            contracts_config[contract_name] = OrderedDict(
                (name, _process_raw_value(value, context)) for name, value in raw_values.items()
            )

        return cls(parameters=contracts_config)

    def resolve(
        self, contract_name: str, deployer: str, deployments: Dict[str, Any]
    ) -> DeploymentTarget:
        """Resolves the constructor arguments for a single contract, in declaration order."""
        parameters = self.parameters[contract_name]
        resolved_args = [
            _resolve_param(value, deployer, deployments) for value in parameters.values()
        ]
        return DeploymentTarget(contract_name=contract_name, constructor_args=resolved_args)


class DeploymentParameters:
    """
    Everything a deployment run needs besides the network: where the results go,
    how the report labels the network, and the constructor parameters.
    """

    def __init__(
        self,
        constructor_parameters: ConstructorParameters,
        network: str = SOMNIA_TESTNET,
        chain_id: Optional[int] = None,
        env_filepath: Path = DEFAULT_ENV_FILEPATH,
        report_filepath: Path = DEFAULT_REPORT_FILEPATH,
        path: Optional[Path] = None,
    ):
        self.constructor_parameters = constructor_parameters
        self.network = network
        self.chain_id = chain_id
        self.env_filepath = Path(env_filepath)
        self.report_filepath = Path(report_filepath)
        self.path = path

    @classmethod
    def from_config(
        cls,
        config: typing.Dict,
        path: Optional[Path] = None,
        env_filepath: Optional[Path] = None,
        report_filepath: Optional[Path] = None,
    ) -> "DeploymentParameters":
        deployment = config.get("deployment")
        if not deployment:
            raise ValueError("deployment is not set in params file.")

        chain_id = deployment.get("chain_id")
        if not chain_id:
            raise ValueError("chain_id is not set in params file.")

        if not config.get("contracts"):
            raise ValueError("Constructor parameters file missing 'contracts' field.")

        # command line overrides win over the params file
        artifacts = config.get("artifacts") or dict()
        env_filepath = env_filepath or artifacts.get("env") or DEFAULT_ENV_FILEPATH
        report_filepath = report_filepath or artifacts.get("report") or DEFAULT_REPORT_FILEPATH

        return cls(
            constructor_parameters=ConstructorParameters.from_config(config),
            network=deployment.get("name", SOMNIA_TESTNET),
            chain_id=int(chain_id),
            env_filepath=Path(env_filepath),
            report_filepath=Path(report_filepath),
            path=path,
        )

    @classmethod
    def from_yaml(cls, filepath: Path, *args, **kwargs) -> "DeploymentParameters":
        config = _load_yaml(filepath)
        return cls.from_config(config, filepath, *args, **kwargs)
