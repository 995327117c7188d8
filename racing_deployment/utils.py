from decimal import Decimal
from pathlib import Path

import yaml
from ape import networks, project
from ape.contracts import ContractContainer
from web3 import Web3

from racing_deployment.constants import LOCAL_NETWORK_NAME


def _load_yaml(filepath: Path) -> dict:
    """Loads a YAML file."""
    with open(filepath, "r") as file:
        return yaml.safe_load(file)


def is_local_network() -> bool:
    return networks.provider.network.name == LOCAL_NETWORK_NAME


def validate_chain_id(config_chain_id: int) -> None:
    """Checks that the parameters file targets the chain the provider is connected to."""
    chain_mismatch = config_chain_id != networks.provider.network.chain_id
    if chain_mismatch and not is_local_network():
        raise ValueError(
            f"chain_id in params file ({config_chain_id}) does not match "
            f"chain_id of current network ({networks.provider.network.chain_id})."
        )


def _get_dependency_contract_container(contract: str) -> ContractContainer:
    for dependency_name, dependency_versions in project.dependencies.items():
        if len(dependency_versions) > 1:
            raise ValueError(f"Ambiguous {dependency_name} dependency for {contract}")
        try:
            dependency_api = list(dependency_versions.values())[0]
            contract_container = getattr(dependency_api, contract)
            return contract_container
        except AttributeError:
            continue
    raise ValueError(f"No contract found with name '{contract}'.")


def get_contract_container(contract: str) -> ContractContainer:
    try:
        contract_container = getattr(project, contract)
    except AttributeError:
        # not in root project; check dependencies
        contract_container = _get_dependency_contract_container(contract)

    return contract_container


def format_ether(wei: int) -> str:
    """Renders a wei amount as a decimal ether string, e.g. '1.5' or '0.0'."""
    value = Decimal(Web3.from_wei(wei, "ether"))
    text = format(value.normalize(), "f")
    if "." not in text:
        text = f"{text}.0"
    return text
