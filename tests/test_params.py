from pathlib import Path
from types import SimpleNamespace

import pytest

from racing_deployment.constants import DEFAULT_PARAMS_FILEPATH
from racing_deployment.params import (
    ConstructorParameters,
    ContractName,
    DeployerAccount,
    DeploymentParameters,
)


def _config(contracts, **deployment):
    deployment = deployment or {"name": "somniaTestnet", "chain_id": 50312}
    return {"deployment": deployment, "contracts": contracts}


def test_default_params_file():
    params = DeploymentParameters.from_yaml(filepath=DEFAULT_PARAMS_FILEPATH)

    assert params.network == "somniaTestnet"
    assert params.chain_id == 50312
    assert params.env_filepath == Path(".env")
    assert params.report_filepath == Path("deployment-split-contracts.json")
    assert params.path == DEFAULT_PARAMS_FILEPATH

    tournaments_params = params.constructor_parameters.parameters["SomniaTournaments"]
    racing_variable = tournaments_params["_racingContract"]
    assert isinstance(racing_variable, ContractName)
    assert racing_variable.contract_name == "SomniaRacing"


def test_output_overrides(tmp_path):
    params = DeploymentParameters.from_yaml(
        filepath=DEFAULT_PARAMS_FILEPATH,
        env_filepath=tmp_path / "app.env",
        report_filepath=tmp_path / "report.json",
    )
    assert params.env_filepath == tmp_path / "app.env"
    assert params.report_filepath == tmp_path / "report.json"


def test_resolve_uses_addresses_from_this_run():
    params = DeploymentParameters.from_yaml(filepath=DEFAULT_PARAMS_FILEPATH)
    deployments = {"SomniaRacing": SimpleNamespace(address="0xBBB")}

    target = params.constructor_parameters.resolve(
        "SomniaTournaments", deployer="0xDEP", deployments=deployments
    )
    assert target.contract_name == "SomniaTournaments"
    assert target.constructor_args == ["0xBBB"]

    token = params.constructor_parameters.resolve("RacingToken", "0xDEP", deployments)
    assert token.constructor_args == []


def test_resolve_before_dependency_is_deployed():
    params = DeploymentParameters.from_yaml(filepath=DEFAULT_PARAMS_FILEPATH)
    with pytest.raises(ConstructorParameters.Invalid, match="has not been deployed yet"):
        params.constructor_parameters.resolve("SomniaTournaments", "0xDEP", deployments={})


def test_deployer_variable():
    config = _config(
        [
            {"RacingToken": {"constructor": {"initialOwner": "$deployer"}}},
            "SomniaRacing",
            {"SomniaTournaments": {"constructor": {"_racing": "$SomniaRacing"}}},
        ]
    )
    parameters = ConstructorParameters.from_config(config)
    assert isinstance(parameters.parameters["RacingToken"]["initialOwner"], DeployerAccount)

    target = parameters.resolve("RacingToken", deployer="0xDEP", deployments={})
    assert target.constructor_args == ["0xDEP"]


def test_list_values_are_resolved():
    config = _config(
        [
            "RacingToken",
            "SomniaRacing",
            {
                "SomniaTournaments": {
                    "constructor": {"_contracts": ["$RacingToken", "$SomniaRacing"], "_fee": 10}
                }
            },
        ]
    )
    parameters = ConstructorParameters.from_config(config)
    deployments = {
        "RacingToken": SimpleNamespace(address="0xAAA"),
        "SomniaRacing": SimpleNamespace(address="0xBBB"),
    }
    target = parameters.resolve("SomniaTournaments", "0xDEP", deployments)
    assert target.constructor_args == [["0xAAA", "0xBBB"], 10]


def test_reference_to_later_contract_is_rejected():
    config = _config(
        [
            "RacingToken",
            {"SomniaRacing": {"constructor": {"_tournaments": "$SomniaTournaments"}}},
            "SomniaTournaments",
        ]
    )
    with pytest.raises(ConstructorParameters.Invalid, match="not deployed before"):
        ConstructorParameters.from_config(config)


def test_unknown_contract_reference_is_rejected():
    config = _config(
        [
            "RacingToken",
            "SomniaRacing",
            {"SomniaTournaments": {"constructor": {"_racing": "$SomniaRacingV2"}}},
        ]
    )
    with pytest.raises(ConstructorParameters.Invalid, match="not found"):
        ConstructorParameters.from_config(config)


@pytest.mark.parametrize(
    "contracts",
    [
        ["SomniaRacing", "RacingToken", "SomniaTournaments"],
        ["RacingToken", "SomniaRacing"],
        ["RacingToken", "SomniaRacing", "SomniaTournaments", "SomniaMarketplace"],
    ],
)
def test_contracts_must_match_deployment_order(contracts):
    with pytest.raises(ConstructorParameters.Invalid, match="deployment order"):
        ConstructorParameters.from_config(_config(contracts))


def test_malformed_contract_entry():
    with pytest.raises(ValueError, match="Malformed"):
        ConstructorParameters.from_config(_config(["RacingToken", 42]))


def test_missing_chain_id():
    config = _config(["RacingToken", "SomniaRacing", "SomniaTournaments"], name="somniaTestnet")
    with pytest.raises(ValueError, match="chain_id is not set"):
        DeploymentParameters.from_config(config)


def test_missing_deployment_section():
    with pytest.raises(ValueError, match="deployment is not set"):
        DeploymentParameters.from_config({"contracts": ["RacingToken"]})
