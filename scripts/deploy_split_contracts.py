#!/usr/bin/python3

import sys

import click
from ape.cli import ConnectedProviderCommand, account_option, network_option

from racing_deployment.client import ApeNetworkClient
from racing_deployment.options import (
    autosign_option,
    confirmations_option,
    env_file_option,
    params_filepath_option,
    report_option,
)
from racing_deployment.orchestrator import DeploymentOrchestrator
from racing_deployment.params import DeploymentParameters
from racing_deployment.utils import validate_chain_id


@click.command(cls=ConnectedProviderCommand)
@network_option(required=True)
@account_option()
@params_filepath_option
@env_file_option
@report_option
@autosign_option
@confirmations_option
def cli(network, account, params_filepath, env_file, report_filepath, autosign, confirmations):
    """
    Deploys RacingToken, SomniaRacing and SomniaTournaments, links them
    and writes their addresses to the env file and the JSON report.

    ape run deploy_split_contracts --network somnia:testnet:node --account <ALIAS>
    """
    params = DeploymentParameters.from_yaml(
        filepath=params_filepath, env_filepath=env_file, report_filepath=report_filepath
    )
    validate_chain_id(params.chain_id)

    client = ApeNetworkClient(
        account=account, autosign=autosign, required_confirmations=confirmations
    )
    client.print_network_info()
    print(
        f"Config: {params.path}",
        f"Env file: {params.env_filepath}",
        f"Report: {params.report_filepath}",
        sep="\n",
    )

    print("\nDeploying all contracts to Somnia testnet\n")
    result = DeploymentOrchestrator(client=client, params=params).run()
    if result.succeeded:
        print("\nALL CONTRACTS DEPLOYED TO SOMNIA TESTNET SUCCESSFULLY!")
    sys.exit(result.exit_code)


if __name__ == "__main__":
    cli()
