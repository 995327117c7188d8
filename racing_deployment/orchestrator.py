from collections import OrderedDict
from typing import Any, Dict, List, NamedTuple, Optional

import click

from racing_deployment.client import NetworkClient
from racing_deployment.constants import (
    ADD_AUTHORIZED_MINTER,
    CONTRACT_FEATURE_DESCRIPTIONS,
    CONTRACTS,
    ENV_KEYS,
    RACING_TOKEN,
    SET_RACING_TOKEN,
    SET_TOURNAMENT_CONTRACT,
    SOMNIA_RACING,
    SOMNIA_TOURNAMENTS,
    DeploymentStage,
)
from racing_deployment.envfile import update_env_file
from racing_deployment.params import DeploymentParameters
from racing_deployment.report import DeploymentReport, build_report, write_report
from racing_deployment.utils import format_ether


class DeployedContract(NamedTuple):
    name: str
    address: str
    deployer: str
    instance: Any


class LinkOperation(NamedTuple):
    """Stores the address of ``target`` inside ``source`` by calling ``method_name``."""

    source: str
    method_name: str
    target: str
    stage: DeploymentStage
    required: bool = True


DEPLOYMENT_STAGES = OrderedDict(
    [
        (RACING_TOKEN, DeploymentStage.DEPLOY_TOKEN),
        (SOMNIA_RACING, DeploymentStage.DEPLOY_RACING),
        (SOMNIA_TOURNAMENTS, DeploymentStage.DEPLOY_TOURNAMENTS),
    ]
)

LINK_OPERATIONS = [
    LinkOperation(SOMNIA_RACING, SET_RACING_TOKEN, RACING_TOKEN, DeploymentStage.LINK_TOKEN),
    LinkOperation(RACING_TOKEN, ADD_AUTHORIZED_MINTER, SOMNIA_RACING, DeploymentStage.LINK_MINTER),
    LinkOperation(
        SOMNIA_RACING,
        SET_TOURNAMENT_CONTRACT,
        SOMNIA_TOURNAMENTS,
        DeploymentStage.LINK_TOURNAMENT,
        required=False,
    ),
]


class DeploymentResult(NamedTuple):
    """Outcome of a run; ``error`` is None only when the run reached DONE."""

    stage: DeploymentStage
    deployments: Dict[str, DeployedContract]
    skipped_links: List[LinkOperation]
    report: Optional[DeploymentReport] = None
    error: Optional[BaseException] = None

    @property
    def succeeded(self) -> bool:
        return self.error is None

    @property
    def exit_code(self) -> int:
        return 0 if self.succeeded else 1


class DeploymentOrchestrator:
    """
    Deploys RacingToken, SomniaRacing and SomniaTournaments in that order,
    links them together and records their addresses locally.

    Every step waits for the network to confirm before the next one starts.
    A failure in any step aborts the run, except for the tournament link which
    older SomniaRacing builds do not expose. Contracts deployed before an
    abort stay deployed; nothing is written locally unless all links ran.
    """

    def __init__(self, client: NetworkClient, params: DeploymentParameters):
        self.client = client
        self.params = params
        self.stage = DeploymentStage.START
        self.deployments: Dict[str, DeployedContract] = OrderedDict()
        self.skipped_links: List[LinkOperation] = list()

    def run(self) -> DeploymentResult:
        report = None
        try:
            deployer, balance = self._resolve_deployer()
            for contract_name in CONTRACTS:
                self._deploy(contract_name, deployer)
            print("\n(i) Linking contracts...")
            for link in LINK_OPERATIONS:
                self._link(link)

            self.stage = DeploymentStage.PERSIST
            report = self._persist(deployer, balance)
        except Exception as error:
            failed_stage = self.stage
            self.stage = DeploymentStage.FAILED
            self._print_failure(failed_stage, error)
            return DeploymentResult(
                stage=failed_stage,
                deployments=dict(self.deployments),
                skipped_links=list(self.skipped_links),
                report=report,
                error=error,
            )

        self.stage = DeploymentStage.DONE
        self._print_summary(report)
        return DeploymentResult(
            stage=self.stage,
            deployments=dict(self.deployments),
            skipped_links=list(self.skipped_links),
            report=report,
        )

    def _resolve_deployer(self):
        account = self.client.get_account()
        print(f"(i) Deploying with account: {account.address}")
        balance = format_ether(self.client.get_balance(account.address))
        print(f"(i) Account balance: {balance} ETH\n")
        return account.address, balance

    def _deploy(self, contract_name: str, deployer: str) -> DeployedContract:
        self.stage = DEPLOYMENT_STAGES[contract_name]
        target = self.params.constructor_parameters.resolve(
            contract_name, deployer=deployer, deployments=self.deployments
        )
        print(f"(i) Deploying {contract_name} contract...")
        instance = self.client.deploy(target.contract_name, *target.constructor_args)
        deployed = DeployedContract(
            name=contract_name, address=instance.address, deployer=deployer, instance=instance
        )
        self.deployments[contract_name] = deployed
        print(f"✓ {contract_name} deployed to: {deployed.address}")
        return deployed

    def _link(self, link: LinkOperation) -> None:
        self.stage = link.stage
        source = self.deployments[link.source]
        target = self.deployments[link.target]
        print(f"(i) Calling {link.source}.{link.method_name}({target.address})...")

        if link.required:
            self.client.transact(source.instance, link.method_name, target.address)
            print(f"✓ {link.target} linked to {link.source}")
            return

        try:
            if not self.client.supports(source.instance, link.method_name):
                raise NetworkClient.UnsupportedMethod(
                    f"{link.source} does not expose '{link.method_name}'"
                )
            self.client.transact(source.instance, link.method_name, target.address)
        except NetworkClient.UnsupportedMethod as error:
            self.skipped_links.append(link)
            print(f"(!) {link.target} linking skipped ({error})")
        except click.Abort:
            # declined by the operator
            raise
        except Exception as error:
            self.skipped_links.append(link)
            print(f"(!) {link.target} linking failed, continuing without it: {error!r}")
        else:
            print(f"✓ {link.target} linked to {link.source}")

    def _addresses(self) -> Dict[str, str]:
        return {name: deployed.address for name, deployed in self.deployments.items()}

    def _persist(self, deployer: str, balance: str) -> DeploymentReport:
        addresses = self._addresses()
        report = build_report(
            network=self.params.network,
            deployer=deployer,
            deployer_balance=balance,
            addresses=addresses,
        )

        env_filepath = self.params.env_filepath
        print(f"\n(i) Updating {env_filepath} with new contract addresses...")
        env_values = {key: addresses[name] for name, key in ENV_KEYS.items()}
        update_env_file(env_filepath, env_values)
        print(f"✓ {env_filepath} updated with new contract addresses")

        report_filepath = write_report(report, self.params.report_filepath)
        print(f"✓ Deployment info saved to: {report_filepath}")
        return report

    def _print_summary(self, report: DeploymentReport) -> None:
        print("\nComplete Deployment Summary:")
        for name, deployed in self.deployments.items():
            print(f"\t{name} Contract: {deployed.address}")

        print("\nContract Features:")
        for name in CONTRACTS:
            print(f"\t{name}:")
            for description in CONTRACT_FEATURE_DESCRIPTIONS[name]:
                print(f"\t  • {description}")

        for link in self.skipped_links:
            print(
                f"\n(!) {link.source}.{link.method_name} was not applied; "
                f"call it manually with {self.deployments[link.target].address}"
            )

        print(f"\nContract addresses updated in {self.params.env_filepath}:")
        for name, key in ENV_KEYS.items():
            print(f"\t{key}={self.deployments[name].address}")
        print(f"\n(i) Report: {self.params.report_filepath} ({report.timestamp})")

    def _print_failure(self, stage: DeploymentStage, error: BaseException) -> None:
        print(f"\nx Deployment failed during {stage.name}: {error!r}")
        if self.deployments:
            print("(!) These contracts were deployed before the failure and remain on-chain:")
            for name, deployed in self.deployments.items():
                print(f"\t{name}: {deployed.address}")
