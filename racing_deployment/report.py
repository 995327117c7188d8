import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, NamedTuple, Optional

from racing_deployment.constants import (
    CONTRACT_FEATURES,
    CONTRACT_TYPES,
    CONTRACTS,
    GAS_ESTIMATES,
    RACING_TOKEN,
    SOMNIA_RACING,
    SOMNIA_TOURNAMENTS,
    STANDARD_REPORT_JSON_FORMAT,
)


class DeploymentReport(NamedTuple):
    """Snapshot of a completed deployment run."""

    network: str
    timestamp: str
    deployer: str
    deployer_balance: str
    contracts: Dict[str, Dict[str, Any]]
    contract_links: Dict[str, str]
    gas_used: Dict[str, str]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "network": self.network,
            "timestamp": self.timestamp,
            "deployer": self.deployer,
            "deployerBalance": self.deployer_balance,
            "contracts": self.contracts,
            "contractLinks": self.contract_links,
            "gasUsed": self.gas_used,
        }


def _timestamp(now: Optional[datetime] = None) -> str:
    now = now or datetime.now(tz=timezone.utc)
    return now.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def build_report(
    network: str,
    deployer: str,
    deployer_balance: str,
    addresses: Dict[str, str],
    now: Optional[datetime] = None,
) -> DeploymentReport:
    """Builds the report from the addresses of the three deployed contracts."""
    contracts = dict()
    for contract_name in CONTRACTS:
        contracts[contract_name] = {
            "address": addresses[contract_name],
            "type": CONTRACT_TYPES[contract_name],
            "features": list(CONTRACT_FEATURES[contract_name]),
        }

    # which address was handed to which contract
    contract_links = {
        "Racing -> Tournaments": addresses[SOMNIA_TOURNAMENTS],
        "Racing -> Token": addresses[RACING_TOKEN],
        "Token -> Racing": addresses[SOMNIA_RACING],
    }

    return DeploymentReport(
        network=network,
        timestamp=_timestamp(now),
        deployer=deployer,
        deployer_balance=deployer_balance,
        contracts=contracts,
        contract_links=contract_links,
        gas_used=dict(GAS_ESTIMATES),
    )


def write_report(report: DeploymentReport, filepath: Path) -> Path:
    """Writes the report as formatted JSON, replacing any previous report."""
    with open(filepath, "w") as file:
        json.dump(report.to_dict(), file, **STANDARD_REPORT_JSON_FORMAT)
    return filepath
