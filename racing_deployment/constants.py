from enum import IntEnum
from pathlib import Path

import racing_deployment

#
# Filesystem
#

DEPLOYMENT_DIR = Path(racing_deployment.__file__).parent
CONSTRUCTOR_PARAMS_DIR = DEPLOYMENT_DIR / "constructor_params"
DEFAULT_PARAMS_FILEPATH = CONSTRUCTOR_PARAMS_DIR / "somnia-testnet.yml"

DEFAULT_ENV_FILEPATH = Path(".env")
DEFAULT_REPORT_FILEPATH = Path("deployment-split-contracts.json")

#
# Networks
#

LOCAL_NETWORK_NAME = "local"
SOMNIA_TESTNET = "somniaTestnet"

#
# Contracts
#

RACING_TOKEN = "RacingToken"
SOMNIA_RACING = "SomniaRacing"
SOMNIA_TOURNAMENTS = "SomniaTournaments"

# deployment order; later constructors may reference earlier addresses
CONTRACTS = [RACING_TOKEN, SOMNIA_RACING, SOMNIA_TOURNAMENTS]

SET_RACING_TOKEN = "setRacingToken"
ADD_AUTHORIZED_MINTER = "addAuthorizedMinter"
SET_TOURNAMENT_CONTRACT = "setTournamentContract"

#
# Environment file
#

RACING_CONTRACT_ENV_KEY = "VITE_RACING_CONTRACT_ADDRESS"
RACING_TOKEN_ENV_KEY = "VITE_RACING_TOKEN_ADDRESS"
TOURNAMENTS_CONTRACT_ENV_KEY = "VITE_TOURNAMENTS_CONTRACT_ADDRESS"

ENV_KEYS = {
    SOMNIA_RACING: RACING_CONTRACT_ENV_KEY,
    RACING_TOKEN: RACING_TOKEN_ENV_KEY,
    SOMNIA_TOURNAMENTS: TOURNAMENTS_CONTRACT_ENV_KEY,
}

#
# Report
#

CONTRACT_TYPES = {
    RACING_TOKEN: "ERC20 Token",
    SOMNIA_RACING: "Main Game Contract",
    SOMNIA_TOURNAMENTS: "Tournament System",
}

CONTRACT_FEATURES = {
    RACING_TOKEN: ["rewards", "gameplay", "tokenomics"],
    SOMNIA_RACING: [
        "minting",
        "racing",
        "staking",
        "dailyRewards",
        "leaderboard",
        "tokenRewards",
    ],
    SOMNIA_TOURNAMENTS: ["tournaments", "entryFees", "prizeDistribution", "competition"],
}

CONTRACT_FEATURE_DESCRIPTIONS = {
    RACING_TOKEN: [
        "ERC20 token for rewards",
        "Minting controlled by Racing contract",
        "Player token balances",
        "Token rewards for racing",
    ],
    SOMNIA_RACING: [
        "Car minting (Starter, Sport, Racing Beast)",
        "Race result submission with token rewards",
        "Staking system (100 XP/day)",
        "Daily rewards & challenges",
        "Player stats & global leaderboard",
        "Token integration for gameplay rewards",
    ],
    SOMNIA_TOURNAMENTS: [
        "Tournament creation & management",
        "Entry fee collection",
        "Prize pool distribution",
        "Tournament leaderboards",
        "Multi-player competition",
    ],
}

# not measured; descriptive only
GAS_ESTIMATES = {
    "token": "Estimated ~1-2M gas",
    "racing": "Estimated ~3-4M gas",
    "tournaments": "Estimated ~2-3M gas",
    "total": "Estimated ~6-8M gas",
}

STANDARD_REPORT_JSON_FORMAT = {"indent": 2}

#
# Orchestration stages
#


class DeploymentStage(IntEnum):
    START = 0
    DEPLOY_TOKEN = 1
    DEPLOY_RACING = 2
    DEPLOY_TOURNAMENTS = 3
    LINK_TOKEN = 4
    LINK_MINTER = 5
    LINK_TOURNAMENT = 6
    PERSIST = 7
    DONE = 8
    FAILED = 9
