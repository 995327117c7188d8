from pathlib import Path

import click

from racing_deployment.constants import DEFAULT_PARAMS_FILEPATH
from racing_deployment.types import MinInt

params_filepath_option = click.option(
    "--params-filepath",
    "-p",
    help="Filepath of the deployment parameters YAML",
    type=click.Path(dir_okay=False, exists=True, path_type=Path),
    default=DEFAULT_PARAMS_FILEPATH,
    show_default=True,
)

env_file_option = click.option(
    "--env-file",
    "-e",
    help="Environment file to update with the deployed addresses",
    type=click.Path(dir_okay=False, path_type=Path),
    required=False,
    default=None,
)

report_option = click.option(
    "--output",
    "-o",
    "report_filepath",
    help="Filepath of the JSON deployment report",
    type=click.Path(dir_okay=False, path_type=Path),
    required=False,
    default=None,
)

autosign_option = click.option(
    "--autosign",
    help="Sign transactions without asking for confirmation",
    is_flag=True,
    default=False,
)

confirmations_option = click.option(
    "--confirmations",
    "-c",
    help="Number of block confirmations to wait for on each transaction",
    type=MinInt(0),
    required=False,
    default=None,
)
