"""jiractl: bulk operations for Jira from the command line."""

import logging
from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("jiractl")
except PackageNotFoundError:
    __version__ = "0.0.0-dev"

from jiractl.bulk import BatchResult, OperationOutcome, execute, report
from jiractl.client import JiraClient

logging.getLogger("jiractl").addHandler(logging.NullHandler())

__all__ = ["BatchResult", "JiraClient", "OperationOutcome", "__version__", "execute", "report"]
