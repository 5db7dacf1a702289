from __future__ import annotations

import logging

from ..context import ProvisionContext
from ..errors import UnsupportedEnvironmentError
from ..lib.hostinfo import is_root
from ..logging_utils import ACTION

logger = logging.getLogger(__name__)


class CheckPrivilegesStep:
    step_id = "10_check_privileges"

    def run(self, ctx: ProvisionContext) -> None:
        logger.info("Verifying running as root", extra=ACTION)
        if not is_root():
            raise UnsupportedEnvironmentError("Script requires to be ran as root. Please rerun using sudo.")
