from __future__ import annotations

import logging

from ..context import ProvisionContext
from ..lib.hostinfo import primary_ip
from ..logging_utils import SUCCESS

logger = logging.getLogger(__name__)


class ReportStep:
    step_id = "95_report"

    def run(self, ctx: ProvisionContext) -> None:
        url = f"https://{primary_ip()}:{ctx.config.web_port}"
        logger.info("Omada Software Controller has been successfully installed! :)", extra=SUCCESS)
        logger.info("Please visit %s to complete the initial setup wizard.", url, extra=SUCCESS)
