from __future__ import annotations

import logging

from ..context import ProvisionContext
from ..errors import UnsupportedEnvironmentError
from ..lib.hostinfo import cpu_flags
from ..logging_utils import ACTION

logger = logging.getLogger(__name__)


class CheckCpuStep:
    step_id = "15_check_cpu"

    def run(self, ctx: ProvisionContext) -> None:
        logger.info("Verifying supported CPU", extra=ACTION)
        required = ctx.config.required_cpu_flag
        flags = cpu_flags()
        ctx.cpu_flags = flags
        if required not in flags:
            raise UnsupportedEnvironmentError(
                f"Your CPU does not support {required.upper()}. "
                f"MongoDB 5.0+ requires an {required.upper()} supported CPU."
            )
