from __future__ import annotations

import logging

from ..context import HostProfile, ProvisionContext
from ..errors import UnsupportedEnvironmentError
from ..lib.hostinfo import operating_system, resolve_codename
from ..logging_utils import ACTION, NOTE

logger = logging.getLogger(__name__)


class DetectOsStep:
    step_id = "20_detect_os"

    def run(self, ctx: ProvisionContext) -> None:
        logger.info("Verifying supported OS", extra=ACTION)
        supported = ctx.config.supported_releases
        description = operating_system()
        logger.info("%s", description or "unknown operating system", extra=NOTE)

        codename = resolve_codename(description, supported) if description else None
        if codename is None:
            raise UnsupportedEnvironmentError(
                f"Script currently only supports {', '.join(supported)}!"
            )

        ctx.host = HostProfile(distribution=description, codename=codename, cpu_flags=ctx.cpu_flags)
        logger.debug("Host profile: %s", ctx.host)
