from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional, Protocol, Sequence

from .context import ProvisionContext
from .errors import InstallerError
from .lib.artifact import remove_artifact
from .logging_utils import ACTION

logger = logging.getLogger(__name__)


class Step(Protocol):
    """A single provisioning step. Raises InstallerError on fatal failure."""

    step_id: str

    def run(self, ctx: ProvisionContext) -> None:
        ...


@dataclass(frozen=True)
class PipelineResult:
    ok: bool
    ran_steps: List[str]
    failed_step: Optional[str] = None
    error: Optional[str] = None

    @property
    def exit_code(self) -> int:
        return 0 if self.ok else InstallerError.exit_code


def cleanup_artifacts(ctx: ProvisionContext) -> None:
    artifact = ctx.artifact
    if artifact is None or not artifact.on_disk():
        return
    logger.info("Cleaning up downloaded and extracted files...", extra=ACTION)
    remove_artifact(artifact)


def run_pipeline(*, ctx: ProvisionContext, steps: Sequence[Step]) -> PipelineResult:
    """Run steps in order, stopping at the first InstallerError.

    Download/extract artifacts are removed on every exit path, including
    exceptions that are not InstallerError (those propagate).
    """

    ran: List[str] = []

    try:
        for step in steps:
            ctx.current_step = step.step_id
            logger.debug("Running step %s", step.step_id)
            try:
                step.run(ctx)
            except InstallerError as e:
                logger.error("%s", e)
                logger.debug("Step %s failed", step.step_id)
                return PipelineResult(ok=False, ran_steps=ran, failed_step=step.step_id, error=str(e))
            ran.append(step.step_id)
    finally:
        cleanup_artifacts(ctx)
        ctx.current_step = None

    return PipelineResult(ok=True, ran_steps=ran)
