"""Run context threaded through providers, agents and memories.

Replaces process-wide logger/config state: every component receives the
context explicitly in its constructor and derives its logger from it.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from .config import ProjectConfig
from .telemetry.logs import ROOT_LOGGER_NAME, configure_logging


@dataclass
class RunContext:
    """Configuration and logging handle shared by one application.

    Attributes:
        config: Loaded project configuration
        logger: Base logger; components log to child loggers of it
        agent_id: Identifier recorded on trace spans
    """

    config: ProjectConfig = field(default_factory=ProjectConfig)
    logger: logging.Logger = field(default_factory=lambda: logging.getLogger(ROOT_LOGGER_NAME))
    agent_id: str = "toolweave"

    @classmethod
    def from_config(cls, config: ProjectConfig, agent_id: str = "toolweave") -> RunContext:
        """Create a context and configure logging from the [logging] table."""
        logger = configure_logging(config.logging)
        return cls(config=config, logger=logger, agent_id=agent_id)

    def child_logger(self, name: str) -> logging.Logger:
        """Logger for a component, e.g. ``ctx.child_logger("agent")``."""
        return self.logger.getChild(name)


__all__ = ["RunContext"]
