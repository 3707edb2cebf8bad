"""
The Faucet Configuration
"""

from __future__ import annotations
import json
import logging
from dataclasses import dataclass, field, asdict
from typing import List, Optional

from faucet.constants import (
    DEFAULT_EPOCH_LENGTH_SEC,
    DEFAULT_LIMIT_PER_EPOCH,
)
from faucet.core.state import EpochConfig
from faucet.host.clock import Clock, ManualClock, NtpClock, SystemClock

logger = logging.getLogger(__name__)

CLOCK_SOURCES = ("manual", "system", "ntp")
DEFAULT_DEPLOYER = "0x" + "00" * 19 + "01"


@dataclass
class EpochSettings:
    """Initial throttle parameters."""
    epoch_length: int = DEFAULT_EPOCH_LENGTH_SEC
    limit: int = DEFAULT_LIMIT_PER_EPOCH

    def to_epoch_config(self) -> EpochConfig:
        return EpochConfig(epoch_length=self.epoch_length, limit=self.limit)


@dataclass
class ClockConfig:
    """Time source configuration."""
    source: str = "system"
    start: int = 0                      # Manual clock start
    ntp_host: str = "pool.ntp.org"
    ntp_timeout_sec: float = 2.0
    ntp_refresh_sec: int = 60

    def build(self) -> Clock:
        if self.source == "manual":
            return ManualClock(self.start)
        if self.source == "ntp":
            return NtpClock(
                host=self.ntp_host,
                timeout_sec=self.ntp_timeout_sec,
                refresh_interval_sec=self.ntp_refresh_sec,
            )
        return SystemClock()


@dataclass
class LogConfig:
    """Logging configuration."""
    level: str = "INFO"
    file: Optional[str] = None
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    max_size_mb: int = 100
    backup_count: int = 5


@dataclass
class FaucetConfig:
    """
    Complete faucet node configuration.
    """
    name: str = "faucet-node"

    # Deployment
    deployer: str = DEFAULT_DEPLOYER
    initial_pool: int = 0
    enable_user_management: bool = True

    # Sub-configurations
    epoch: EpochSettings = field(default_factory=EpochSettings)
    clock: ClockConfig = field(default_factory=ClockConfig)
    log: LogConfig = field(default_factory=LogConfig)

    def validate(self) -> List[str]:
        """
        Validate configuration.

        Returns:
            List of validation errors (empty if valid)
        """
        errors = []

        if self.epoch.epoch_length <= 0:
            errors.append(f"epoch_length must be positive: {self.epoch.epoch_length}")

        if self.epoch.limit < 0:
            errors.append(f"limit must be non-negative: {self.epoch.limit}")

        if self.initial_pool < 0:
            errors.append(f"initial_pool must be non-negative: {self.initial_pool}")

        deployer = self.deployer[2:] if self.deployer.startswith("0x") else self.deployer
        if len(deployer) != 40:
            errors.append(f"Invalid deployer address: {self.deployer}")
        else:
            try:
                bytes.fromhex(deployer)
            except ValueError:
                errors.append(f"Invalid deployer address: {self.deployer}")

        if self.clock.source not in CLOCK_SOURCES:
            errors.append(f"Unknown clock source: {self.clock.source}")

        if self.log.level.upper() not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            errors.append(f"Invalid log level: {self.log.level}")

        return errors

    def save(self, path: str) -> None:
        """Save configuration to file."""
        with open(path, 'w') as f:
            json.dump(self.to_dict(), f, indent=2)

        logger.info(f"Configuration saved to {path}")

    @classmethod
    def load(cls, path: str) -> "FaucetConfig":
        """Load configuration from file."""
        with open(path, 'r') as f:
            data = json.load(f)

        config = cls(
            name=data.get("name", "faucet-node"),
            deployer=data.get("deployer", DEFAULT_DEPLOYER),
            initial_pool=data.get("initial_pool", 0),
            enable_user_management=data.get("enable_user_management", True),
        )

        if "epoch" in data:
            config.epoch = EpochSettings(**data["epoch"])

        if "clock" in data:
            config.clock = ClockConfig(**data["clock"])

        if "log" in data:
            config.log = LogConfig(**data["log"])

        logger.info(f"Configuration loaded from {path}")
        return config

    def to_dict(self) -> dict:
        """Export configuration as dictionary."""
        return {
            "name": self.name,
            "deployer": self.deployer,
            "initial_pool": self.initial_pool,
            "enable_user_management": self.enable_user_management,
            "epoch": asdict(self.epoch),
            "clock": asdict(self.clock),
            "log": asdict(self.log),
        }


def setup_logging(config: LogConfig) -> None:
    """Configure logging based on config."""
    level = getattr(logging, config.level.upper(), logging.INFO)

    handlers = [logging.StreamHandler()]

    if config.file:
        from logging.handlers import RotatingFileHandler
        file_handler = RotatingFileHandler(
            config.file,
            maxBytes=config.max_size_mb * 1024 * 1024,
            backupCount=config.backup_count,
        )
        handlers.append(file_handler)

    logging.basicConfig(
        level=level,
        format=config.format,
        handlers=handlers,
    )
