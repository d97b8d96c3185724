"""
Configuration management for transaction building and fee checks.
"""
import json
import os
from dataclasses import dataclass, asdict


@dataclass(frozen=True)
class FeeSchedule:
    """Intrinsic gas costs (homestead values)."""
    tx_gas: int = 21000
    tx_creation: int = 32000
    tx_data_zero_gas: int = 4
    tx_data_non_zero_gas: int = 68


@dataclass
class ClientConfig:
    """Defaults applied to transactions built for broadcast."""
    network_id: str = "0x3"  # testnet
    version: str = "0x1"


@dataclass
class Config:
    """Main configuration."""
    fees: FeeSchedule
    client: ClientConfig

    @classmethod
    def default(cls) -> 'Config':
        """Create default configuration."""
        return cls(
            fees=FeeSchedule(),
            client=ClientConfig()
        )

    @classmethod
    def from_file(cls, path: str) -> 'Config':
        """Load configuration from JSON file."""
        with open(path, 'r') as f:
            data = json.load(f)

        return cls(
            fees=FeeSchedule(**data.get('fees', {})),
            client=ClientConfig(**data.get('client', {}))
        )

    def to_file(self, path: str):
        """Save configuration to JSON file."""
        os.makedirs(os.path.dirname(path) or '.', exist_ok=True)
        with open(path, 'w') as f:
            json.dump(self.to_dict(), f, indent=2)

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            'fees': asdict(self.fees),
            'client': asdict(self.client)
        }


DEFAULT_FEES = FeeSchedule()
