"""
Front-End Configuration
=======================

Options shared by the tokenizer and parser. Values come from:
- Default values (defined here)
- Environment variables (FrontendOptions.from_env)
- Command-line flags (applied by the packal CLI on top of from_env)
"""

import os
from dataclasses import dataclass

# Default buffer: 64 KiB of payload plus 1 KiB of slack for tokens that
# straddle a refill.
SIZE1KB = 1 << 10
SIZE64KB = 1 << 16
SIZE65KB = SIZE64KB + SIZE1KB


@dataclass
class FrontendOptions:
    """
    Front-end configuration options.

    Attributes:
        buffer_size: Capacity of the tokenizer's byte buffer
        low_water_mark: Refill when fewer buffered bytes than this remain
                        ahead of the read cursor
        require_eof: Treat tokens after the final '.' as a fatal error
    """
    buffer_size: int = SIZE65KB
    low_water_mark: int = SIZE1KB
    require_eof: bool = True

    def __post_init__(self):
        if self.buffer_size <= 0:
            raise ValueError(f"buffer_size must be positive, got {self.buffer_size}")
        if not 0 <= self.low_water_mark < self.buffer_size:
            raise ValueError(
                f"low_water_mark must be in [0, {self.buffer_size}), "
                f"got {self.low_water_mark}"
            )

    @classmethod
    def from_env(cls) -> "FrontendOptions":
        """
        Create FrontendOptions from environment variables.

        Environment variables (all optional):
            PACKAL_BUFFER_SIZE: Tokenizer buffer capacity in bytes
            PACKAL_LOW_WATER_MARK: Refill threshold in bytes

        Invalid values are ignored. Without PACKAL_LOW_WATER_MARK the
        threshold is capped below the buffer size.
        """
        buffer_size = SIZE65KB

        if value := os.environ.get("PACKAL_BUFFER_SIZE"):
            try:
                buffer_size = int(value)
            except ValueError:
                pass

        low_water_mark = min(SIZE1KB, max(buffer_size - 1, 0))
        if value := os.environ.get("PACKAL_LOW_WATER_MARK"):
            try:
                low_water_mark = int(value)
            except ValueError:
                pass

        try:
            return cls(buffer_size=buffer_size, low_water_mark=low_water_mark)
        except ValueError:
            return cls()
