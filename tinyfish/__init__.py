"""tinyfish: a 64-bit-block, 16-round Feistel cipher with a rotating-state key schedule.

Research / education only. Do NOT use in production.
"""

__version__ = "1.0.0"
