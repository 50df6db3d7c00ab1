"""Exit-code contract for the command line.

Code  Meaning
----  -------
  0   Success
  2   Error (usage, configuration or upstream failure)
"""

from __future__ import annotations

from enum import IntEnum


class ExitCode(IntEnum):
    SUCCESS = 0
    ERROR = 2
