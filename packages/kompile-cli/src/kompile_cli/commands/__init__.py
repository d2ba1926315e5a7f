"""CLI command modules.

One module per subcommand, loaded lazily by kompile_cli.main.
"""

from __future__ import annotations

__all__: list[str] = []
