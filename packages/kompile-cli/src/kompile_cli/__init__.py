"""kompile-cli: Command-line interface for kompile.

Commands:
- run, test: Compile and execute a JVM project
- compile: Write class files (or compile.err) to a directory
- translate: Translate to JavaScript or WebAssembly
- complete, highlight: Editor support
- version: Show the configured backend version
"""

from __future__ import annotations

__version__ = "0.1.0"
