"""
Example: fan out package.json scripts in parallel.

Run from a directory containing a package.json with scripts such as
"build:css" and "build:js". Equivalent to:
    crossrun -p "npm:build:*"
"""

import asyncio
import sys

from crossrun import CrossRunError, RunConfig, RunMode, RunOrchestrator


async def main() -> int:
    orchestrator = RunOrchestrator(RunConfig(mode=RunMode.CONCURRENT))
    try:
        await orchestrator.run(["npm:build:*"])
    except CrossRunError as e:
        if not e.reported:
            print(e, file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
