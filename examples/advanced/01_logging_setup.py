"""
Example: Logging Configuration for crossrun

crossrun logs lifecycle details (package manager detection, script matches,
subprocess launches) at DEBUG level. Nothing is printed until you opt in.
"""

import asyncio

from crossrun import RunConfig, RunMode, RunOrchestrator, disable_logging, setup_logging


async def main():
    print("=== Example 1: Debug logging to stderr ===")
    setup_logging(level="DEBUG")
    await RunOrchestrator(RunConfig(mode=RunMode.SEQUENTIAL)).run(["echo one", "echo two"])

    print("\n=== Example 2: Detailed format ===")
    setup_logging(level="DEBUG", format="detailed")
    await RunOrchestrator(RunConfig()).run(["echo", "detailed"])

    print("\n=== Example 3: Disable logging ===")
    disable_logging()
    await RunOrchestrator(RunConfig()).run(["echo", "quiet"])


if __name__ == "__main__":
    asyncio.run(main())
