"""
Example: run a few commands from Python instead of the CLI.

Equivalent to:
    crossrun -m "echo hello $NAME" "echo %NAME% again"
"""

import asyncio

from crossrun import RunConfig, RunMode, RunOrchestrator


async def main():
    config = RunConfig(mode=RunMode.SEQUENTIAL)
    orchestrator = RunOrchestrator(config)

    results = await orchestrator.run(["NAME=world", "echo hello $NAME", "echo %NAME% again"])

    for result in results:
        print(f"{result.command}: {result.state.value} in {result.duration_str}")


if __name__ == "__main__":
    asyncio.run(main())
