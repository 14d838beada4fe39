"""Print the commands a debug build of the hello project would send."""

import asyncio
from pathlib import Path

from cmakeshell import ShellSession, Workspace
from cmakeshell.terminals import InProcessHost
from cmakeshell.workspace import JsonLauncher

PROJECT = Path(__file__).parent / "hello"


async def dry_run() -> None:
    host = InProcessHost()
    workspace = Workspace(PROJECT, session=ShellSession(host), launcher=JsonLauncher())
    workspace.reload()
    for target in workspace.project.targets:
        print(f"{target.kind.value:5} {target.name}")
    await workspace.launch()
    print("\n".join(host.history))


if __name__ == "__main__":
    asyncio.run(dry_run())
