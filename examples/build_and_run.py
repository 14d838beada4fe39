"""Generate, build and run the bundled hello project in one shell session."""

import asyncio
from pathlib import Path

from cmakeshell import Configuration, RunTarget, Settings, ShellSession, TargetKey, TargetKind, Workspace
from cmakeshell.terminals import LocalShellHost

PROJECT = Path(__file__).parent / "hello"


async def build_and_run() -> None:
    settings = Settings(config=Configuration.RELEASE)
    session = ShellSession(LocalShellHost(cwd=str(PROJECT)), name=settings.terminal_name)
    workspace = Workspace(PROJECT, session=session, settings=settings)

    await workspace.refresh()
    main = workspace.project.find(TargetKey("main", TargetKind.RUN))
    assert isinstance(main, RunTarget)
    await workspace.run(main)
    session.close()


if __name__ == "__main__":
    asyncio.run(build_and_run())
