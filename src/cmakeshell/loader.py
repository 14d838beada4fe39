"""Recursive ``CMakeLists.txt`` loader that populates a :class:`ProjectModel`."""

from __future__ import annotations

from pathlib import Path, PurePath

from cmakeshell.models import BuildTarget, RunTarget, Target
from cmakeshell.project import ProjectModel
from cmakeshell.scanner import (
    LIBRARY_OUTPUT_DIRECTORY,
    OUTPUT_NAME,
    RUNTIME_OUTPUT_DIRECTORY,
    AddCustomTarget,
    AddExecutable,
    AddLibrary,
    AddSubdirectory,
    ClassifiedStatement,
    EnableTesting,
    SetTargetProperties,
    Statements,
    Unrecognized,
    classify,
)
from cmakeshell.settings import Settings

LISTS_FILE = "CMakeLists.txt"


def load_project(root_dir: str | Path, settings: Settings | None = None) -> ProjectModel:
    """Build a fresh model from the ``CMakeLists.txt`` tree rooted at *root_dir*."""
    return load(None, ProjectModel.create(root_dir, settings))


def load(subdirectory: str | None, model: ProjectModel) -> ProjectModel:
    """Parse ``<root>/<subdirectory>/CMakeLists.txt`` into *model*, depth first.

    A missing file ends that branch of the walk silently.
    """
    path = _lists_path(model.root_dir, subdirectory)
    if not path.is_file():
        return model

    model.files.add(path)
    for statement in Statements(path.read_text(encoding="utf-8")):
        _apply(classify(statement), subdirectory, model)
    return model


def _lists_path(root_dir: Path, subdirectory: str | None) -> Path:
    if subdirectory:
        return root_dir / subdirectory / LISTS_FILE
    return root_dir / LISTS_FILE


def _apply(statement: ClassifiedStatement, subdirectory: str | None, model: ProjectModel) -> None:
    match statement:
        case AddExecutable(name=name):
            out_dir = model.build_dir / subdirectory if subdirectory else model.build_dir
            model.targets.append(BuildTarget(name=name))
            model.targets.append(
                RunTarget.for_output(name, out_dir=str(out_dir), output_name=name)
            )
        case AddLibrary(name=name) | AddCustomTarget(name=name):
            model.targets.append(BuildTarget(name=name))
        case EnableTesting():
            model.targets.append(BuildTarget(name="test"))
        case AddSubdirectory(directory=directory):
            nested = str(PurePath(subdirectory, directory)) if subdirectory else directory
            load(nested, model)
        case SetTargetProperties(names=names, properties=properties):
            matched = [target for name in names for target in model.named(name)]
            for key, value in properties:
                _set_property(matched, key, value)
        case Unrecognized():
            pass


def _set_property(targets: list[Target], key: str, value: str) -> None:
    if key in RUNTIME_OUTPUT_DIRECTORY:
        config = RUNTIME_OUTPUT_DIRECTORY[key]
        for target in targets:
            if isinstance(target, RunTarget):
                target.out_dir[config] = value
    elif key in LIBRARY_OUTPUT_DIRECTORY:
        config = LIBRARY_OUTPUT_DIRECTORY[key]
        for target in targets:
            if isinstance(target, BuildTarget):
                target.out_dir[config] = value
    elif key == OUTPUT_NAME:
        for target in targets:
            target.output_name = value
