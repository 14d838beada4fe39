from collections.abc import Callable
from pathlib import Path

from cmakeshell.loader import load, load_project
from cmakeshell.models import BuildTarget, Configuration, RunTarget, TargetKey, TargetKind
from cmakeshell.project import ProjectModel


def test_missing_root_lists_yields_implicit_targets_only(tmp_path: Path) -> None:
    model = load_project(tmp_path)

    assert [target.key for target in model.targets] == [
        TargetKey("all", TargetKind.BUILD),
        TargetKey("clean", TargetKind.BUILD),
    ]
    assert model.files == set()


def test_library_executable_and_properties_scenario(
    tmp_path: Path,
    lists_writer: Callable[[Path, str], Path],
) -> None:
    lists_writer(
        tmp_path,
        """
        add_library(core)
        add_executable(app)
        set_target_properties(app PROPERTIES RUNTIME_OUTPUT_DIRECTORY_DEBUG out/debug OUTPUT_NAME myapp)
        """,
    )

    model = load_project(tmp_path)

    assert [(target.name, target.kind) for target in model.targets] == [
        ("all", TargetKind.BUILD),
        ("clean", TargetKind.BUILD),
        ("core", TargetKind.BUILD),
        ("app", TargetKind.BUILD),
        ("app", TargetKind.RUN),
    ]
    run = model.targets[-1]
    assert isinstance(run, RunTarget)
    assert run.out_dir[Configuration.DEBUG] == "out/debug"
    assert run.output_name == "myapp"
    # The build variant of app is renamed as well.
    assert model.targets[3].output_name == "myapp"
    assert Configuration.DEBUG not in model.targets[3].out_dir


def test_executable_defaults_to_build_dir_of_its_subdirectory(project_root: Path) -> None:
    model = load_project(project_root)

    lib_test = model.find(TargetKey("lib_test", TargetKind.RUN))
    tool = model.find(TargetKey("tool", TargetKind.RUN))

    assert lib_test is not None and tool is not None
    assert lib_test.out_dir == {
        Configuration.DEBUG: str(model.build_dir / "libs"),
        Configuration.RELEASE: str(model.build_dir / "libs"),
    }
    assert tool.out_dir[Configuration.RELEASE] == str(model.build_dir / "libs" / "nested")
    assert tool.output_name == "tool"


def test_subdirectories_are_loaded_before_later_siblings(project_root: Path) -> None:
    model = load_project(project_root)

    assert [target.name for target in model.targets] == [
        "all",
        "clean",
        "test",
        "main",
        "main",
        "lib",
        "lib_test",
        "lib_test",
        "tool",
        "tool",
        "coverage",
    ]


def test_files_record_every_visited_lists_file(project_root: Path) -> None:
    model = load_project(project_root)

    assert model.files == {
        project_root.resolve() / "CMakeLists.txt",
        project_root.resolve() / "libs" / "CMakeLists.txt",
        project_root.resolve() / "libs" / "nested" / "CMakeLists.txt",
    }


def test_multi_line_properties_apply_to_run_target(project_root: Path) -> None:
    model = load_project(project_root)

    main = model.find(TargetKey("main", TargetKind.RUN))

    assert main is not None
    assert main.out_dir[Configuration.DEBUG] == "${CMAKE_SOURCE_DIR}/bin/debug/"
    assert main.out_dir[Configuration.RELEASE] == "${CMAKE_SOURCE_DIR}/bin/release/"
    assert main.output_name == "cmain"


def test_properties_before_declaration_affect_nothing(
    tmp_path: Path,
    lists_writer: Callable[[Path, str], Path],
) -> None:
    lists_writer(
        tmp_path,
        """
        set_target_properties(app PROPERTIES OUTPUT_NAME early)
        add_executable(app main.c)
        """,
    )

    model = load_project(tmp_path)

    assert all(target.output_name in (None, "app") for target in model.targets)


def test_property_keys_filter_by_target_variant(
    tmp_path: Path,
    lists_writer: Callable[[Path, str], Path],
) -> None:
    lists_writer(
        tmp_path,
        """
        add_executable(app main.c)
        set_target_properties(app PROPERTIES LIBRARY_OUTPUT_DIRECTORY_RELEASE lib/rel RUNTIME_OUTPUT_DIRECTORY_RELEASE bin/rel)
        """,
    )

    model = load_project(tmp_path)
    build = model.find(TargetKey("app", TargetKind.BUILD))
    run = model.find(TargetKey("app", TargetKind.RUN))

    assert build is not None and run is not None
    assert build.out_dir == {Configuration.RELEASE: "lib/rel"}
    assert run.out_dir[Configuration.RELEASE] == "bin/rel"


def test_properties_apply_to_every_target_sharing_a_name(
    tmp_path: Path,
    lists_writer: Callable[[Path, str], Path],
) -> None:
    lists_writer(
        tmp_path,
        """
        add_subdirectory(a)
        add_subdirectory(b)
        set_target_properties(util other PROPERTIES OUTPUT_NAME shared UNKNOWN_KEY x)
        """,
    )
    lists_writer(tmp_path / "a", "add_executable(util u.c)\n")
    lists_writer(tmp_path / "b", "add_executable(util u.c)\n")

    model = load_project(tmp_path)

    utils = model.named("util")
    assert len(utils) == 4
    assert {target.output_name for target in utils} == {"shared"}


def test_missing_marker_is_a_no_op(
    tmp_path: Path,
    lists_writer: Callable[[Path, str], Path],
) -> None:
    lists_writer(
        tmp_path,
        """
        add_executable(app main.c)
        set_target_properties(app OUTPUT_NAME renamed)
        """,
    )

    model = load_project(tmp_path)

    assert {target.output_name for target in model.named("app")} == {None, "app"}


def test_executable_yields_one_build_and_one_run_target(
    tmp_path: Path,
    lists_writer: Callable[[Path, str], Path],
) -> None:
    lists_writer(tmp_path, "add_executable(x x.c)\nadd_library(y y.c)\n")

    model = load_project(tmp_path)

    assert [t.kind for t in model.named("x")] == [TargetKind.BUILD, TargetKind.RUN]
    assert [t.kind for t in model.named("y")] == [TargetKind.BUILD]
    assert isinstance(model.named("y")[0], BuildTarget)


def test_repeated_loads_produce_equal_target_lists(project_root: Path) -> None:
    first = load_project(project_root)
    second = load_project(project_root)

    assert first.targets == second.targets
    assert all(a is not b for a, b in zip(first.targets, second.targets))


def test_load_mutates_and_returns_given_model(project_root: Path) -> None:
    model = ProjectModel.create(project_root)

    result = load("libs", model)

    assert result is model
    assert [target.name for target in model.targets][2:] == ["lib", "lib_test", "lib_test", "tool", "tool"]
