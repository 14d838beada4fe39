from cmakeshell.scanner import (
    AddCustomTarget,
    AddExecutable,
    AddLibrary,
    AddSubdirectory,
    EnableTesting,
    SetTargetProperties,
    Statement,
    Statements,
    Unrecognized,
    classify,
    scan_statements,
)


def test_scan_splits_arguments_on_whitespace_runs() -> None:
    statements = list(scan_statements("add_executable(  app \t main.c   util.c )\n"))

    assert statements == [Statement(name="add_executable", args=("app", "main.c", "util.c"))]


def test_scan_keeps_document_order_and_skips_other_lines() -> None:
    text = "\n".join(
        [
            "# comment",
            "add_library(core core.c)",
            "if(NOT (WIN32))",
            "endif()",
            "  enable_testing()  ",
            "message(STATUS done) trailing",
        ]
    )

    names = [statement.name for statement in scan_statements(text)]

    assert names == ["add_library", "endif", "enable_testing"]


def test_scan_empty_argument_list() -> None:
    assert list(scan_statements("enable_testing()")) == [Statement(name="enable_testing")]


def test_scan_accepts_argument_list_spanning_lines() -> None:
    text = "set_target_properties(main\n\tPROPERTIES\n\tOUTPUT_NAME cmain\n)\n"

    statements = list(scan_statements(text))

    assert statements == [
        Statement(name="set_target_properties", args=("main", "PROPERTIES", "OUTPUT_NAME", "cmain"))
    ]


def test_scan_is_idempotent_and_restartable() -> None:
    text = "add_library(a)\nadd_executable(b b.c)\nadd_subdirectory(sub)\n"
    statements = Statements(text)

    first = list(statements)
    second = list(statements)

    assert first == second == list(scan_statements(text))
    assert len(first) == 3


def test_classify_whitelisted_statements() -> None:
    assert classify(Statement("add_executable", ("app", "main.c"))) == AddExecutable("app")
    assert classify(Statement("add_library", ("core", "STATIC", "a.c"))) == AddLibrary("core")
    assert classify(Statement("add_custom_target", ("docs",))) == AddCustomTarget("docs")
    assert classify(Statement("enable_testing")) == EnableTesting()
    assert classify(Statement("add_subdirectory", ("libs",))) == AddSubdirectory("libs")


def test_classify_unknown_or_empty_statements_as_unrecognized() -> None:
    for statement in (
        Statement("project", ("demo",)),
        Statement("add_library"),
        Statement("add_subdirectory"),
    ):
        assert classify(statement) == Unrecognized(statement)


def test_classify_target_properties_pairs() -> None:
    statement = Statement(
        "set_target_properties",
        ("a", "b", "PROPERTIES", "OUTPUT_NAME", "x", "PREFIX", "lib", "DANGLING"),
    )

    classified = classify(statement)

    assert classified == SetTargetProperties(
        names=("a", "b"),
        properties=(("OUTPUT_NAME", "x"), ("PREFIX", "lib")),
    )


def test_classify_target_properties_without_marker_is_unrecognized() -> None:
    statement = Statement("set_target_properties", ("a", "OUTPUT_NAME", "x"))

    assert isinstance(classify(statement), Unrecognized)
