import pytest

from depscan.types import (
    Dependency,
    Library,
    Location,
    Parser,
    RefType,
    library_sort_key,
    sort_dependencies,
    sort_libraries,
)


def test_ref_type_values():
    assert RefType.ISSUE_TRACKER == "issue-tracker"
    assert RefType("vcs") is RefType.VCS


def test_library_defaults_are_independent():
    first = Library(name="libc")
    second = Library(name="url")
    first.locations.append(Location(start_line=3, end_line=6))
    assert second.locations == []
    assert first.dev is False and first.indirect is False


def test_library_sort_key_components():
    lib = Library(id="libc@0.2.54", name="libc", version="0.2.54")
    assert library_sort_key(lib) == ("libc@0.2.54", "libc", "0.2.54")


def test_sort_libraries_by_id():
    libs = [
        Library(id="url@1.7.2", name="url", version="1.7.2"),
        Library(id="libc@0.2.54", name="libc", version="0.2.54"),
        Library(id="idna@0.1.5", name="idna", version="0.1.5"),
    ]
    result = sort_libraries(libs)
    assert [lib.id for lib in result] == ["idna@0.1.5", "libc@0.2.54", "url@1.7.2"]
    assert [lib.id for lib in libs][0] == "url@1.7.2"


def test_sort_libraries_falls_back_to_name_and_version():
    libs = [
        Library(name="memchr", version="2.5.0"),
        Library(name="libc", version="0.2.140"),
        Library(name="memchr", version="1.0.2"),
    ]
    result = sort_libraries(libs)
    assert [(lib.name, lib.version) for lib in result] == [
        ("libc", "0.2.140"),
        ("memchr", "1.0.2"),
        ("memchr", "2.5.0"),
    ]


def test_sort_dependencies_by_id():
    deps = [
        Dependency(id="url@1.7.2", depends_on=["idna@0.1.5"]),
        Dependency(id="normal@0.1.0", depends_on=["libc@0.2.54"]),
        Dependency(id="typemap@0.3.3", depends_on=["unsafe-any@0.4.2"]),
    ]
    result = sort_dependencies(deps)
    assert [dep.id for dep in result] == ["normal@0.1.0", "typemap@0.3.3", "url@1.7.2"]


def test_parser_is_abstract():
    with pytest.raises(TypeError):
        Parser()