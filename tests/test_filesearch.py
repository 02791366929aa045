import threading

from sysprog.filesearch import Match, Options, file_search


def _tree(tmp_path):
    for sub in ("a", "b", "c"):
        (tmp_path / sub).mkdir()
    (tmp_path / "a" / "target").write_text("x")
    (tmp_path / "b" / "target").write_text("y")
    (tmp_path / "c" / "other").write_text("first\nsecond term here\nthird\nterm again\n")
    return tmp_path


def test_search_by_name(tmp_path):
    root = _tree(tmp_path)
    results = list(file_search(root, "target"))
    assert {r.file for r in results} == {
        str(root / "a" / "target"),
        str(root / "b" / "target"),
    }
    assert all(r.error is None and r.matches == [] for r in results)


def test_exclude_folder(tmp_path):
    root = _tree(tmp_path)
    results = list(file_search(root, "target", Options(exclude=["b"])))
    assert [r.file for r in results] == [str(root / "a" / "target")]


def test_search_contents(tmp_path):
    root = _tree(tmp_path)
    results = list(file_search(root, "term", Options(contents=True)))
    assert len(results) == 1
    assert results[0].file == str(root / "c" / "other")
    assert results[0].matches == [
        Match(2, "second term here"),
        Match(4, "term again"),
    ]


def test_contents_without_match_yields_nothing(tmp_path):
    root = _tree(tmp_path)
    assert list(file_search(root, "absent", Options(contents=True))) == []


def test_missing_root_reports_error(tmp_path):
    missing = tmp_path / "nope"
    (result,) = list(file_search(missing, "x"))
    assert result.file == str(missing)
    assert isinstance(result.error, FileNotFoundError)


def test_cancelled_search_is_empty(tmp_path):
    root = _tree(tmp_path)
    cancel = threading.Event()
    cancel.set()
    assert list(file_search(root, "target", None, cancel)) == []