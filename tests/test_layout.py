from lyricdb.ingest.layout import find_data_dir, is_data_dir


def test_indicator_directory_marks_a_dataset_root(tmp_path):
    assert not is_data_dir(tmp_path)
    (tmp_path / "qq-lyrics").mkdir()
    assert is_data_dir(tmp_path)


def test_indicator_must_be_a_directory(tmp_path):
    (tmp_path / "metadata").write_text("", encoding="utf-8")
    assert not is_data_dir(tmp_path)


def test_preferred_dir_wins(tmp_path):
    preferred = tmp_path / "custom"
    (preferred / "ncm-lyrics").mkdir(parents=True)
    (tmp_path / "data" / "ncm-lyrics").mkdir(parents=True)
    assert find_data_dir(preferred, cwd=tmp_path) == preferred.resolve()


def test_relative_preferred_dir_is_resolved_against_cwd(tmp_path):
    (tmp_path / "custom" / "metadata").mkdir(parents=True)
    assert find_data_dir("custom", cwd=tmp_path) == (tmp_path / "custom").resolve()


def test_falls_back_to_known_subdirectories(tmp_path):
    cwd = tmp_path / "work"
    (cwd / "amll-ttml-db" / "ncm-lyrics").mkdir(parents=True)
    assert find_data_dir(cwd / "missing", cwd=cwd) == (cwd / "amll-ttml-db").resolve()


def test_returns_none_without_dataset(tmp_path):
    cwd = tmp_path / "work"
    cwd.mkdir()
    assert find_data_dir(None, cwd=cwd) is None
