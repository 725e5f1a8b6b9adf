from local_store import BUDGET_KEY, THEME_KEY, TRANSACTIONS_KEY, LocalStore


def test_missing_file_gives_defaults(tmp_path):
    store = LocalStore(tmp_path / "nested" / "state.json")
    assert store.get(THEME_KEY, "light") == "light"
    assert store.get(TRANSACTIONS_KEY, []) == []


def test_keys_are_independent(tmp_path):
    store = LocalStore(tmp_path / "nested" / "state.json")
    store.set(THEME_KEY, "dark")
    store.set(BUDGET_KEY, 250.0)
    reopened = LocalStore(tmp_path / "nested" / "state.json")
    assert reopened.get(THEME_KEY) == "dark"
    assert reopened.get(BUDGET_KEY) == 250.0
    assert reopened.get(TRANSACTIONS_KEY, []) == []
    assert not (tmp_path / "nested" / "state.tmp").exists()


def test_corrupt_file_is_ignored(tmp_path):
    path = tmp_path / "state.json"
    path.write_text("{not json", encoding="utf-8")
    store = LocalStore(path)
    assert store.get(BUDGET_KEY, 0) == 0
    store.set(BUDGET_KEY, 10)
    assert store.get(BUDGET_KEY) == 10
