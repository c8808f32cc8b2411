import json
import threading
import time

from gastos.utils.persistence import BestScoreStore, atomic_write_json, read_json


def test_read_json_defaults(tmp_path) -> None:
    assert read_json(str(tmp_path / "missing.json"), {"a": 1}) == {"a": 1}

    broken = tmp_path / "broken.json"
    broken.write_text("{not json")
    assert read_json(str(broken), []) == []


def test_atomic_write_creates_directories(tmp_path) -> None:
    path = tmp_path / "nested" / "dir" / "data.json"

    atomic_write_json(str(path), {"months": ["2024-01"], "name": "café"})

    assert json.loads(path.read_text(encoding="utf-8")) == {"months": ["2024-01"], "name": "café"}
    assert [p.name for p in path.parent.iterdir()] == ["data.json"]


def test_best_score_store_round_trip(tmp_path) -> None:
    path = str(tmp_path / "best.json")
    store = BestScoreStore(path)

    assert store.best == 0
    assert store.record(64)
    assert not store.record(32)
    assert not store.record(64)
    assert BestScoreStore(path).best == 64


def test_best_score_store_ignores_bad_files(tmp_path) -> None:
    path = tmp_path / "best.json"
    path.write_text(json.dumps({"best_score": "lots"}))
    assert BestScoreStore(str(path)).load() == 0

    path.write_text(json.dumps([1, 2, 3]))
    assert BestScoreStore(str(path)).load() == 0

    path.write_text(json.dumps({"best_score": -5}))
    assert BestScoreStore(str(path)).load() == 0


def test_best_score_store_survives_write_failure(tmp_path) -> None:
    blocker = tmp_path / "blocker"
    blocker.write_text("")
    store = BestScoreStore(str(blocker / "best.json"))

    assert store.save(10) is False
    assert store.record(10)
    assert store.best == 10


def test_concurrent_records_never_lower_the_best(tmp_path, monkeypatch) -> None:
    path = str(tmp_path / "best.json")
    store = BestScoreStore(path)
    real_save = store.save
    saving_lower = threading.Event()

    def slow_save(score):
        if score == 100:
            saving_lower.set()
            time.sleep(0.2)
        return real_save(score)

    monkeypatch.setattr(store, "save", slow_save)
    lower = threading.Thread(target=store.record, args=(100,))
    higher = threading.Thread(target=store.record, args=(200,))

    lower.start()
    assert saving_lower.wait(timeout=5)
    higher.start()
    lower.join()
    higher.join()

    assert store.best == 200
    assert BestScoreStore(path).load() == 200
