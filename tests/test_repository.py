from __future__ import annotations

from supertask.infra.repository import KeyValueRepository


def test_set_get_overwrite_and_delete(repo: KeyValueRepository) -> None:
    assert repo.get("missing") is None

    repo.set("greeting", "hello")
    repo.set("greeting", "hi")
    assert repo.get("greeting") == "hi"

    repo.delete("greeting")
    assert repo.get("greeting") is None


def test_json_documents(repo: KeyValueRepository) -> None:
    repo.save_json("doc", {"name": "Zoë", "items": [1, 2]})
    repo.save_json("flag", True)

    assert repo.load_json("doc") == {"name": "Zoë", "items": [1, 2]}
    assert repo.load_json("flag") is True
    assert repo.load_json("absent") is None


def test_invalid_json_reads_as_absent(repo: KeyValueRepository) -> None:
    repo.set("broken", "[1, 2")

    assert repo.load_json("broken") is None


def test_keys_and_clear(repo: KeyValueRepository) -> None:
    repo.set("b", "2")
    repo.set("a", "1")

    assert repo.keys() == ["a", "b"]
    repo.clear()
    assert repo.keys() == []
