"""Tests for core identifier types and generation."""

from toolscope.core.identifiers import InstanceId, generate_id, generate_instance_id


class TestGenerateId:
    def test_returns_string(self) -> None:
        assert isinstance(generate_id(), str)

    def test_unique_ids(self) -> None:
        ids = {generate_id() for _ in range(100)}
        assert len(ids) == 100

    def test_uuid4_format(self) -> None:
        id_ = generate_id()
        parts = id_.split("-")
        assert len(parts) == 5
        assert len(id_) == 36


class TestInstanceId:
    def test_generate_instance_id(self) -> None:
        iid = generate_instance_id()
        assert isinstance(iid, str)
        assert InstanceId.__supertype__ is str
