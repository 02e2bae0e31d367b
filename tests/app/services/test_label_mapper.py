"""Testes do LabelMapper."""

from __future__ import annotations

from app.services.label_mapper import LabelMapper
from config.settings import MapperSettings


class TestLabelMapper:
    def test_disabled_returns_labels_unchanged(self) -> None:
        assert LabelMapper().map(("vip", "novo")) == ["vip", "novo"]

    def test_prefix_applied_once(self) -> None:
        mapper = LabelMapper(enabled=True, prefix="tagone-")
        assert mapper.map(["vip", "tagone-lead"]) == ["tagone-vip", "tagone-lead"]

    def test_empty_prefix_disables(self) -> None:
        assert LabelMapper(enabled=True, prefix="").enabled is False

    def test_from_settings(self) -> None:
        mapper = LabelMapper.from_settings(MapperSettings(enable=True, prefix="x-"))
        assert mapper.map(["a"]) == ["x-a"]
