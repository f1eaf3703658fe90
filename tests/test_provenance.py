# -*- coding: utf-8 -*-
"""Tests for provenance hashing."""

from cbam_engine.models import CBAMDataSnapshot
from cbam_engine.provenance import calculation_hash, canonical_json, hash_payload


class TestProvenance:

    def test_canonical_json_sorts_keys(self):
        assert canonical_json({"b": 1, "a": [1, 2]}) == '{"a":[1,2],"b":1}'

    def test_hash_ignores_key_order(self):
        assert hash_payload({"b": 1, "a": 2}) == hash_payload({"a": 2, "b": 1})

    def test_hash_is_sha256_hex(self):
        digest = hash_payload({"a": 1})
        assert len(digest) == 64
        int(digest, 16)

    def test_models_hash_like_their_dump(self):
        snapshot = CBAMDataSnapshot.model_validate({"energyFuelData": [{"fuelType": "Coal"}]})
        assert hash_payload(snapshot) == hash_payload(snapshot.model_dump(mode="json"))

    def test_calculation_hash_binds_inputs_and_results(self):
        base = calculation_hash({"x": 1}, {"total": 2.0})
        assert base == calculation_hash({"x": 1}, {"total": 2.0})
        assert base != calculation_hash({"x": 2}, {"total": 2.0})
        assert base != calculation_hash({"x": 1}, {"total": 2.5})
