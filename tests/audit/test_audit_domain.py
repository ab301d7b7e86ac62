"""Pure audit value objects: entity types, reference folding, snapshots."""

from datetime import UTC, date, datetime
from decimal import Decimal

import pytest

from inventory_kernel.domain.audit import AuditEvent, legacy_mirror, resolve_reference
from inventory_kernel.domain.entity_type import EntityType
from inventory_kernel.exceptions import UnknownEntityTypeError
from inventory_kernel.utils.snapshots import decode_snapshot, encode_snapshot


class TestEntityType:
    @pytest.mark.parametrize(
        "member, table, column",
        [
            (EntityType.USER, "user", "name"),
            (EntityType.PRODUCTS, "products", "part_number"),
            (EntityType.BRANDS, "brands", "name"),
            (EntityType.CATEGORIES, "categories", "name"),
            (EntityType.LOCATIONS, "locations", "name"),
            (EntityType.PROVIDER, "provider", "name"),
        ],
    )
    def test_reference_mapping(self, member, table, column):
        assert member.table == table
        assert member.display_column == column

    def test_aliases_are_unique(self):
        aliases = [member.alias for member in EntityType]
        assert len(set(aliases)) == len(aliases)

    def test_parse(self):
        assert EntityType.parse("brands") is EntityType.BRANDS
        assert EntityType.parse(EntityType.USER) is EntityType.USER
        assert EntityType.parse(None) is None
        with pytest.raises(ValueError):
            EntityType.parse("warehouses")


def _event(**fields):
    return AuditEvent(action_type="x", performed_by=1, description="x", **fields)


class TestResolveReference:
    def test_explicit_reference(self):
        assert resolve_reference(_event(entity_type="locations", entity_id=4)) == (
            EntityType.LOCATIONS,
            4,
        )

    def test_target_user_before_target_product(self):
        assert resolve_reference(_event(target_user=2, target_product=3)) == (EntityType.USER, 2)

    def test_target_product(self):
        assert resolve_reference(_event(target_product=3)) == (EntityType.PRODUCTS, 3)

    def test_untyped_id_passes_through(self):
        assert resolve_reference(_event(entity_id=5)) == (None, 5)

    def test_unknown_type(self):
        with pytest.raises(UnknownEntityTypeError) as exc_info:
            resolve_reference(_event(entity_type="warehouses", entity_id=1))
        assert exc_info.value.code == "UNKNOWN_ENTITY_TYPE"

    def test_legacy_mirror(self):
        assert legacy_mirror(EntityType.USER, 1) == (1, None)
        assert legacy_mirror(EntityType.PRODUCTS, 2) == (None, 2)
        assert legacy_mirror(EntityType.BRANDS, 3) == (None, None)
        assert legacy_mirror(None, None) == (None, None)


class TestSnapshots:
    def test_none_passes_through(self):
        assert encode_snapshot(None) is None
        assert decode_snapshot(None) is None

    def test_strings_are_json_encoded(self):
        assert encode_snapshot("status changed") == '"status changed"'
        assert encode_snapshot('{"a":1}') == '"{\\"a\\":1}"'

    @pytest.mark.parametrize(
        "value",
        ["status changed", "", "null", 0, False, [1, "two"], {"qty": 3, "note": "x"}],
    )
    def test_decode_reads_back_what_encode_wrote(self, value):
        assert decode_snapshot(encode_snapshot(value)) == value

    def test_canonical_json(self):
        encoded = encode_snapshot(
            {
                "price": Decimal("12.50"),
                "at": datetime(2024, 1, 1, tzinfo=UTC),
                "day": date(2024, 1, 2),
                "kind": EntityType.BRANDS,
            }
        )
        assert encoded == (
            '{"at":"2024-01-01T00:00:00+00:00","day":"2024-01-02",'
            '"kind":"brands","price":"12.5"}'
        )
        assert decode_snapshot(encoded)["kind"] == "brands"
