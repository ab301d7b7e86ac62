"""HistorySelector: ordering, cap, name resolution and both reference schemes."""

from datetime import timedelta

import pytest

from inventory_kernel.selectors.history_selector import (
    HISTORY_LIMIT,
    HistorySelector,
    ReferenceScheme,
)


def _log(recorder, clock, actor_id, action="Login", **fields):
    clock.tick()
    return recorder.register_log(
        {"action_type": action, "performed_by": actor_id, "description": action, **fields}
    )


class TestGetHistory:
    def test_newest_first(self, recorder, history, deterministic_clock, actor_id):
        ids = [_log(recorder, deterministic_clock, actor_id).id for _ in range(3)]
        rows = history.get_history()
        assert [r["id"] for r in rows] == list(reversed(ids))

    def test_same_timestamp_orders_by_id_desc(self, recorder, history, actor_id):
        first = recorder.register_log({"action_type": "A", "performed_by": actor_id, "description": "a"})
        second = recorder.register_log({"action_type": "B", "performed_by": actor_id, "description": "b"})
        assert [r["id"] for r in history.get_history()] == [second.id, first.id]

    def test_performed_by_name(self, recorder, history, deterministic_clock, actor_id):
        _log(recorder, deterministic_clock, actor_id)
        assert history.get_history()[0]["performed_by_name"] == "Admin"

    def test_target_name_per_entity_type(
        self,
        recorder,
        history,
        deterministic_clock,
        actor_id,
        make_user,
        make_product,
        make_catalog_entry,
    ):
        user_id = make_user("Target User")
        product_id = make_product("PN-77")
        refs = {
            "user": user_id,
            "products": product_id,
            "brands": make_catalog_entry("brands", "Yamaha"),
            "categories": make_catalog_entry("categories", "Engines"),
            "locations": make_catalog_entry("locations", "Dock A"),
            "provider": make_catalog_entry("provider", "Marine Supply"),
        }
        for entity_type, entity_id in refs.items():
            _log(
                recorder,
                deterministic_clock,
                actor_id,
                action=f"{entity_type} touched",
                entity_type=entity_type,
                entity_id=entity_id,
            )

        names = {r["entity_type"]: r["target_name"] for r in history.get_history()}
        assert names == {
            "user": "Target User",
            "products": "PN-77",
            "brands": "Yamaha",
            "categories": "Engines",
            "locations": "Dock A",
            "provider": "Marine Supply",
        }

    def test_target_name_null_without_reference(self, recorder, history, deterministic_clock, actor_id):
        _log(recorder, deterministic_clock, actor_id)
        assert history.get_history()[0]["target_name"] is None

    def test_target_name_null_when_row_deleted(
        self, recorder, registry, history, deterministic_clock, actor_id, make_catalog_entry
    ):
        brand_id = make_catalog_entry("brands", "Yamaha")
        _log(recorder, deterministic_clock, actor_id, entity_type="brands", entity_id=brand_id)
        registry.get("brands").delete_by_id(brand_id)

        row = history.get_history()[0]
        assert row["entity_id"] == brand_id
        assert row["target_name"] is None

    def test_ids_do_not_cross_entity_types(
        self, recorder, history, deterministic_clock, actor_id, make_catalog_entry, make_product
    ):
        brand_id = make_catalog_entry("brands", "Yamaha")
        product_id = make_product("PN-1")
        assert brand_id == product_id
        _log(recorder, deterministic_clock, actor_id, entity_type="brands", entity_id=brand_id)
        assert history.get_history()[0]["target_name"] == "Yamaha"

    def test_capped_at_history_limit(self, executor, history):
        if executor.engine.dialect.name != "sqlite":
            pytest.skip("bulk seed uses SQLite date functions")
        executor.execute(
            "WITH RECURSIVE seq(n) AS (SELECT 1 UNION ALL SELECT n + 1 FROM seq WHERE n < ?) "
            "INSERT INTO history (action_type, performed_by, description, created_at) "
            "SELECT 'Bulk', 1, 'entry ' || n, datetime('2024-01-01', '+' || n || ' minutes') "
            "FROM seq",
            (HISTORY_LIMIT + 5,),
        )
        rows = history.get_history()
        assert len(rows) == HISTORY_LIMIT
        assert rows[0]["description"] == f"entry {HISTORY_LIMIT + 5}"
        assert rows[-1]["description"] == "entry 6"

    def test_load_is_logged(self, history, captured_logs):
        history.get_history()
        loaded = [r for r in captured_logs() if r["message"] == "history_loaded"]
        assert loaded[0]["row_count"] == 0


class TestSecondaryAccessors:
    def test_get_all_logs_matches_get_history(self, recorder, history, deterministic_clock, actor_id):
        _log(recorder, deterministic_clock, actor_id)
        assert history.get_all_logs() == history.get_history()

    def test_get_logs_by_type(self, recorder, history, deterministic_clock, actor_id):
        _log(recorder, deterministic_clock, actor_id, action="Login")
        _log(recorder, deterministic_clock, actor_id, action="Logout")
        _log(recorder, deterministic_clock, actor_id, action="Login")
        rows = history.get_logs_by_type("Login")
        assert len(rows) == 2
        assert all(r["action_type"] == "Login" for r in rows)

    def test_get_logs_by_user_includes_actor_and_target(
        self, recorder, history, deterministic_clock, actor_id, make_user
    ):
        other = make_user("Other")
        _log(recorder, deterministic_clock, actor_id, action="Self")
        _log(recorder, deterministic_clock, other, action="Targeted", entity_type="user", entity_id=actor_id)
        _log(recorder, deterministic_clock, other, action="Unrelated")

        actions = [r["action_type"] for r in history.get_logs_by_user(actor_id)]
        assert actions == ["Targeted", "Self"]

    def test_get_logs_by_product(self, recorder, history, deterministic_clock, actor_id, make_product):
        product_id = make_product("PN-1")
        _log(recorder, deterministic_clock, actor_id, action="Stock In", target_product=product_id)
        _log(recorder, deterministic_clock, actor_id, action="Login")
        rows = history.get_logs_by_product(product_id)
        assert [r["action_type"] for r in rows] == ["Stock In"]
        assert rows[0]["target_name"] == "PN-1"

    def test_get_logs_by_date_range(self, recorder, history, deterministic_clock, actor_id):
        start = deterministic_clock.now()
        _log(recorder, deterministic_clock, actor_id, action="Inside")
        deterministic_clock.advance(3600)
        _log(recorder, deterministic_clock, actor_id, action="Outside")

        rows = history.get_logs_by_date_range(start, start + timedelta(minutes=5))
        assert [r["action_type"] for r in rows] == ["Inside"]

    def test_get_history_stats(self, recorder, history, deterministic_clock, actor_id):
        _log(recorder, deterministic_clock, actor_id, action="Login")
        _log(recorder, deterministic_clock, actor_id, action="Login")
        _log(recorder, deterministic_clock, actor_id, action="Logout")

        stats = history.get_history_stats(days=30)
        by_action = {s["action_type"]: s["count"] for s in stats}
        assert by_action == {"Login": 2, "Logout": 1}
        assert {str(s["date"]) for s in stats} == {"2024-01-01"}

    def test_get_history_stats_excludes_old_entries(self, recorder, history, deterministic_clock, actor_id):
        _log(recorder, deterministic_clock, actor_id, action="Old")
        deterministic_clock.advance(60 * 60 * 24 * 40)
        _log(recorder, deterministic_clock, actor_id, action="New")
        assert [s["action_type"] for s in history.get_history_stats(days=30)] == ["New"]


class TestLegacyScheme:
    def test_scheme_accepts_string(self, executor):
        assert HistorySelector(executor, "legacy").scheme is ReferenceScheme.LEGACY

    def test_legacy_rows_carry_mirror_names(
        self, recorder, legacy_history, deterministic_clock, actor_id, make_user, make_product
    ):
        user_id = make_user("Target User")
        product_id = make_product("PN-9")
        _log(recorder, deterministic_clock, actor_id, action="U", target_user=user_id)
        _log(recorder, deterministic_clock, actor_id, action="P", target_product=product_id)

        by_user = legacy_history.get_logs_by_user(user_id)
        assert [r["action_type"] for r in by_user] == ["U"]
        assert by_user[0]["target_user_name"] == "Target User"

        by_product = legacy_history.get_logs_by_product(product_id)
        assert by_product[0]["target_product_name"] == "PN-9"
        assert "target_name" not in by_product[0]

    def test_legacy_leaves_catalog_names_unresolved(
        self, recorder, legacy_history, deterministic_clock, actor_id, make_catalog_entry
    ):
        brand_id = make_catalog_entry("brands", "Yamaha")
        _log(recorder, deterministic_clock, actor_id, action="Brand Updated", entity_type="brands", entity_id=brand_id)
        row = legacy_history.get_logs_by_type("Brand Updated")[0]
        assert row["target_user_name"] is None
        assert row["target_product_name"] is None

    def test_get_history_shape_is_scheme_independent(
        self, recorder, legacy_history, deterministic_clock, actor_id
    ):
        _log(recorder, deterministic_clock, actor_id)
        assert "target_name" in legacy_history.get_history()[0]
