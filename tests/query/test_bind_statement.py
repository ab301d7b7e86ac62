"""Positional placeholder binding in the executor."""

from inventory_kernel.db.executor import bind_statement


def _sql(clause) -> str:
    return clause.text


class TestBindStatement:
    def test_positional_placeholders_become_named_binds(self):
        clause = bind_statement("SELECT * FROM t WHERE a = ? AND b = ?", (1, "x"))
        assert _sql(clause) == "SELECT * FROM t WHERE a = :p0 AND b = :p1"
        assert set(clause._bindparams) == {"p0", "p1"}
        assert clause._bindparams["p0"].value == 1
        assert clause._bindparams["p1"].value == "x"

    def test_question_mark_inside_literal_is_kept(self):
        clause = bind_statement("SELECT '?' AS q, a FROM t WHERE a = ?", (5,))
        assert _sql(clause) == "SELECT '?' AS q, a FROM t WHERE a = :p0"

    def test_colons_are_escaped(self):
        clause = bind_statement("SELECT '12:30' AS t, a FROM t WHERE a = ?", (5,))
        assert "\\:30" in _sql(clause)
        assert set(clause._bindparams) == {"p0"}

    def test_mapping_params_bind_by_name(self):
        clause = bind_statement("SELECT * FROM t WHERE a = :a", {"a": 3})
        assert clause._bindparams["a"].value == 3

    def test_executor_runs_literal_with_colon(self, executor):
        result = executor.execute("SELECT '12:30' AS t, ? AS v", (7,))
        assert result.rows == ({"t": "12:30", "v": 7},)

    def test_line_comment_apostrophe_does_not_hide_later_placeholders(self):
        clause = bind_statement("SELECT ? AS a -- don't\n , ? AS b", (1, 2))
        assert _sql(clause) == "SELECT :p0 AS a -- don't\n , :p1 AS b"
        assert set(clause._bindparams) == {"p0", "p1"}

    def test_placeholders_inside_comments_are_not_bound(self):
        clause = bind_statement("SELECT /* id = ? */ a FROM t -- b = ?\nWHERE a = ?", (4,))
        assert _sql(clause) == "SELECT /* id = ? */ a FROM t -- b = ?\nWHERE a = :p0"
        assert set(clause._bindparams) == {"p0"}

    def test_unterminated_block_comment_runs_to_end(self):
        clause = bind_statement("SELECT a FROM t WHERE a = ? /* ? ", (1,))
        assert set(clause._bindparams) == {"p0"}

    def test_executor_runs_statement_with_comments(self, executor):
        result = executor.execute("SELECT ? AS a -- don't\n , ? AS b /* it's ? */", (1, 2))
        assert result.rows == ({"a": 1, "b": 2},)
