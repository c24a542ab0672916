"""
Tests for alert table renderer.
"""


class TestAlertTableRenderer:
    """Tests for AlertTableRenderer."""

    def test_single_row(self, renderer, make_status):
        table = renderer.render_table([make_status("A", 300)])

        assert table == (
            "| ----- | ---- |\n"
            "| shard | left |\n"
            "| ----- | ---- |\n"
            "| A     | 300  |\n"
            "| ----- | ---- |\n"
        )

    def test_widths_follow_widest_cells(self, renderer, make_status):
        statuses = [
            make_status("catalog-long-01", 7),
            make_status("c2", 123456),
        ]

        lines = renderer.render_table(statuses).splitlines()

        assert lines[0] == "| --------------- | ------ |"
        assert lines[1] == "| shard           | left   |"
        assert lines[3] == "| catalog-long-01 | 7      |"
        assert lines[4] == "| c2              | 123456 |"
        assert len({len(line) for line in lines}) == 1

    def test_negative_values_measured(self, renderer, make_status):
        lines = renderer.render_table([make_status("a", -12345)]).splitlines()

        assert lines[3] == "| a     | -12345 |"

    def test_column_widths_include_headers(self, renderer, make_status):
        assert renderer.column_widths([make_status("a", 1)]) == (5, 4)
        assert renderer.column_widths([]) == (5, 4)

    def test_rows_keep_order(self, renderer, make_status):
        statuses = [make_status("b", 1), make_status("a", 2)]

        lines = renderer.render_table(statuses).splitlines()

        assert lines[3].startswith("| b ")
        assert lines[4].startswith("| a ")

    def test_render_message(self, renderer, make_status):
        message = renderer.render_message([make_status("A", 300)])

        assert message == (
            "*Shard limit alert*\n"
            "\n"
            "```\n"
            "| ----- | ---- |\n"
            "| shard | left |\n"
            "| ----- | ---- |\n"
            "| A     | 300  |\n"
            "| ----- | ---- |\n"
            "```\n"
        )
