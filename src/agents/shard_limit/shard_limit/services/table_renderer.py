"""
Shard Limit Table Renderer.

Builds the fixed-width Markdown message sent to the chat.
"""

from typing import List

from src.agents.shard_limit.shard_limit.services.models import ShardStatus


class AlertTableRenderer:
    """
    Fixed-width table renderer.

    Output is wrapped in a code fence so the chat client keeps the columns
    aligned:

        | ---------- | ---- |
        | shard      | left |
        | ---------- | ---- |
        | catalog-01 | 250  |
        | ---------- | ---- |
    """

    TITLE = "*Shard limit alert*"
    SHARD_TITLE = "shard"
    COUNT_TITLE = "left"
    FENCE = "```"

    def column_widths(self, statuses: List[ShardStatus]) -> tuple:
        """Widest cell per column, header labels included."""
        shard_width = max([len(self.SHARD_TITLE)] + [len(s.shard) for s in statuses])
        count_width = max([len(self.COUNT_TITLE)] + [len(str(s.free_slots)) for s in statuses])
        return shard_width, count_width

    @staticmethod
    def _row(shard_cell: str, count_cell: str, shard_width: int, count_width: int) -> str:
        return f"| {shard_cell.ljust(shard_width)} | {count_cell.ljust(count_width)} |"

    def _separator(self, shard_width: int, count_width: int) -> str:
        return self._row("-" * shard_width, "-" * count_width, shard_width, count_width)

    def render_table(self, statuses: List[ShardStatus]) -> str:
        """Render the table body without title or fence.

        Args:
            statuses: Shards to list, already sorted

        Returns:
            Newline-terminated table text
        """
        shard_width, count_width = self.column_widths(statuses)
        separator = self._separator(shard_width, count_width)

        lines = [
            separator,
            self._row(self.SHARD_TITLE, self.COUNT_TITLE, shard_width, count_width),
            separator,
        ]
        lines.extend(
            self._row(s.shard, str(s.free_slots), shard_width, count_width)
            for s in statuses
        )
        lines.append(separator)
        return "\n".join(lines) + "\n"

    def render_message(self, statuses: List[ShardStatus]) -> str:
        """Render the full chat message.

        Args:
            statuses: Shards to list, already sorted

        Returns:
            Title followed by the fenced table
        """
        return f"{self.TITLE}\n\n{self.FENCE}\n{self.render_table(statuses)}{self.FENCE}\n"
