"""REPL for the taskboard CLI."""

import asyncio

from taskboard.client.channel import ChannelStatus
from taskboard.client.session import BoardSession
from taskboard.errors import TaskboardError
from taskboard.kernel.reorder import locate
from taskboard.kernel.types import COLUMN_TITLES, COLUMNS, Slot

from taskboard_cli.config import Config

COLUMN_ALIASES = {
    "t": "todo",
    "todo": "todo",
    "ip": "inprogress",
    "inprogress": "inprogress",
    "in-progress": "inprogress",
    "d": "done",
    "done": "done",
    "u": "unsure",
    "unsure": "unsure",
}


class Repl:
    """Interactive REPL bound to one board."""

    def __init__(self, config: Config, board_id: str, session: BoardSession | None = None):
        self.config = config
        self.board_id = board_id
        self.session = session or BoardSession(board_id, token=config.token, api_url=config.api_url)
        self.running = True
        self._last_status = self.session.status

    async def start(self):
        """Start the REPL. Channel messages keep flowing while waiting for input."""
        self.session.subscribe(self._on_change)
        await self.session.start()

        name = self.session.board.name if self.session.board else self.board_id
        print(f"board > {name} ({self.session.status.value})")
        self._show()

        try:
            while self.running:
                try:
                    line = (await asyncio.to_thread(input, "board > ")).strip()
                except (EOFError, KeyboardInterrupt):
                    print()
                    break

                if not line:
                    continue
                if not line.startswith("/"):
                    print("  Commands start with '/'. Type /help.")
                    continue

                try:
                    await self.handle_command(line)
                except TaskboardError as e:
                    print(f"  Error: {e}")
        finally:
            self.running = False
            await self.session.close()

    def _on_change(self, store):
        if not self.running:
            return
        if store.status is not self._last_status:
            self._last_status = store.status
            if store.status is ChannelStatus.CLOSED:
                print("\n  (live updates disconnected)")

    async def handle_command(self, line: str):
        """Handle one REPL command."""
        parts = line.split(maxsplit=1)
        cmd = parts[0].lower()
        arg = parts[1] if len(parts) > 1 else ""

        if cmd == "/quit":
            self.running = False
            print("Goodbye.")
        elif cmd == "/show":
            self._show()
        elif cmd == "/add":
            if await self.session.create(arg):
                print("  Sent. The card appears once the server confirms it.")
            else:
                print("  Failed to create task.")
        elif cmd == "/rename":
            task_id, _, title = arg.partition(" ")
            if not task_id:
                print("Usage: /rename <id> <title>")
                return
            ok = await self.session.rename(task_id, title)
            print("  Renamed." if ok else "  Server rejected the rename (local edit kept).")
        elif cmd == "/del":
            if not arg:
                print("Usage: /del <id>")
                return
            ok = await self.session.delete(arg.strip())
            print("  Deleted." if ok else "  Server rejected the delete (local removal kept).")
        elif cmd == "/move":
            await self._move(arg)
        elif cmd == "/refresh":
            ok = await self.session.refresh()
            print("  Refreshed." if ok else "  Refresh failed.")
            self._show()
        elif cmd == "/status":
            print(f"  Channel: {self.session.status.value}")
        elif cmd == "/help":
            self._show_help()
        else:
            print(f"Unknown command: {cmd}")
            print("Type /help for available commands.")

    async def _move(self, arg: str):
        parts = arg.split()
        if len(parts) != 3:
            print("Usage: /move <id> <column> <index>")
            return
        task_id, column, index = parts
        column = COLUMN_ALIASES.get(column.lower())
        if column is None:
            print(f"  Unknown column. Use one of: {', '.join(COLUMNS)}")
            return
        try:
            dest_index = int(index) - 1
        except ValueError:
            print("  Invalid number.")
            return

        source = locate(self.session.store.tasks, task_id)
        if source is None:
            print(f"  No task {task_id} on this board.")
            return

        ok = await self.session.move(task_id, source, Slot(column, dest_index))
        if not ok:
            print("  Move failed; board reloaded from server.")
        self._show()

    def _show(self):
        """Print columns as plain text."""
        for column, tasks in self.session.columns.items():
            print(f"  {COLUMN_TITLES[column]}")
            if not tasks:
                print("    (empty)")
            for i, task in enumerate(tasks, 1):
                print(f"    {i}. {task.title}  [{task.id}]")

    def _show_help(self):
        """Show help message."""
        print("""
  REPL Commands:
    /show                       - Print the board
    /add <title>                - Create a task in To Do
    /rename <id> <title>        - Rename a task
    /del <id>                   - Delete a task
    /move <id> <column> <n>     - Move a task to position n (1-based) of a column
    /refresh                    - Reload the board from the server
    /status                     - Show live-update connection status
    /help                       - Show this help
    /quit                       - Exit REPL
""")
