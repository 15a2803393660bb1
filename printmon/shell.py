import click

from .service import CollectorService, DEFAULT_EXPORT_FILE

HELP_TEXT = f"""
=== Print Job Monitor Help ===
Commands:
  start         - Start monitoring print jobs
  stop          - Stop monitoring print jobs
  save          - Force save current data to CSV
  export [file] - Export to specified CSV file (default: {DEFAULT_EXPORT_FILE})
  stats         - Show current statistics
  help          - Show this help message
  quit/exit     - Quit the application
==============================
"""


def format_statistics(service: CollectorService) -> str:
    stats = service.statistics()
    lines = ["", "=== Print Job Statistics ===", f"Total print jobs recorded: {stats.count}"]
    if stats.count:
        lines.append("Jobs by status:")
        for status, n in sorted(stats.count_by_status.items()):
            lines.append(f"  {status}: {n}")
        lines.append(f"Total pages printed: {stats.total_pages}")
        lines.append(f"Total document size: {stats.total_document_size_bytes} bytes")
        lines.append(f"Average pages per job: {stats.average_pages:.2f}")
    lines.append(f"Monitoring status: {'ACTIVE' if service.is_active else 'STOPPED'}")
    lines.append("============================")
    return "\n".join(lines) + "\n"


class CommandShell:
    """Line-oriented command surface over a CollectorService."""

    def __init__(self, service: CollectorService):
        self.service = service

    def handle(self, line: str) -> bool:
        """Run one command. Returns False when the shell should exit."""
        parts = line.strip().split(maxsplit=1)
        if not parts:
            return True
        command = parts[0].lower()
        arg = parts[1].strip() if len(parts) > 1 else ""

        if command == "start":
            self.service.start()
        elif command == "stop":
            self.service.stop()
        elif command == "save":
            self.service.save()
        elif command == "export":
            self.service.export(arg or None)
        elif command == "stats":
            click.echo(format_statistics(self.service))
        elif command == "help":
            click.echo(HELP_TEXT)
        elif command in ("quit", "exit"):
            return False
        else:
            click.echo("Unknown command. Type 'help' for available commands.")
        return True

    def run(self):
        click.echo("Print Job Monitoring System")
        click.echo("Type 'help' for available commands or 'quit' to exit.\n")
        while True:
            try:
                line = click.prompt("", prompt_suffix="> ", default="", show_default=False)
            except (click.Abort, EOFError):
                click.echo()
                break
            if not self.handle(line):
                break
        click.echo("Exiting...")
