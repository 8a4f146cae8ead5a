"""Console output formatting utilities for actionflow."""

from __future__ import annotations

import sys
from typing import Optional, Sequence


class Console:
    """Centralized console output formatting."""
    
    def __init__(self, debug: bool = False):
        """
        Initialize console formatter.
        
        Args:
            debug: If True, show detailed output including stack traces
        """
        self.debug = debug
    
    def print_header(self, title: str) -> None:
        """Print a section header."""
        print(f"\n{title}")
        print("-" * len(title))
    
    def print_run_started(
        self,
        workflow: str,
        source: str,
        action_count: int,
        dry_run: bool = False,
    ) -> None:
        """Print run start information."""
        print("\nRUN STARTED" + (" (dry run)" if dry_run else ""))
        print(f"Workflow: {workflow}")
        print(f"Source: {source}")
        print(f"Actions: {action_count}")
        print()
    
    def print_action_start(self, name: str) -> None:
        """Print action start message."""
        print(f"---executing action {name}---")
    
    def print_image(self, image: str) -> None:
        print(f"Using docker image {image}")
    
    def print_command(self, argv: Sequence[str]) -> None:
        print(f"will run: {' '.join(argv)}")
    
    def print_plan(self, workflow: str, names: Sequence[str]) -> None:
        """Print the scheduled order, one action per line."""
        self.print_header(f"PLAN: {workflow}")
        for i, name in enumerate(names, start=1):
            print(f"  {i}. {name}")
    
    def print_failure(self, name: str, exit_code: int) -> None:
        print(f"ACTION FAILED: {name}")
        print(f"Exit code: {exit_code}")
    
    def print_lint_violation(self, line: str) -> None:
        """Lint diagnostics are printed as they are found, one per line."""
        print(line, file=sys.stderr)
    
    def print_cycle(self, edges: Sequence[tuple[str, str]]) -> None:
        """Print a dependency cycle as a list of edges."""
        print("actions are cycled", file=sys.stderr)
        for src, dst in edges:
            print(f"{src} -> {dst}", file=sys.stderr)
    
    def print_error(
        self,
        title: str,
        message: str,
        suggestion: Optional[str] = None,
    ) -> None:
        """
        Print structured error message.
        
        Args:
            title: Error title
            message: Main error message
            suggestion: Optional hint for fixing the problem
        """
        print(f"\nERROR: {title}", file=sys.stderr)
        print(f"{message}", file=sys.stderr)
        if suggestion:
            print(f"\n{suggestion}", file=sys.stderr)
    
    def print_traceback(self) -> None:
        """Print the traceback of the exception being handled, in debug mode only."""
        if self.debug:
            import traceback
            traceback.print_exc()
    
    def print_info(self, message: str) -> None:
        """Print informational message."""
        print(message)
    
    def print_debug(self, message: str) -> None:
        """Print debug message (only if debug mode enabled)."""
        if self.debug:
            print(f"[DEBUG] {message}", file=sys.stderr)


# Global console instance (will be initialized by CLI)
_console: Optional[Console] = None


def get_console() -> Console:
    """Get the global console instance."""
    global _console
    if _console is None:
        _console = Console()
    return _console


def set_console(console: Console) -> None:
    """Set the global console instance."""
    global _console
    _console = console
