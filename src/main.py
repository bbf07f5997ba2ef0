# src/main.py

import logging
import sys
from pathlib import Path
from typing import Dict, Any, Optional
import argparse
import signal
from datetime import datetime, timezone

# Add src to path
sys.path.append(str(Path(__file__).parent))

from chat.webhook_client import ChatSession
from data.dataset_store import DatasetStore
from search.series_extractor import SERIES_FIELDS, measurement_table
from visualization.view_binding import ViewBinding, ViewState
from config import config


class FloatExplorerSystem:
    """Command-line controller for the float explorer"""

    def __init__(self, dataset_source: Optional[str] = None):
        config.setup_logging()
        self.logger = logging.getLogger(__name__)
        self.store = DatasetStore(dataset_source or config.get_dataset_source())
        self.binding = ViewBinding()
        self.chat_session = None
        self.is_running = False

        # Register signal handlers for graceful shutdown
        signal.signal(signal.SIGINT, self._signal_handler)
        signal.signal(signal.SIGTERM, self._signal_handler)

    def initialize_system(self) -> bool:
        """Load the dataset; a failed load leaves an empty, searchable store"""
        self.logger.info("Initializing float explorer...")
        loaded = self.store.load()
        if not loaded:
            self.logger.error(f"Dataset unavailable: {self.store.load_error}")
        return loaded

    def search(self, raw_id: str) -> ViewState:
        return self.binding.search(self.store.dataset, raw_id)

    def format_search(self, state: ViewState, field: Optional[str] = None) -> str:
        if state.message:
            return state.message

        lat, lon = state.focus.center
        lines = [f"Float {state.highlighted_id} at {lat:.3f}, {lon:.3f}"]
        fields = [field] if field else list(SERIES_FIELDS)
        for name in fields:
            series = getattr(state, f"{name}_series")
            points = ", ".join(f"({point.x:g}, {point.y:g})" for point in series)
            lines.append(f"{name}: [{points}]")

        table = measurement_table(state.result.record)
        if not table.empty:
            lines.append(table.to_string(index=False))
        return "\n".join(lines)

    def chat(self, text: str) -> Optional[str]:
        if self.chat_session is None:
            self.chat_session = ChatSession()
        return self.chat_session.send(text)

    def get_system_status(self) -> Dict[str, Any]:
        error = self.store.load_error
        return {
            'dataset': {
                'source': self.store.source,
                'loaded': self.store.is_loaded and error is None,
                'error': str(error) if error else None,
                'summary': self.store.summary(),
            },
            'search': {
                'highlighted_id': self.binding.state.highlighted_id,
                'message': self.binding.state.message,
            },
            'timestamp': datetime.now(timezone.utc).isoformat(),
        }

    def run_interactive_mode(self):
        """Run interactive command-line mode"""
        self.is_running = True

        print("=== Argonauts Float Explorer - Interactive Mode ===")
        print("Commands: find <id>, summary, status, chat <text>, exit")

        while self.is_running:
            try:
                command = input("\nargo> ").strip().split(maxsplit=1)
                if not command:
                    continue

                cmd = command[0].lower()
                argument = command[1] if len(command) > 1 else ""

                if cmd == 'exit':
                    break
                elif cmd == 'find':
                    print(self.format_search(self.search(argument)))
                elif cmd == 'summary':
                    print(self.store.summary())
                elif cmd == 'status':
                    print(self.get_system_status())
                elif cmd == 'chat' and argument:
                    print(f"bot> {self.chat(argument)}")
                else:
                    print("Unknown command")

            except (KeyboardInterrupt, EOFError):
                break

        self.shutdown()

    def _signal_handler(self, signum, frame):
        """Handle shutdown signals gracefully"""
        self.logger.info(f"Received signal {signum}, shutting down...")
        self.shutdown()
        if signum == signal.SIGINT:
            # unblock input() at the prompt
            raise KeyboardInterrupt

    def shutdown(self):
        self.is_running = False
        self.logger.info("Float explorer shutdown complete")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description='Argonauts float explorer')
    parser.add_argument('--dataset', help='Dataset URL or path (overrides dataset.source)')
    parser.add_argument('--find', metavar='ID', help='Look up a float by identifier')
    parser.add_argument('--field', choices=SERIES_FIELDS, help='Only print this series')
    parser.add_argument('--summary', action='store_true', help='Print dataset counts')
    parser.add_argument('--chat', metavar='TEXT', help='Send one message to the chat webhook')
    parser.add_argument('--interactive', action='store_true', help='Run interactive mode (default)')
    parser.add_argument('--config', help='Path to configuration file')
    return parser


def main(argv=None):
    """Main entry point with command-line interface"""
    args = build_parser().parse_args(argv)

    if args.config:
        config.load_config(args.config)

    system = FloatExplorerSystem(args.dataset)

    try:
        if args.chat:
            print(system.chat(args.chat))
            return 0

        loaded = system.initialize_system()

        if args.summary:
            print(system.store.summary())
            return 0 if loaded else 1

        if args.find is not None:
            state = system.search(args.find)
            print(system.format_search(state, args.field))
            return 0 if state.message is None else 1

        system.run_interactive_mode()
        return 0
    except KeyboardInterrupt:
        return 130
    finally:
        system.shutdown()

if __name__ == "__main__":
    sys.exit(main())
