"""
State Store

Durable JSONL journal of settlement attempts.
"""

import json
from pathlib import Path


class StateStore:
    """
    Persistent state management.

    Stores:
    - Settlement attempts (settlements.jsonl)
    """

    def __init__(self, data_dir: str = "data/state"):
        self.data_dir = Path(data_dir)
        self.data_dir.mkdir(parents=True, exist_ok=True)

    def append_jsonl(self, name: str, record: dict):
        """Append a record to a JSONL log file."""
        path = self.data_dir / f"{name}.jsonl"
        with open(path, "a") as f:
            f.write(json.dumps(record, default=str) + "\n")

    def read_jsonl(self, name: str, limit: int = 1000) -> list:
        """Read up to 'limit' records from end of a JSONL log file."""
        path = self.data_dir / f"{name}.jsonl"
        if not path.exists():
            return []
        with open(path, "r") as f:
            lines = f.readlines()
        return [json.loads(x) for x in lines[-limit:]]
