import os
import sys

import pytest

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from tools.record_store import RecordStore


class ScriptedIntegrationClient:
    """Stands in for IntegrationAppClient; serves pages keyed by the requested cursor."""

    def __init__(self, pages, connections=None):
        self.pages = pages
        self.connections = [{"id": "conn-1"}] if connections is None else connections
        self.calls = []
        self.connection_lookups = 0

    def list_connections(self):
        self.connection_lookups += 1
        return self.connections

    def run_action(self, connection_id, action_key, cursor=None, instance_key=None):
        self.calls.append({
            "connection_id": connection_id,
            "action_key": action_key,
            "cursor": cursor,
            "instance_key": instance_key,
        })
        return self.pages[cursor]

    def close(self):
        pass


def equipment_pages():
    """Two pages of equipment: 2 records, then 1."""
    return {
        None: {
            "records": [
                {"id": "eq-1", "name": "Forklift", "fields": {"serial": "F-100"}},
                {"id": "eq-2", "name": "Crane", "fields": {"serial": "C-200"}},
            ],
            "cursor": "page-2",
        },
        "page-2": {
            "records": [{"id": "eq-3", "name": "Loader", "fields": {}}],
            "cursor": None,
        },
    }


@pytest.fixture
def memory_store():
    return RecordStore(in_memory=True)


@pytest.fixture
def equipment_client():
    return ScriptedIntegrationClient(equipment_pages())
