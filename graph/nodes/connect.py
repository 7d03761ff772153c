from graph.state import ImportState
from loguru import logger

NO_CONNECTION_ERROR = "No connection found"

def make_connect(client):
    """Build the node that resolves the customer's first connection."""

    def connect(state: ImportState) -> ImportState:
        connections = client.list_connections()
        first_connection = connections[0] if connections else None

        if not first_connection:
            logger.warning(f"No connection found for customer {state.get('customer_id')}")
            state["connection_id"] = None
            state["success"] = False
            state["error"] = NO_CONNECTION_ERROR
            return state

        state["connection_id"] = first_connection["id"]
        logger.info(f"Using connection {state['connection_id']}")
        return state

    return connect


def has_connection(state: ImportState) -> str:
    return "fetch" if state.get("connection_id") else "done"
