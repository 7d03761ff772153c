from graph.state import ImportState
from loguru import logger
from tools.errors import PageLimitExceeded

def make_fetch(client, max_pages: int):
    """Build the node that runs the action for the current cursor."""

    def fetch(state: ImportState) -> ImportState:
        if state.get("pages_fetched", 0) >= max_pages:
            raise PageLimitExceeded(
                f"Action {state['action_key']} still returned a cursor after {max_pages} pages"
            )

        logger.info(f"Fetching records with cursor: {state.get('cursor')}")
        result = client.run_action(
            state["connection_id"],
            state["action_key"],
            cursor=state.get("cursor"),
            instance_key=state.get("instance_key"),
        )

        state["page"] = result.get("records") or []
        state["cursor"] = result.get("cursor") or None
        state["pages_fetched"] = state.get("pages_fetched", 0) + 1
        return state

    return fetch


def has_more_pages(state: ImportState) -> str:
    if state.get("cursor"):
        logger.info("More records available, continuing to next page...")
        return "fetch"
    return "done"
