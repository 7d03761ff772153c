from graph.state import ImportState
from loguru import logger
from tools.errors import InvalidRequest, Unauthorized
from tools.record_actions import is_custom_action, resolve_record_type

def validate(state: ImportState) -> ImportState:
    """Check the request and classify the action before any external call."""
    if not state.get("customer_id"):
        raise Unauthorized()

    action_key = state.get("action_key")
    if not action_key:
        raise InvalidRequest("Action key is required")

    is_custom = is_custom_action(action_key)
    instance_key = state.get("instance_key")

    if is_custom and not instance_key:
        raise InvalidRequest("Instance key is required for custom object actions")

    state["is_custom"] = is_custom
    state["record_type"] = resolve_record_type(action_key, instance_key)
    # Default actions never forward an instance key
    state["instance_key"] = instance_key if is_custom else None

    state["cursor"] = None
    state["page"] = []
    state["pages_fetched"] = 0
    state["records_count"] = 0
    state["new_records_count"] = 0
    state["existing_records_count"] = 0

    logger.info(
        f"Import requested by {state['customer_id']}: action={action_key}, "
        f"record_type={state['record_type']}, custom={is_custom}"
    )
    return state
