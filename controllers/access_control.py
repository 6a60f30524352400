"""Role-based authorization for operator commands"""

from room_state import Role

OVERRIDE = 'override'

# action -> roles allowed to perform it
AUTHORIZATION_TABLE = {
    OVERRIDE: frozenset({Role.ADMIN, Role.HEAD_OF_OFFICE}),
}


def is_authorized(role, action):
    """True if `role` may perform `action`. Unknown roles and actions are refused."""
    parsed = Role.parse(role)
    if parsed is None:
        return False
    return parsed in AUTHORIZATION_TABLE.get(action, frozenset())
