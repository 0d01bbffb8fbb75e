"""Resolve the account's internal user id from list-sharing metadata."""

from recipe_importer.domain.user_data import UserDataSnapshot


def resolve_user_id(snapshot: UserDataSnapshot, known_email: str) -> str | None:
    """Return the user id shared on the first list for the given email.

    Login does not return the id, so it is cross-referenced from the shared
    user membership of the first list. Returns None when no entry matches.
    """
    lists = snapshot.shopping_lists_response.new_lists
    if not lists or not known_email:
        return None
    wanted = known_email.strip().lower()
    for shared_user in lists[0].shared_users:
        if shared_user.email and shared_user.email.strip().lower() == wanted:
            return shared_user.user_id or None
    return None
