# finance_client/preview.py
"""
Optimistic values shown before the server answers.

They use the same derivation functions as the backend, but the record the
server returns always replaces the preview.
"""
import logging

from finance_api.derivations import goal_status, percentage_used

logger = logging.getLogger("finance-client")


def preview_goal(data):
    preview = dict(data)
    try:
        preview["status"] = goal_status(
            data.get("currentAmount", 0), data.get("targetAmount"), data.get("status")
        )
    except ValueError:
        # leave it to the server to reject
        pass
    return preview


def preview_budget(data):
    preview = dict(data)
    try:
        preview["percentageUsed"] = percentage_used(data.get("spent", 0), data.get("amount"))
    except ValueError:
        pass
    return preview


def reconcile(preview, confirmed):
    """Returns the server's record, noting any derived field the preview got wrong."""
    for key in ("status", "percentageUsed"):
        if key in preview and key in confirmed and preview[key] != confirmed[key]:
            logger.info(f"Preview {key}={preview[key]!r} replaced by server value {confirmed[key]!r}")
    return dict(confirmed)
