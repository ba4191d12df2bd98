"""
Audit logging for customer and image mutations.

Every committed change to a customer's image collection is written as one
JSON line to the "audit" logger, which can be routed separately from the
application log.
"""
import json
import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional

# Separate logger for audit events (can be shipped to centralized logging)
audit_logger = logging.getLogger("audit")


class AuditLog:
    """Central audit logging for data-changing events."""

    @staticmethod
    def log_action(
        action: str,  # "create", "delete", "replace", "add", "delete_all"
        resource_type: str,  # "customer", "customer_images"
        resource_id: int,
        changes: Optional[Dict[str, Any]] = None,
    ):
        """
        Log a committed mutation.

        Usage:
            AuditLog.log_action("create", "customer", 12, changes={"image_count": 3})
            AuditLog.log_action("add", "customer_images", 12, changes={"added": 2, "image_count": 5})
        """
        log_entry = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "event_type": f"{resource_type}.{action}",
            "resource_id": resource_id,
        }

        if changes:
            log_entry["changes"] = changes

        audit_logger.info(json.dumps(log_entry))
