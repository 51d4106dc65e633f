import json
import hashlib
import logging
from datetime import datetime, timezone
from typing import Optional, Dict, Any

from ...application.ports.audit_logger import AuditLogger


class StdAuditLogger(AuditLogger):
    def __init__(self) -> None:
        self._logger = logging.getLogger(__name__)

    def log(self, action: str, email: str, admin_id: Optional[str] = None, ip_address: Optional[str] = None, success: bool = True, details: Optional[Dict[str, Any]] = None) -> None:
        entry = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "action": action,
            "email_hash": hashlib.sha256(email.encode()).hexdigest(),
            "admin_id": admin_id,
            "ip_address": ip_address,
            "success": success,
            "details": details or {},
        }
        self._logger.info(f"AUDIT: {json.dumps(entry)}")
