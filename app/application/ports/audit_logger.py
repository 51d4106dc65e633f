from typing import Optional, Dict, Any, Protocol


class AuditLogger(Protocol):
    def log(self, action: str, email: str, admin_id: Optional[str] = None, ip_address: Optional[str] = None, success: bool = True, details: Optional[Dict[str, Any]] = None) -> None:
        ...
