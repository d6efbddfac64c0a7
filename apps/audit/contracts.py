from dataclasses import dataclass, field
from typing import Any, Optional


@dataclass(frozen=True)
class AuditEvent:
    """One audit record. `source` tells REST writes apart from chat-bot writes."""

    action: str
    actor: Any = None
    object_type: str = ""
    object_id: str = ""
    level: str = "info"
    category: str = "system"
    ip_address: Optional[str] = None
    source: str = "api"
    metadata: dict[str, Any] = field(default_factory=dict)

    def payload(self) -> dict[str, Any]:
        return {"source": self.source, **self.metadata}
