"""Redirect rule model."""

from dataclasses import dataclass, field
from typing import Dict, Any
from datetime import datetime

REDIRECT_TYPES = ("301", "302")


@dataclass
class RedirectRule:
    """Maps an old path to a new one."""
    from_path: str
    to_path: str
    type: str = "301"  # "301" permanent, "302" temporary
    active: bool = True
    created_at: datetime = field(default_factory=datetime.utcnow)

    @property
    def status_code(self) -> int:
        return int(self.type)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "from": self.from_path,
            "to": self.to_path,
            "type": self.type,
            "active": self.active,
            "created_at": self.created_at.isoformat(),
        }
