"""Result object returned by the workflow services."""

from dataclasses import dataclass, field
from typing import Any, Dict, List

from services.notifications import Notification


@dataclass
class WorkflowOutcome:
    message: str
    payload: Dict[str, Any] = field(default_factory=dict)
    warnings: List[str] = field(default_factory=list)
    notifications: List[Notification] = field(default_factory=list)

    def warn(self, warning):
        if warning:
            self.warnings.append(warning)

    def to_response(self) -> Dict[str, Any]:
        body = {'ok': True, 'message': self.message}
        body.update(self.payload)
        body['warnings'] = list(self.warnings)
        return body
