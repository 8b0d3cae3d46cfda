"""
Data models for resolved subscriptions
"""
from dataclasses import dataclass
from typing import Any, Dict

from pydantic import BaseModel


@dataclass(frozen=True)
class SubscriptionRecord:
    """A subscription found under the root management group"""
    subscription_id: str
    subscription_name: str = ""

    def to_option(self) -> "SubscriptionOption":
        return SubscriptionOption(label=self.subscription_name, value=self.subscription_id)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "subscriptionId": self.subscription_id,
            "subscriptionName": self.subscription_name,
        }


class SubscriptionOption(BaseModel):
    """Select-list entry: display name as label, subscription id as value"""
    label: str
    value: str
