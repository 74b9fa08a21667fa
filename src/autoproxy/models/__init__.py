from .container import ContainerRecord, ContainerRole, ContainerSummary, LifecycleEvent, classify_role
from .kinds import Role, RunState
from .routing import CertificateBundle, ProxyReference, RoutingRecord

__all__ = [
    "CertificateBundle",
    "ContainerRecord",
    "ContainerRole",
    "ContainerSummary",
    "LifecycleEvent",
    "ProxyReference",
    "Role",
    "RoutingRecord",
    "RunState",
    "classify_role",
]
