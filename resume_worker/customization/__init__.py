from resume_worker.customization.client import CustomizationClient
from resume_worker.customization.client_base import BaseCustomizationTransport
from resume_worker.customization.factory import CustomizationClientFactory
from resume_worker.customization.models import CustomizationRequest

__all__ = [
    "BaseCustomizationTransport",
    "CustomizationClient",
    "CustomizationClientFactory",
    "CustomizationRequest",
]
