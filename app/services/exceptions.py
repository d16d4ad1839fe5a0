from typing import Optional


class IntegrationError(Exception):
    """Raised when a third-party collaborator call fails."""


class IntegrationConfigurationError(IntegrationError):
    pass


class PaymentGatewayError(IntegrationError):
    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class PhotoStorageError(IntegrationError):
    pass


class MailDeliveryError(IntegrationError):
    pass


class UnsupportedPhotoTypeError(PhotoStorageError):
    pass
