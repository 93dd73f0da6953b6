from shortlink.services.admission import AdmissionController, AdmissionDecision, client_identity
from shortlink.services.redirects import ensure_redirectable
from shortlink.services.shortening import ShorteningService


__all__ = [
    'AdmissionController',
    'AdmissionDecision',
    'client_identity',
    'ensure_redirectable',
    'ShorteningService',
]
