"""
Upload services.

Available Services:
    UploadStrategySelector: Entry point; validates, normalizes and routes
    DirectCloudUploader: Signed upload straight to the storage provider
    ProxiedServerUploader: Upload through the application server
    SignedUploadRequester: Obtains single-use upload signatures
    ErrorClassifier: Maps transport failures to the upload error taxonomy
"""

from uploads.services.direct import DirectCloudUploader
from uploads.services.errors import ErrorClassifier, UploadPath
from uploads.services.proxied import ProxiedServerUploader
from uploads.services.selector import UploadStrategySelector
from uploads.services.signing import SignedUploadRequester

__all__ = [
    "DirectCloudUploader",
    "ErrorClassifier",
    "ProxiedServerUploader",
    "SignedUploadRequester",
    "UploadPath",
    "UploadStrategySelector",
]
