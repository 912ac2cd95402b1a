"""
Exception hierarchy for the digitizer.

    DigitizerError
      ├─ CameraUnavailableError   camera denied, missing or not delivering frames
      ├─ ExtractionRequestError   /api/process-table unreachable or non-2xx
      ├─ SaveRequestError         /api/save-to-database unreachable or non-2xx
      └─ MalformedTableError      extraction output is not a headers/rows table
"""


class DigitizerError(Exception):
    """Base class for all digitizer errors."""


class CameraUnavailableError(DigitizerError):
    pass


class ExtractionRequestError(DigitizerError):
    pass


class SaveRequestError(DigitizerError):
    pass


class MalformedTableError(DigitizerError):
    pass
